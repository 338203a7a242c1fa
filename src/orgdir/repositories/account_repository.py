"""
Account repositories.

Accounts hold an already-hashed secret; nothing here hashes or compares
passwords.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.db.models import Account as AccountRow
from orgdir.domain import Account, EntityId, IdLike, validate_account
from orgdir.exceptions import ConstraintViolationError
from orgdir.observability import get_logger

from .base import CommandRepository, QueryRepository, id_value

logger = get_logger(__name__)


def account_to_entity(row: AccountRow) -> Account:
    return Account(
        id=EntityId(row.id),
        principal_id=EntityId(row.principal_id),
        username=row.username,
        password_hash=row.password_hash,
        is_active=row.is_active,
        provider=row.provider,
        provider_sub=row.provider_sub,
        email=row.email,
        last_login_at=row.last_login_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class AccountCommandRepository(CommandRepository[Account, AccountRow]):
    entity_name = "Account"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AccountRow)

    def _to_entity(self, row: AccountRow) -> Account:
        return account_to_entity(row)

    def _to_row(self, entity: Account) -> Dict[str, Any]:
        return {
            "id": entity.id.value,
            "principal_id": entity.principal_id.value,
            "username": entity.username,
            "password_hash": entity.password_hash,
            "email": entity.email,
            "is_active": entity.is_active,
            "provider": entity.provider,
            "provider_sub": entity.provider_sub,
            "last_login_at": entity.last_login_at,
        }

    def _validate(self, entity: Account) -> None:
        validate_account(entity)

    async def _ensure_unique(self, account: Account) -> None:
        stmt = select(AccountRow.id).where(
            AccountRow.principal_id == account.principal_id.value,
            AccountRow.id != account.id.value,
        )
        if (await self.session.execute(stmt)).first() is not None:
            raise ConstraintViolationError(
                f"Principal {account.principal_id} already has an account",
                constraint="uq_accounts_principal_id",
                entity=self.entity_name,
                context={"principal_id": account.principal_id.value},
            )

        stmt = select(AccountRow.id).where(
            AccountRow.username == account.username,
            AccountRow.id != account.id.value,
        )
        if (await self.session.execute(stmt)).first() is not None:
            raise ConstraintViolationError(
                f"Username already taken: {account.username}",
                constraint="uq_accounts_username",
                entity=self.entity_name,
                context={"username": account.username},
            )

    async def create(self, account: Account) -> Account:
        """Insert an account; principal and username must both be free."""
        validate_account(account)
        await self._ensure_unique(account)
        return await super().create(account)

    async def update(self, account: Account) -> Account:
        """Update everything except the owning principal."""
        validate_account(account)
        await self._ensure_unique(account)
        return await self._update_values(
            account.id,
            username=account.username,
            password_hash=account.password_hash,
            email=account.email,
            is_active=account.is_active,
            provider=account.provider,
            provider_sub=account.provider_sub,
            last_login_at=account.last_login_at,
        )

    async def delete_many(self, principal_id: IdLike) -> int:
        """Delete the accounts owned by the principal; returns the row count."""
        key = id_value(principal_id)
        deleted = await self._delete_where(AccountRow.principal_id == key)
        logger.debug(f"Deleted {deleted} accounts for principal {key}")
        return deleted


class AccountQueryRepository(QueryRepository[Account, AccountRow]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, AccountRow)

    def _to_entity(self, row: AccountRow) -> Account:
        return account_to_entity(row)

    async def find_by_principal_id(self, principal_id: IdLike) -> Optional[Account]:
        stmt = select(AccountRow).where(AccountRow.principal_id == id_value(principal_id))
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return account_to_entity(row) if row is not None else None

    async def find_by_username(self, username: str) -> Optional[Account]:
        stmt = select(AccountRow).where(AccountRow.username == username)
        row = (await self.session.execute(stmt)).scalar_one_or_none()
        return account_to_entity(row) if row is not None else None

    async def list(self, is_active: Optional[bool] = None) -> List[Account]:
        if is_active is None:
            return await self._list_where()
        return await self._list_where(AccountRow.is_active.is_(is_active))
