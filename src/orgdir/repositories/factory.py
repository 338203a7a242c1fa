"""
Repository factory for creating repository instances.

Every repository handed out by one factory shares the factory's session, so
writes through any of them land in the same transaction.
"""

from typing import Dict, Type, TypeVar, cast

from sqlalchemy.ext.asyncio import AsyncSession

from orgdir.observability import get_logger

from .account_repository import AccountCommandRepository, AccountQueryRepository
from .affiliation_repository import FacilityQueryRepository, OrganizationQueryRepository
from .contact_address_repository import (
    ContactAddressCommandRepository,
    ContactAddressQueryRepository,
)
from .person_repository import PersonCommandRepository, PersonQueryRepository
from .principal_repository import PrincipalCommandRepository, PrincipalQueryRepository

logger = get_logger(__name__)

R = TypeVar("R")


class RepositoryFactory:
    """
    Factory for repository instances bound to a single session.

    Repositories are created on first access and cached for the factory's
    lifetime.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize factory with database session.

        Args:
            session: Async SQLAlchemy session for database operations
        """
        self.session = session
        self._repositories: Dict[str, object] = {}
        logger.debug("Repository factory initialized with new session")

    def _get(self, key: str, repository_class: Type[R]) -> R:
        if key not in self._repositories:
            self._repositories[key] = repository_class(self.session)  # type: ignore[call-arg]
        return cast(R, self._repositories[key])

    # -- persons ---------------------------------------------------------
    @property
    def persons(self) -> PersonCommandRepository:
        return self._get("persons", PersonCommandRepository)

    @property
    def person_queries(self) -> PersonQueryRepository:
        return self._get("person_queries", PersonQueryRepository)

    # -- contact addresses ------------------------------------------------
    @property
    def contacts(self) -> ContactAddressCommandRepository:
        return self._get("contacts", ContactAddressCommandRepository)

    @property
    def contact_queries(self) -> ContactAddressQueryRepository:
        return self._get("contact_queries", ContactAddressQueryRepository)

    # -- principals -------------------------------------------------------
    @property
    def principals(self) -> PrincipalCommandRepository:
        return self._get("principals", PrincipalCommandRepository)

    @property
    def principal_queries(self) -> PrincipalQueryRepository:
        return self._get("principal_queries", PrincipalQueryRepository)

    # -- accounts ---------------------------------------------------------
    @property
    def accounts(self) -> AccountCommandRepository:
        return self._get("accounts", AccountCommandRepository)

    @property
    def account_queries(self) -> AccountQueryRepository:
        return self._get("account_queries", AccountQueryRepository)

    # -- read-only affiliations -------------------------------------------
    @property
    def facilities(self) -> FacilityQueryRepository:
        return self._get("facilities", FacilityQueryRepository)

    @property
    def organizations(self) -> OrganizationQueryRepository:
        return self._get("organizations", OrganizationQueryRepository)

    async def flush(self) -> None:
        await self.session.flush()

    async def close(self) -> None:
        """Close the session and cleanup resources."""
        await self.session.close()
        self._repositories.clear()
        logger.debug("Repository factory session closed")

    def clear_cache(self) -> None:
        """Clear cached repository instances."""
        self._repositories.clear()
