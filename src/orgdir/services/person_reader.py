"""
Read composer: selectively materializes a person's graph as frozen views.
"""

from typing import Any, List, Mapping, Optional, Union

from orgdir.db.models import Person as PersonRow
from orgdir.db.session_factory import DatabaseSessionFactory
from orgdir.domain import EntityId, IdLike, PersonInclude, PrincipalStatus
from orgdir.observability import get_logger
from orgdir.repositories.account_repository import account_to_entity
from orgdir.repositories.affiliation_repository import (
    facility_to_entity,
    organization_to_entity,
)
from orgdir.repositories.contact_address_repository import contact_to_entity
from orgdir.repositories.principal_repository import principal_to_entity
from orgdir.schemas import (
    ContactAddressView,
    FacilityView,
    OrganizationView,
    PersonView,
    PrincipalView,
)

logger = get_logger(__name__)

IncludeLike = Union[PersonInclude, Mapping[str, Any], None]


class PersonReadComposer:
    """
    Build ``PersonView`` objects for reads.

    Performs no writes. Store errors propagate unchanged.
    """

    def __init__(self, session_factory: DatabaseSessionFactory) -> None:
        self.session_factory = session_factory

    async def find(self, person_id: IdLike, include: IncludeLike = None) -> Optional[PersonView]:
        """
        Fetch one person with the requested subgraph, or ``None``.

        ``include`` may be a ``PersonInclude`` or a mapping such as
        ``{"contacts": True, "principal": {"account": True}}``.
        """
        spec = PersonInclude.coerce(include)
        key = EntityId.of(person_id)

        async with self.session_factory.read() as repos:
            row = await repos.person_queries.find_graph(key, spec)
            if row is None:
                return None
            return _compose(row, spec)

    async def list(self, name_contains: Optional[str] = None) -> List[PersonView]:
        async with self.session_factory.read() as repos:
            persons = await repos.person_queries.list(name_contains=name_contains)
        return [PersonView.from_entity(person) for person in persons]

    async def principal_status(self, person_id: IdLike) -> Optional[PrincipalStatus]:
        """Where the person sits in the principal lifecycle; ``None`` if unknown."""
        view = await self.find(person_id, {"principal": {"account": True}})
        if view is None:
            return None
        if view.principal is None:
            return PrincipalStatus.NO_PRINCIPAL
        if view.principal.account is None:
            return PrincipalStatus.HAS_PRINCIPAL_NO_ACCOUNT
        return PrincipalStatus.HAS_PRINCIPAL_WITH_ACCOUNT


def _compose(row: PersonRow, spec: PersonInclude) -> PersonView:
    # only touch relationships that were eager-loaded; the rest raise
    data: dict = {"id": row.id, "name": row.name}

    if spec.contacts:
        data["contacts"] = [
            ContactAddressView.from_entity(contact_to_entity(c)) for c in row.contacts
        ]

    if spec.principal is not None and row.principal is not None:
        account = None
        if spec.include_account and row.principal.account is not None:
            account = account_to_entity(row.principal.account)
        data["principal"] = PrincipalView.from_entity(principal_to_entity(row.principal), account)

    if spec.facilities:
        data["facilities"] = [
            FacilityView.from_entity(facility_to_entity(f)) for f in row.facilities
        ]

    if spec.organization and row.organization is not None:
        data["organization"] = OrganizationView.from_entity(
            organization_to_entity(row.organization)
        )

    logger.debug("Composed person view", person_id=row.id, include=spec.model_dump())
    return PersonView(**data)
