"""
Repository layer for the directory aggregate.

Command and query repositories per entity, plus the factory that binds a
set of them to one session.
"""

from .account_repository import AccountCommandRepository, AccountQueryRepository
from .affiliation_repository import FacilityQueryRepository, OrganizationQueryRepository
from .base import CommandRepository, QueryRepository
from .contact_address_repository import (
    ContactAddressCommandRepository,
    ContactAddressQueryRepository,
)
from .factory import RepositoryFactory
from .person_repository import PersonCommandRepository, PersonQueryRepository
from .principal_repository import PrincipalCommandRepository, PrincipalQueryRepository

__all__ = [
    "CommandRepository",
    "QueryRepository",
    "RepositoryFactory",
    "PersonCommandRepository",
    "PersonQueryRepository",
    "ContactAddressCommandRepository",
    "ContactAddressQueryRepository",
    "PrincipalCommandRepository",
    "PrincipalQueryRepository",
    "AccountCommandRepository",
    "AccountQueryRepository",
    "FacilityQueryRepository",
    "OrganizationQueryRepository",
]
