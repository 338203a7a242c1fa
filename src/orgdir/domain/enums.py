from __future__ import annotations

from enum import Enum


class ContactKind(str, Enum):
    EMAIL = "EMAIL"
    PHONE = "PHONE"
    ADDRESS = "ADDRESS"


class PrincipalKind(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"
    STAKEHOLDER = "STAKEHOLDER"


class OwnerKind(str, Enum):
    """Which column of a contact address holds its owner."""

    PERSON = "person"
    FACILITY = "facility"
    ORGANIZATION = "organization"


class PrincipalStatus(str, Enum):
    """Principal status of a person as observed from committed state."""

    NO_PRINCIPAL = "NO_PRINCIPAL"
    HAS_PRINCIPAL_NO_ACCOUNT = "HAS_PRINCIPAL_NO_ACCOUNT"
    HAS_PRINCIPAL_WITH_ACCOUNT = "HAS_PRINCIPAL_WITH_ACCOUNT"
