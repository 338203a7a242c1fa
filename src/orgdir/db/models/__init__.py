# src/orgdir/db/models/__init__.py
# Import every model so Base.metadata knows all tables (create_all / Alembic).
from orgdir.db.base import Base

from .accounts import Account
from .contact_addresses import ContactAddress
from .facilities import Facility, person_facilities
from .organizations import Organization
from .persons import Person
from .principals import Principal

__all__ = [
    "Base",
    "Account",
    "ContactAddress",
    "Facility",
    "Organization",
    "Person",
    "Principal",
    "person_facilities",
]
