from .person import (
    AccountView,
    ContactAddressView,
    FacilityView,
    OrganizationView,
    PersonView,
    PrincipalView,
)

__all__ = [
    "AccountView",
    "ContactAddressView",
    "FacilityView",
    "OrganizationView",
    "PersonView",
    "PrincipalView",
]
