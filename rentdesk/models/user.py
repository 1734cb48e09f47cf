from dataclasses import dataclass
from typing import Optional

from rentdesk.utils.constants import Role


@dataclass
class UserBase:
    """
    Base back-office user. The Store keeps raw dicts; we wrap them into rich
    objects to express permissions via polymorphism.
    """
    user_id: str
    username: str
    name: str
    role: str  # "superadmin" | "admin" | "driver" | "partner"
    linked_id: Optional[str] = None  # driver or partner record of the account

    def can_manage_bookings(self) -> bool:
        return False

    def can_delete_bookings(self) -> bool:
        """Hard delete of bookings leaves no trace, so only the owner account may do it."""
        return False


class AdminUser(UserBase):
    """
    Operational staff: create/edit bookings, checklists and payments.
    """

    def can_manage_bookings(self) -> bool:
        return True


class SuperAdminUser(AdminUser):
    def can_delete_bookings(self) -> bool:
        return True


class DriverUser(UserBase):
    """
    Drivers only see their own schedule and file reimbursements.
    """
    pass


class PartnerUser(UserBase):
    """
    Car owners only see payouts for their own cars.
    """
    pass


def user_from_dict(d: Optional[dict]) -> Optional[UserBase]:
    """Map a stored user dict to a rich user object."""
    if not d:
        return None
    role = (d.get("role") or "").lower()
    base = dict(
        user_id=str(d.get("id")),
        username=d.get("username") or "",
        name=d.get("name") or d.get("username") or "",
        role=role,
        linked_id=d.get("linked_driver_id") or d.get("linked_partner_id") or None,
    )
    if role == Role.SUPERADMIN:
        return SuperAdminUser(**base)
    if role == Role.ADMIN:
        return AdminUser(**base)
    if role == Role.PARTNER:
        return PartnerUser(**base)
    return DriverUser(**base)
