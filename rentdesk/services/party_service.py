"""Customers and partners (car owners)."""
from __future__ import annotations

from typing import Optional

from rentdesk.models.booking import Booking
from rentdesk.models.party import Customer, Partner
from rentdesk.services.common import _lc, bookings_repo, repo, time_based_id
from rentdesk.utils.constants import BookingStatus, Collection
from rentdesk.utils.numbers import to_int_safe


class CustomerService:

    @staticmethod
    def search(keyword=None, store=None) -> list[dict]:
        """Customers whose name or phone contains `keyword` (case-insensitive)."""
        res = repo(Collection.CUSTOMERS, store).list()
        kw = _lc(keyword).strip()
        if kw:
            res = [c for c in res if kw in _lc(c.get("name")) or kw in _lc(c.get("phone"))]
        return res

    @staticmethod
    def save_customer(payload: dict, customer_id: Optional[str] = None, store=None):
        """
        Returns:
            (ok: bool, message: str, customer_id: Optional[str])
        """
        customers = repo(Collection.CUSTOMERS, store)
        if customer_id and customers.get_by_id(customer_id) is None:
            return False, "Customer not found", None

        name = (payload.get("name") or "").strip()
        phone = (payload.get("phone") or "").strip()
        if not name or not phone:
            return False, "Customer name and phone are required", None

        customer = Customer(
            id=customer_id or time_based_id([str(c.get("id")) for c in customers.list()]),
            name=name,
            phone=phone,
            address=(payload.get("address") or "").strip(),
            notes=(payload.get("notes") or "").strip(),
        )
        customers.upsert(customer.to_dict())
        return True, "Customer saved", customer.id

    @staticmethod
    def delete_customer(customer_id: str, store=None):
        # bookings keep their own copy of the customer's name and phone
        if not repo(Collection.CUSTOMERS, store).delete(customer_id):
            return False, "Customer not found"
        return True, "Customer deleted"


class PartnerService:

    @staticmethod
    def partners(linked_id: Optional[str] = None, store=None) -> list[dict]:
        """All partners, or only the record a partner account is linked to."""
        res = repo(Collection.PARTNERS, store).list()
        if linked_id is not None:
            res = [p for p in res if str(p.get("id")) == str(linked_id)]
        return res

    @staticmethod
    def save_partner(payload: dict, partner_id: Optional[str] = None, store=None):
        """
        Returns:
            (ok: bool, message: str, partner_id: Optional[str])
        """
        partners = repo(Collection.PARTNERS, store)
        if partner_id and partners.get_by_id(partner_id) is None:
            return False, "Partner not found", None

        name = (payload.get("name") or "").strip()
        if not name:
            return False, "Partner name is required", None

        split = to_int_safe(payload.get("split_percentage"), 70)
        if not 0 <= split <= 100:
            return False, "Split percentage must be between 0 and 100", None

        partner = Partner(
            id=partner_id or time_based_id([str(p.get("id")) for p in partners.list()]),
            name=name,
            phone=(payload.get("phone") or "").strip(),
            image=payload.get("image") or "",
            split_percentage=split,
        )
        partners.upsert(partner.to_dict(), prepend=False)
        return True, "Partner saved", partner.id

    @staticmethod
    def delete_partner(partner_id: str, store=None):
        partners = repo(Collection.PARTNERS, store)
        if partners.get_by_id(partner_id) is None:
            return False, "Partner not found"
        if any(str(c.get("partner_id") or "") == str(partner_id) for c in repo(Collection.CARS, store).list()):
            return False, "Cannot delete: partner still owns cars"
        partners.delete(partner_id)
        return True, "Partner deleted"

    @staticmethod
    def income(partner_id: str, store=None) -> dict:
        """
        Revenue of the partner's cars over non-cancelled bookings and the
        partner's share of it (split_percentage, rounded down).
        """
        partner = Partner.from_dict(repo(Collection.PARTNERS, store).get_by_id(partner_id))
        if partner is None:
            return {"partner_id": partner_id, "revenue": 0, "share": 0, "bookings": 0}

        car_ids = {str(c.get("id")) for c in repo(Collection.CARS, store).list()
                   if str(c.get("partner_id") or "") == partner.id}
        bookings = [Booking.from_dict(b) for b in bookings_repo(store).list()]
        bookings = [b for b in bookings if b.car_id in car_ids and b.status != BookingStatus.CANCELLED]

        revenue = sum(b.total_price for b in bookings)
        return {
            "partner_id": partner.id,
            "revenue": revenue,
            "share": revenue * partner.split_percentage // 100,
            "bookings": len(bookings),
        }
