from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional

from rentdesk.utils.constants import (
    BookingStatus,
    PaymentStatus,
    DepositType,
    Destination,
)
from rentdesk.utils.numbers import to_int_safe


@dataclass
class VehicleChecklist:
    """Handover record captured at pickup; the speedometer photo is mandatory."""
    odometer: int
    fuel_level: str
    speedometer_image: str
    physical_images: dict[str, Optional[str]] = field(default_factory=dict)
    notes: str = ""
    checked_at: int = 0
    checked_by: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Booking:
    id: str
    created_at: int
    car_id: str
    customer_name: str
    customer_phone: str
    start_date: str
    end_date: str
    package_type: str
    destination: str = Destination.IN_TOWN
    driver_id: Optional[str] = None
    customer_id: Optional[str] = None
    actual_return_date: Optional[str] = None

    base_price: int = 0
    driver_fee: int = 0
    high_season_fee: int = 0
    delivery_fee: int = 0
    overtime_fee: int = 0
    total_price: int = 0
    amount_paid: int = 0
    notes: str = ""

    security_deposit_type: str = DepositType.CASH
    security_deposit_value: int = 0
    security_deposit_description: str = ""
    security_deposit_image: Optional[str] = None

    status: str = BookingStatus.BOOKED
    payment_status: str = PaymentStatus.UNPAID
    checklist: Optional[dict] = None

    @property
    def fee_sum(self) -> int:
        return self.base_price + self.driver_fee + self.high_season_fee + self.delivery_fee + self.overtime_fee

    @classmethod
    def from_dict(cls, d: dict) -> "Booking":
        return cls(
            id=str(d.get("id")),
            created_at=to_int_safe(d.get("created_at")),
            car_id=str(d.get("car_id") or ""),
            customer_name=d.get("customer_name") or "",
            customer_phone=d.get("customer_phone") or "",
            start_date=d.get("start_date") or "",
            end_date=d.get("end_date") or "",
            package_type=d.get("package_type") or "",
            destination=d.get("destination") or Destination.IN_TOWN,
            driver_id=d.get("driver_id") or None,
            customer_id=d.get("customer_id") or None,
            actual_return_date=d.get("actual_return_date") or None,
            base_price=to_int_safe(d.get("base_price")),
            driver_fee=to_int_safe(d.get("driver_fee")),
            high_season_fee=to_int_safe(d.get("high_season_fee")),
            delivery_fee=to_int_safe(d.get("delivery_fee")),
            overtime_fee=to_int_safe(d.get("overtime_fee")),
            total_price=to_int_safe(d.get("total_price")),
            amount_paid=to_int_safe(d.get("amount_paid")),
            notes=d.get("notes") or "",
            security_deposit_type=d.get("security_deposit_type") or DepositType.CASH,
            security_deposit_value=to_int_safe(d.get("security_deposit_value")),
            security_deposit_description=d.get("security_deposit_description") or "",
            security_deposit_image=d.get("security_deposit_image") or None,
            status=d.get("status") or BookingStatus.BOOKED,
            payment_status=d.get("payment_status") or PaymentStatus.UNPAID,
            checklist=d.get("checklist") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)
