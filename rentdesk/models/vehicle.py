from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional

from rentdesk.utils.constants import CarStatus
from rentdesk.utils.numbers import to_int_safe


@dataclass
class Car:
    """
    Fleet unit. `price_24h` is the fallback daily rate; `pricing` maps a
    rental package label to its own daily rate.
    """
    id: str
    name: str
    plate: str = ""
    type: str = ""
    image: str = ""
    status: str = CarStatus.AVAILABLE
    price_24h: int = 0
    pricing: dict[str, int] = field(default_factory=dict)
    partner_id: Optional[str] = None

    def rate_for_package(self, package_type: Optional[str]) -> int:
        """Per-package rate when one is set (non-zero), else the 24h rate."""
        if package_type and self.pricing.get(package_type):
            return self.pricing[package_type]
        return self.price_24h or 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Optional["Car"]:
        if not d:
            return None
        pricing = {str(k): to_int_safe(v) for k, v in (d.get("pricing") or {}).items()}
        return cls(
            id=str(d.get("id")),
            name=d.get("name") or "",
            plate=d.get("plate") or "",
            type=d.get("type") or "",
            image=d.get("image") or "",
            status=d.get("status") or CarStatus.AVAILABLE,
            price_24h=to_int_safe(d.get("price_24h")),
            pricing=pricing,
            partner_id=d.get("partner_id") or None,
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class HighSeason:
    """
    Calendar range with a per-day surcharge. Date-only bounds are whole
    days: a rule ending '2024-12-26' still covers the 26th.
    """
    id: str
    name: str
    start_date: str
    end_date: str
    price_increase: int = 0

    @classmethod
    def from_dict(cls, d: dict) -> "HighSeason":
        return cls(
            id=str(d.get("id")),
            name=d.get("name") or "",
            start_date=d.get("start_date") or "",
            end_date=d.get("end_date") or "",
            price_increase=to_int_safe(d.get("price_increase")),
        )

    def to_dict(self) -> dict:
        return asdict(self)
