from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Optional

from rentdesk.utils.numbers import to_int_safe


@dataclass
class Driver:
    id: str
    name: str
    phone: str = ""
    image: str = ""
    daily_rate: int = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Optional["Driver"]:
        if not d:
            return None
        return cls(
            id=str(d.get("id")),
            name=d.get("name") or "",
            phone=d.get("phone") or "",
            image=d.get("image") or "",
            daily_rate=to_int_safe(d.get("daily_rate")),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Customer:
    id: str
    name: str
    phone: str = ""
    address: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Optional["Customer"]:
        if not d:
            return None
        return cls(
            id=str(d.get("id")),
            name=d.get("name") or "",
            phone=d.get("phone") or "",
            address=d.get("address") or "",
            notes=d.get("notes") or "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Partner:
    """Car owner; receives `split_percentage` of the revenue of their cars."""
    id: str
    name: str
    phone: str = ""
    image: str = ""
    split_percentage: int = 70

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Optional["Partner"]:
        if not d:
            return None
        return cls(
            id=str(d.get("id")),
            name=d.get("name") or "",
            phone=d.get("phone") or "",
            image=d.get("image") or "",
            split_percentage=to_int_safe(d.get("split_percentage"), 70),
        )

    def to_dict(self) -> dict:
        return asdict(self)
