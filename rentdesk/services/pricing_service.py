"""
Booking price computation.

All money is integer (smallest currency unit). The only rounding is on the
duration: partial days round up, and one day is the minimum charge.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Iterable, Optional

from rentdesk.models.party import Driver
from rentdesk.models.vehicle import Car, HighSeason
from rentdesk.utils.dates import parse_instant, localize
from rentdesk.utils.numbers import parse_amount

ONE_DAY = timedelta(days=1)


@dataclass
class PriceBreakdown:
    duration_days: int
    base_rate: int
    base_price: int
    driver_fee: int
    high_season_fee: int
    delivery_fee: int
    overtime_fee: int
    total_price: int

    def to_dict(self) -> dict:
        return asdict(self)


def duration_days(start: datetime, end: datetime) -> int:
    """Billable days: ceil(hours / 24), never less than 1."""
    return max(1, math.ceil((end - start) / ONE_DAY))


def resolve_base_rate(car: Optional[Car], package_type: Optional[str]) -> int:
    """Daily rate a car is offered at for a package (used to prefill the editable rate)."""
    if car is None:
        return 0
    return car.rate_for_package(package_type)


def derive_rate_per_day(base_price: int, start, end) -> int:
    """Recover the per-day rate of a stored booking when it is reopened for editing."""
    days = duration_days(parse_instant(start), parse_instant(end))
    return base_price // days


def season_window(rule: HighSeason) -> tuple[datetime, datetime]:
    """
    [start, end) of a high season rule. A date-only end date covers that whole
    day, so the exclusive bound is the following midnight.
    """
    start = parse_instant(rule.start_date)
    end_raw = rule.end_date.strip()
    if len(end_raw) == 10:
        end = localize(datetime.strptime(end_raw, "%Y-%m-%d") + ONE_DAY)
    else:
        end = parse_instant(end_raw)
    return start, end


def high_season_fee(high_seasons: Iterable[HighSeason], start: datetime, end: datetime, days: int) -> int:
    """
    Every rule whose window intersects the booking adds price_increase per day.
    Overlapping rules stack.
    """
    fee = 0
    for rule in high_seasons:
        rule_start, rule_end = season_window(rule)
        if start < rule_end and end > rule_start:
            fee += rule.price_increase * days
    return fee


def compute_pricing(
        car: Optional[Car],
        driver: Optional[Driver],
        start: datetime,
        end: datetime,
        package_type: Optional[str],
        high_seasons: Iterable[HighSeason] = (),
        delivery_fee=0,
        overtime_fee=0,
        base_rate_override=None,
) -> PriceBreakdown:
    """
    Price a booking window.

    The base rate is `base_rate_override` when given (staff may edit the
    rate per booking); otherwise the car's package price, falling back to
    its 24h price, falling back to 0.
    """
    days = duration_days(start, end)
    if base_rate_override is not None and base_rate_override != "":
        rate = parse_amount(base_rate_override)
    else:
        rate = resolve_base_rate(car, package_type)

    base_price = rate * days
    driver_fee = driver.daily_rate * days if driver else 0
    hs_fee = high_season_fee(high_seasons, start, end, days)
    delivery = parse_amount(delivery_fee)
    overtime = parse_amount(overtime_fee)

    return PriceBreakdown(
        duration_days=days,
        base_rate=rate,
        base_price=base_price,
        driver_fee=driver_fee,
        high_season_fee=hs_fee,
        delivery_fee=delivery,
        overtime_fee=overtime,
        total_price=base_price + driver_fee + hs_fee + delivery + overtime,
    )
