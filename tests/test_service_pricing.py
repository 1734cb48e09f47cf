import pytest

from rentdesk.models.party import Driver
from rentdesk.models.vehicle import Car, HighSeason
from rentdesk.services.pricing_service import (
    compute_pricing,
    derive_rate_per_day,
    duration_days,
    resolve_base_rate,
    season_window,
)
from rentdesk.utils.dates import parse_instant


def at(s):
    return parse_instant(s)


CAR = Car(id="c1", name="Honda Brio", price_24h=300000)
PACKAGED = Car(id="c2", name="Toyota Avanza", price_24h=350000, pricing={"12 Jam (Dalam Kota)": 250000})
DRIVER = Driver(id="d1", name="Pak Asep", daily_rate=150000)


@pytest.mark.parametrize("start,end,days", [
    ("2024-01-01T08:00", "2024-01-02T08:00", 1),   # exactly 24h
    ("2024-01-01T08:00", "2024-01-02T09:00", 2),   # 25h
    ("2024-01-01T08:00", "2024-01-01T08:01", 1),   # 1 minute
    ("2024-01-01T08:00", "2024-01-04T08:00", 3),
])
def test_duration_rounds_partial_days_up(start, end, days):
    assert duration_days(at(start), at(end)) == days


def test_reference_scenario_24h_without_extras():
    p = compute_pricing(CAR, None, at("2024-01-01T08:00"), at("2024-01-02T08:00"), "12 Jam", [])
    assert p.duration_days == 1
    assert p.base_price == 300000
    assert p.total_price == 300000


def test_package_price_takes_precedence_over_24h_rate():
    assert resolve_base_rate(PACKAGED, "12 Jam (Dalam Kota)") == 250000
    assert resolve_base_rate(PACKAGED, "24 Jam (Luar Kota)") == 350000
    assert resolve_base_rate(None, "24 Jam (Luar Kota)") == 0


def test_zero_package_price_falls_back_to_24h_rate():
    car = Car(id="c3", name="X", price_24h=400000, pricing={"12 Jam": 0})
    assert resolve_base_rate(car, "12 Jam") == 400000


def test_manual_rate_overrides_car_price():
    p = compute_pricing(PACKAGED, None, at("2024-01-01T08:00"), at("2024-01-03T08:00"),
                        "12 Jam (Dalam Kota)", [], base_rate_override="275000")
    assert p.base_rate == 275000
    assert p.base_price == 550000


def test_driver_fee_is_daily_rate_times_days():
    p = compute_pricing(CAR, DRIVER, at("2024-01-01T08:00"), at("2024-01-03T09:00"), "", [])
    assert p.duration_days == 3
    assert p.driver_fee == 450000


def test_high_season_date_only_end_covers_the_whole_last_day():
    rule = HighSeason(id="h1", name="Natal", start_date="2024-12-24", end_date="2024-12-26", price_increase=50000)
    start, end = season_window(rule)
    assert start == at("2024-12-24T00:00")
    assert end == at("2024-12-27T00:00")

    inside = compute_pricing(CAR, None, at("2024-12-26T10:00"), at("2024-12-27T10:00"), "", [rule])
    assert inside.high_season_fee == 50000

    after = compute_pricing(CAR, None, at("2024-12-27T00:00"), at("2024-12-28T00:00"), "", [rule])
    assert after.high_season_fee == 0


def test_overlapping_high_seasons_stack():
    rules = [
        HighSeason(id="h1", name="Lebaran", start_date="2024-04-05", end_date="2024-04-15", price_increase=50000),
        HighSeason(id="h2", name="Libur Sekolah", start_date="2024-04-10", end_date="2024-04-20", price_increase=20000),
    ]
    p = compute_pricing(CAR, None, at("2024-04-11T08:00"), at("2024-04-13T08:00"), "", rules)
    assert p.duration_days == 2
    assert p.high_season_fee == (50000 + 20000) * 2


def test_total_is_exact_sum_of_components():
    rule = HighSeason(id="h1", name="Natal", start_date="2024-12-20", end_date="2024-12-31", price_increase=25000)
    p = compute_pricing(CAR, DRIVER, at("2024-12-24T08:00"), at("2024-12-26T10:00"), "", [rule],
                        delivery_fee=75000, overtime_fee="40000")
    assert p.duration_days == 3
    assert p.total_price == p.base_price + p.driver_fee + p.high_season_fee + p.delivery_fee + p.overtime_fee
    assert (p.base_price, p.driver_fee, p.high_season_fee) == (900000, 450000, 75000)
    assert (p.delivery_fee, p.overtime_fee) == (75000, 40000)


def test_all_zero_components():
    free = Car(id="c0", name="Demo")
    p = compute_pricing(free, None, at("2024-01-01T08:00"), at("2024-01-02T08:00"), "", [])
    assert p.to_dict()["total_price"] == 0


def test_malformed_fees_count_as_zero():
    p = compute_pricing(CAR, None, at("2024-01-01T08:00"), at("2024-01-02T08:00"), "", [],
                        delivery_fee="abc", overtime_fee=None)
    assert p.delivery_fee == 0 and p.overtime_fee == 0
    assert p.total_price == 300000


def test_rate_per_day_recovered_from_stored_booking():
    assert derive_rate_per_day(900000, "2024-01-01T08:00", "2024-01-03T09:00") == 300000
