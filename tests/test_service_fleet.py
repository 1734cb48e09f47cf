import pytest

from conftest import booking_form
from rentdesk.exceptions import CarNotFoundError, DriverNotFoundError
from rentdesk.services.booking_service import BookingService
from rentdesk.services.fleet_service import CarService, DriverService
from rentdesk.services.party_service import CustomerService, PartnerService
from rentdesk.utils.constants import CarStatus, Collection
from rentdesk.utils.dates import parse_instant

NOW = parse_instant("2024-01-01T00:00:00Z")


def test_filter_by_type_keyword_and_price(fleet):
    assert [c["id"] for c in CarService.filter_cars(car_type="mpv")] == ["c2"]
    assert [c["id"] for c in CarService.filter_cars(keyword="brio")] == ["c1"]
    assert [c["id"] for c in CarService.filter_cars(keyword="b 2")] == ["c2"]
    assert [c["id"] for c in CarService.filter_cars(min_price="320000")] == ["c2"]
    # inverted range is swapped
    assert [c["id"] for c in CarService.filter_cars(min_price="320000", max_price="200000")] == ["c1"]
    # unparseable bounds are ignored
    assert len(CarService.filter_cars(min_price="abc", max_price="")) == 2


def test_get_unknown_car_and_driver(fleet):
    with pytest.raises(CarNotFoundError):
        CarService.get_car("nope")
    with pytest.raises(DriverNotFoundError):
        DriverService.get_driver("nope")


def test_create_car_cleans_its_fields(fleet):
    ok, msg, cid = CarService.admin_save_car({
        "name": "Suzuki Ertiga", "plate": "d 9 zz", "type": "MPV", "price_24h": "325000",
        "pricing": {"12 Jam (Dalam Kota)": "200000", "24 Jam (Luar Kota)": "0"},
    })
    assert ok, msg
    car = CarService.get_car(cid)
    assert car["plate"] == "D 9 ZZ"
    assert car["status"] == CarStatus.AVAILABLE
    assert car["price_24h"] == 325000
    assert car["pricing"] == {"12 Jam (Dalam Kota)": 200000}
    assert fleet.get(Collection.CARS)[-1]["id"] == cid


def test_car_validation(fleet):
    assert CarService.admin_save_car({"name": "", "plate": "X 1"})[0] is False
    ok, msg, _ = CarService.admin_save_car({"name": "Clone", "plate": "b 1 aa"})
    assert not ok and "already registered" in msg
    ok, msg, _ = CarService.admin_save_car({"name": "Bus", "plate": "X 2", "type": "Spaceship"})
    assert not ok and "Type" in msg
    ok, msg, _ = CarService.admin_save_car({"name": "Bus", "plate": "X 3", "status": "Sold"})
    assert not ok and "Status" in msg
    ok, msg, _ = CarService.admin_save_car({"name": "Bus", "plate": "X 4", "partner_id": "p9"})
    assert not ok and "partner" in msg
    assert len(fleet.get(Collection.CARS)) == 2


def test_update_car_keeps_its_plate(fleet):
    ok, msg, cid = CarService.admin_save_car(
        {"name": "Honda Brio RS", "plate": "B 1 AA", "type": "City Car", "price_24h": "320000",
         "status": CarStatus.MAINTENANCE}, car_id="c1")
    assert ok and cid == "c1" and msg == "Car updated"
    car = CarService.get_car("c1")
    assert car["name"] == "Honda Brio RS"
    assert car["status"] == CarStatus.MAINTENANCE

    assert CarService.admin_save_car({"name": "x", "plate": "y"}, car_id="c9")[0] is False


def test_delete_car_is_blocked_by_open_bookings(fleet):
    b = BookingService.save(booking_form(), now=NOW).booking
    ok, msg = CarService.delete_car("c1")
    assert not ok and "open bookings" in msg

    BookingService.cancel(b["id"])
    assert CarService.delete_car("c1") == (True, "Car deleted")
    assert CarService.delete_car("c1") == (False, "Car not found")


def test_driver_crud_and_schedule(fleet):
    ok, msg, did = DriverService.admin_save_driver({"name": "Pak Ujang", "daily_rate": "125000"})
    assert ok, msg
    assert DriverService.get_driver(did)["daily_rate"] == 125000
    assert DriverService.admin_save_driver({"name": " "})[0] is False

    late = BookingService.save(booking_form(car_id="c2", driver_id="d1", start="2024-01-05T08:00",
                                            end="2024-01-06T08:00"), now=NOW).booking
    early = BookingService.save(booking_form(driver_id="d1"), now=parse_instant("2024-01-01T00:00:01Z")).booking
    assert [b["id"] for b in DriverService.schedule("d1")] == [early["id"], late["id"]]

    ok, msg = DriverService.delete_driver("d1")
    assert not ok and "open bookings" in msg
    assert DriverService.delete_driver("d2") == (True, "Driver deleted")


def test_customer_save_search_delete(fleet):
    ok, msg, cid = CustomerService.save_customer({"name": "Cici", "phone": "0857", "address": "Bandung"})
    assert ok, msg
    assert [c["id"] for c in CustomerService.search("cici")] == [cid]
    assert [c["id"] for c in CustomerService.search("0813")] == ["cu1"]
    assert CustomerService.save_customer({"name": "No Phone"})[0] is False

    ok, _, _ = CustomerService.save_customer({"name": "Andi W.", "phone": "0813"}, customer_id="cu1")
    assert ok
    assert CustomerService.search("andi w.")[0]["phone"] == "0813"

    assert CustomerService.delete_customer(cid) == (True, "Customer deleted")
    assert CustomerService.delete_customer(cid)[0] is False


def test_partner_income_and_delete_guard(fleet):
    ok, msg, pid = PartnerService.save_partner({"name": "Budi Santoso", "split_percentage": "60"})
    assert ok, msg
    cars = fleet.get(Collection.CARS)
    cars[0]["partner_id"] = pid
    fleet.set(Collection.CARS, cars)

    BookingService.save(booking_form(), now=NOW)
    gone = BookingService.save(booking_form(start="2024-01-03T08:00", end="2024-01-04T08:00"),
                               now=parse_instant("2024-01-01T00:00:01Z")).booking
    BookingService.cancel(gone["id"])
    BookingService.save(booking_form(car_id="c2"), now=parse_instant("2024-01-01T00:00:02Z"))

    income = PartnerService.income(pid)
    assert income["revenue"] == 300000
    assert income["share"] == 180000
    assert income["bookings"] == 1

    ok, msg = PartnerService.delete_partner(pid)
    assert not ok and "owns cars" in msg


def test_partner_validation_and_linked_view(fleet):
    assert PartnerService.save_partner({"name": ""})[0] is False
    assert PartnerService.save_partner({"name": "X", "split_percentage": "120"})[0] is False

    _, _, p1 = PartnerService.save_partner({"name": "Budi"})
    _, _, p2 = PartnerService.save_partner({"name": "Sari", "split_percentage": "50"})
    assert PartnerService.partners(linked_id=p2)[0]["split_percentage"] == 50
    assert len(PartnerService.partners()) == 2
    assert PartnerService.partners(linked_id="") == []
    assert PartnerService.delete_partner(p1) == (True, "Partner deleted")
