import os
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
os.environ.setdefault("APP_ENV", "test")

import pytest

from rentdesk.models.store import Store
from rentdesk.utils.constants import Collection

CARS = [
    {"id": "c1", "name": "Honda Brio", "plate": "B 1 AA", "type": "City Car",
     "price_24h": 300000, "pricing": {}},
    {"id": "c2", "name": "Toyota Avanza", "plate": "B 2 BB", "type": "MPV",
     "price_24h": 350000, "pricing": {"12 Jam (Dalam Kota)": 250000}},
]
DRIVERS = [
    {"id": "d1", "name": "Pak Asep", "phone": "0812", "daily_rate": 150000},
    {"id": "d2", "name": "Pak Dadang", "phone": "0813", "daily_rate": 100000},
]
CUSTOMERS = [
    {"id": "cu1", "name": "Andi Wijaya", "phone": "08131112222"},
]


@pytest.fixture(autouse=True)
def store(tmp_path, monkeypatch):
    """
    Provide a fresh on-disk store per test and make Store.instance() return it,
    so services, controllers and tests all share the SAME object.
    """
    st = Store(tmp_path / "data.pkl")
    monkeypatch.setattr(Store, "_inst", st)
    yield st


@pytest.fixture
def fleet(store):
    """Cars, drivers and customers the booking tests rely on."""
    store.set(Collection.CARS, CARS)
    store.set(Collection.DRIVERS, DRIVERS)
    store.set(Collection.CUSTOMERS, CUSTOMERS)
    return store


@pytest.fixture
def client(store, tmp_path):
    from rentdesk import create_app
    app = create_app({"TESTING": True, "SECRET_KEY": "test", "DATA_PATH": str(tmp_path / "data.pkl")})
    with app.test_client() as c:
        yield c


def login(client, username="super", password="Super123"):
    return client.post("/login", json={"username": username, "password": password})


def booking_form(**overrides):
    form = {
        "car_id": "c1",
        "customer_name": "Budi",
        "customer_phone": "0811",
        "start": "2024-01-01T08:00",
        "end": "2024-01-02T08:00",
        "package_type": "24 Jam (Dalam Kota)",
        "amount_paid": "0",
    }
    form.update(overrides)
    return form
