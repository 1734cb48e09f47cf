from rentdesk import create_app
from rentdesk.models.repository import Repository
from rentdesk.models.store import Store
from rentdesk.services.settings_service import SettingsService
from rentdesk.services.user_service import UserService
from rentdesk.utils.constants import Collection, Role
from rentdesk.utils.security import generate_hash


def ensure_user(store: Store, username: str, password: str, role: str, name: str, linked_id=None):
    """
    Ensure a user with `username` exists in the store.
    - If exists: update password hash and role (idempotent).
    - If not:   create a new user.
    """
    users = Repository(store, Collection.USERS)
    u = UserService.find(username, store)
    if u:
        u["password_hash"] = generate_hash(password)
        u["role"] = role
        users.upsert(u)
        return u["id"]
    ok, msg, uid = UserService.admin_create_user(username, role, password, name=name,
                                                 linked_id=linked_id, store=store)
    return uid


def seed_collection(store: Store, key: str, records: list[dict]):
    """Write demo records only if the collection is still empty."""
    if not store.get(key, []):
        store.set(key, records)


def main():
    app = create_app()
    with app.app_context():
        store = Store.instance()

        # ---- Demo accounts ----
        ensure_user(store, "super", "Super123", Role.SUPERADMIN, "Super Admin")
        ensure_user(store, "admin", "Admin123", Role.ADMIN, "Staff Operasional")
        ensure_user(store, "driver", "Driver123", Role.DRIVER, "Pak Asep", linked_id="d1")
        ensure_user(store, "mitra", "Mitra123", Role.PARTNER, "Budi Santoso", linked_id="p1")

        # ---- Demo fleet, drivers, partners, customers ----
        packages = SettingsService.rental_packages(store)
        seed_collection(store, Collection.PARTNERS, [
            {"id": "p1", "name": "Budi Santoso", "phone": "08123456789", "split_percentage": 70},
        ])
        seed_collection(store, Collection.CARS, [
            {"id": "c1", "name": "Toyota Avanza", "plate": "B 1234 ABC", "type": "MPV",
             "price_24h": 350000, "pricing": {packages[0]: 250000} if packages else {},
             "status": "Available", "partner_id": "p1"},
            {"id": "c2", "name": "Honda Brio", "plate": "B 5678 DEF", "type": "City Car",
             "price_24h": 300000, "pricing": {}, "status": "Available"},
            {"id": "c3", "name": "Toyota Innova Reborn", "plate": "B 9012 GHI", "type": "MPV",
             "price_24h": 550000, "pricing": {}, "status": "Available"},
        ])
        seed_collection(store, Collection.DRIVERS, [
            {"id": "d1", "name": "Pak Asep", "phone": "08122334455", "daily_rate": 150000},
            {"id": "d2", "name": "Pak Dadang", "phone": "08122334466", "daily_rate": 150000},
        ])
        seed_collection(store, Collection.CUSTOMERS, [
            {"id": "cu1", "name": "Andi Wijaya", "phone": "08131112222", "address": "Bandung"},
        ])

        store.save()

        print("✅ Seed complete.")
        print("🔑 Superadmin login: super / Super123")
        print("👤 Admin login:      admin / Admin123")
        print("🚗 Driver login:     driver / Driver123")
        print("🤝 Partner login:    mitra / Mitra123")


if __name__ == "__main__":
    main()
