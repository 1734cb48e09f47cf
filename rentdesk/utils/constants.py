# rentdesk/utils/constants.py

"""
Global constants for roles, statuses, collection keys and default settings.
These constants are imported by both models and services.
"""

# Date format (used for date-only filters and high season ranges)
DATE_FMT = "%Y-%m-%d"
TIME_FMT = "%H:%M"

# All form-entered times are wall-clock times at the rental office
BUSINESS_TZ = "Asia/Jakarta"


class Role:
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    DRIVER = "driver"
    PARTNER = "partner"


class BookingStatus:
    BOOKED = "Booked"
    ACTIVE = "Active"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus:
    UNPAID = "Unpaid"
    PARTIAL = "Partial"
    PAID = "Paid"


# Unpaid < Partial < Paid
PAYMENT_STATUS_ORDER = (PaymentStatus.UNPAID, PaymentStatus.PARTIAL, PaymentStatus.PAID)


class CarStatus:
    AVAILABLE = "Available"
    RENTED = "Rented"
    MAINTENANCE = "Maintenance"


class TransactionType:
    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionStatus:
    PAID = "Paid"
    PENDING = "Pending"


class Destination:
    IN_TOWN = "Dalam Kota"
    OUT_OF_TOWN = "Luar Kota"


class DepositType:
    CASH = "Uang"
    GOODS = "Barang"


class Collection:
    CARS = "cars"
    BOOKINGS = "bookings"
    DRIVERS = "drivers"
    CUSTOMERS = "customers"
    HIGH_SEASONS = "highSeasons"
    TRANSACTIONS = "transactions"
    PARTNERS = "partners"
    SETTINGS = "appSettings"
    USERS = "users"


ALL_COLLECTIONS = (
    Collection.CARS,
    Collection.BOOKINGS,
    Collection.DRIVERS,
    Collection.CUSTOMERS,
    Collection.HIGH_SEASONS,
    Collection.TRANSACTIONS,
    Collection.PARTNERS,
    Collection.SETTINGS,
    Collection.USERS,
)

# --- Booking / checklist ---
FUEL_LEVELS = ("Full", "3/4", "1/2", "1/4", "Empty")
CHECKLIST_SIDES = ("front", "back", "left", "right")
DESTINATIONS = (Destination.IN_TOWN, Destination.OUT_OF_TOWN)
DEPOSIT_TYPES = (DepositType.CASH, DepositType.GOODS)

RENTAL_PAYMENT_CATEGORY = "Rental Payment"

# Expense categories that need a second step (approval / hand-over) before they count as paid
REIMBURSEMENT_CATEGORY = "Reimbursement"
PARTNER_DEPOSIT_CATEGORY = "Setor Mitra"
PENDING_CATEGORIES = {REIMBURSEMENT_CATEGORY, PARTNER_DEPOSIT_CATEGORY}

DEFAULT_SETTINGS = {
    "company_name": "Bersama Rent Car",
    "display_name": "BRC",
    "tagline": "Solusi Transportasi Terpercaya",
    "address": "Jl. Raya Merdeka No. 123, Jakarta",
    "phone": "0812-3456-7890",
    "email": "admin@bersamarent.com",
    "invoice_footer": "Terima kasih atas kepercayaan Anda menggunakan jasa kami.",
    "car_categories": ["MPV", "SUV", "Sedan", "City Car", "Luxury", "Minibus"],
    "rental_packages": ["12 Jam (Dalam Kota)", "24 Jam (Dalam Kota)", "24 Jam (Luar Kota)"],
}
