from .analytics_service import AnalyticsService
from .availability_service import AvailabilityService
from .booking_service import BookingService
from .settings_service import SettingsService
from .transaction_service import TransactionService
from .user_service import UserService

__all__ = [
    "BookingService",
    "AvailabilityService",
    "TransactionService",
    "SettingsService",
    "UserService",
    "AnalyticsService",
]
