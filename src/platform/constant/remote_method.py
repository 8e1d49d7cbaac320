# Remote Booking Service RPC method constants

from src.platform.config.core_setting import settings


# Base API
RPC_BASE = '/api/method'
APP = settings.BOOKING_API_APP

# Session
LOGIN = 'login'
LOGOUT = 'logout'
GET_CSRF_TOKEN = f'{APP}.api.auth.get_csrf_token'

# Catalog
LIST_EVENTS = f'{APP}.api.get_chavara_events'
GET_EVENT = f'{APP}.api.get_event_details'

# Seat locks and bookings
BOOKING_MODULE = f'{APP}.api.booking'
GET_BOOKED_SEATS = f'{BOOKING_MODULE}.get_booked_seats'
GET_LOCKED_SEATS = f'{BOOKING_MODULE}.get_locked_seats'
LOCK_SEATS = f'{BOOKING_MODULE}.lock_seats'
RELEASE_SEATS = f'{BOOKING_MODULE}.release_seats'
CREATE_BOOKING = f'{BOOKING_MODULE}.create_booking'
CREATE_ADMIN_BOOKING = f'{BOOKING_MODULE}.create_admin_booking'
GET_BOOKING = f'{BOOKING_MODULE}.get_booking_details'
GET_SECURE_QR_CODE = f'{BOOKING_MODULE}.get_secure_qr_code'

# Entry verification
VERIFICATION_MODULE = f'{APP}.api.ticket_verification'
CHECK_SCANNER_ACCESS = f'{VERIFICATION_MODULE}.check_scanner_access'
VERIFY_AND_LOG_ENTRY = f'{VERIFICATION_MODULE}.verify_and_log_entry'
