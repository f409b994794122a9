"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6371000.0
DEFAULT_RADIUS_METERS = 100.0
DEFAULT_HISTORY_LIMIT = 31
DEFAULT_QR_IMAGE_SIZE = 512

DATE_ID_FORMAT = "%Y-%m-%d"
TIME_DISPLAY_FORMAT = "%I:%M %p"
DURATION_ERROR = "Error"

USERS = "users"
LOCATIONS = "locations"
ATTENDANCE = "attendance"
