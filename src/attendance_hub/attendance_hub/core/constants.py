"""Constants and defaults.

Office rules below are fallbacks; config modules and the settings table override them.
"""

JWT_EXPIRES_DAYS = 7
MIN_PASSWORD_LENGTH = 6

# Office defaults, overridden by rows in the settings table.
DEFAULT_OFFICE_LATITUDE = -26.1942
DEFAULT_OFFICE_LONGITUDE = 28.0578
DEFAULT_LOCATION_RADIUS_METERS = 5000
DEFAULT_WORK_START_TIME = "09:00"
DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_OVERTIME_THRESHOLD_HOURS = 8

EARTH_RADIUS_METERS = 6371000

FACE_DESCRIPTOR_LENGTH = 128
FACE_MATCH_THRESHOLD = 0.55

CHAT_HISTORY_LIMIT = 20
HISTORY_LIMIT = 100
NOTIFICATION_LIMIT = 50
RECENT_REPORTS_LIMIT = 20
REPORT_PDF_MAX_RECORDS = 20
ANALYTICS_WINDOW_DAYS = 30

# Payslip estimate used by the assistant.
HOURLY_RATE = 150
DEDUCTION_RATE = 0.15

DEFAULT_SCHEDULE_LOCATION = "Main Office"
SCHEDULE_APPLIES_TO_ALL = "all"
