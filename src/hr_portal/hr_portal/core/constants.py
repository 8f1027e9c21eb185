"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Geofence policy
OFFICE_RANGE_METERS = 500
METERS_PER_DEGREE = 111000

ALLOWED_LAT_RANGE = (15.0, 17.0)
ALLOWED_LON_RANGE = (79.0, 81.0)

# Reports: start at or before 09:30 is on time, end before 17:30 is early, after 18:30 is overtime
ON_TIME_CUTOFF = (9, 30)
EARLY_LEAVE_CUTOFF = (17, 30)
OVERTIME_CUTOFF = (18, 30)

DEFAULT_SESSION_DAYS = 7
DEFAULT_HISTORY_LIMIT = 15
DEFAULT_REPORT_DAYS = 7
MIN_PASSWORD_LENGTH = 6
