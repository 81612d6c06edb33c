"""Configuration constants for the carpark tracker pipeline."""
from __future__ import annotations

# Published CSV export of the shared logging spreadsheet
SHEET_CSV_URL: str = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vSpcNe_oAPGLGZpUO-v3d8dPzWl1qOG26ItP2MmvadOnGQsAWfyrtKBgmttTybcR-hhU4d299zKP9En"
    "/pub?gid=0&single=true&output=csv"
)

# Environment variable that overrides SHEET_CSV_URL
SHEET_URL_ENV_VAR: str = "CARPARK_SHEET_URL"

# Timeout (seconds) for HTTP requests to the sheet export
HTTP_TIMEOUT: int = 30

# Interval between scheduled re-fetches (seconds)
REFRESH_INTERVAL_SECONDS: int = 5 * 60

# Countdown display tick (seconds)
COUNTDOWN_TICK_SECONDS: float = 1.0

# All calendar-day, week and month boundaries are evaluated in this zone
REFERENCE_TIMEZONE: str = "Asia/Bangkok"

# Maximum number of rows in the recent activity feed
RECENT_FEED_LIMIT: int = 12

# Token meaning "no restriction" for the month and location selectors
ALL: str = "all"

# Location facets as they appear in the sheet
PRIMARY_RESIDENCE: str = "คอนโด"
WORKPLACE: str = "ที่ทำงาน"
HOTEL: str = "โรงแรม"
OTHER_LOCATION: str = "อื่นๆ"

# Facets plotted in the arrival-time trend
TRACKED_LOCATIONS: tuple[str, ...] = (PRIMARY_RESIDENCE, WORKPLACE)

# Floor value meaning "not applicable"
FLOOR_NOT_APPLICABLE: str = "-"

# Placeholder for headline figures with no data
EMPTY_DISPLAY: str = "-"

# Status prefix written by the reminder bot after a successful delivery
SENT_STATUS_PREFIX: str = "SENT"

# Ordered column names accepted for each canonical field; the first column with a
# non-empty value wins. Older exports lack the time and status columns.
FIELD_COLUMNS: dict[str, tuple[str, ...]] = {
    "recorded_at": ("Date", "Timestamp", "timestamp"),
    "time_of_event": ("parkingTime", "time", "Time"),
    "map_url": ("parkingMap",),
    "floor": ("parkingFloor",),
    "note": ("note",),
    "location": ("parkingLocation",),
    "exit_date": ("exitDateReminder ", "exitDateReminder"),
    "status": ("status", "Status", "deliveryStatus"),
}

# Boilerplate pasted by the phone keyboard app into the note field
NOISE_NOTE_MARKERS: tuple[str, ...] = (
    "welcome to gboard",
    "touch and hold",
    "unpinned clips",
)

# Markers of trial entries. Latin markers match case-insensitively, Thai ones verbatim.
TEST_NOTE_MARKERS: tuple[str, ...] = ("test",)
TEST_NOTE_MARKERS_EXACT: tuple[str, ...] = ("ทดสอบ", "ทดลอง")

# Hour boundaries for the time-of-day buckets: morning [5, 12), afternoon [12, 18)
MORNING_START_HOUR: int = 5
AFTERNOON_START_HOUR: int = 12
EVENING_START_HOUR: int = 18
