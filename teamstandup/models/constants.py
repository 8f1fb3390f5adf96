"""Constants for teamstandup.

This module centralizes the magic numbers and default values used throughout the application.
"""

# Users
DEFAULT_TIMEZONE = "UTC"
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100

# Refresh tokens persisted server-side
REFRESH_TOKEN_TTL_DAYS = 30

# Cookie lifetimes (seconds)
ACCESS_COOKIE_MAX_AGE = 7 * 24 * 60 * 60
REFRESH_COOKIE_MAX_AGE = 30 * 24 * 60 * 60
ACCESS_COOKIE_NAME = "accessToken"
REFRESH_COOKIE_NAME = "refreshToken"

# Standups
STANDUP_TEXT_MAX_LENGTH = 1000
STANDUP_DATE_WINDOW_DAYS = 7  # how far back a standup may be dated
DEFAULT_BLOCKERS = "None"

# Pagination
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
