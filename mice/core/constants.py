"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""
import enum


class UserRole(str, enum.Enum):
    """Roles a conference user can hold."""

    ADMIN = "ADMIN"
    SPEAKER = "SPEAKER"
    ATTENDEE = "ATTENDEE"


# Dynamic QR Configuration
# A dynamic token is valid for 60 seconds after it is issued
DYNAMIC_QR_TTL_SECONDS = 60
# Displays re-issue ahead of expiry so a fresh code is always on screen
DYNAMIC_QR_REFRESH_SECONDS = 50
# 16 random bytes = 128 bits of entropy per dynamic token
DYNAMIC_TOKEN_BYTES = 16
# Submissions longer than this cannot be tokens we issued
MAX_DYNAMIC_TOKEN_LENGTH = 200

# Event Entry Configuration
# Every event-entry scan takes at least this long to answer
EVENT_ENTRY_MIN_DURATION_MS = 100

# JWT Token Configuration
# Token expiration time in minutes (12 hours, one conference day)
ACCESS_TOKEN_EXPIRE_MINUTES = 720

# Database Configuration
# Primary keys are INTEGER columns; PostgreSQL stores them as signed 32-bit
MAX_STORED_ID = 2**31 - 1
