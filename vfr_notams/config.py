"""
Configuration for vfr_notams.

Values come from environment variables and are read once at import time.
"""

import os

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Notices farther than this from a waypoint are never shown for it
RESTRICTION_RADIUS_NM = float(os.getenv("NOTAM_RESTRICTION_RADIUS_NM", "20"))

# A stored list only answers for a waypoint if the waypoint is at least this
# far inside the list's region
MINIMUM_RADIUS_POINT_NM = float(os.getenv("NOTAM_MINIMUM_RADIUS_POINT_NM", "20"))

# A NOTAM list older than this asks for an update
MAX_AGE_HOURS = float(os.getenv("NOTAM_MAX_AGE_HOURS", "24"))

# FAA NOTAM API
FAA_API_URL = os.getenv("FAA_NOTAM_API_URL", "https://external-api.faa.gov/notamapi/v1/notams")
FAA_CLIENT_ID = os.getenv("FAA_CLIENT_ID", "")
FAA_CLIENT_SECRET = os.getenv("FAA_CLIENT_SECRET", "")
FAA_PAGE_SIZE = int(os.getenv("FAA_NOTAM_PAGE_SIZE", "1000"))
FAA_TIMEOUT = int(os.getenv("FAA_NOTAM_TIMEOUT", "30"))
