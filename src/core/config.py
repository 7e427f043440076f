"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
OUTPUT_DIR = PROJECT_ROOT / "output"
TOKEN_PATH = Path(os.environ.get("GOOGLE_TOKEN_PATH", str(PROJECT_ROOT / "data" / "token.json")))

# =============================================================================
# TIME CONFIGURATION
# =============================================================================

# Reference zone for bucketing events by day (the viewer's local zone)
DEFAULT_TIMEZONE = os.environ.get("DIARY_TIMEZONE", "America/Denver")

# Recompute requests arriving within this window are coalesced
DEBOUNCE_DELAY_MS = int(os.environ.get("DEBOUNCE_DELAY_MS", "250"))

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

DIARY_CALENDAR_PATTERN = os.environ.get("DIARY_CALENDAR_PATTERN", "Actual Diary")  # e.g., "Actual Diary - Prod"

# =============================================================================
# CATEGORY RULES
# =============================================================================

# Evaluated in order, first match wins. Each rule is
# (category, substrings of which any must match, substrings of which none may match).
# Anything unmatched is "other".
CATEGORY_RULES = [
    ("production", ("prod",), ("nonprod",)),
    ("non_production", ("nonprod",), ()),
    ("admin_rest", ("admin", "rest"), ()),
]

# Optional JSON file replacing CATEGORY_RULES, e.g.
# [{"category": "admin_rest", "contains": ["admin", "rest", "routine"]}]
CATEGORY_RULES_PATH = os.environ.get("CATEGORY_RULES_PATH", "")

CATEGORY_LABELS = {
    "production": "Production Work",
    "non_production": "Non-Production",
    "admin_rest": "Admin & Rest",
    "other": "Other Activities",
}

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

DETAIL_HEADERS = ["Date", "Calendar", "Category", "Title", "Start", "End", "Hours"]
MIN_TABLE_ROWS = 12  # Minimum rows for better display in Numbers when few events

SUMMARY_ROW_LABELS = [
    "Total events",
    "Active hours",
    "Most common category",
]

# =============================================================================
# GOOGLE OAUTH CREDENTIALS (from environment)
# =============================================================================

GOOGLE_CLIENT_ID = os.environ.get("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.environ.get("GOOGLE_CLIENT_SECRET", "")
GOOGLE_REFRESH_TOKEN = os.environ.get("GOOGLE_REFRESH_TOKEN", "")
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
GOOGLE_CLIENT_SECRETS_FILE = os.environ.get(
    "GOOGLE_CLIENT_SECRETS_FILE", str(PROJECT_ROOT / "data" / "credentials.json")
)
GOOGLE_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

DIARY_API_KEY = os.environ.get("DIARY_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_EVENTS_PER_REQUEST = int(os.environ.get("MAX_EVENTS_PER_REQUEST", "20000"))
API_VERSION = "1.0.0"
