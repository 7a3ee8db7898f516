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
DATA_DIR = Path(os.environ.get("TIMEKEEPING_DATA_DIR", PROJECT_ROOT / "data"))
TIME_ENTRIES_PATH = DATA_DIR / "time-entries.json"
PERSONAL_GOALS_PATH = DATA_DIR / "personal-goals.json"
DB_PATH = DATA_DIR / "db" / "timekeeping.db"
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# TIME ACCOUNTING
# =============================================================================

# 0=Monday ... 6=Sunday
WEEK_START_DAY = int(os.environ.get("WEEK_START_DAY", "0"))
DEFAULT_TIMEFRAME = os.environ.get("DEFAULT_TIMEFRAME", "monthly")
BREAKDOWN_DAYS = 30
SECONDS_PER_HOUR = 3600

ENTRY_SOURCE_MANUAL = "manual-api"
ENTRY_SOURCE_CLOCK = "clock-session"
ENTRY_STATUS_COMPLETED = "COMPLETED"

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

DETAIL_HEADERS = ["Date", "User", "Case", "Start", "End", "Hours", "Billable", "Description"]
SUMMARY_HEADERS = ["User", "Billable Hours", "Non-billable Hours", "Total Hours", "Billable Rate %", "Entries"]
GOAL_HEADERS = ["Goal", "Type", "Frequency", "Target", "Current", "Status"]

# =============================================================================
# API CONFIGURATION
# =============================================================================

TIMEKEEPING_API_KEY = os.environ.get("TIMEKEEPING_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
