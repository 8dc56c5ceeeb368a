# schoolfeed/settings.py
import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

load_dotenv(PROJECT_ROOT / ".env")

LOG_LEVEL = os.getenv("SCHOOLFEED_LOG_LEVEL", "INFO")

# Bounds every blocking HTTP call (login, data request, upload)
HTTP_TIMEOUT = float(os.getenv("SCHOOLFEED_HTTP_TIMEOUT", "30"))

# Dates in encoded lines are rendered in this zone; range maths stays in UTC
DISPLAY_TIMEZONE = os.getenv("SCHOOLFEED_TIMEZONE", "Europe/Prague")

# Bakaláři mobile client id used for the password grant
BAKALARI_CLIENT_ID = "ANDR"

MAX_MARKS = 10
MAX_HOMEWORK_LINES = 10
MAX_LINE_LENGTH = 50

DEFAULT_PREFIXES = {
    "marks": ("grades_line", "grades_updated"),
    "homeworks": ("homeworks_line", "homeworks_updated"),
    "events": ("events_line", "events_updated"),
}
