from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# -----------------------------
# Canonical records produced by the normalizers.
# All datetimes are timezone-aware UTC instants.
# -----------------------------

@dataclass(frozen=True)
class DateRange:
    # `from`/`to` of the upstream API; both ends inclusive by calendar day
    start: datetime
    end: datetime


@dataclass(frozen=True)
class Mark:
    subject_name: str
    mark_value: str                 # never empty
    edit_date: datetime
    caption: str = ""
    theme: str = ""


@dataclass(frozen=True)
class Homework:
    subject_name: str
    due_date: datetime
    content: str = ""               # may be empty, never None


@dataclass(frozen=True)
class Event:
    start_date: Optional[datetime]
    end_date: Optional[datetime]    # falls back to start_date
    subject_name: str
    title: str
    description: str = ""
    type: str = ""

    def __str__(self):
        return f"Event {self.title!r} ({self.type or 'untyped'}) from {self.start_date} to {self.end_date}"
