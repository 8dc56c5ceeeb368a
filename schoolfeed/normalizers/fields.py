"""
Field helpers shared by every normalizer.

Upstream records are plain mappings whose keys vary between deployments,
so every canonical attribute is looked up through an ordered list of
candidate paths. Helpers here return None for "absent" and never raise.
"""
import re
from datetime import date, datetime, time, timezone
from typing import Any, Collection, Optional, Sequence

from dateutil import parser as dtparser

from schoolfeed.models import DateRange
from .types import RawRecord

_MISSING = object()

# dateutil fills missing parts from today, so only hand it complete dates
_YMD = re.compile(r"^\d{4}[./-]\s*\d{1,2}[./-]\s*\d{1,2}(?!\d)")
_DMY = re.compile(r"^\d{1,2}[./-]\s*\d{1,2}[./-]\s*\d{4}(?!\d)")


def lookup(record: Any, path: str) -> Any:
    """Walk a dotted path ("Subject.Abbrev") through nested mappings."""
    cur = record
    for part in path.split("."):
        if not hasattr(cur, "get"):
            return _MISSING
        cur = cur.get(part, _MISSING)
        if cur is _MISSING or cur is None:
            return _MISSING
    return cur


def resolve_text(
    record: RawRecord, candidates: Sequence[str], numeric: Collection[str] = ()
) -> Optional[str]:
    """
    Return the first candidate holding a non-blank string, trimmed.
    Paths listed in `numeric` also accept int/float values.
    """
    for path in candidates:
        value = lookup(record, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if path in numeric and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    return None


def parse_full_date(text: str) -> Optional[datetime]:
    """
    Non-ISO strings: yyyy-mm-dd or dd.mm.yyyy (optionally with a time).
    Anything without a full year/month/day ("10:00", "March", "15") is None.
    """
    if _YMD.match(text):
        dayfirst = False
    elif _DMY.match(text):
        dayfirst = True
    else:
        return None
    try:
        return dtparser.parse(text, dayfirst=dayfirst)
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any) -> Optional[datetime]:
    """Parse an upstream date value into an aware UTC datetime, or None."""
    if value is None or value is _MISSING or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time.min)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            dt = parse_full_date(text)
            if dt is None:
                return None
    else:
        return None
    # naive values are taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def resolve_date(record: RawRecord, candidates: Sequence[str]) -> Optional[datetime]:
    """First candidate that parses into a valid instant; bad values fall through."""
    for path in candidates:
        parsed = parse_date(lookup(record, path))
        if parsed is not None:
            return parsed
    return None


def day_floor(instant: datetime) -> datetime:
    """UTC midnight of the instant's calendar day."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    utc = instant.astimezone(timezone.utc)
    return datetime(utc.year, utc.month, utc.day, tzinfo=timezone.utc)


def in_range(candidate: datetime, date_range: DateRange) -> bool:
    """Inclusive on both ends at day granularity."""
    day = day_floor(candidate)
    return day_floor(date_range.start) <= day <= day_floor(date_range.end)


def container(payload: Any, *keys: str) -> list:
    """Pull a list out of a payload under the first matching key; else []."""
    if not hasattr(payload, "get"):
        return []
    for key in keys:
        value = payload.get(key)
        if value is not None:
            return value if isinstance(value, list) else []
    return []
