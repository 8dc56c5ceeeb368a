import logging
from typing import List, Optional

from schoolfeed.models import DateRange, Event, Homework, Mark
from .base import Normalizer
from .fields import container, in_range, lookup, resolve_date, resolve_text
from .types import Payload, RawRecord

log = logging.getLogger(__name__)

# --- Candidate tables: most authoritative path first ---

SUBJECT_CANDIDATES = ("Subject.Abbrev", "Subject.Name", "Name", "Abbrev")
UNKNOWN_SUBJECT = "Neznámý předmět"

MARK_CANDIDATES = {
    "value":     ("MarkText", "Text", "Caption", "ValueText", "Value", "Mark"),
    "edit_date": ("EditDate", "MarkDate", "Date", "Created", "CreatedDate"),
    "caption":   ("Caption", "Theme"),
    "theme":     ("Theme",),
}
# upstream sometimes sends these as bare numbers
MARK_NUMERIC_FIELDS = {"Value", "Mark"}

HOMEWORK_CANDIDATES = {
    # deadline first, then start/creation dates as a last resort
    "due_date": ("DueDate", "Deadline", "Due", "DateEnd", "Date", "Created", "CreatedDate", "DateStart"),
    "content":  ("HomeworkText", "Text", "Description", "Title", "Content", "Note", "Name"),
}

EVENT_CANDIDATES = {
    "start_date":  ("DateFrom", "Start", "Date", "From", "Begin", "Since"),
    "end_date":    ("DateTo", "End", "To", "Finish", "Until"),
    "title":       ("Title", "Name", "Caption", "Description"),
    "description": ("Description", "Note", "Content", "Text", "HomeworkText"),
    "type":        ("Type", "EventType", "EventKind"),
}
UNKNOWN_EVENT = "Neznámá událost"


def subject_name(rec: RawRecord) -> str:
    return resolve_text(rec, SUBJECT_CANDIDATES) or UNKNOWN_SUBJECT


class MarkNormalizer(Normalizer):
    """
    Flattens subject groups into one list of marks.

    The fetch window already bounds what the API returns, so by default no
    range filter is applied here. `filter_by_range=True` additionally drops
    marks whose edit date falls outside the window (instant comparison).
    """
    def __init__(self, filter_by_range: bool = False):
        # TODO: confirm with the product owner whether marks outside the
        # fetch window should be dropped; until then the filter is opt-in.
        self.filter_by_range = filter_by_range

    def normalize(self, payload: Payload, date_range: DateRange) -> List[Mark]:
        out: List[Mark] = []
        for group in container(payload, "Subjects", "subjects"):
            if not hasattr(group, "get"):
                continue
            name = subject_name(group)
            for raw in container(group, "Marks", "marks"):
                mark = self.normalize_mark(name, raw)
                if mark is None:
                    log.debug("mark dropped (no value or edit date): subject=%s", name)
                    continue
                if self.filter_by_range and not (date_range.start <= mark.edit_date <= date_range.end):
                    continue
                out.append(mark)
        return out

    @staticmethod
    def normalize_mark(subject: str, raw: RawRecord) -> Optional[Mark]:
        if not hasattr(raw, "get"):
            return None
        value = resolve_text(raw, MARK_CANDIDATES["value"], numeric=MARK_NUMERIC_FIELDS)
        edit_date = resolve_date(raw, MARK_CANDIDATES["edit_date"])
        if not value or edit_date is None:
            return None
        return Mark(
            subject_name=subject,
            mark_value=value,
            edit_date=edit_date,
            caption=resolve_text(raw, MARK_CANDIDATES["caption"]) or "",
            theme=resolve_text(raw, MARK_CANDIDATES["theme"]) or "",
        )


class HomeworkNormalizer(Normalizer):
    """Range-filters raw homework on its due day, then maps what is left."""

    def normalize(self, payload: Payload, date_range: DateRange) -> List[Homework]:
        out: List[Homework] = []
        for raw in container(payload, "Homeworks", "homeworks"):
            if not hasattr(raw, "get"):
                continue
            due = resolve_date(raw, HOMEWORK_CANDIDATES["due_date"])
            if due is None:
                log.debug("homework dropped (no due date): %s", raw)
                continue
            if not in_range(due, date_range):
                continue
            out.append(Homework(
                subject_name=subject_name(raw),
                due_date=due,
                content=resolve_text(raw, HOMEWORK_CANDIDATES["content"]) or "",
            ))
        return out


class EventNormalizer(Normalizer):
    """Maps every raw event first, then keeps those starting inside the window."""

    def normalize(self, payload: Payload, date_range: DateRange) -> List[Event]:
        mapped = [
            self.normalize_event(raw)
            for raw in container(payload, "Events", "events")
            if hasattr(raw, "get")
        ]
        out = []
        for ev in mapped:
            if ev.start_date is None:
                log.debug("event dropped (no start date): %s", ev)
                continue
            if in_range(ev.start_date, date_range):
                out.append(ev)
        return out

    @staticmethod
    def normalize_event(raw: RawRecord) -> Event:
        start = resolve_date(raw, EVENT_CANDIDATES["start_date"])
        end = resolve_date(raw, EVENT_CANDIDATES["end_date"]) or start
        return Event(
            start_date=start,
            end_date=end,
            subject_name=subject_name(raw),
            title=resolve_text(raw, EVENT_CANDIDATES["title"]) or UNKNOWN_EVENT,
            description=resolve_text(raw, EVENT_CANDIDATES["description"]) or "",
            type=event_type(raw),
        )


def event_type(rec: RawRecord) -> str:
    """Type may be a plain string or a nested {Name, Abbrev} object."""
    for path in EVENT_CANDIDATES["type"]:
        value = lookup(rec, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if hasattr(value, "get"):
            nested = resolve_text(value, ("Name", "Abbrev"))
            if nested:
                return nested
    return ""
