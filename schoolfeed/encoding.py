"""
Turns ordered canonical records into the `key=value&...` payload accepted
by the text-ingestion endpoint.

Every payload is `{prefix}_1..N` display lines followed by one
`{updated_param}` line carrying a formatted date. Values are percent-encoded
exactly like JavaScript's encodeURIComponent.
"""
import re
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Callable, Dict, List, Sequence, Tuple
from urllib.parse import quote

from schoolfeed.errors import ConfigError
from schoolfeed.models import Event, Homework, Mark
from schoolfeed.normalizers.fields import day_floor
from schoolfeed.settings import DEFAULT_PREFIXES, MAX_HOMEWORK_LINES, MAX_LINE_LENGTH

NO_MARKS = "Žádné nové známky za vybrané období."
NO_HOMEWORKS = "Žádné nadcházející domácí úkoly."
NO_EVENTS = "Žádné nadcházející události."
NO_DESCRIPTION = "Bez popisu"
ELLIPSIS = "..."

_JS_SAFE = "-_.!~*'()"

# keys go on the wire unencoded
_KEY_NAME = re.compile(r"^[A-Za-z0-9_.~-]+$")


def check_key_name(name: str) -> str:
    """Line prefixes and the updated param must be plain ASCII key names."""
    if not isinstance(name, str) or not _KEY_NAME.match(name):
        raise ConfigError(f"invalid key name {name!r}: use ASCII letters, digits, _ . ~ -")
    return name


def encode_component(text: str) -> str:
    return quote(text, safe=_JS_SAFE)


def format_date(dt: datetime, tz: tzinfo = timezone.utc) -> str:
    """Czech numeric date, e.g. `9. 3. 2024`."""
    local = dt.astimezone(tz)
    return f"{local.day}. {local.month}. {local.year}"


def format_short_date(dt: datetime, tz: tzinfo = timezone.utc) -> str:
    local = dt.astimezone(tz)
    return f"{local.day}. {local.month}."


def truncate_line(line: str, limit: int = MAX_LINE_LENGTH) -> str:
    if len(line) > limit:
        return line[: limit - 1] + ELLIPSIS
    return line


# ---------------------------------------------------------------------
# Relative-day indicator for homework
# ---------------------------------------------------------------------

class RelativeDay(Enum):
    OVERDUE = "po termínu"
    TODAY = "dnes"
    TOMORROW = "zítra"
    IN_DAYS = "za {n} {unit}"


def relative_day(generated_at: datetime, due_date: datetime) -> Tuple[RelativeDay, int]:
    """Classify the due date against the generation day (UTC calendar days)."""
    days = (day_floor(due_date) - day_floor(generated_at)).days
    if days < 0:
        return RelativeDay.OVERDUE, days
    if days == 0:
        return RelativeDay.TODAY, days
    if days == 1:
        return RelativeDay.TOMORROW, days
    return RelativeDay.IN_DAYS, days


def describe_relative_day(generated_at: datetime, due_date: datetime) -> str:
    kind, days = relative_day(generated_at, due_date)
    if kind is RelativeDay.IN_DAYS:
        # Czech plural: 2-4 "dny", 5+ "dní"
        return kind.value.format(n=days, unit="dny" if days < 5 else "dní")
    return kind.value


# ---------------------------------------------------------------------
# Line rendering
# ---------------------------------------------------------------------

def render_mark(mark: Mark, generated_at: datetime, tz: tzinfo) -> str:
    return f"{mark.subject_name}: {mark.mark_value} ({format_short_date(mark.edit_date, tz)})"


def render_homework(hw: Homework, generated_at: datetime, tz: tzinfo) -> str:
    indicator = describe_relative_day(generated_at, hw.due_date)
    content = re.sub(r"\s+", " ", hw.content or NO_DESCRIPTION)
    return f"[{indicator}] {hw.subject_name}: {content} – {format_date(hw.due_date, tz)}"


def render_event(ev: Event, generated_at: datetime, tz: tzinfo) -> str:
    when = format_short_date(ev.start_date, tz) if ev.start_date else ""
    if ev.start_date and ev.end_date and ev.end_date.astimezone(tz).date() != ev.start_date.astimezone(tz).date():
        when = f"{when}–{format_short_date(ev.end_date, tz)}"
    line = f"{when} {ev.title}".strip()
    if ev.type:
        line = f"{line} ({ev.type})"
    return line


def _payload(lines: List[str], line_prefix: str, updated_param: str, updated_at: datetime, tz: tzinfo) -> str:
    pairs = [
        f"{line_prefix}_{i}={encode_component(truncate_line(line))}"
        for i, line in enumerate(lines, start=1)
    ]
    pairs.append(f"{updated_param}={encode_component(format_date(updated_at, tz))}")
    return "&".join(pairs)


def encode_marks(
    marks: Sequence[Mark],
    generated_at: datetime,
    line_prefix: str = DEFAULT_PREFIXES["marks"][0],
    updated_param: str = DEFAULT_PREFIXES["marks"][1],
    tz: tzinfo = timezone.utc,
) -> str:
    """Marks arrive newest first and already capped; the newest edit date stamps the payload."""
    if not marks:
        return _payload([NO_MARKS], line_prefix, updated_param, generated_at, tz)
    lines = [render_mark(m, generated_at, tz) for m in marks]
    return _payload(lines, line_prefix, updated_param, marks[0].edit_date, tz)


def encode_homeworks(
    homeworks: Sequence[Homework],
    generated_at: datetime,
    line_prefix: str = DEFAULT_PREFIXES["homeworks"][0],
    updated_param: str = DEFAULT_PREFIXES["homeworks"][1],
    tz: tzinfo = timezone.utc,
) -> str:
    if not homeworks:
        return _payload([NO_HOMEWORKS], line_prefix, updated_param, generated_at, tz)
    lines = [render_homework(h, generated_at, tz) for h in homeworks[:MAX_HOMEWORK_LINES]]
    return _payload(lines, line_prefix, updated_param, generated_at, tz)


def encode_events(
    events: Sequence[Event],
    generated_at: datetime,
    line_prefix: str = DEFAULT_PREFIXES["events"][0],
    updated_param: str = DEFAULT_PREFIXES["events"][1],
    tz: tzinfo = timezone.utc,
) -> str:
    if not events:
        return _payload([NO_EVENTS], line_prefix, updated_param, generated_at, tz)
    lines = [render_event(e, generated_at, tz) for e in events]
    return _payload(lines, line_prefix, updated_param, generated_at, tz)


ENCODERS: Dict[str, Callable[..., str]] = {
    "marks": encode_marks,
    "homeworks": encode_homeworks,
    "events": encode_events,
}
