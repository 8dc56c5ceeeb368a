from datetime import datetime, timedelta, timezone
from urllib.parse import unquote

import pytest

from schoolfeed.encoding import (
    NO_EVENTS, NO_HOMEWORKS, NO_MARKS, RelativeDay, describe_relative_day, encode_component,
    encode_events, encode_homeworks, encode_marks, format_date, format_short_date,
    relative_day, render_homework, truncate_line,
)
from schoolfeed.models import Event, Homework, Mark

UTC = timezone.utc


def _pairs(encoded):
    return [tuple(p.split("=", 1)) for p in encoded.split("&")]


def test_encode_component_matches_encode_uri_component():
    assert encode_component("a b&c=d/é") == "a%20b%26c%3Dd%2F%C3%A9"
    assert encode_component("-_.!~*'()") == "-_.!~*'()"

def test_format_dates():
    dt = datetime(2024, 3, 9, 23, 30, tzinfo=UTC)
    assert format_date(dt) == "9. 3. 2024"
    assert format_short_date(dt) == "9. 3."
    assert format_date(dt, timezone(timedelta(hours=1))) == "10. 3. 2024"


def test_truncate_line_boundary():
    assert truncate_line("x" * 50) == "x" * 50
    assert truncate_line("x" * 51) == "x" * 49 + "..."


@pytest.mark.parametrize("due,expected", [
    (datetime(2024, 3, 4, 12, tzinfo=UTC), (RelativeDay.OVERDUE, -1)),
    (datetime(2024, 3, 5, 23, tzinfo=UTC), (RelativeDay.TODAY, 0)),
    (datetime(2024, 3, 6, 0, tzinfo=UTC), (RelativeDay.TOMORROW, 1)),
    (datetime(2024, 3, 9, tzinfo=UTC), (RelativeDay.IN_DAYS, 4)),
])
def test_relative_day(generated_at, due, expected):
    assert relative_day(generated_at, due) == expected

def test_describe_relative_day_labels(generated_at):
    day = lambda n: generated_at + timedelta(days=n)
    assert describe_relative_day(generated_at, day(-3)) == "po termínu"
    assert describe_relative_day(generated_at, day(0)) == "dnes"
    assert describe_relative_day(generated_at, day(1)) == "zítra"
    assert describe_relative_day(generated_at, day(3)) == "za 3 dny"
    assert describe_relative_day(generated_at, day(7)) == "za 7 dní"


# --- marks ---

def test_empty_marks(generated_at):
    assert encode_marks([], generated_at) == (
        f"grades_line_1={encode_component(NO_MARKS)}"
        f"&grades_updated={encode_component('5. 3. 2024')}"
    )

def test_marks_lines_and_newest_timestamp(generated_at):
    marks = [
        Mark("M", "1", datetime(2024, 3, 4, 7, tzinfo=UTC)),
        Mark("Čeština", "3-", datetime(2024, 2, 28, tzinfo=UTC)),
    ]
    pairs = _pairs(encode_marks(marks, generated_at, "g", "u"))
    assert [k for k, _ in pairs] == ["g_1", "g_2", "u"]
    assert unquote(pairs[0][1]) == "M: 1 (4. 3.)"
    assert unquote(pairs[1][1]) == "Čeština: 3- (28. 2.)"
    assert unquote(pairs[2][1]) == "4. 3. 2024"


# --- homework ---

def test_empty_homeworks_uses_custom_names(generated_at):
    assert encode_homeworks([], generated_at, "hw", "hw_at") == (
        f"hw_1={encode_component(NO_HOMEWORKS)}&hw_at={encode_component('5. 3. 2024')}"
    )

def test_homework_line_format(generated_at):
    hw = Homework("AJ", datetime(2024, 3, 6, tzinfo=UTC), "Read\n  p. 12")
    assert render_homework(hw, generated_at, UTC) == "[zítra] AJ: Read p. 12 – 6. 3. 2024"
    assert render_homework(Homework("AJ", generated_at, ""), generated_at, UTC) == (
        "[dnes] AJ: Bez popisu – 5. 3. 2024"
    )

def test_homework_truncation(generated_at):
    due = datetime(2024, 3, 6, tzinfo=UTC)
    prefix = "[zítra] AJ: "
    suffix = " – 6. 3. 2024"
    exact = Homework("AJ", due, "x" * (50 - len(prefix) - len(suffix)))
    long = Homework("AJ", due, "x" * (51 - len(prefix) - len(suffix)))
    encoded = _pairs(encode_homeworks([exact, long], generated_at))
    first, second = unquote(encoded[0][1]), unquote(encoded[1][1])
    assert len(first) == 50 and not first.endswith("...")
    assert second == (prefix + long.content + suffix)[:49] + "..."

def test_homeworks_capped_at_ten_and_stamped_with_generation_time(generated_at):
    hws = [Homework("M", generated_at + timedelta(days=i), str(i)) for i in range(12)]
    pairs = _pairs(encode_homeworks(hws, generated_at))
    assert len(pairs) == 11
    assert pairs[-1] == ("homeworks_updated", encode_component("5. 3. 2024"))


# --- events ---

def test_events_lines(generated_at):
    events = [
        Event(datetime(2024, 3, 7, 17, tzinfo=UTC), datetime(2024, 3, 7, 18, tzinfo=UTC), "x", "Schůzky", "", "schůzka"),
        Event(datetime(2024, 3, 20, tzinfo=UTC), datetime(2024, 3, 21, tzinfo=UTC), "x", "Výlet"),
    ]
    pairs = _pairs(encode_events(events, generated_at))
    assert [unquote(v) for _, v in pairs] == [
        "7. 3. Schůzky (schůzka)",
        "20. 3.–21. 3. Výlet",
        "5. 3. 2024",
    ]

def test_empty_events(generated_at):
    assert _pairs(encode_events([], generated_at))[0] == ("events_line_1", encode_component(NO_EVENTS))

def test_truncate_line_counts_code_points():
    # an emoji is one character here, not two UTF-16 units
    line = "\U0001F4DA" * 50
    assert truncate_line(line) == line
    assert truncate_line(line + "x") == "\U0001F4DA" * 49 + "..."
