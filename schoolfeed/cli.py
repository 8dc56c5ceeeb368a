"""
Command-line entry points: schoolfeed-marks, schoolfeed-homeworks, schoolfeed-events.

Values resolve as: --option, then positional, then environment variable.
Usage:
    schoolfeed-marks <baseUrl> <username> <password> <importKey> [linePrefix] [updatedParam]
"""
import argparse
import logging
import os
import sys
from datetime import datetime, timezone
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from schoolfeed.config import SyncConfig
from schoolfeed.errors import SchoolFeedError
from schoolfeed.normalizers.types import RecordKind
from schoolfeed.settings import DEFAULT_PREFIXES, DISPLAY_TIMEZONE, LOG_LEVEL
from schoolfeed.setup_logging import setup_logging
from schoolfeed.sync import build_pipeline

log = logging.getLogger(__name__)

# option name -> positional index, environment fallback
FIELDS = [
    ("base_url", 0, "BAKALARI_BASE_URL"),
    ("username", 1, "BAKALARI_USERNAME"),
    ("password", 2, "BAKALARI_PASSWORD"),
    ("import_key", 3, "SCHOOLFEED_IMPORT_KEY"),
    ("line_prefix", 4, None),
    ("updated_param", 5, None),
]

# CLI option spelling kept compatible with the older scripts
OPTION_NAMES = {
    "marks": "grades",
    "homeworks": "homeworks",
    "events": "events",
}


def build_parser(kind: RecordKind) -> argparse.ArgumentParser:
    opt = OPTION_NAMES[kind]
    p = argparse.ArgumentParser(
        prog=f"schoolfeed-{kind}",
        description=f"Fetch {kind} from Bakaláři and post them as indexed text lines.",
    )
    p.add_argument("positionals", nargs="*", metavar="ARG",
                   help="baseUrl username password importKey [linePrefix] [updatedParam]")
    p.add_argument("--bakalari-base-url", dest="base_url")
    p.add_argument("--bakalari-username", dest="username")
    p.add_argument("--bakalari-password", dest="password")
    p.add_argument("--import-key", dest="import_key")
    p.add_argument("--upload-url", dest="upload_url",
                   default=os.getenv("SCHOOLFEED_UPLOAD_URL"))
    p.add_argument(f"--{opt}-line-prefix", dest="line_prefix")
    p.add_argument(f"--{opt}-updated-param", dest="updated_param")
    p.add_argument("--log-level", default=LOG_LEVEL)
    if kind == "marks":
        p.add_argument("--filter-by-range", dest="filter_marks_by_range", action="store_true",
                       help="also drop marks edited outside the fetch window")
    return p


def resolve_values(kind: RecordKind, args: argparse.Namespace) -> dict:
    values = {}
    for name, index, env in FIELDS:
        value = getattr(args, name, None)
        if value is None and index < len(args.positionals):
            value = args.positionals[index]
        if value is None and env:
            value = os.getenv(env)
        values[name] = value
    # blank prefix/param fall back to the defaults for the kind
    defaults = dict(zip(("line_prefix", "updated_param"), DEFAULT_PREFIXES[kind]))
    for name, fallback in defaults.items():
        v = values.get(name)
        values[name] = v.strip() if isinstance(v, str) and v.strip() else fallback
    values["upload_url"] = args.upload_url
    values["filter_marks_by_range"] = bool(getattr(args, "filter_marks_by_range", False))
    return values


def main(kind: RecordKind, argv: Optional[List[str]] = None) -> int:
    parser = build_parser(kind)
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = SyncConfig(**resolve_values(kind, args))
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]) for err in e.errors())
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: missing or invalid: {missing}", file=sys.stderr)
        return 2

    try:
        tz = ZoneInfo(DISPLAY_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        print(f"{parser.prog}: error: unknown time zone {DISPLAY_TIMEZONE!r} (SCHOOLFEED_TIMEZONE)", file=sys.stderr)
        return 2

    now = datetime.now(timezone.utc)
    try:
        pipeline = build_pipeline(kind, config, tz=tz)
        pipeline.run(now)
    except SchoolFeedError as e:
        log.error("Error occurred during %s sync: %s", kind, e)
        return 1
    return 0


def marks_main() -> int:
    return main("marks")


def homeworks_main() -> int:
    return main("homeworks")


def events_main() -> int:
    return main("events")
