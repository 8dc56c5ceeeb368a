"""
One sync run per record kind:

    fetch -> normalize -> filter -> order/limit -> encode -> submit

The transform part is pure and never raises on upstream data. Fetch and
submit failures abort the run (no retry, no partial upload) and propagate.
"""
import logging
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Callable, Optional

from dateutil.relativedelta import relativedelta

from schoolfeed.client import BakalariClient
from schoolfeed.config import SyncConfig
from schoolfeed.encoding import ENCODERS, check_key_name
from schoolfeed.models import DateRange
from schoolfeed.normalizers import Normalizer, get_default_normalizer
from schoolfeed.normalizers.fields import day_floor
from schoolfeed.normalizers.types import Payload, RecordKind
from schoolfeed.settings import DEFAULT_PREFIXES
from schoolfeed.upload import Uploader

log = logging.getLogger(__name__)

Fetch = Callable[[RecordKind, DateRange], Payload]
Submit = Callable[[str], Any]


class SyncState(str, Enum):
    PENDING = "pending"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    ENCODED = "encoded"
    SUBMITTED = "submitted"
    FAILED = "failed"


def default_window(kind: RecordKind, now: datetime) -> DateRange:
    """
    Marks look one month back from `now`; homework and events look one
    month ahead from the start of today (UTC).
    """
    if kind == "marks":
        return DateRange(start=now - relativedelta(months=1), end=now)
    today = day_floor(now)
    return DateRange(start=today, end=today + relativedelta(months=1))


class SyncPipeline:
    def __init__(
        self,
        kind: RecordKind,
        fetch: Fetch,
        submit: Submit,
        line_prefix: Optional[str] = None,
        updated_param: Optional[str] = None,
        tz: tzinfo = timezone.utc,
        normalizer: Optional[Normalizer] = None,
    ):
        if kind not in ENCODERS:
            raise ValueError(f"unknown record kind: {kind!r}")
        default_prefix, default_param = DEFAULT_PREFIXES[kind]
        self.kind = kind
        self.fetch = fetch
        self.submit = submit
        self.line_prefix = check_key_name(line_prefix or default_prefix)
        self.updated_param = check_key_name(updated_param or default_param)
        self.tz = tz
        self.normalizer = normalizer or get_default_normalizer(kind)
        self.state = SyncState.PENDING
        self.response: Any = None

    def transform(self, payload: Payload, generated_at: datetime, date_range: DateRange) -> str:
        """Normalize, filter, order and encode an already-fetched payload."""
        records = self.normalizer.normalize(payload or {}, date_range)
        return ENCODERS[self.kind](
            records, generated_at, self.line_prefix, self.updated_param, tz=self.tz
        )

    def run(self, generated_at: datetime, date_range: Optional[DateRange] = None) -> str:
        """Execute the whole chain; returns the string that was submitted."""
        date_range = date_range or default_window(self.kind, generated_at)
        log.info("Starting %s sync, from %s to %s", self.kind,
                 date_range.start.date().isoformat(), date_range.end.date().isoformat())

        self.state = SyncState.FETCHING
        try:
            payload = self.fetch(self.kind, date_range)
        except Exception:
            self.state = SyncState.FAILED
            log.exception("%s sync failed while fetching", self.kind)
            raise

        self.state = SyncState.NORMALIZING
        encoded = self.transform(payload, generated_at, date_range)
        self.state = SyncState.ENCODED
        log.debug("Prepared query string: %s", encoded)

        try:
            self.response = self.submit(encoded)
        except Exception:
            self.state = SyncState.FAILED
            log.exception("%s sync failed while uploading", self.kind)
            raise
        self.state = SyncState.SUBMITTED
        log.info("%s successfully posted (response=%s)", self.kind, self.response)
        return encoded


def build_pipeline(kind: RecordKind, config: SyncConfig, tz: tzinfo = timezone.utc) -> SyncPipeline:
    """Wire the real Bakaláři client and uploader into a pipeline."""
    client = BakalariClient(config.base_url, config.username, config.password)
    uploader = Uploader(config.upload_url, config.import_key)
    normalizer = None
    if kind == "marks":
        normalizer = get_default_normalizer("marks", filter_marks_by_range=config.filter_marks_by_range)
    return SyncPipeline(
        kind, client.fetch, uploader.submit,
        line_prefix=config.line_prefix, updated_param=config.updated_param,
        tz=tz, normalizer=normalizer,
    )
