from datetime import datetime, timezone
from typing import Callable, List, Optional

from schoolfeed.models import DateRange
from schoolfeed.settings import MAX_MARKS
from .base import Normalizer
from .rules import EventNormalizer, HomeworkNormalizer, MarkNormalizer
from .types import Canonical, Payload, RecordKind

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

class NormalizerPipeline(Normalizer):
    """
    Normalize, then order and cap.
    Each kind sorts on its own date field; a missing date sorts as epoch zero
    so the comparator never sees None.
    """
    def __init__(
        self,
        normalizer: Normalizer,
        sort_key: Callable[[Canonical], Optional[datetime]],
        descending: bool = False,
        limit: Optional[int] = None,
    ):
        self.normalizer = normalizer
        self.sort_key = sort_key
        self.descending = descending
        self.limit = limit

    def normalize(self, payload: Payload, date_range: DateRange) -> List[Canonical]:
        records = self.normalizer.normalize(payload, date_range)
        ordered = sorted(records, key=lambda r: self.sort_key(r) or EPOCH, reverse=self.descending)
        if self.limit is not None:
            ordered = ordered[: self.limit]
        return ordered

def get_default_normalizer(kind: RecordKind, filter_marks_by_range: bool = False) -> Normalizer:
    """
    Factory for the per-kind pipeline:
      marks     -> newest first, at most MAX_MARKS
      homeworks -> earliest due first, uncapped (the encoder shows the first few)
      events    -> earliest start first, uncapped
    """
    if kind == "marks":
        return NormalizerPipeline(
            MarkNormalizer(filter_by_range=filter_marks_by_range),
            lambda m: m.edit_date, descending=True, limit=MAX_MARKS,
        )
    if kind == "homeworks":
        return NormalizerPipeline(HomeworkNormalizer(), lambda h: h.due_date)
    if kind == "events":
        return NormalizerPipeline(EventNormalizer(), lambda e: e.start_date)
    raise ValueError(f"unknown record kind: {kind!r}")
