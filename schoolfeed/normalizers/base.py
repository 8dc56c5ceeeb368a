# schoolfeed/normalizers/base.py
from typing import List, Protocol

from schoolfeed.models import DateRange
from .types import Canonical, Payload

class Normalizer(Protocol):
    def normalize(self, payload: Payload, date_range: DateRange) -> List[Canonical]:
        """Return NEW canonical records built from `payload`. Do not mutate it."""
        ...
