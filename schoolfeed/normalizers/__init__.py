from .pipeline import get_default_normalizer, NormalizerPipeline
from .rules import MarkNormalizer, HomeworkNormalizer, EventNormalizer
from .fields import resolve_text, resolve_date, parse_date, day_floor, in_range
from .types import RecordKind, RawRecord
from .base import Normalizer

__all__ = [
    "get_default_normalizer",
    "NormalizerPipeline",
    "MarkNormalizer",
    "HomeworkNormalizer",
    "EventNormalizer",
    "resolve_text",
    "resolve_date",
    "parse_date",
    "day_floor",
    "in_range",
    "RecordKind",
    "RawRecord",
    "Normalizer",
]
