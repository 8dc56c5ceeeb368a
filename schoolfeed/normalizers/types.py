# schoolfeed/normalizers/types.py
from typing import Any, Dict, Literal, Mapping, Union

from schoolfeed.models import Event, Homework, Mark

RecordKind = Literal["marks", "homeworks", "events"]

# Upstream JSON object; shape differs between school deployments
RawRecord = Mapping[str, Any]
Payload = Dict[str, Any]

Canonical = Union[Mark, Homework, Event]
