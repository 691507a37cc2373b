from __future__ import annotations

from typing import Any, Dict

from ..domain import Occurrence
from .models import OccurrencePayload


def serialize_occurrence(occurrence: Occurrence) -> Dict[str, Any]:
    return OccurrencePayload.from_domain(occurrence).model_dump(mode="json")
