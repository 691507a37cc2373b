from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..domain import Occurrence


class OccurrencePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = Field(default="")
    start_date: datetime
    end_date: datetime
    event_type: str = Field(default="")
    recurrence: str = Field(default="none")
    invited_friends: List[str] = Field(default_factory=list)
    derived: bool = Field(default=False)
    sequence: int = Field(default=0)

    @classmethod
    def from_domain(cls, occurrence: Occurrence) -> "OccurrencePayload":
        event = occurrence.event
        return cls(
            id=occurrence.master_id,
            title=event.title,
            description=event.description,
            start_date=event.start_date,
            end_date=event.end_date,
            event_type=event.event_type,
            recurrence=event.recurrence,
            invited_friends=list(event.invited_friends),
            derived=occurrence.is_derived,
            sequence=occurrence.sequence,
        )
