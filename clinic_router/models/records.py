from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

SLOT_DURATION = timedelta(minutes=30)


class SlotMode(str, Enum):
    TELEHEALTH = "telehealth"
    IN_PERSON = "in_person"


class Slot(BaseModel):
    """A bookable window offered by a provider. Never mutated after seeding."""

    model_config = ConfigDict(frozen=True)

    id: str
    provider: str
    mode: SlotMode
    start: datetime
    end: datetime

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class Appointment(BaseModel):
    id: str
    slot: Slot
    patient_id: Optional[Any] = Field(default=None, alias="patientId")
    reason: Optional[Any] = None
    contact: Optional[Any] = None
    created_at: str = Field(alias="createdAt")

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
