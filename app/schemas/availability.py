from pydantic import BaseModel, Field
from typing import List, Optional

from app.schemas.schedule_generations import GenerationOutcomeResponse


class AvailabilitySlot(BaseModel):
    day_of_week: int = Field(ge=0, le=6)  # 0=Monday .. 6=Sunday
    shift_template_id: int


class AvailabilitySubmit(BaseModel):
    worker_id: int
    slots: List[AvailabilitySlot]
    submitted_by_user_id: Optional[int] = None


class AvailabilityOverride(AvailabilitySubmit):
    reason: str = Field(min_length=1, max_length=255)


class SubmissionStatusResponse(BaseModel):
    complete: bool
    total_active: int
    submitted_distinct: int

    class Config:
        from_attributes = True


class SubmissionResponse(BaseModel):
    entries_saved: int
    status: SubmissionStatusResponse
    auto_schedule: Optional[GenerationOutcomeResponse] = None


class RecallResponse(BaseModel):
    entries_removed: int
