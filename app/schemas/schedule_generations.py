from datetime import date, datetime
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from app.services.scheduling.types import SkipReason


class WarningShift(BaseModel):
    date: date
    shift_template_id: int
    shift_name: str
    start_time: str
    end_time: str
    duration: float
    required: int
    day_of_week: int


class UnderstaffedWarningOut(BaseModel):
    type: Literal["understaffed"]
    severity: Literal["critical", "warning"]
    shift: WarningShift
    assigned: int
    required: int
    message: str


class NoShiftsWarningOut(BaseModel):
    type: Literal["no_shifts"]
    severity: Literal["info"]
    staff_id: int
    available_slots: int
    message: str


class OverworkWarningOut(BaseModel):
    type: Literal["overwork"]
    severity: Literal["warning"]
    staff_id: int
    hours: float
    max_hours: float
    consecutive_days: int
    max_consecutive_days: int
    message: str


ScheduleWarningOut = Annotated[
    Union[UnderstaffedWarningOut, NoShiftsWarningOut, OverworkWarningOut],
    Field(discriminator="type"),
]


class ScheduleStatsOut(BaseModel):
    total_shifts_required: int
    total_shifts_filled: int
    coverage_percent: float
    avg_hours_per_staff: float
    min_hours: float
    max_hours: float
    hours_variance: float
    avg_shifts_per_staff: float
    min_shifts: int
    max_shifts: int
    fairness_score: float


class AssignmentOut(BaseModel):
    worker_id: int
    date: date
    shift_template_id: int


class ScheduleResultResponse(BaseModel):
    assignments: List[AssignmentOut]
    warnings: List[ScheduleWarningOut]
    stats: ScheduleStatsOut
    staff_hours: Dict[int, float]
    staff_shift_count: Dict[int, int]


class GenerationOutcomeResponse(BaseModel):
    recorded: bool
    message: str
    skip_reason: Optional[SkipReason] = None
    generation_id: Optional[int] = None
    result: Optional[ScheduleResultResponse] = None


class ScheduleGenerationResponse(BaseModel):
    id: int
    store_id: int
    week_start_date: date
    total_shifts_required: int
    total_shifts_filled: int
    coverage_percent: float
    fairness_score: float
    total_warnings: int
    warnings: List[ScheduleWarningOut] = Field(validation_alias="warnings_json")
    stats: ScheduleStatsOut = Field(validation_alias="stats_json")
    is_auto_generated: bool
    auto_triggered_at: Optional[datetime]
    is_accepted: bool
    accepted_at: Optional[datetime]
    needs_review: bool
    has_been_viewed: bool
    viewed_at: Optional[datetime]
    resolved_warnings: List[int]
    supersedes_generation_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True


class ResolveWarningsRequest(BaseModel):
    indices: Optional[List[int]] = None  # None resolves every warning


class ReviewStatusResponse(BaseModel):
    store_id: int
    needs_review: bool


def outcome_response(outcome) -> GenerationOutcomeResponse:
    """GenerationOutcome (service dataclass) -> response model."""
    result = None
    if outcome.result is not None:
        r = outcome.result
        result = ScheduleResultResponse(
            assignments=[
                AssignmentOut(worker_id=a.worker_id, date=a.shift_date, shift_template_id=a.shift_template_id)
                for a in r.assignments
            ],
            warnings=r.warnings_as_dicts(),
            stats=ScheduleStatsOut(**r.stats.to_dict()),
            staff_hours=r.staff_hours,
            staff_shift_count=r.staff_shift_count,
        )
    return GenerationOutcomeResponse(
        recorded=outcome.recorded,
        message=outcome.message,
        skip_reason=outcome.skip_reason,
        generation_id=outcome.generation_id,
        result=result,
    )
