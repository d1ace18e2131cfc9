"""
Internal data types for scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.

Day-of-week convention everywhere: 0=Monday .. 6=Sunday (date.weekday()).
"""

from dataclasses import asdict, dataclass, field
from datetime import date, time, datetime, timedelta
from enum import Enum
from typing import Optional, Union

from app.core.config import settings


# worker_id -> date ISO string -> shift_template_id -> available
AvailabilityMatrix = dict[int, dict[str, dict[int, bool]]]


class ScheduleInputError(ValueError):
    """Malformed scheduling input (never raised for merely impossible inputs)."""


def shift_duration_hours(start_time: time, end_time: time) -> float:
    """(end - start) mod 24h. Equal start and end is a full 24h shift."""
    start_minutes = start_time.hour * 60 + start_time.minute
    end_minutes = end_time.hour * 60 + end_time.minute
    minutes = (end_minutes - start_minutes) % (24 * 60)
    if minutes == 0:
        minutes = 24 * 60
    return minutes / 60


@dataclass(frozen=True)
class Worker:
    id: int
    store_id: int
    name: str = ""


@dataclass(frozen=True)
class ShiftTemplate:
    id: int
    store_id: int
    name: str
    start_time: time
    end_time: time
    color: Optional[str] = None

    @property
    def duration_hours(self) -> float:
        return shift_duration_hours(self.start_time, self.end_time)


@dataclass(frozen=True)
class ShiftRequirement:
    store_id: int
    week_start: date
    day_of_week: int  # 0-6
    shift_template_id: int
    required_count: int


@dataclass(frozen=True)
class AvailabilityEntry:
    worker_id: int
    store_id: int
    week_start: date
    shift_template_id: int
    day_of_week: int  # 0-6
    is_available: bool
    submitted_by: Optional[int] = None
    is_owner_override: bool = False
    override_reason: Optional[str] = None


@dataclass(frozen=True)
class ShiftInstance:
    """A shift template bound to a concrete date of the target week."""
    date: date
    shift_template_id: int
    shift_name: str
    start_time: time
    end_time: time
    required_count: int
    duration_hours: float

    @property
    def date_iso(self) -> str:
        return self.date.isoformat()

    @property
    def day_of_week(self) -> int:
        return self.date.weekday()

    @property
    def key(self) -> tuple[date, int]:
        return (self.date, self.shift_template_id)

    def to_datetime_range(self) -> tuple[datetime, datetime]:
        """Absolute window; overnight shifts end on the following day."""
        start_dt = datetime.combine(self.date, self.start_time)
        return start_dt, start_dt + timedelta(hours=self.duration_hours)

    def to_dict(self) -> dict:
        return {
            "date": self.date_iso,
            "shift_template_id": self.shift_template_id,
            "shift_name": self.shift_name,
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "duration": self.duration_hours,
            "required": self.required_count,
            "day_of_week": self.day_of_week,
        }


@dataclass(frozen=True)
class ShiftAssignment:
    """A worker placed on a shift (proposed or already persisted)."""
    worker_id: int
    shift_date: date
    shift_template_id: int
    start_datetime: datetime
    end_datetime: datetime

    @classmethod
    def for_instance(cls, worker_id: int, instance: ShiftInstance) -> "ShiftAssignment":
        start_dt, end_dt = instance.to_datetime_range()
        return cls(
            worker_id=worker_id,
            shift_date=instance.date,
            shift_template_id=instance.shift_template_id,
            start_datetime=start_dt,
            end_datetime=end_dt,
        )

    @property
    def duration_hours(self) -> float:
        delta = self.end_datetime - self.start_datetime
        return delta.total_seconds() / 3600


class WarningType(str, Enum):
    UNDERSTAFFED = "understaffed"
    NO_SHIFTS = "no_shifts"
    OVERWORK = "overwork"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class UnderstaffedWarning:
    shift: ShiftInstance
    assigned: int
    required: int
    severity: Severity
    type: WarningType = WarningType.UNDERSTAFFED

    @property
    def message(self) -> str:
        return (
            f"{self.shift.shift_name} on {self.shift.date_iso} "
            f"({self.shift.start_time:%H:%M}-{self.shift.end_time:%H:%M}): "
            f"{self.assigned}/{self.required} staff assigned"
        )

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "shift": self.shift.to_dict(),
            "assigned": self.assigned,
            "required": self.required,
            "message": self.message,
        }


@dataclass(frozen=True)
class NoShiftsWarning:
    worker_id: int
    available_slots: int
    severity: Severity = Severity.INFO
    type: WarningType = WarningType.NO_SHIFTS

    @property
    def message(self) -> str:
        return f"Worker {self.worker_id} offered {self.available_slots} slot(s) but was not scheduled"

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "staff_id": self.worker_id,
            "available_slots": self.available_slots,
            "message": self.message,
        }


@dataclass(frozen=True)
class OverworkWarning:
    worker_id: int
    hours: float
    max_hours: float
    consecutive_days: int
    max_consecutive_days: int
    severity: Severity = Severity.WARNING
    type: WarningType = WarningType.OVERWORK

    @property
    def message(self) -> str:
        reasons = []
        if self.hours > self.max_hours:
            reasons.append(f"{self.hours:g}h scheduled (limit {self.max_hours:g}h)")
        if self.consecutive_days > self.max_consecutive_days:
            reasons.append(f"{self.consecutive_days} consecutive days (limit {self.max_consecutive_days})")
        return f"Worker {self.worker_id} overworked: " + ", ".join(reasons)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "staff_id": self.worker_id,
            "hours": self.hours,
            "max_hours": self.max_hours,
            "consecutive_days": self.consecutive_days,
            "max_consecutive_days": self.max_consecutive_days,
            "message": self.message,
        }


ScheduleWarning = Union[UnderstaffedWarning, NoShiftsWarning, OverworkWarning]


@dataclass(frozen=True)
class EngineConfig:
    max_consecutive_days: int = 6
    max_weekly_hours: float = 48.0
    allow_multiple_shifts_per_day: bool = True
    # Node budget for the exact coverage search; 0 disables it
    coverage_search_nodes: int = 100_000

    @classmethod
    def from_settings(cls) -> "EngineConfig":
        return cls(
            max_consecutive_days=settings.SCHEDULE_MAX_CONSECUTIVE_DAYS,
            max_weekly_hours=settings.SCHEDULE_MAX_WEEKLY_HOURS,
            allow_multiple_shifts_per_day=settings.SCHEDULE_ALLOW_MULTIPLE_SHIFTS_PER_DAY,
            coverage_search_nodes=settings.SCHEDULE_COVERAGE_SEARCH_NODES,
        )


@dataclass
class ScheduleStats:
    total_shifts_required: int = 0
    total_shifts_filled: int = 0
    coverage_percent: float = 0.0
    avg_hours_per_staff: float = 0.0
    min_hours: float = 0.0
    max_hours: float = 0.0
    hours_variance: float = 0.0
    avg_shifts_per_staff: float = 0.0
    min_shifts: int = 0
    max_shifts: int = 0
    fairness_score: float = 100.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ScheduleResult:
    """Output of the scheduling algorithm."""
    assignments: list[ShiftAssignment]
    warnings: list[ScheduleWarning] = field(default_factory=list)
    stats: ScheduleStats = field(default_factory=ScheduleStats)
    staff_hours: dict[int, float] = field(default_factory=dict)  # worker_id -> hours incl. locked
    staff_shift_count: dict[int, int] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.stats.total_shifts_filled == self.stats.total_shifts_required

    def assignments_by_worker(self) -> dict[int, dict[str, list[int]]]:
        """worker_id -> date ISO -> [shift_template_id], new assignments only."""
        grouped: dict[int, dict[str, list[int]]] = {}
        for a in self.assignments:
            grouped.setdefault(a.worker_id, {}).setdefault(a.shift_date.isoformat(), []).append(a.shift_template_id)
        return grouped

    def warnings_as_dicts(self) -> list[dict]:
        return [w.to_dict() for w in self.warnings]


@dataclass(frozen=True)
class SubmissionStatus:
    complete: bool
    total_active: int
    submitted_distinct: int


class SkipReason(str, Enum):
    DISABLED = "DISABLED"
    NOT_ALL_SUBMITTED = "NOT_ALL_SUBMITTED"
    ALREADY_RUN = "ALREADY_RUN"
    NO_SHIFT_TEMPLATES = "NO_SHIFT_TEMPLATES"
    NO_ACTIVE_WORKERS = "NO_ACTIVE_WORKERS"
    NO_REQUIREMENTS = "NO_REQUIREMENTS"
    NO_SHIFT_INSTANCES = "NO_SHIFT_INSTANCES"
    INVALID_INPUT = "INVALID_INPUT"


SKIP_MESSAGES = {
    SkipReason.DISABLED: "Auto-schedule is disabled for this store",
    SkipReason.NOT_ALL_SUBMITTED: "Not every active worker has submitted availability",
    SkipReason.ALREADY_RUN: "Auto-schedule already ran for this week",
    SkipReason.NO_SHIFT_TEMPLATES: "No shift templates found",
    SkipReason.NO_ACTIVE_WORKERS: "No active workers found",
    SkipReason.NO_REQUIREMENTS: "No staffing requirements set for this week",
    SkipReason.NO_SHIFT_INSTANCES: "No shifts with a positive staffing requirement",
    SkipReason.INVALID_INPUT: "Stored schedule data is invalid",
}


@dataclass
class GenerationOutcome:
    """Result of a generation attempt. recorded=False with a skip_reason means nothing was written."""
    recorded: bool
    message: str
    skip_reason: Optional[SkipReason] = None
    generation_id: Optional[int] = None
    result: Optional[ScheduleResult] = None

    @classmethod
    def skipped(cls, reason: SkipReason) -> "GenerationOutcome":
        return cls(recorded=False, message=SKIP_MESSAGES[reason], skip_reason=reason)


@dataclass
class GenerationRecord:
    """Snapshot persisted for one scheduling run."""
    store_id: int
    week_start: date
    total_shifts_required: int
    total_shifts_filled: int
    coverage_percent: float
    fairness_score: float
    warnings: list[dict]
    stats: dict
    is_auto_generated: bool
    accepted_at: datetime
    needs_review: bool
    auto_triggered_at: Optional[datetime] = None
    supersedes_generation_id: Optional[int] = None


@dataclass
class SubmissionResult:
    entries_saved: int
    status: SubmissionStatus
    auto_schedule: Optional[GenerationOutcome] = None
