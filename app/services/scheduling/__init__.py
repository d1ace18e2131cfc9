"""
Scheduling service package.

Usage:
    from datetime import date
    from app.services.scheduling import get_schedule_stores, submit_availability

    # A worker submits; the last submission of the week generates the schedule
    stores = get_schedule_stores(db, store_id=1)
    result = submit_availability(stores, 1, date(2025, 1, 20), worker_id=7, slots=[(0, 3), (2, 3)])
    if result.auto_schedule and result.auto_schedule.recorded:
        print(result.auto_schedule.generation_id)

    # Or drive the solver directly with prepared inputs
    from app.services.scheduling import generate_smart_schedule
    result = generate_smart_schedule(instances, matrix, worker_ids)
"""

from .types import (
    AvailabilityEntry,
    AvailabilityMatrix,
    EngineConfig,
    GenerationOutcome,
    NoShiftsWarning,
    OverworkWarning,
    ScheduleInputError,
    ScheduleResult,
    ScheduleStats,
    Severity,
    ShiftAssignment,
    ShiftInstance,
    ShiftRequirement,
    ShiftTemplate,
    SkipReason,
    SubmissionResult,
    SubmissionStatus,
    UnderstaffedWarning,
    WarningType,
    Worker,
)
from .availability import build_availability_matrix
from .data_loader import get_schedule_stores
from .expander import expand_shift_instances
from .generator import apply_schedule, auto_generate_schedule, preview_schedule
from .recorder import GenerationRecorder
from .solver import SmartScheduleSolver, generate_smart_schedule
from .stores import ScheduleStores
from .submissions import override_availability, recall_availability, submit_availability
from .tracker import check_all_submitted
from .trigger_guard import TriggerDecision, TriggerGuard

__all__ = [
    # Types
    "AvailabilityEntry",
    "AvailabilityMatrix",
    "EngineConfig",
    "GenerationOutcome",
    "NoShiftsWarning",
    "OverworkWarning",
    "ScheduleInputError",
    "ScheduleResult",
    "ScheduleStats",
    "Severity",
    "ShiftAssignment",
    "ShiftInstance",
    "ShiftRequirement",
    "ShiftTemplate",
    "SkipReason",
    "SubmissionResult",
    "SubmissionStatus",
    "UnderstaffedWarning",
    "WarningType",
    "Worker",
    # Main entry points
    "submit_availability",
    "recall_availability",
    "override_availability",
    "auto_generate_schedule",
    "preview_schedule",
    "apply_schedule",
    # Lower-level functions
    "build_availability_matrix",
    "check_all_submitted",
    "expand_shift_instances",
    "generate_smart_schedule",
    "get_schedule_stores",
    "GenerationRecorder",
    "ScheduleStores",
    "SmartScheduleSolver",
    "TriggerDecision",
    "TriggerGuard",
]
