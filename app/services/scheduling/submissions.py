"""
Worker availability self-service and owner overrides.
Submitting is what drives automatic generation: every successful submission
re-evaluates completeness and, once the last active worker is in, runs
auto_generate_schedule.
"""

import logging
from datetime import date
from typing import Optional

from .expander import validate_week_start
from .generator import auto_generate_schedule
from .stores import ScheduleStores
from .tracker import check_all_submitted
from .types import (
    EngineConfig,
    GenerationOutcome,
    ScheduleInputError,
    SKIP_MESSAGES,
    SkipReason,
    SubmissionResult,
)


logger = logging.getLogger(__name__)


def _validate_submission(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    worker_id: int,
    slots: list[tuple[int, int]],
) -> list[tuple[int, int]]:
    validate_week_start(week_start)

    if worker_id not in {w.id for w in stores.roster.list_active_workers(store_id)}:
        raise ScheduleInputError(f"Worker {worker_id} is not an active worker of store {store_id}")

    template_ids = {t.id for t in stores.requirements.list_shift_templates(store_id)}
    unique_slots = sorted(set(slots))
    for day_of_week, template_id in unique_slots:
        if not 0 <= day_of_week <= 6:
            raise ScheduleInputError(f"day_of_week must be 0-6, got {day_of_week}")
        if template_id not in template_ids:
            raise ScheduleInputError(f"Unknown shift template {template_id} for store {store_id}")
    return unique_slots


def _auto_generate(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    config: Optional[EngineConfig],
) -> GenerationOutcome:
    """
    The entries are already committed, so bad stored data (say a requirement
    pointing at a deleted template) is reported on the outcome rather than
    failing the submission.
    """
    try:
        return auto_generate_schedule(stores, store_id, week_start, config)
    except ScheduleInputError as e:
        logger.error(f"Auto-schedule input invalid for store {store_id}, week {week_start}: {e}")
        return GenerationOutcome(
            recorded=False,
            message=f"{SKIP_MESSAGES[SkipReason.INVALID_INPUT]}: {e}",
            skip_reason=SkipReason.INVALID_INPUT,
        )


def submit_availability(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    worker_id: int,
    slots: list[tuple[int, int]],
    submitted_by: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> SubmissionResult:
    """
    Replace the worker's own (non-override) entries for the week with the
    given (day_of_week, shift_template_id) slots, then trigger generation
    if everyone has submitted.
    """
    slots = _validate_submission(stores, store_id, week_start, worker_id, slots)
    try:
        saved = stores.availability.replace_worker_availability(
            store_id, week_start, worker_id, slots, submitted_by
        )
        stores.uow.commit()
    except Exception:
        stores.uow.rollback()
        raise

    status = check_all_submitted(stores, store_id, week_start)
    outcome = None
    if status.complete:
        logger.info(f"All {status.total_active} workers submitted for store {store_id}, week {week_start}")
        outcome = _auto_generate(stores, store_id, week_start, config)

    return SubmissionResult(entries_saved=saved, status=status, auto_schedule=outcome)


def recall_availability(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    worker_id: int,
) -> int:
    """Withdraw the worker's own entries. Owner overrides stay."""
    validate_week_start(week_start)
    try:
        removed = stores.availability.clear_worker_availability(store_id, week_start, worker_id)
        stores.uow.commit()
    except Exception:
        stores.uow.rollback()
        raise
    return removed


def override_availability(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    worker_id: int,
    slots: list[tuple[int, int]],
    reason: str,
    submitted_by: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> SubmissionResult:
    """
    Owner sets availability on a worker's behalf. Override entries survive
    the worker's own resubmission and recall, and count as a submission.
    """
    if not reason or not reason.strip():
        raise ScheduleInputError("An override reason is required")
    slots = _validate_submission(stores, store_id, week_start, worker_id, slots)
    try:
        saved = stores.availability.replace_owner_overrides(
            store_id, week_start, worker_id, slots, reason.strip(), submitted_by
        )
        stores.uow.commit()
    except Exception:
        stores.uow.rollback()
        raise

    status = check_all_submitted(stores, store_id, week_start)
    outcome = None
    if status.complete:
        outcome = _auto_generate(stores, store_id, week_start, config)
    return SubmissionResult(entries_saved=saved, status=status, auto_schedule=outcome)
