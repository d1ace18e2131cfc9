"""
Schedule generator - main orchestration layer.

Combines submission tracking, the trigger guard, data loading, the solver and
the recorder into the automatic flow, plus the on-demand preview/apply flows
used by the owner screens.
"""

import logging
import random
from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.core.config import settings

from .availability import build_availability_matrix
from .expander import expand_shift_instances, validate_week_start
from .recorder import GenerationRecorder
from .solver import generate_smart_schedule
from .stores import ScheduleStores
from .tracker import check_all_submitted
from .trigger_guard import TriggerDecision, TriggerGuard
from .types import (
    AvailabilityMatrix,
    EngineConfig,
    GenerationOutcome,
    ScheduleResult,
    ShiftAssignment,
    ShiftInstance,
    SkipReason,
)


logger = logging.getLogger(__name__)


@dataclass
class ScheduleInputs:
    instances: list[ShiftInstance]
    matrix: AvailabilityMatrix
    worker_ids: list[int]  # tie-break order
    existing_assignments: list[ShiftAssignment]


def worker_tiebreak_order(
    worker_ids: list[int],
    store_id: int,
    week_start: date,
    shuffle: bool = True,
) -> list[int]:
    """
    Stable per generation, different between weeks, so nobody is always
    first in line when loads are equal.
    """
    ordered = sorted(worker_ids)
    if shuffle:
        random.Random(f"{store_id}:{week_start.isoformat()}").shuffle(ordered)
    return ordered


def load_schedule_inputs(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
) -> tuple[Optional[ScheduleInputs], Optional[SkipReason]]:
    """Read everything the solver needs, or the reason there is nothing to do."""
    templates = stores.requirements.list_shift_templates(store_id)
    if not templates:
        return None, SkipReason.NO_SHIFT_TEMPLATES

    workers = stores.roster.list_active_workers(store_id)
    if not workers:
        return None, SkipReason.NO_ACTIVE_WORKERS

    requirements = stores.requirements.list_requirements(store_id, week_start)
    if not requirements:
        return None, SkipReason.NO_REQUIREMENTS

    instances = expand_shift_instances(requirements, templates, week_start)
    if not instances:
        return None, SkipReason.NO_SHIFT_INSTANCES

    worker_ids = [w.id for w in workers]
    entries = stores.availability.list_availability(store_id, week_start)
    matrix = build_availability_matrix(entries, worker_ids, [t.id for t in templates], week_start)

    return ScheduleInputs(
        instances=instances,
        matrix=matrix,
        worker_ids=worker_tiebreak_order(worker_ids, store_id, week_start, settings.SCHEDULE_SHUFFLE_WORKERS),
        existing_assignments=stores.schedules.list_locked_assignments(store_id, week_start),
    ), None


def _solve(inputs: ScheduleInputs, config: Optional[EngineConfig]) -> ScheduleResult:
    return generate_smart_schedule(
        inputs.instances,
        inputs.matrix,
        inputs.worker_ids,
        config or EngineConfig.from_settings(),
        inputs.existing_assignments,
    )


def _summary(result: ScheduleResult) -> str:
    stats = result.stats
    return f"Schedule generated: {stats.total_shifts_filled}/{stats.total_shifts_required} shifts filled"


def _warn_if_short(result: ScheduleResult, store_id: int, week_start: date):
    if not result.success:
        stats = result.stats
        logger.warning(
            f"Store {store_id} week {week_start} is short: "
            f"{stats.total_shifts_required - stats.total_shifts_filled} of {stats.total_shifts_required} slots unfilled"
        )


def auto_generate_schedule(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    config: Optional[EngineConfig] = None,
) -> GenerationOutcome:
    """
    Generate and auto-accept the week's schedule once every active worker
    has submitted availability.

    Flow:
    1. Feature flag and submission completeness (read only)
    2. Trigger guard - the unique insert decides who runs
    3. Load templates, roster, requirements and availability
    4. Run the solver
    5. Record generation + assignments + trigger, commit once

    Skips return an outcome with skip_reason and leave no writes behind.
    Persistence errors roll back and propagate.
    """
    validate_week_start(week_start)

    if not stores.workspaces.is_auto_schedule_enabled(store_id):
        logger.info(f"Auto-schedule disabled for store {store_id}")
        return GenerationOutcome.skipped(SkipReason.DISABLED)

    status = check_all_submitted(stores, store_id, week_start)
    if not status.complete:
        return GenerationOutcome.skipped(SkipReason.NOT_ALL_SUBMITTED)

    if TriggerGuard(stores.schedules).try_acquire(store_id, week_start) is TriggerDecision.ALREADY_RUN:
        return GenerationOutcome.skipped(SkipReason.ALREADY_RUN)

    try:
        inputs, skip_reason = load_schedule_inputs(stores, store_id, week_start)
        if skip_reason is not None:
            # releases the pending trigger row
            stores.uow.rollback()
            logger.info(f"Auto-schedule skipped for store {store_id}, week {week_start}: {skip_reason.value}")
            return GenerationOutcome.skipped(skip_reason)

        result = _solve(inputs, config)
        generation_id = GenerationRecorder(stores.schedules).record(
            store_id, week_start, result, is_auto_generated=True
        )
        stores.uow.commit()
    except Exception as e:
        stores.uow.rollback()
        logger.error(f"Auto-schedule failed for store {store_id}, week {week_start}: {e}")
        raise

    logger.info(
        f"Auto-generation complete: generation={generation_id} assignments={len(result.assignments)} "
        f"warnings={len(result.warnings)} coverage={result.stats.coverage_percent:.1f}%"
    )
    _warn_if_short(result, store_id, week_start)
    return GenerationOutcome(
        recorded=True,
        message=_summary(result),
        generation_id=generation_id,
        result=result,
    )


def preview_schedule(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    config: Optional[EngineConfig] = None,
) -> GenerationOutcome:
    """Run the solver on current data without writing anything."""
    validate_week_start(week_start)
    inputs, skip_reason = load_schedule_inputs(stores, store_id, week_start)
    if skip_reason is not None:
        return GenerationOutcome.skipped(skip_reason)

    result = _solve(inputs, config)
    return GenerationOutcome(recorded=False, message=_summary(result), result=result)


def apply_schedule(
    stores: ScheduleStores,
    store_id: int,
    week_start: date,
    config: Optional[EngineConfig] = None,
) -> GenerationOutcome:
    """
    Owner-initiated generation: recompute and record without the trigger.
    Supersedes the latest generation for the week; manual edits survive.
    """
    validate_week_start(week_start)
    try:
        inputs, skip_reason = load_schedule_inputs(stores, store_id, week_start)
        if skip_reason is not None:
            return GenerationOutcome.skipped(skip_reason)

        result = _solve(inputs, config)
        generation_id = GenerationRecorder(stores.schedules).record(
            store_id, week_start, result, is_auto_generated=False
        )
        stores.uow.commit()
    except Exception as e:
        stores.uow.rollback()
        logger.error(f"Schedule apply failed for store {store_id}, week {week_start}: {e}")
        raise

    logger.info(f"Manual generation recorded: generation={generation_id} store={store_id} week={week_start}")
    _warn_if_short(result, store_id, week_start)
    return GenerationOutcome(
        recorded=True,
        message=_summary(result),
        generation_id=generation_id,
        result=result,
    )
