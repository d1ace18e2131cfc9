"""
Constraint checking utilities for schedule validation.
Handles double-booking, consecutive working days and weekly hour ceilings.
"""

from datetime import date, timedelta
from typing import Container

from .types import (
    EngineConfig,
    OverworkWarning,
    ShiftAssignment,
)
from .availability import datetime_ranges_overlap


def has_overlapping_assignment(
    assignments: list[ShiftAssignment],
    candidate: ShiftAssignment,
    allow_multiple_per_day: bool = True,
) -> bool:
    """True if the candidate clashes with any of the worker's assignments."""
    for existing in assignments:
        if not allow_multiple_per_day and existing.shift_date == candidate.shift_date:
            return True
        if datetime_ranges_overlap(
            existing.start_datetime, existing.end_datetime,
            candidate.start_datetime, candidate.end_datetime,
        ):
            return True
    return False


def consecutive_run_length(worked_dates: Container[date], target_date: date) -> int:
    """
    Length of the run of consecutive worked days containing target_date,
    counting target_date as worked.
    """
    length = 1
    day = target_date - timedelta(days=1)
    while day in worked_dates:
        length += 1
        day -= timedelta(days=1)
    day = target_date + timedelta(days=1)
    while day in worked_dates:
        length += 1
        day += timedelta(days=1)
    return length


def fits_worker(
    own_assignments: list[ShiftAssignment],
    worked_dates: Container[date],
    candidate: ShiftAssignment,
    config: EngineConfig,
) -> bool:
    """
    Availability aside, can this worker take the candidate shift: no clash
    with their other shifts and the consecutive-day run stays in bounds.
    """
    if has_overlapping_assignment(own_assignments, candidate, config.allow_multiple_shifts_per_day):
        return False
    if candidate.shift_date not in worked_dates:
        if consecutive_run_length(worked_dates, candidate.shift_date) > config.max_consecutive_days:
            return False
    return True


def longest_consecutive_run(worked_dates: set[date]) -> int:
    longest = 0
    for day in worked_dates:
        if day - timedelta(days=1) in worked_dates:
            continue
        longest = max(longest, consecutive_run_length(worked_dates, day))
    return longest


def calculate_worker_hours(assignments: list[ShiftAssignment], worker_id: int) -> float:
    """Calculate total hours assigned to a worker."""
    return sum(a.duration_hours for a in assignments if a.worker_id == worker_id)


def check_overwork(
    assignments: list[ShiftAssignment],
    worker_ids: list[int],
    config: EngineConfig,
) -> list[OverworkWarning]:
    """
    Weekly hour ceiling and consecutive-day limit, checked over the final schedule.
    The consecutive-day check repeats the solver's eligibility filter.
    """
    warnings = []
    for worker_id in worker_ids:
        own = [a for a in assignments if a.worker_id == worker_id]
        if not own:
            continue
        hours = calculate_worker_hours(own, worker_id)
        run = longest_consecutive_run({a.shift_date for a in own})
        if hours > config.max_weekly_hours or run > config.max_consecutive_days:
            warnings.append(OverworkWarning(
                worker_id=worker_id,
                hours=hours,
                max_hours=config.max_weekly_hours,
                consecutive_days=run,
                max_consecutive_days=config.max_consecutive_days,
            ))
    return warnings
