"""
Availability utilities.
Builds the worker x date x shift matrix and answers "can this worker take this slot".
"""

from datetime import datetime, date, timedelta

from .types import AvailabilityEntry, AvailabilityMatrix, ShiftInstance


def datetime_ranges_overlap(
    start1: datetime, end1: datetime,
    start2: datetime, end2: datetime
) -> bool:
    """Check if two datetime ranges overlap. Touching ranges do not."""
    return start1 < end2 and start2 < end1


def build_availability_matrix(
    entries: list[AvailabilityEntry],
    worker_ids: list[int],
    template_ids: list[int],
    week_start: date,
) -> AvailabilityMatrix:
    """
    matrix[worker_id][date_iso][template_id] -> bool.

    Every cell exists and defaults to False: a missing entry means
    unavailable, not unknown. Entries for workers or templates outside the
    given lists are ignored.
    """
    dates = [(week_start + timedelta(days=i)).isoformat() for i in range(7)]
    matrix: AvailabilityMatrix = {
        worker_id: {d: {t: False for t in template_ids} for d in dates}
        for worker_id in worker_ids
    }

    for entry in entries:
        if not entry.is_available:
            continue
        if entry.worker_id not in matrix or not 0 <= entry.day_of_week <= 6:
            continue
        day_cells = matrix[entry.worker_id][dates[entry.day_of_week]]
        if entry.shift_template_id in day_cells:
            day_cells[entry.shift_template_id] = True

    return matrix


def is_available(matrix: AvailabilityMatrix, worker_id: int, instance: ShiftInstance) -> bool:
    return matrix.get(worker_id, {}).get(instance.date_iso, {}).get(instance.shift_template_id, False)


def count_available_workers(matrix: AvailabilityMatrix, worker_ids: list[int], instance: ShiftInstance) -> int:
    return sum(1 for w in worker_ids if is_available(matrix, w, instance))


def count_offered_slots(matrix: AvailabilityMatrix, worker_id: int) -> int:
    """Number of True cells a worker offered for the week."""
    return sum(
        1
        for shifts in matrix.get(worker_id, {}).values()
        for available in shifts.values()
        if available
    )


def offered_availability(matrix: AvailabilityMatrix, worker_ids: list[int]) -> list[int]:
    """Workers with at least one True cell, in the given order."""
    return [w for w in worker_ids if count_offered_slots(matrix, w) > 0]
