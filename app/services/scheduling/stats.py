"""
Schedule statistics and fairness scoring.
"""

import math

from .types import ScheduleStats, ShiftInstance


def fairness_score(hours: list[float]) -> float:
    """
    100 = perfectly even distribution of hours.

    Coefficient of variation normalised by its maximum, sqrt(n - 1),
    reached when one worker holds every hour.
    """
    n = len(hours)
    if n < 2:
        return 100.0
    mean = sum(hours) / n
    if mean == 0:
        return 100.0
    std = math.sqrt(sum((h - mean) ** 2 for h in hours) / n)
    cv = std / mean
    score = 100 * (1 - cv / math.sqrt(n - 1))
    return round(min(100.0, max(0.0, score)), 1)


def compute_stats(
    instances: list[ShiftInstance],
    filled: dict[tuple, int],
    staff_hours: dict[int, float],
    staff_shift_count: dict[int, int],
    offered_worker_ids: list[int],
) -> ScheduleStats:
    """
    filled: instance key -> slots filled (capped at required).
    Distribution figures are taken over the workers who offered availability.
    """
    total_required = sum(i.required_count for i in instances)
    total_filled = sum(min(filled.get(i.key, 0), i.required_count) for i in instances)
    coverage = (total_filled * 100 / total_required) if total_required else 0.0

    working = [w for w, count in staff_shift_count.items() if count > 0]
    total_hours = sum(staff_hours[w] for w in working)
    avg_hours = total_hours / len(working) if working else 0.0

    pool_hours = [staff_hours.get(w, 0.0) for w in offered_worker_ids]
    pool_shifts = [staff_shift_count.get(w, 0) for w in offered_worker_ids]
    if pool_hours:
        mean = sum(pool_hours) / len(pool_hours)
        variance = sum((h - mean) ** 2 for h in pool_hours) / len(pool_hours)
    else:
        variance = 0.0

    return ScheduleStats(
        total_shifts_required=total_required,
        total_shifts_filled=total_filled,
        coverage_percent=coverage,
        avg_hours_per_staff=round(avg_hours, 2),
        min_hours=min(pool_hours, default=0.0),
        max_hours=max(pool_hours, default=0.0),
        hours_variance=round(variance, 2),
        avg_shifts_per_staff=round(sum(pool_shifts) / len(pool_shifts), 2) if pool_shifts else 0.0,
        min_shifts=min(pool_shifts, default=0),
        max_shifts=max(pool_shifts, default=0),
        fairness_score=fairness_score(pool_hours),
    )
