"""
Persists solver output as a generation record plus assignment rows.
"""

from datetime import date, datetime, timezone
from typing import Optional

from .stores import ScheduleStore
from .types import GenerationRecord, ScheduleResult


class GenerationRecorder:
    """
    Writes one generation inside the caller's unit of work:
    generation row, replacement of non-manual assignments for the week, and
    (for automatic runs) the trigger's generation id. Committing is left to
    the caller so the whole run lands or none of it does.
    """

    def __init__(self, schedules: ScheduleStore):
        self.schedules = schedules

    def record(
        self,
        store_id: int,
        week_start: date,
        result: ScheduleResult,
        is_auto_generated: bool,
        now: Optional[datetime] = None,
    ) -> int:
        now = now or datetime.now(timezone.utc)
        stats = result.stats

        record = GenerationRecord(
            store_id=store_id,
            week_start=week_start,
            total_shifts_required=stats.total_shifts_required,
            total_shifts_filled=stats.total_shifts_filled,
            coverage_percent=stats.coverage_percent,
            fairness_score=stats.fairness_score,
            warnings=result.warnings_as_dicts(),
            stats=stats.to_dict(),
            is_auto_generated=is_auto_generated,
            auto_triggered_at=now if is_auto_generated else None,
            accepted_at=now,  # auto-accepted, no approval gate
            needs_review=len(result.warnings) > 0,
            supersedes_generation_id=self.schedules.latest_generation_id(store_id, week_start),
        )

        generation_id = self.schedules.record_generation(record)
        self.schedules.replace_week_assignments(store_id, week_start, result.assignments, generation_id)
        if is_auto_generated:
            self.schedules.attach_trigger_generation(store_id, week_start, generation_id)
        return generation_id
