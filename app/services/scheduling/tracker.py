"""
Submission tracking: has every active worker submitted availability for the week?
"""

from datetime import date

from .stores import ScheduleStores
from .types import SubmissionStatus


def check_all_submitted(stores: ScheduleStores, store_id: int, week_start: date) -> SubmissionStatus:
    """
    Complete iff every active worker has at least one entry for the week and
    there is at least one active worker. Side-effect free.
    """
    active_ids = {w.id for w in stores.roster.list_active_workers(store_id)}
    submitted = stores.availability.list_submitted_worker_ids(store_id, week_start) & active_ids

    total_active = len(active_ids)
    submitted_distinct = len(submitted)
    return SubmissionStatus(
        complete=total_active > 0 and submitted_distinct == total_active,
        total_active=total_active,
        submitted_distinct=submitted_distinct,
    )
