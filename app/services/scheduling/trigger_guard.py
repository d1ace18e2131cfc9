"""
At-most-once admission for automatic generation per store/week.

The unique (store_id, week_start_date) key on auto_schedule_triggers is the
only serialization point between concurrent submissions; the completeness
check that precedes it only narrows the race window.
"""

import logging
from datetime import date
from enum import Enum

from .stores import ScheduleStore


logger = logging.getLogger(__name__)


class TriggerDecision(str, Enum):
    GRANTED = "GRANTED"
    ALREADY_RUN = "ALREADY_RUN"


class TriggerGuard:

    def __init__(self, schedules: ScheduleStore):
        self.schedules = schedules

    def try_acquire(self, store_id: int, week_start: date) -> TriggerDecision:
        """
        Insert the trigger row inside the current unit of work.

        GRANTED: the row is pending and becomes durable when the run commits;
        rolling the run back releases it. ALREADY_RUN is terminal, never retried.
        """
        if self.schedules.insert_trigger_if_absent(store_id, week_start):
            return TriggerDecision.GRANTED
        logger.info(f"Auto-schedule trigger already consumed for store {store_id}, week {week_start}")
        return TriggerDecision.ALREADY_RUN
