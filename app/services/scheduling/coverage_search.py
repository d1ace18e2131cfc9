"""
Bounded exact search for more coverage than the greedy pass found.

Scarcity-first greedy filling can hand a worker a shift that blocks two
others they could have covered. This search walks instances in
chronological order and tries every set of eligible workers per instance,
pruned by an upper bound on what the remaining instances can still add.
It only reports a schedule that fills strictly more slots, and gives up
after a fixed number of nodes so large weeks stay cheap.
"""

import logging
from typing import Optional

from .types import (
    AvailabilityMatrix,
    EngineConfig,
    ShiftAssignment,
    ShiftInstance,
)
from .availability import is_available
from .constraints import fits_worker

logger = logging.getLogger(__name__)

# Recursion depth grows with open slots plus instances
MAX_SEARCH_DEPTH = 600


class CoverageSearch:

    def __init__(
        self,
        instances: list[ShiftInstance],
        matrix: AvailabilityMatrix,
        worker_ids: list[int],
        config: EngineConfig,
        locked: list[ShiftAssignment],
        node_budget: int,
    ):
        self.config = config
        self.node_budget = node_budget
        self.instances = sorted(
            instances, key=lambda i: (i.date, i.start_time, i.shift_template_id)
        )

        self.worker_assignments: dict[int, list[ShiftAssignment]] = {w: [] for w in worker_ids}
        self.worker_dates: dict[int, dict] = {w: {} for w in worker_ids}
        locked_filled: dict[tuple, int] = {}
        locked_workers: dict[tuple, set[int]] = {}
        for a in locked:
            if a.worker_id not in self.worker_assignments:
                self.worker_assignments[a.worker_id] = []
                self.worker_dates[a.worker_id] = {}
            self._push(a)
            key = (a.shift_date, a.shift_template_id)
            locked_filled[key] = locked_filled.get(key, 0) + 1
            locked_workers.setdefault(key, set()).add(a.worker_id)

        self.needs: list[int] = []
        self.candidates: list[list[ShiftAssignment]] = []
        for instance in self.instances:
            self.needs.append(max(0, instance.required_count - locked_filled.get(instance.key, 0)))
            taken = locked_workers.get(instance.key, set())
            self.candidates.append([
                ShiftAssignment.for_instance(w, instance)
                for w in worker_ids
                if w not in taken and is_available(matrix, w, instance)
            ])

        # suffix_bound[i]: most slots instances i.. could add, ignoring conflicts
        n = len(self.instances)
        self.suffix_bound = [0] * (n + 1)
        for i in range(n - 1, -1, -1):
            self.suffix_bound[i] = self.suffix_bound[i + 1] + min(self.needs[i], len(self.candidates[i]))

        self.nodes = 0
        self.best = 0
        self.best_assignments: Optional[list[ShiftAssignment]] = None
        self.current: list[ShiftAssignment] = []

    @property
    def exhausted(self) -> bool:
        return self.nodes >= self.node_budget

    def improve(self, current: list[ShiftAssignment]) -> Optional[list[ShiftAssignment]]:
        """
        Return an assignment list filling more slots than current, or None when
        current is already optimal or nothing better turned up within budget.
        """
        self.best = len(current)
        self.best_assignments = None
        if not self.instances or self.best >= self.suffix_bound[0]:
            return None
        if sum(self.needs) + len(self.instances) > MAX_SEARCH_DEPTH:
            logger.info(f"Coverage search skipped: {sum(self.needs)} open slots")
            return None

        self._search(0, 0, self.needs[0], 0)
        if self.exhausted:
            logger.info(f"Coverage search stopped after {self.nodes} nodes")
        if self.best_assignments is not None:
            logger.info(f"Coverage search raised filled slots from {len(current)} to {self.best}")
        return self.best_assignments

    def _done(self) -> bool:
        return self.exhausted or self.best >= self.suffix_bound[0]

    def _search(self, i: int, start: int, need: int, filled: int):
        if self._done():
            return
        self.nodes += 1

        if i == len(self.instances):
            if filled > self.best:
                self.best = filled
                self.best_assignments = list(self.current)
            return

        cands = self.candidates[i]
        if filled + min(need, len(cands) - start) + self.suffix_bound[i + 1] <= self.best:
            return

        # Take one more worker for this instance
        if need > 0:
            for k in range(start, len(cands)):
                if filled + 1 + min(need - 1, len(cands) - k - 1) + self.suffix_bound[i + 1] <= self.best:
                    break
                candidate = cands[k]
                worker_id = candidate.worker_id
                if not fits_worker(
                    self.worker_assignments[worker_id],
                    self.worker_dates[worker_id],
                    candidate,
                    self.config,
                ):
                    continue
                self._push(candidate)
                self.current.append(candidate)
                self._search(i, k + 1, need - 1, filled + 1)
                self.current.pop()
                self._pop(candidate)
                if self._done():
                    return

        # Or leave the rest of this instance open
        next_need = self.needs[i + 1] if i + 1 < len(self.instances) else 0
        self._search(i + 1, 0, next_need, filled)

    def _push(self, assignment: ShiftAssignment):
        worker_id = assignment.worker_id
        self.worker_assignments[worker_id].append(assignment)
        dates = self.worker_dates[worker_id]
        dates[assignment.shift_date] = dates.get(assignment.shift_date, 0) + 1

    def _pop(self, assignment: ShiftAssignment):
        worker_id = assignment.worker_id
        self.worker_assignments[worker_id].pop()
        dates = self.worker_dates[worker_id]
        dates[assignment.shift_date] -= 1
        if dates[assignment.shift_date] == 0:
            del dates[assignment.shift_date]
