"""
Smart schedule solver: deterministic greedy assignment with fairness-aware selection.

Strategy:
1. Order shift instances by scarcity (available workers - required), hardest first
2. Fill each instance with the eligible worker carrying the fewest hours so far
3. Run a bounded exact search and keep its schedule if it covers more slots
4. Report understaffed instances, unused availability and overwork
5. Compute coverage and fairness statistics

Pure: no I/O and no shared state, so it is safe to run for different stores
concurrently.
"""

from collections import defaultdict
from typing import Iterable, Optional

from .types import (
    AvailabilityMatrix,
    EngineConfig,
    NoShiftsWarning,
    ScheduleInputError,
    ScheduleResult,
    ScheduleWarning,
    Severity,
    ShiftAssignment,
    ShiftInstance,
    UnderstaffedWarning,
)
from .availability import (
    count_available_workers,
    count_offered_slots,
    is_available,
    offered_availability,
)
from .constraints import check_overwork, fits_worker
from .coverage_search import CoverageSearch
from .stats import compute_stats


def validate_instances(instances: list[ShiftInstance]) -> None:
    seen = set()
    for instance in instances:
        if instance.required_count < 0:
            raise ScheduleInputError(
                f"{instance.shift_name} on {instance.date_iso}: required_count must be >= 0"
            )
        if instance.duration_hours <= 0:
            raise ScheduleInputError(
                f"{instance.shift_name} on {instance.date_iso}: duration must be positive"
            )
        if instance.key in seen:
            raise ScheduleInputError(
                f"Duplicate shift instance for template {instance.shift_template_id} on {instance.date_iso}"
            )
        seen.add(instance.key)


class SmartScheduleSolver:
    """
    Greedy, fairness-aware shift assignment for one store/week.

    worker_ids doubles as the final tie-break: earlier workers win ties, so
    callers pass a per-generation shuffled order.
    """

    def __init__(
        self,
        instances: list[ShiftInstance],
        matrix: AvailabilityMatrix,
        worker_ids: list[int],
        config: Optional[EngineConfig] = None,
        existing_assignments: Iterable[ShiftAssignment] = (),
    ):
        validate_instances(instances)
        self.instances = list(instances)
        self.matrix = matrix
        self.worker_ids = list(worker_ids)
        self.rank = {w: i for i, w in enumerate(self.worker_ids)}
        self.config = config or EngineConfig()
        self.locked: list[ShiftAssignment] = list(existing_assignments)
        self.warnings: list[ScheduleWarning] = []
        self._reset_tracking()

    def _reset_tracking(self):
        self.assignments: list[ShiftAssignment] = []
        self.worker_assignments: dict[int, list[ShiftAssignment]] = defaultdict(list)
        self.worker_hours: dict[int, float] = defaultdict(float)
        self.worker_shift_count: dict[int, int] = defaultdict(int)
        self.worker_dates: dict[int, set] = defaultdict(set)
        self.filled: dict[tuple, int] = defaultdict(int)
        self.instance_workers: dict[tuple, set[int]] = defaultdict(set)

        # Locked (manually edited) assignments occupy slots and count toward load
        instance_keys = {i.key for i in self.instances}
        for a in self.locked:
            self._track(a)
            key = (a.shift_date, a.shift_template_id)
            if key in instance_keys:
                self.filled[key] += 1
                self.instance_workers[key].add(a.worker_id)

    def solve(self) -> ScheduleResult:
        #1: Fill instances, scarcest first
        order = self._sort_instances_by_scarcity()
        for instance in order:
            self._fill_instance(instance)
        #2: Recover slots the greedy pass gave away
        self._improve_coverage()
        #3: Post-scan
        self._check_understaffed(order)
        self._check_unused_availability()
        self.warnings.extend(
            check_overwork(self.locked + self.assignments, self.worker_ids, self.config)
        )
        #4: Result
        return self._build_result()

    def _sort_instances_by_scarcity(self) -> list[ShiftInstance]:
        """Hardest to fill first; chronological within a scarcity band."""

        def scarcity_key(instance: ShiftInstance):
            available = count_available_workers(self.matrix, self.worker_ids, instance)
            return (
                available - instance.required_count,
                instance.date,
                instance.start_time,
                instance.shift_template_id,
            )

        return sorted(self.instances, key=scarcity_key)

    def _fill_instance(self, instance: ShiftInstance):
        while self.filled[instance.key] < instance.required_count:
            worker_id = self._pick_worker(instance)
            if worker_id is None:
                break
            self._assign(ShiftAssignment.for_instance(worker_id, instance))

    def _improve_coverage(self):
        if self.config.coverage_search_nodes <= 0:
            return
        search = CoverageSearch(
            self.instances,
            self.matrix,
            self.worker_ids,
            self.config,
            self.locked,
            self.config.coverage_search_nodes,
        )
        better = search.improve(self.assignments)
        if better is None:
            return
        self._reset_tracking()
        for assignment in better:
            self._assign(assignment)

    def _check_understaffed(self, order: list[ShiftInstance]):
        for instance in order:
            assigned = self.filled[instance.key]
            if assigned < instance.required_count:
                self.warnings.append(UnderstaffedWarning(
                    shift=instance,
                    assigned=assigned,
                    required=instance.required_count,
                    severity=Severity.CRITICAL if assigned == 0 else Severity.WARNING,
                ))

    def _pick_worker(self, instance: ShiftInstance) -> Optional[int]:
        """Lowest hours, then fewest shifts, then earliest in worker order."""
        eligible = [w for w in self.worker_ids if self._is_eligible(w, instance)]
        if not eligible:
            return None
        return min(
            eligible,
            key=lambda w: (self.worker_hours[w], self.worker_shift_count[w], self.rank[w]),
        )

    def _is_eligible(self, worker_id: int, instance: ShiftInstance) -> bool:
        if not is_available(self.matrix, worker_id, instance):
            return False
        if worker_id in self.instance_workers[instance.key]:
            return False
        return fits_worker(
            self.worker_assignments[worker_id],
            self.worker_dates[worker_id],
            ShiftAssignment.for_instance(worker_id, instance),
            self.config,
        )

    def _track(self, assignment: ShiftAssignment):
        worker_id = assignment.worker_id
        self.worker_assignments[worker_id].append(assignment)
        self.worker_hours[worker_id] += assignment.duration_hours
        self.worker_shift_count[worker_id] += 1
        self.worker_dates[worker_id].add(assignment.shift_date)

    def _assign(self, assignment: ShiftAssignment):
        key = (assignment.shift_date, assignment.shift_template_id)
        self.assignments.append(assignment)
        self.filled[key] += 1
        self.instance_workers[key].add(assignment.worker_id)
        self._track(assignment)

    def _check_unused_availability(self):
        """Workers who offered availability but got nothing."""
        for worker_id in self.worker_ids:
            if self.worker_shift_count[worker_id] > 0:
                continue
            slots = count_offered_slots(self.matrix, worker_id)
            if slots > 0:
                self.warnings.append(NoShiftsWarning(worker_id=worker_id, available_slots=slots))

    def _build_result(self) -> ScheduleResult:
        staff_hours = {w: self.worker_hours[w] for w in self.worker_ids}
        staff_shift_count = {w: self.worker_shift_count[w] for w in self.worker_ids}
        stats = compute_stats(
            self.instances,
            self.filled,
            staff_hours,
            staff_shift_count,
            offered_availability(self.matrix, self.worker_ids),
        )
        return ScheduleResult(
            assignments=list(self.assignments),
            warnings=list(self.warnings),
            stats=stats,
            staff_hours=staff_hours,
            staff_shift_count=staff_shift_count,
        )


def generate_smart_schedule(
    instances: list[ShiftInstance],
    matrix: AvailabilityMatrix,
    worker_ids: list[int],
    config: Optional[EngineConfig] = None,
    existing_assignments: Iterable[ShiftAssignment] = (),
) -> ScheduleResult:
    """
    Main entry point for the scheduling algorithm.

    Args:
        instances: dated shift instances for the week
        matrix: worker x date x template availability
        worker_ids: active workers in tie-break order
        config: thresholds; defaults to EngineConfig()
        existing_assignments: manually edited rows kept across generations

    Returns:
        ScheduleResult with new assignments, warnings and stats

    Raises:
        ScheduleInputError: malformed instances only, never for shortfalls
    """
    solver = SmartScheduleSolver(instances, matrix, worker_ids, config, existing_assignments)
    return solver.solve()
