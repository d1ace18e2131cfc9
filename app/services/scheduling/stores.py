"""
Store interfaces consumed by the scheduling orchestration.

Each workspace kind gets a fixed RosterStore implementation; everything the
orchestration reads or writes goes through these contracts so it can be
driven by any persistence layer.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from app.db.models.stores import WorkspaceType

from .types import (
    AvailabilityEntry,
    GenerationRecord,
    ShiftAssignment,
    ShiftRequirement,
    ShiftTemplate,
    Worker,
)


class WorkspaceStore(ABC):

    @abstractmethod
    def get_workspace_type(self, store_id: int) -> Optional[WorkspaceType]:
        """None when the store does not exist."""
        ...

    @abstractmethod
    def is_auto_schedule_enabled(self, store_id: int) -> bool:
        ...


class RosterStore(ABC):

    @abstractmethod
    def list_active_workers(self, store_id: int) -> list[Worker]:
        ...


class RequirementStore(ABC):

    @abstractmethod
    def list_shift_templates(self, store_id: int) -> list[ShiftTemplate]:
        ...

    @abstractmethod
    def list_requirements(self, store_id: int, week_start: date) -> list[ShiftRequirement]:
        ...


class AvailabilityStore(ABC):

    @abstractmethod
    def list_availability(self, store_id: int, week_start: date) -> list[AvailabilityEntry]:
        ...

    @abstractmethod
    def list_submitted_worker_ids(self, store_id: int, week_start: date) -> set[int]:
        """Workers with at least one entry for the week."""
        ...

    @abstractmethod
    def replace_worker_availability(
        self,
        store_id: int,
        week_start: date,
        worker_id: int,
        slots: list[tuple[int, int]],
        submitted_by: Optional[int],
    ) -> int:
        """Replace non-override entries with (day_of_week, template_id) slots."""
        ...

    @abstractmethod
    def clear_worker_availability(self, store_id: int, week_start: date, worker_id: int) -> int:
        """Delete non-override entries; returns rows removed."""
        ...

    @abstractmethod
    def replace_owner_overrides(
        self,
        store_id: int,
        week_start: date,
        worker_id: int,
        slots: list[tuple[int, int]],
        reason: str,
        submitted_by: Optional[int],
    ) -> int:
        ...


class ScheduleStore(ABC):

    @abstractmethod
    def insert_trigger_if_absent(self, store_id: int, week_start: date) -> bool:
        """False when a trigger already exists (or is being written) for the week."""
        ...

    @abstractmethod
    def attach_trigger_generation(self, store_id: int, week_start: date, generation_id: int) -> None:
        ...

    @abstractmethod
    def list_locked_assignments(self, store_id: int, week_start: date) -> list[ShiftAssignment]:
        """Manually edited assignments, exempt from replacement."""
        ...

    @abstractmethod
    def latest_generation_id(self, store_id: int, week_start: date) -> Optional[int]:
        ...

    @abstractmethod
    def record_generation(self, record: GenerationRecord) -> int:
        ...

    @abstractmethod
    def replace_week_assignments(
        self,
        store_id: int,
        week_start: date,
        assignments: list[ShiftAssignment],
        generation_id: int,
    ) -> int:
        """Delete non-manual rows for the week, insert the new ones."""
        ...


class UnitOfWork(ABC):

    @abstractmethod
    def commit(self) -> None:
        ...

    @abstractmethod
    def rollback(self) -> None:
        ...


@dataclass
class ScheduleStores:
    """Everything the orchestration needs, sharing one unit of work."""
    workspaces: WorkspaceStore
    roster: RosterStore
    requirements: RequirementStore
    availability: AvailabilityStore
    schedules: ScheduleStore
    uow: UnitOfWork
