"""
SQLAlchemy-backed stores for the scheduling service.
Fetches data from the database, converts it to internal types, and writes
generation output. All stores built by get_schedule_stores share one Session,
which is the unit of work the orchestration commits or rolls back.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from sqlalchemy import select, delete, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.db.models.stores import Stores, WorkspaceType
from app.db.models.employees import Employees, EmploymentStatus
from app.db.models.students import Students, StudentStatus
from app.db.models.shift_templates import ShiftTemplates
from app.db.models.shift_requirements import ShiftRequirements
from app.db.models.availability_entries import AvailabilityEntries
from app.db.models.schedule_assignments import ScheduleAssignments, AssignmentSource
from app.db.models.schedule_generations import ScheduleGenerations
from app.db.models.auto_schedule_triggers import AutoScheduleTriggers

from .stores import (
    AvailabilityStore,
    RequirementStore,
    RosterStore,
    ScheduleStore,
    ScheduleStores,
    UnitOfWork,
    WorkspaceStore,
)
from .types import (
    AvailabilityEntry,
    GenerationRecord,
    ShiftAssignment,
    ShiftRequirement,
    ShiftTemplate,
    Worker,
    shift_duration_hours,
)


class SqlWorkspaceStore(WorkspaceStore):

    def __init__(self, db: Session):
        self.db = db

    def get_workspace_type(self, store_id: int) -> Optional[WorkspaceType]:
        store = self.db.get(Stores, store_id)
        return store.workspace_type if store else None

    def is_auto_schedule_enabled(self, store_id: int) -> bool:
        store = self.db.get(Stores, store_id)
        return bool(store and store.auto_schedule_enabled)


class SqlEmployeeRosterStore(RosterStore):
    """Business workspaces: active employees."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_workers(self, store_id: int) -> list[Worker]:
        stmt = select(Employees).where(
            and_(
                Employees.store_id == store_id,
                Employees.employment_status == EmploymentStatus.ACTIVE,
            )
        ).order_by(Employees.id)
        rows = self.db.execute(stmt).scalars().all()
        return [Worker(id=e.id, store_id=e.store_id, name=e.name) for e in rows]


class SqlStudentRosterStore(RosterStore):
    """Education workspaces: active student helpers."""

    def __init__(self, db: Session):
        self.db = db

    def list_active_workers(self, store_id: int) -> list[Worker]:
        stmt = select(Students).where(
            and_(
                Students.store_id == store_id,
                Students.status == StudentStatus.ACTIVE,
            )
        ).order_by(Students.id)
        rows = self.db.execute(stmt).scalars().all()
        return [Worker(id=s.id, store_id=s.store_id, name=s.name) for s in rows]


ROSTER_STORES: dict[WorkspaceType, type[RosterStore]] = {
    WorkspaceType.BUSINESS: SqlEmployeeRosterStore,
    WorkspaceType.EDUCATION: SqlStudentRosterStore,
}


class SqlRequirementStore(RequirementStore):

    def __init__(self, db: Session):
        self.db = db

    def list_shift_templates(self, store_id: int) -> list[ShiftTemplate]:
        stmt = select(ShiftTemplates).where(ShiftTemplates.store_id == store_id).order_by(ShiftTemplates.id)
        rows = self.db.execute(stmt).scalars().all()
        return [
            ShiftTemplate(
                id=t.id,
                store_id=t.store_id,
                name=t.name,
                start_time=t.start_time,
                end_time=t.end_time,
                color=t.color,
            )
            for t in rows
        ]

    def list_requirements(self, store_id: int, week_start: date) -> list[ShiftRequirement]:
        stmt = select(ShiftRequirements).where(
            and_(
                ShiftRequirements.store_id == store_id,
                ShiftRequirements.week_start_date == week_start,
            )
        ).order_by(ShiftRequirements.day_of_week, ShiftRequirements.shift_template_id)
        rows = self.db.execute(stmt).scalars().all()
        return [
            ShiftRequirement(
                store_id=r.store_id,
                week_start=r.week_start_date,
                day_of_week=r.day_of_week,
                shift_template_id=r.shift_template_id,
                required_count=r.required_staff_count,
            )
            for r in rows
        ]


class SqlAvailabilityStore(AvailabilityStore):

    def __init__(self, db: Session):
        self.db = db

    def list_availability(self, store_id: int, week_start: date) -> list[AvailabilityEntry]:
        stmt = select(AvailabilityEntries).where(
            and_(
                AvailabilityEntries.store_id == store_id,
                AvailabilityEntries.week_start_date == week_start,
            )
        ).order_by(AvailabilityEntries.id)
        rows = self.db.execute(stmt).scalars().all()
        return [
            AvailabilityEntry(
                worker_id=r.worker_id,
                store_id=r.store_id,
                week_start=r.week_start_date,
                shift_template_id=r.shift_template_id,
                day_of_week=r.day_of_week,
                is_available=r.is_available,
                submitted_by=r.submitted_by_user_id,
                is_owner_override=r.is_owner_override,
                override_reason=r.override_reason,
            )
            for r in rows
        ]

    def list_submitted_worker_ids(self, store_id: int, week_start: date) -> set[int]:
        stmt = select(AvailabilityEntries.worker_id).where(
            and_(
                AvailabilityEntries.store_id == store_id,
                AvailabilityEntries.week_start_date == week_start,
            )
        ).distinct()
        return set(self.db.execute(stmt).scalars().all())

    def _delete_entries(self, store_id: int, week_start: date, worker_id: int, owner_override: bool) -> int:
        stmt = delete(AvailabilityEntries).where(
            and_(
                AvailabilityEntries.store_id == store_id,
                AvailabilityEntries.week_start_date == week_start,
                AvailabilityEntries.worker_id == worker_id,
                AvailabilityEntries.is_owner_override == owner_override,
            )
        )
        return self.db.execute(stmt).rowcount

    def _add_entries(
        self,
        store_id: int,
        week_start: date,
        worker_id: int,
        slots: list[tuple[int, int]],
        submitted_by: Optional[int],
        reason: Optional[str] = None,
    ) -> int:
        for day_of_week, template_id in slots:
            self.db.add(AvailabilityEntries(
                worker_id=worker_id,
                store_id=store_id,
                week_start_date=week_start,
                shift_template_id=template_id,
                day_of_week=day_of_week,
                is_available=True,
                submitted_by_user_id=submitted_by,
                is_owner_override=reason is not None,
                override_reason=reason,
            ))
        self.db.flush()
        return len(slots)

    def replace_worker_availability(self, store_id, week_start, worker_id, slots, submitted_by) -> int:
        self._delete_entries(store_id, week_start, worker_id, owner_override=False)
        return self._add_entries(store_id, week_start, worker_id, slots, submitted_by)

    def clear_worker_availability(self, store_id, week_start, worker_id) -> int:
        return self._delete_entries(store_id, week_start, worker_id, owner_override=False)

    def replace_owner_overrides(self, store_id, week_start, worker_id, slots, reason, submitted_by) -> int:
        self._delete_entries(store_id, week_start, worker_id, owner_override=True)
        return self._add_entries(store_id, week_start, worker_id, slots, submitted_by, reason=reason)


class SqlScheduleStore(ScheduleStore):

    def __init__(self, db: Session):
        self.db = db

    def insert_trigger_if_absent(self, store_id: int, week_start: date) -> bool:
        # Must run before anything else is written in this unit of work:
        # a duplicate rolls the whole session back.
        self.db.add(AutoScheduleTriggers(store_id=store_id, week_start_date=week_start))
        try:
            self.db.flush()
        except IntegrityError:
            self.db.rollback()
            return False
        return True

    def attach_trigger_generation(self, store_id: int, week_start: date, generation_id: int) -> None:
        trigger = self.db.execute(
            select(AutoScheduleTriggers).where(
                and_(
                    AutoScheduleTriggers.store_id == store_id,
                    AutoScheduleTriggers.week_start_date == week_start,
                )
            )
        ).scalar_one()
        trigger.generation_id = generation_id
        self.db.flush()

    def list_locked_assignments(self, store_id: int, week_start: date) -> list[ShiftAssignment]:
        week_end = week_start + timedelta(days=6)
        stmt = (
            select(ScheduleAssignments, ShiftTemplates)
            .join(ShiftTemplates, ShiftTemplates.id == ScheduleAssignments.shift_template_id)
            .where(
                and_(
                    ScheduleAssignments.store_id == store_id,
                    ScheduleAssignments.source == AssignmentSource.MANUAL,
                    ScheduleAssignments.scheduled_date >= week_start,
                    ScheduleAssignments.scheduled_date <= week_end,
                )
            )
            .order_by(ScheduleAssignments.scheduled_date, ScheduleAssignments.id)
        )
        locked = []
        for row, template in self.db.execute(stmt).all():
            start_dt = datetime.combine(row.scheduled_date, template.start_time)
            duration = shift_duration_hours(template.start_time, template.end_time)
            locked.append(ShiftAssignment(
                worker_id=row.worker_id,
                shift_date=row.scheduled_date,
                shift_template_id=row.shift_template_id,
                start_datetime=start_dt,
                end_datetime=start_dt + timedelta(hours=duration),
            ))
        return locked

    def latest_generation_id(self, store_id: int, week_start: date) -> Optional[int]:
        stmt = select(ScheduleGenerations.id).where(
            and_(
                ScheduleGenerations.store_id == store_id,
                ScheduleGenerations.week_start_date == week_start,
            )
        ).order_by(ScheduleGenerations.id.desc()).limit(1)
        return self.db.execute(stmt).scalar_one_or_none()

    def record_generation(self, record: GenerationRecord) -> int:
        generation = ScheduleGenerations(
            store_id=record.store_id,
            week_start_date=record.week_start,
            total_shifts_required=record.total_shifts_required,
            total_shifts_filled=record.total_shifts_filled,
            coverage_percent=record.coverage_percent,
            fairness_score=record.fairness_score,
            total_warnings=len(record.warnings),
            warnings_json=record.warnings,
            stats_json=record.stats,
            is_auto_generated=record.is_auto_generated,
            auto_triggered_at=record.auto_triggered_at,
            is_accepted=True,
            accepted_at=record.accepted_at,
            needs_review=record.needs_review,
            supersedes_generation_id=record.supersedes_generation_id,
        )
        self.db.add(generation)
        self.db.flush()
        return generation.id

    def replace_week_assignments(
        self,
        store_id: int,
        week_start: date,
        assignments: list[ShiftAssignment],
        generation_id: int,
    ) -> int:
        week_end = week_start + timedelta(days=6)
        self.db.execute(
            delete(ScheduleAssignments).where(
                and_(
                    ScheduleAssignments.store_id == store_id,
                    ScheduleAssignments.source != AssignmentSource.MANUAL,
                    ScheduleAssignments.scheduled_date >= week_start,
                    ScheduleAssignments.scheduled_date <= week_end,
                )
            )
        )
        for a in assignments:
            self.db.add(ScheduleAssignments(
                store_id=store_id,
                worker_id=a.worker_id,
                shift_template_id=a.shift_template_id,
                scheduled_date=a.shift_date,
                generation_id=generation_id,
                source=AssignmentSource.AUTO,
            ))
        self.db.flush()
        return len(assignments)


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()


def get_schedule_stores(db: Session, store_id: int) -> ScheduleStores:
    """
    Build the store bundle for a store, picking the roster strategy from its
    workspace type. Unknown stores fall back to the business roster; the
    orchestration reports them as disabled.
    """
    workspaces = SqlWorkspaceStore(db)
    workspace_type = workspaces.get_workspace_type(store_id) or WorkspaceType.BUSINESS
    roster_cls = ROSTER_STORES[workspace_type]

    return ScheduleStores(
        workspaces=workspaces,
        roster=roster_cls(db),
        requirements=SqlRequirementStore(db),
        availability=SqlAvailabilityStore(db),
        schedules=SqlScheduleStore(db),
        uow=SqlUnitOfWork(db),
    )
