import pytest
from datetime import date, time
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.db.models import (
    Base,
    Employees,
    ShiftRequirements,
    ShiftTemplates,
    Stores,
    Students,
    WorkspaceType,
)
from app.main import app
from app.services.scheduling.availability import build_availability_matrix
from app.services.scheduling.expander import day_to_date
from app.services.scheduling.types import (
    AvailabilityEntry,
    ShiftInstance,
    ShiftTemplate,
)


def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2025, 1, 20)


MORNING = ShiftTemplate(id=1, store_id=1, name="Morning", start_time=time(9, 0), end_time=time(17, 0))
EVENING = ShiftTemplate(id=2, store_id=1, name="Evening", start_time=time(17, 0), end_time=time(23, 0))
# overlaps the last hour of EVENING
NIGHT = ShiftTemplate(id=3, store_id=1, name="Night", start_time=time(22, 0), end_time=time(6, 0))


def make_instance(template: ShiftTemplate, day_of_week: int, required: int) -> ShiftInstance:
    return ShiftInstance(
        date=day_to_date(get_test_monday(), day_of_week),
        shift_template_id=template.id,
        shift_name=template.name,
        start_time=template.start_time,
        end_time=template.end_time,
        required_count=required,
        duration_hours=template.duration_hours,
    )


def make_matrix(offered: dict[int, list[tuple[int, int]]], template_ids=(1, 2, 3)):
    """offered: worker_id -> [(day_of_week, template_id)]; every key becomes a worker."""
    monday = get_test_monday()
    entries = [
        AvailabilityEntry(worker_id=w, store_id=1, week_start=monday,
                          shift_template_id=t, day_of_week=d, is_available=True)
        for w, slots in offered.items()
        for d, t in slots
    ]
    return build_availability_matrix(entries, list(offered), list(template_ids), monday)


@pytest.fixture
def templates() -> list[ShiftTemplate]:
    return [MORNING, EVENING, NIGHT]


@pytest.fixture
def db():
    # single shared in-memory connection
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def seed_store(
    db,
    worker_count: int = 3,
    workspace_type: WorkspaceType = WorkspaceType.BUSINESS,
    auto_schedule_enabled: bool = True,
    requirements: list[tuple[int, int, int]] = ((0, 1, 1), (1, 1, 1), (2, 2, 1)),
    store_id: int = 1,
) -> date:
    """
    Store with Morning (1) and Evening (2) templates, worker_count active
    workers with ids 1..n and (day_of_week, template_id, count) requirements
    for the test week. Returns the week start.
    """
    monday = get_test_monday()
    db.add(Stores(id=store_id, name="Test Store", workspace_type=workspace_type,
                  auto_schedule_enabled=auto_schedule_enabled))
    db.add_all([
        ShiftTemplates(id=1, store_id=store_id, name="Morning", start_time=time(9, 0), end_time=time(17, 0)),
        ShiftTemplates(id=2, store_id=store_id, name="Evening", start_time=time(17, 0), end_time=time(23, 0)),
    ])
    for i in range(1, worker_count + 1):
        if workspace_type == WorkspaceType.EDUCATION:
            db.add(Students(id=i, store_id=store_id, name=f"Student {i}"))
        else:
            db.add(Employees(id=i, store_id=store_id, name=f"Employee {i}"))
    for day_of_week, template_id, count in requirements:
        db.add(ShiftRequirements(store_id=store_id, week_start_date=monday, day_of_week=day_of_week,
                                 shift_template_id=template_id, required_staff_count=count))
    db.commit()
    return monday
