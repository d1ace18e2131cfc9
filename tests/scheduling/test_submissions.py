import pytest
from datetime import date
from sqlalchemy import select

from app.db.models import AutoScheduleTriggers, AvailabilityEntries, ScheduleGenerations, ShiftRequirements
from app.services.scheduling import (
    ScheduleInputError,
    SkipReason,
    get_schedule_stores,
    override_availability,
    recall_availability,
    submit_availability,
)

from conftest import seed_store


def entries_for(db, worker_id: int) -> list[AvailabilityEntries]:
    stmt = select(AvailabilityEntries).where(AvailabilityEntries.worker_id == worker_id)
    return db.execute(stmt).scalars().all()


class TestSubmitAvailability:

    def test_saves_slots(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)

        result = submit_availability(stores, 1, monday, 1, [(0, 1), (1, 1)], submitted_by=10)

        assert result.entries_saved == 2
        assert result.status.submitted_distinct == 1
        assert result.status.complete is False
        assert result.auto_schedule is None
        rows = entries_for(db, 1)
        assert {(r.day_of_week, r.shift_template_id) for r in rows} == {(0, 1), (1, 1)}
        assert all(r.is_available and not r.is_owner_override for r in rows)
        assert all(r.submitted_by_user_id == 10 for r in rows)

    def test_resubmission_replaces(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1), (1, 1)])

        submit_availability(stores, 1, monday, 1, [(4, 2)])

        assert [(r.day_of_week, r.shift_template_id) for r in entries_for(db, 1)] == [(4, 2)]

    def test_duplicate_slots_collapse(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        result = submit_availability(stores, 1, monday, 1, [(0, 1), (0, 1)])
        assert result.entries_saved == 1

    def test_empty_submission_is_not_a_submission(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        result = submit_availability(stores, 1, monday, 1, [])
        assert result.entries_saved == 0
        assert result.status.submitted_distinct == 0

    def test_last_submission_triggers_generation(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1)])
        submit_availability(stores, 1, monday, 2, [(1, 1)])

        result = submit_availability(stores, 1, monday, 3, [(2, 2)])

        assert result.status.complete is True
        assert result.auto_schedule is not None
        assert result.auto_schedule.recorded is True
        assert db.get(ScheduleGenerations, result.auto_schedule.generation_id).is_auto_generated is True

    def test_resubmission_after_generation_does_not_regenerate(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        for worker_id, slot in ((1, (0, 1)), (2, (1, 1)), (3, (2, 2))):
            submit_availability(stores, 1, monday, worker_id, [slot])

        result = submit_availability(stores, 1, monday, 1, [(0, 1), (3, 1)])

        assert result.auto_schedule.skip_reason == SkipReason.ALREADY_RUN
        assert len(db.execute(select(ScheduleGenerations)).scalars().all()) == 1

    @pytest.mark.parametrize("slots", [[(0, 42)], [(7, 1)], [(-1, 1)]])
    def test_rejects_invalid_slots(self, db, slots):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        with pytest.raises(ScheduleInputError):
            submit_availability(stores, 1, monday, 1, slots)
        assert entries_for(db, 1) == []

    def test_rejects_unknown_worker(self, db):
        monday = seed_store(db)
        with pytest.raises(ScheduleInputError):
            submit_availability(get_schedule_stores(db, 1), 1, monday, 99, [(0, 1)])

    def test_rejects_non_monday(self, db):
        seed_store(db)
        with pytest.raises(ScheduleInputError):
            submit_availability(get_schedule_stores(db, 1), 1, date(2025, 1, 19), 1, [(0, 1)])

    def test_invalid_stored_data_is_reported_not_raised(self, db):
        # requirement row pointing at a template the store no longer has
        monday = seed_store(db, requirements=[(0, 1, 1), (1, 99, 1)])
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1)])
        submit_availability(stores, 1, monday, 2, [(1, 1)])

        result = submit_availability(stores, 1, monday, 3, [(2, 2)])

        assert result.entries_saved == 1
        assert result.status.complete is True
        assert result.auto_schedule.recorded is False
        assert result.auto_schedule.skip_reason == SkipReason.INVALID_INPUT
        assert "unknown shift template 99" in result.auto_schedule.message
        assert len(entries_for(db, 3)) == 1
        assert db.execute(select(ScheduleGenerations)).scalars().all() == []
        assert db.execute(select(AutoScheduleTriggers)).scalars().all() == []

    def test_retry_after_fixing_data_generates(self, db):
        monday = seed_store(db, requirements=[(0, 1, 1), (1, 99, 1)])
        stores = get_schedule_stores(db, 1)
        for worker_id, slot in ((1, (0, 1)), (2, (1, 1)), (3, (2, 2))):
            submit_availability(stores, 1, monday, worker_id, [slot])

        bad = db.execute(select(ShiftRequirements).where(ShiftRequirements.shift_template_id == 99)).scalar_one()
        bad.shift_template_id = 2
        db.commit()
        result = submit_availability(stores, 1, monday, 3, [(1, 2)])

        assert result.auto_schedule.recorded is True
        assert result.auto_schedule.result.stats.coverage_percent == 100.0


class TestRecallAvailability:

    def test_removes_own_entries(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1), (1, 1)])

        assert recall_availability(stores, 1, monday, 1) == 2
        assert entries_for(db, 1) == []

    def test_keeps_owner_overrides(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1)])
        override_availability(stores, 1, monday, 1, [(3, 2)], reason="Covering for holiday")

        assert recall_availability(stores, 1, monday, 1) == 1
        rows = entries_for(db, 1)
        assert len(rows) == 1
        assert rows[0].is_owner_override is True


class TestOverrideAvailability:

    def test_records_reason(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)

        result = override_availability(stores, 1, monday, 2, [(1, 1)], reason="  Phoned in  ", submitted_by=100)

        assert result.entries_saved == 1
        row = entries_for(db, 2)[0]
        assert row.is_owner_override is True
        assert row.override_reason == "Phoned in"
        assert row.submitted_by_user_id == 100

    def test_requires_reason(self, db):
        monday = seed_store(db)
        with pytest.raises(ScheduleInputError):
            override_availability(get_schedule_stores(db, 1), 1, monday, 1, [(0, 1)], reason=" ")

    def test_survives_worker_resubmission(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        override_availability(stores, 1, monday, 1, [(3, 2)], reason="Agreed by phone")

        submit_availability(stores, 1, monday, 1, [(0, 1)])

        assert {(r.day_of_week, r.is_owner_override) for r in entries_for(db, 1)} == {(3, True), (0, False)}

    def test_override_completes_submissions(self, db):
        monday = seed_store(db)
        stores = get_schedule_stores(db, 1)
        submit_availability(stores, 1, monday, 1, [(0, 1)])
        submit_availability(stores, 1, monday, 2, [(1, 1)])

        result = override_availability(stores, 1, monday, 3, [(2, 2)], reason="Paper form")

        assert result.status.complete is True
        assert result.auto_schedule.recorded is True
        assert result.auto_schedule.result.stats.coverage_percent == 100.0
