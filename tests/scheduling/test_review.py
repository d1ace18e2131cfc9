import pytest

from app.services.scheduling import auto_generate_schedule, get_schedule_stores
from app.services.scheduling.review import (
    GenerationNotFoundError,
    active_warnings,
    get_latest_generation,
    mark_generation_viewed,
    resolve_warnings,
    store_needs_review,
)

from conftest import seed_store


@pytest.fixture
def generation(db):
    """Auto generation with two understaffed warnings (Monday and Tuesday mornings need 2)."""
    monday = seed_store(db, requirements=[(0, 1, 2), (1, 1, 2), (2, 2, 1)])
    stores = get_schedule_stores(db, 1)
    for worker_id, slot in ((1, (0, 1)), (2, (1, 1)), (3, (2, 2))):
        stores.availability.replace_worker_availability(1, monday, worker_id, [slot], None)
    stores.uow.commit()
    auto_generate_schedule(stores, 1, monday)
    return get_latest_generation(db, 1, monday)


class TestLatestGeneration:

    def test_returns_latest(self, db, generation):
        assert generation is not None
        assert generation.total_warnings == 2
        assert generation.needs_review is True

    def test_none_when_missing(self, db):
        monday = seed_store(db)
        assert get_latest_generation(db, 1, monday) is None


class TestMarkViewed:

    def test_clears_needs_review(self, db, generation):
        assert store_needs_review(db, 1) is True

        viewed = mark_generation_viewed(db, generation.id)

        assert viewed.has_been_viewed is True
        assert viewed.viewed_at is not None
        assert viewed.needs_review is False
        assert store_needs_review(db, 1) is False

    def test_second_view_keeps_first_timestamp(self, db, generation):
        first = mark_generation_viewed(db, generation.id).viewed_at
        assert mark_generation_viewed(db, generation.id).viewed_at == first

    def test_not_found(self, db):
        with pytest.raises(GenerationNotFoundError):
            mark_generation_viewed(db, 404)


class TestResolveWarnings:

    def test_resolve_subset(self, db, generation):
        resolved = resolve_warnings(db, generation.id, [1])

        assert resolved.resolved_warnings == [1]
        remaining = active_warnings(resolved)
        assert len(remaining) == 1
        assert remaining[0] == resolved.warnings_json[0]

    def test_resolve_accumulates(self, db, generation):
        resolve_warnings(db, generation.id, [1])
        resolved = resolve_warnings(db, generation.id, [0, 1])
        assert resolved.resolved_warnings == [0, 1]
        assert active_warnings(resolved) == []

    def test_resolve_all(self, db, generation):
        resolved = resolve_warnings(db, generation.id)
        assert resolved.resolved_warnings == [0, 1]

    def test_out_of_range(self, db, generation):
        with pytest.raises(ValueError):
            resolve_warnings(db, generation.id, [2])

    def test_snapshot_unchanged(self, db, generation):
        before = list(generation.warnings_json)
        resolved = resolve_warnings(db, generation.id)
        assert resolved.warnings_json == before
        assert resolved.total_warnings == 2
