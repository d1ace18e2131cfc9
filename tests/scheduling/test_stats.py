import pytest

from app.services.scheduling.stats import compute_stats, fairness_score

from conftest import make_instance, MORNING, EVENING


class TestFairnessScore:

    @pytest.mark.parametrize("hours", [[], [5.0], [0.0, 0.0], [8.0, 8.0, 8.0]])
    def test_perfectly_even_or_trivial(self, hours):
        assert fairness_score(hours) == 100.0

    def test_one_worker_holds_everything(self):
        assert fairness_score([8.0, 0.0]) == 0.0
        assert fairness_score([16.0, 0.0, 0.0]) == 0.0

    def test_partial_spread(self):
        # mean 6, std 2
        assert fairness_score([8.0, 4.0]) == 66.7

    def test_lower_for_more_dispersion(self):
        assert fairness_score([12.0, 4.0, 8.0]) < fairness_score([8.0, 8.0, 8.0])
        assert fairness_score([16.0, 8.0, 0.0]) < fairness_score([12.0, 4.0, 8.0])

    def test_bounded(self):
        for hours in ([100.0, 0.0, 0.0, 0.0], [1.0, 2.0, 3.0], [0.5, 40.0]):
            assert 0.0 <= fairness_score(hours) <= 100.0


class TestComputeStats:

    def test_coverage_and_distribution(self):
        morning = make_instance(MORNING, 0, 2)
        evening = make_instance(EVENING, 0, 2)
        filled = {morning.key: 2, evening.key: 1}
        stats = compute_stats(
            [morning, evening],
            filled,
            staff_hours={1: 8.0, 2: 14.0, 3: 0.0},
            staff_shift_count={1: 1, 2: 2, 3: 0},
            offered_worker_ids=[1, 2, 3],
        )
        assert stats.total_shifts_required == 4
        assert stats.total_shifts_filled == 3
        assert stats.coverage_percent == 75.0
        assert stats.avg_hours_per_staff == 11.0
        assert stats.min_hours == 0.0
        assert stats.max_hours == 14.0
        assert stats.min_shifts == 0
        assert stats.max_shifts == 2
        assert stats.avg_shifts_per_staff == 1.0

    def test_nothing_required(self):
        stats = compute_stats([], {}, {}, {}, [])
        assert stats.coverage_percent == 0.0
        assert stats.fairness_score == 100.0
        assert stats.avg_hours_per_staff == 0.0

    def test_to_dict_keys(self):
        stats = compute_stats([], {}, {}, {}, [])
        assert set(stats.to_dict()) == {
            "total_shifts_required", "total_shifts_filled", "coverage_percent",
            "avg_hours_per_staff", "min_hours", "max_hours", "hours_variance",
            "avg_shifts_per_staff", "min_shifts", "max_shifts", "fairness_score",
        }
