"""Tests for stats recomputation and reconciliation."""

from bottletrail.models import GlobalStats, ProfileCounters, UserStats
from bottletrail.services.stats import (
    compute_all_user_stats,
    compute_global_stats,
    compute_stats,
    reconcile_stats,
)
from factories import cast_away, found, make_bottle, make_event, reply


class TestUserStats:
    def test_scenario_b1(self, b1) -> None:
        _, events = b1
        assert compute_stats(events, "Alice") == UserStats(created=1, found=0, retossed=0)
        assert compute_stats(events, "Bob") == UserStats(created=0, found=1, retossed=1)
        assert compute_stats(events, "Carol") == UserStats(created=0, found=1, retossed=0)

    def test_unknown_user_is_all_zero(self, b1) -> None:
        _, events = b1
        assert compute_stats(events, "Nobody") == UserStats()

    def test_creator_retossing_own_bottle(self) -> None:
        events = [
            cast_away("B1", 0, tosser="Alice"),
            found("B1", 1, finder="Bob"),
            cast_away("B1", 2, tosser="Alice"),
        ]
        assert compute_stats(events, "Alice") == UserStats(created=1, found=0, retossed=1)

    def test_sentinel_finds_count(self) -> None:
        events = [cast_away("B1", 0, tosser="Alice"), found("B1", 1, finder="Bob")]
        assert compute_stats(events, "Bob").found == 1

    def test_unnamed_actors_not_attributed(self) -> None:
        events = [cast_away("B1", 0), found("B1", 1)]
        assert compute_all_user_stats(events) == {}

    def test_counts_across_bottles(self) -> None:
        events = [
            cast_away("B1", 0, tosser="Alice"),
            cast_away("B2", 1, tosser="Alice"),
            reply("B2", 2, finder="Alice"),
        ]
        assert compute_stats(events, "Alice") == UserStats(created=2, found=1, retossed=0)

    def test_conservation(self) -> None:
        events = [
            cast_away("B1", 0, tosser="A"),
            found("B1", 1, finder="B"),
            reply("B1", 2, finder="C"),
            cast_away("B1", 3, tosser="B"),
            found("B1", 4, finder="A"),
            cast_away("B1", 5, tosser="A"),
            cast_away("B2", 0, tosser="C"),
            found("B2", 1),
            cast_away("B2", 2),
        ]
        by_user = compute_all_user_stats(events)

        named_tosses = sum(1 for e in events if e.event_type == "cast_away" and e.tosser_name)
        named_finds = sum(1 for e in events if e.event_type == "found" and e.finder_name)
        assert sum(s.created + s.retossed for s in by_user.values()) == named_tosses
        assert sum(s.found for s in by_user.values()) == named_finds

    def test_malformed_rows_ignored(self, b1) -> None:
        _, events = b1
        noisy = events + [make_event("B1", "exploded", 40, tosser_name="Bob")]
        assert compute_stats(noisy, "Bob") == compute_stats(events, "Bob")

    def test_repeated_runs_are_identical(self, b1) -> None:
        _, events = b1
        more = events + [cast_away("B2", 5, tosser="Bob"), found("B2", 6, finder="Alice")]
        assert list(compute_all_user_stats(more).items()) == list(compute_all_user_stats(more).items())
        assert compute_stats(more, "Bob") == compute_stats(more, "Bob")

    def test_users_sorted_by_name(self, b1) -> None:
        _, events = b1
        assert list(compute_all_user_stats(events)) == ["Alice", "Bob", "Carol"]


class TestGlobalStats:
    def test_scenario_b1(self, b1) -> None:
        bottle, events = b1
        assert compute_global_stats([bottle], events) == GlobalStats(
            total_bottles=1,
            total_found=2,
            total_retossed=1,
            active_bottles=0,
        )

    def test_active_bottles_counted_from_status(self) -> None:
        bottles = [make_bottle("B1", status="adrift"), make_bottle("B2", status="found")]
        stats = compute_global_stats(bottles, [])
        assert stats.total_bottles == 2
        assert stats.active_bottles == 1


class TestReconciliation:
    def test_consistent_counters(self, b1) -> None:
        _, events = b1
        counters = [
            ProfileCounters(username="Alice", total_bottles_created=1),
            ProfileCounters(username="Bob", total_bottles_found=1, total_bottles_retossed=1),
        ]
        result = reconcile_stats(events, counters)
        assert result.checked_users == 2
        assert result.consistent is True
        assert result.discrepancies == []

    def test_divergent_counters_reported(self, b1) -> None:
        _, events = b1
        counters = [
            ProfileCounters(username="Bob", total_bottles_created=1, total_bottles_found=1),
            ProfileCounters(username="Carol", total_bottles_found=1),
        ]
        result = reconcile_stats(events, counters)

        assert result.consistent is False
        [discrepancy] = result.discrepancies
        assert discrepancy.username == "Bob"
        assert discrepancy.recorded == UserStats(created=1, found=1, retossed=0)
        assert discrepancy.recomputed == UserStats(created=0, found=1, retossed=1)

    def test_profile_without_events(self) -> None:
        result = reconcile_stats([], [ProfileCounters(username="Ghost", total_bottles_found=3)])
        assert result.discrepancies[0].recomputed == UserStats()
