#!/usr/bin/env python3
"""
Unit tests for artist performance metrics.
"""

import unittest
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from core.enums import ExperienceLevel, OfferResponse
from core.assignment.metrics import MetricsUpdater, compute_artist_metrics, experience_level_for
from tests.mocks.assignment_mocks import FakeAssignmentRepository


NOW = datetime(2024, 3, 4, 10, 0, tzinfo=timezone.utc)


def offer(response, minutes=None):
    return SimpleNamespace(
        response=OfferResponse(response).value,
        offered_at=NOW,
        responded_at=NOW + timedelta(minutes=minutes) if minutes is not None else None,
    )


def completed_task(days_early):
    deadline = NOW + timedelta(days=10)
    return SimpleNamespace(deadline=deadline, completed_at=deadline - timedelta(days=days_early))


class TestExperienceLevelFor(unittest.TestCase):

    def test_thresholds(self):
        expectations = [
            (0, ExperienceLevel.JUNIOR),
            (10, ExperienceLevel.JUNIOR),
            (11, ExperienceLevel.MID),
            (50, ExperienceLevel.MID),
            (51, ExperienceLevel.SENIOR),
            (150, ExperienceLevel.SENIOR),
            (151, ExperienceLevel.EXPERT),
        ]
        for completed, level in expectations:
            with self.subTest(completed=completed):
                self.assertEqual(experience_level_for(completed), level)


class TestComputeArtistMetrics(unittest.TestCase):

    def test_acceptance_rate(self):
        metrics = compute_artist_metrics(
            [offer("ACCEPTED", 5), offer("ACCEPTED", 5), offer("REJECTED", 5), offer("EXPIRED")],
            []
        )
        self.assertEqual(metrics.acceptance_rate, 50)

    def test_average_response_time_rounds_half_up(self):
        metrics = compute_artist_metrics([offer("ACCEPTED", 15), offer("REJECTED", 16)], [])
        self.assertEqual(metrics.avg_response_time_minutes, 16)

    def test_expired_offers_do_not_count_towards_response_time(self):
        metrics = compute_artist_metrics([offer("ACCEPTED", 10), offer("EXPIRED")], [])
        self.assertEqual(metrics.avg_response_time_minutes, 10)

    def test_no_response_timestamps(self):
        metrics = compute_artist_metrics([offer("EXPIRED")], [])
        self.assertEqual(metrics.acceptance_rate, 0)
        self.assertIsNone(metrics.avg_response_time_minutes)

    def test_on_time_rate(self):
        tasks = [completed_task(1), completed_task(0), completed_task(-2), completed_task(3)]
        metrics = compute_artist_metrics([offer("ACCEPTED", 1)], tasks)

        self.assertEqual(metrics.on_time_rate, 75)
        self.assertEqual(metrics.completed_tasks, 4)
        self.assertEqual(metrics.experience_level, ExperienceLevel.JUNIOR)

    def test_tasks_without_deadline_are_ignored_for_on_time_rate(self):
        tasks = [SimpleNamespace(deadline=None, completed_at=NOW)]
        metrics = compute_artist_metrics([offer("ACCEPTED", 1)], tasks)

        self.assertIsNone(metrics.on_time_rate)
        self.assertEqual(metrics.completed_tasks, 1)

    def test_no_resolved_offers(self):
        self.assertIsNone(compute_artist_metrics([], []))
        self.assertIsNone(compute_artist_metrics([offer("PENDING")], []))


class TestMetricsUpdater(unittest.TestCase):

    def test_writes_metrics(self):
        repo = FakeAssignmentRepository()
        repo.offers.add_existing("task-1", "artist-1", response="ACCEPTED",
                                 offered_at=NOW, responded_at=NOW + timedelta(minutes=20))
        repo.offers.add_existing("task-2", "artist-1", response="REJECTED",
                                 offered_at=NOW, responded_at=NOW + timedelta(minutes=40))
        repo.tasks.completed["artist-1"] = [completed_task(1) for _ in range(12)]

        metrics = MetricsUpdater(repo).update_artist_metrics("artist-1")

        saved = repo.freelancers.saved_metrics["artist-1"]
        self.assertEqual(saved['acceptance_rate'], 50)
        self.assertEqual(saved['avg_response_time_minutes'], 30)
        self.assertEqual(saved['on_time_rate'], 100)
        self.assertEqual(saved['experience_level'], ExperienceLevel.MID)
        self.assertEqual(saved['completed_tasks'], 12)
        self.assertEqual(metrics.acceptance_rate, 50)

    def test_no_history_is_a_no_op(self):
        repo = FakeAssignmentRepository()
        repo.offers.add_existing("task-1", "artist-1")  # still pending

        self.assertIsNone(MetricsUpdater(repo).update_artist_metrics("artist-1"))
        self.assertEqual(repo.freelancers.saved_metrics, {})


if __name__ == "__main__":
    unittest.main()
