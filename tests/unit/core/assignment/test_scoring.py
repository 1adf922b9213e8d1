#!/usr/bin/env python3
"""
Unit tests for artist/task match scoring.

Covers the five sub-scores, the exclusion priority order and the weighted
composite (including bonuses and the 100 cap).
"""

import unittest
from datetime import datetime, timezone

from core.config_loader import DEFAULT_CONFIG, merge_algorithm_config
from core.enums import ExperienceLevel, TaskComplexity, TaskUrgency
from core.assignment.scoring import (
    calculate_skill_score,
    calculate_timezone_score,
    calculate_experience_score,
    calculate_workload_score,
    calculate_performance_score,
    calculate_match_score,
)
from tests.mocks.assignment_mocks import make_artist, make_task


def utc(hour, minute=0):
    return datetime(2024, 3, 4, hour, minute, tzinfo=timezone.utc)


class TestSkillScore(unittest.TestCase):
    """Tests for calculate_skill_score."""

    def test_no_required_skills_is_perfect_match(self):
        self.assertEqual(calculate_skill_score(["illustration"], []), 100)
        self.assertEqual(calculate_skill_score([], []), 100)

    def test_exact_match(self):
        self.assertEqual(calculate_skill_score(["Logo Design"], ["logo design"]), 100)

    def test_normalizes_case_and_whitespace(self):
        self.assertEqual(calculate_skill_score(["  PHOTOSHOP "], ["photoshop"]), 100)

    def test_containment_in_both_directions(self):
        """"art" matches "artist" and "artist" matches "art"."""
        self.assertEqual(calculate_skill_score(["artist"], ["art"]), 100)
        self.assertEqual(calculate_skill_score(["art"], ["artist"]), 100)

    def test_partial_coverage_is_rounded(self):
        artist_skills = ["illustration"]
        self.assertEqual(calculate_skill_score(artist_skills, ["illustration", "3d", "video"]), 33)
        self.assertEqual(calculate_skill_score(["illustration", "3d"], ["illustration", "3d", "video"]), 67)

    def test_no_match(self):
        self.assertEqual(calculate_skill_score(["copywriting"], ["motion graphics"]), 0)

    def test_always_within_bounds(self):
        cases = [
            ([], ["a"]),
            (["a", "b", "c"], ["a"]),
            (["x"], ["a", "b", "c", "d"]),
            (["abc"], ["b"]),
        ]
        for artist_skills, required in cases:
            score = calculate_skill_score(artist_skills, required)
            self.assertGreaterEqual(score, 0)
            self.assertLessEqual(score, 100)


class TestTimezoneScore(unittest.TestCase):
    """Tests for the time-of-day curve."""

    def test_buckets(self):
        expectations = [
            (utc(10), 100),     # peak
            (utc(9), 100),      # peak start inclusive
            (utc(18), 100),     # peak end inclusive
            (utc(19), 80),      # evening
            (utc(21), 80),      # evening end inclusive
            (utc(8), 70),       # early morning
            (utc(7), 70),
            (utc(22), 50),      # late evening
            (utc(23), 50),
            (utc(23, 30), 20),  # night
            (utc(2), 20),
        ]
        for now, expected in expectations:
            with self.subTest(now=now.time()):
                self.assertEqual(calculate_timezone_score("UTC", DEFAULT_CONFIG, now), expected)

    def test_converts_to_artist_local_time(self):
        # 10:00 UTC is 19:00 in Tokyo (UTC+9, no DST)
        self.assertEqual(calculate_timezone_score("Asia/Tokyo", DEFAULT_CONFIG, utc(10)), 80)

    def test_missing_timezone_is_neutral(self):
        self.assertEqual(calculate_timezone_score(None, DEFAULT_CONFIG, utc(10)), 50)

    def test_invalid_timezone_is_neutral(self):
        with self.assertLogs('core.assignment.scoring', level='WARNING'):
            score = calculate_timezone_score("Not/AZone", DEFAULT_CONFIG, utc(10))
        self.assertEqual(score, 50)

    def test_custom_peak_window(self):
        config = merge_algorithm_config({
            'timezone_settings': {'peak_hours_start': '06:00', 'peak_hours_end': '14:00'}
        })
        self.assertEqual(calculate_timezone_score("UTC", config, utc(6, 30)), 100)
        self.assertEqual(calculate_timezone_score("UTC", config, utc(15)), 80)


class TestExperienceScore(unittest.TestCase):
    def test_matrix_lookup(self):
        self.assertEqual(
            calculate_experience_score(ExperienceLevel.SENIOR, TaskComplexity.ADVANCED, DEFAULT_CONFIG), 100
        )
        self.assertEqual(
            calculate_experience_score(ExperienceLevel.JUNIOR, TaskComplexity.EXPERT, DEFAULT_CONFIG), 0
        )
        self.assertEqual(
            calculate_experience_score(ExperienceLevel.EXPERT, TaskComplexity.SIMPLE, DEFAULT_CONFIG), 50
        )


class TestWorkloadScore(unittest.TestCase):
    def test_penalty_per_task(self):
        self.assertEqual(calculate_workload_score(0, DEFAULT_CONFIG), 100)
        self.assertEqual(calculate_workload_score(2, DEFAULT_CONFIG), 60)
        self.assertEqual(calculate_workload_score(5, DEFAULT_CONFIG), 0)

    def test_floored_at_zero(self):
        self.assertEqual(calculate_workload_score(9, DEFAULT_CONFIG), 0)

    def test_non_increasing(self):
        scores = [calculate_workload_score(n, DEFAULT_CONFIG) for n in range(10)]
        self.assertEqual(scores, sorted(scores, reverse=True))


class TestPerformanceScore(unittest.TestCase):
    def test_blend(self):
        # 90*0.5 + 90*0.3 + 85*0.2 = 89
        self.assertEqual(calculate_performance_score(4.5, 90, 85), 89)

    def test_unknown_rates_default_to_80(self):
        # 0 + 80*0.3 + 80*0.2 = 40
        self.assertEqual(calculate_performance_score(0, None, None), 40)

    def test_perfect(self):
        self.assertEqual(calculate_performance_score(5, 100, 100), 100)


class TestMatchScore(unittest.TestCase):
    """Tests for calculate_match_score."""

    def setUp(self):
        self.task = make_task(
            complexity=TaskComplexity.ADVANCED,
            urgency=TaskUrgency.STANDARD,
            required_skills=["motion graphics"],
            category_slug="animation",
        )
        self.artist = make_artist(experience_level=ExperienceLevel.SENIOR)
        self.now = utc(10)

    def test_worked_example(self):
        """35 + 10 + 20 + 15 + 8.9 = 88.9 with a neutral timezone."""
        score = calculate_match_score(self.artist, self.task, 0, DEFAULT_CONFIG, now=self.now)

        self.assertFalse(score.excluded)
        self.assertIsNone(score.exclusion_reason)
        self.assertEqual(score.breakdown.skill_score, 100)
        self.assertEqual(score.breakdown.timezone_score, 50)
        self.assertEqual(score.breakdown.experience_score, 100)
        self.assertEqual(score.breakdown.workload_score, 100)
        self.assertEqual(score.breakdown.performance_score, 89)
        self.assertEqual(score.total_score, 88.9)

    def test_category_bonus(self):
        artist = make_artist(experience_level=ExperienceLevel.SENIOR, preferred_categories=["animation"])
        score = calculate_match_score(artist, self.task, 0, DEFAULT_CONFIG, now=self.now)
        self.assertEqual(score.total_score, 98.9)

    def test_favorite_bonus(self):
        score = calculate_match_score(self.artist, self.task, 0, DEFAULT_CONFIG, is_favorite=True, now=self.now)
        self.assertEqual(score.total_score, 98.9)

    def test_bonuses_capped_at_100(self):
        artist = make_artist(experience_level=ExperienceLevel.SENIOR, preferred_categories=["animation"])
        score = calculate_match_score(artist, self.task, 0, DEFAULT_CONFIG, is_favorite=True, now=self.now)
        self.assertEqual(score.total_score, 100)

    def test_excluded_at_max_capacity(self):
        score = calculate_match_score(self.artist, self.task, 5, DEFAULT_CONFIG, now=self.now)

        self.assertTrue(score.excluded)
        self.assertEqual(score.total_score, -1)
        self.assertIn("max capacity (5/5 tasks)", score.exclusion_reason)
        # Breakdown is still attached
        self.assertEqual(score.breakdown.workload_score, 0)
        self.assertEqual(score.breakdown.skill_score, 100)

    def test_capacity_rule_disabled(self):
        config = merge_algorithm_config({'exclusion_rules': {'exclude_overloaded': False}})
        score = calculate_match_score(self.artist, self.task, 5, config, now=self.now)
        self.assertFalse(score.excluded)

    def test_vacation_takes_priority(self):
        """Vacation beats every other rule, including a failing skill score."""
        artist = make_artist(vacation_mode=True, skills=["copywriting"])
        score = calculate_match_score(artist, self.task, 5, DEFAULT_CONFIG, now=self.now)

        self.assertTrue(score.excluded)
        self.assertEqual(score.exclusion_reason, "Artist is on vacation")

    def test_vacation_rule_disabled(self):
        config = merge_algorithm_config({'exclusion_rules': {'exclude_vacation_mode': False}})
        artist = make_artist(vacation_mode=True)
        score = calculate_match_score(artist, self.task, 0, config, now=self.now)
        self.assertFalse(score.excluded)

    def test_skill_below_threshold(self):
        artist = make_artist(skills=["copywriting"])
        score = calculate_match_score(artist, self.task, 5, DEFAULT_CONFIG, now=self.now)

        self.assertTrue(score.excluded)
        self.assertEqual(score.exclusion_reason, "Skill score (0) below threshold (50)")

    def test_night_hours_for_urgent_task(self):
        task = make_task(urgency=TaskUrgency.URGENT)
        artist = make_artist(timezone="UTC")
        score = calculate_match_score(artist, task, 0, DEFAULT_CONFIG, now=utc(2))

        self.assertTrue(score.excluded)
        self.assertEqual(score.exclusion_reason, "Urgent task during night hours")

    def test_night_hours_ignored_for_standard_task(self):
        artist = make_artist(timezone="UTC")
        score = calculate_match_score(artist, self.task, 0, DEFAULT_CONFIG, now=utc(2))
        self.assertFalse(score.excluded)
        self.assertEqual(score.breakdown.timezone_score, 20)

    def test_invalid_timezone_never_night(self):
        task = make_task(urgency=TaskUrgency.CRITICAL)
        artist = make_artist(timezone="Not/AZone")
        with self.assertLogs('core.assignment.scoring', level='WARNING'):
            score = calculate_match_score(artist, task, 0, DEFAULT_CONFIG, now=utc(2))
        self.assertFalse(score.excluded)

    def test_opted_out_of_urgent(self):
        task = make_task(urgency=TaskUrgency.CRITICAL)
        artist = make_artist(accepts_urgent_tasks=False)
        score = calculate_match_score(artist, task, 0, DEFAULT_CONFIG, now=self.now)

        self.assertTrue(score.excluded)
        self.assertEqual(score.exclusion_reason, "Artist does not accept urgent tasks")

    def test_opted_out_of_urgent_but_task_is_flexible(self):
        task = make_task(urgency=TaskUrgency.FLEXIBLE)
        artist = make_artist(accepts_urgent_tasks=False)
        score = calculate_match_score(artist, task, 0, DEFAULT_CONFIG, now=self.now)
        self.assertFalse(score.excluded)

    def test_total_within_bounds(self):
        artists = [
            make_artist(rating=5, on_time_rate=100, acceptance_rate=100, preferred_categories=["animation"]),
            make_artist(rating=0, on_time_rate=0, acceptance_rate=0),
            make_artist(experience_level=ExperienceLevel.JUNIOR),
        ]
        for artist in artists:
            for active in range(5):
                score = calculate_match_score(artist, self.task, active, DEFAULT_CONFIG, is_favorite=True, now=self.now)
                self.assertTrue(score.excluded or 0 <= score.total_score <= 100)


if __name__ == "__main__":
    unittest.main()
