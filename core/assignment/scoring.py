#!/usr/bin/env python3
"""
Scoring Engine - Multi-factor artist/task match scoring.

Five sub-scores (0-100 each) are combined into a weighted composite:
- Skill match: fuzzy coverage of the task's required skills
- Timezone fit: where the artist's local clock sits on the time-of-day curve
- Experience match: complexity x experience-level matrix lookup
- Workload balance: penalty per active task
- Performance history: rating, on-time rate and acceptance rate blend

All functions are pure and take the config explicitly. Bad artist data
degrades to neutral values instead of raising, so one malformed record
cannot abort a ranking pass.
"""

from datetime import datetime
from typing import Iterable, Optional
import logging

from core.config_loader import AlgorithmConfig
from core.enums import ExperienceLevel, TaskComplexity
from core.utils import round_half_up, normalize_term
from core.assignment import clock
from core.assignment.exclusions import find_exclusion_reason
from core.assignment.models import (
    ArtistData, TaskData, ArtistScore, ScoreBreakdown, EXCLUDED_SCORE
)

logger = logging.getLogger(__name__)

NEUTRAL_TIMEZONE_SCORE = 50.0

# Assumed percentages when an artist has no history yet
DEFAULT_ON_TIME_RATE = 80.0
DEFAULT_ACCEPTANCE_RATE = 80.0

RATING_WEIGHT = 0.5
ON_TIME_WEIGHT = 0.3
ACCEPTANCE_WEIGHT = 0.2

MAX_SCORE = 100.0


def _skill_matches(required: str, artist_skills: Iterable[str]) -> bool:
    # Containment in either direction counts: "art" matches "artist" and vice versa
    return any(
        skill == required or required in skill or skill in required
        for skill in artist_skills
    )


def calculate_skill_score(artist_skills: Iterable[str], required_skills: Iterable[str]) -> float:
    """Percentage of required skills covered by the artist (0-100).

    A task with no required skills is a vacuous perfect match.
    """
    required = [normalize_term(s) for s in required_skills]
    if not required:
        return MAX_SCORE

    normalized = [normalize_term(s) for s in artist_skills]
    matched = [skill for skill in required if _skill_matches(skill, normalized)]

    return round_half_up(len(matched) / len(required) * 100)


def calculate_timezone_score(
    artist_timezone: Optional[str],
    config: AlgorithmConfig,
    now: Optional[datetime] = None
) -> float:
    """Score the artist's current local time of day (0-100).

    Buckets: peak window -> peak; peak end to 21:00 -> evening;
    07:00 to peak start -> early morning; 21:00-23:00 -> late evening;
    otherwise night. Unknown or invalid timezone -> neutral 50.
    """
    if not artist_timezone:
        return NEUTRAL_TIMEZONE_SCORE

    settings = config.timezone_settings
    try:
        current = clock.fractional_hour(clock.local_time(artist_timezone, now))
        peak_start = clock.parse_clock(settings.peak_hours_start)
        peak_end = clock.parse_clock(settings.peak_hours_end)
    except clock.TIMEZONE_ERRORS as e:
        logger.warning(f"Failed to calculate timezone score for {artist_timezone!r}: {e}")
        return NEUTRAL_TIMEZONE_SCORE

    if peak_start <= current <= peak_end:
        return settings.peak_score
    if peak_end < current <= clock.EVENING_END:
        return settings.evening_score
    if clock.EARLY_MORNING_START <= current < peak_start:
        return settings.early_morning_score
    if clock.EVENING_END < current <= clock.LATE_EVENING_END:
        return settings.late_evening_score
    return settings.night_score


def calculate_experience_score(
    artist_level: ExperienceLevel,
    task_complexity: TaskComplexity,
    config: AlgorithmConfig
) -> float:
    return config.experience_matrix.row_for(task_complexity).score_for(artist_level)


def calculate_workload_score(active_tasks: int, config: AlgorithmConfig) -> float:
    """100 minus a fixed penalty per active task, floored at 0."""
    return max(0.0, MAX_SCORE - active_tasks * config.workload_settings.score_per_task)


def calculate_performance_score(
    rating: float,
    on_time_rate: Optional[float],
    acceptance_rate: Optional[float]
) -> float:
    rating_score = (rating / 5) * 100
    on_time_score = on_time_rate if on_time_rate is not None else DEFAULT_ON_TIME_RATE
    accept_score = acceptance_rate if acceptance_rate is not None else DEFAULT_ACCEPTANCE_RATE

    return round_half_up(
        rating_score * RATING_WEIGHT
        + on_time_score * ON_TIME_WEIGHT
        + accept_score * ACCEPTANCE_WEIGHT
    )


def calculate_match_score(
    artist: ArtistData,
    task: TaskData,
    active_tasks: int,
    config: AlgorithmConfig,
    is_favorite: bool = False,
    now: Optional[datetime] = None
) -> ArtistScore:
    """Calculate the composite score for an artist/task pair.

    Excluded artists get total_score == -1 with the breakdown still attached.
    Otherwise: weighted sum of the sub-scores, plus the category
    specialization and favorite-artist bonuses, capped at 100 and rounded
    to 2 decimals.
    """
    breakdown = ScoreBreakdown(
        skill_score=calculate_skill_score(artist.all_skills, task.required_skills),
        timezone_score=calculate_timezone_score(artist.timezone, config, now),
        experience_score=calculate_experience_score(artist.experience_level, task.complexity, config),
        workload_score=calculate_workload_score(active_tasks, config),
        performance_score=calculate_performance_score(
            artist.rating, artist.on_time_rate, artist.acceptance_rate
        ),
    )

    exclusion_reason = find_exclusion_reason(
        artist, task, breakdown.skill_score, active_tasks, config, now
    )
    if exclusion_reason:
        logger.debug(f"Artist {artist.user_id} excluded from task {task.id}: {exclusion_reason}")
        return ArtistScore(
            artist=artist,
            total_score=EXCLUDED_SCORE,
            breakdown=breakdown,
            excluded=True,
            exclusion_reason=exclusion_reason,
        )

    weights = config.weights
    total = (
        breakdown.skill_score * (weights.skill_match / 100)
        + breakdown.timezone_score * (weights.timezone_fit / 100)
        + breakdown.experience_score * (weights.experience_match / 100)
        + breakdown.workload_score * (weights.workload_balance / 100)
        + breakdown.performance_score * (weights.performance_history / 100)
    )

    bonuses = config.bonus_modifiers
    if task.category_slug and task.category_slug in artist.preferred_categories:
        total += bonuses.category_specialization_bonus

    if is_favorite:
        total += bonuses.favorite_artist_bonus

    total_score = min(MAX_SCORE, round_half_up(total, 2))
    logger.debug(f"Artist {artist.user_id} scored {total_score} for task {task.id}")

    return ArtistScore(
        artist=artist,
        total_score=total_score,
        breakdown=breakdown,
    )
