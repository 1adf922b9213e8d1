#!/usr/bin/env python3
"""
Metrics Updater - Recomputes artist performance figures from history.

The figures feed back into the performance sub-score of future rankings.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Any
import logging

from core.enums import ExperienceLevel, OfferResponse
from core.utils import round_half_up
from core.assignment.clock import as_aware

logger = logging.getLogger(__name__)

# (exclusive lower bound on completed tasks, level), checked top-down
EXPERIENCE_TIERS = (
    (150, ExperienceLevel.EXPERT),
    (50, ExperienceLevel.SENIOR),
    (10, ExperienceLevel.MID),
)


@dataclass(frozen=True)
class ArtistMetrics:
    acceptance_rate: float
    avg_response_time_minutes: Optional[int]
    on_time_rate: Optional[float]
    experience_level: ExperienceLevel
    completed_tasks: int


def experience_level_for(completed_tasks: int) -> ExperienceLevel:
    for threshold, level in EXPERIENCE_TIERS:
        if completed_tasks > threshold:
            return level
    return ExperienceLevel.JUNIOR


def compute_artist_metrics(offers: Iterable[Any], completed_tasks: Iterable[Any]) -> Optional[ArtistMetrics]:
    """Compute metrics from resolved offers and completed tasks.

    Returns None when there are no resolved offers, so brand-new artists keep
    their unknown (None) rates instead of being overwritten with zeros.
    """
    resolved = [o for o in offers if o.response != OfferResponse.PENDING.value]
    if not resolved:
        return None

    accepted = sum(1 for o in resolved if o.response == OfferResponse.ACCEPTED.value)
    acceptance_rate = accepted / len(resolved) * 100

    response_minutes: List[float] = [
        (as_aware(o.responded_at) - as_aware(o.offered_at)).total_seconds() / 60
        for o in resolved
        if o.responded_at and o.offered_at
    ]
    avg_response = (
        int(round_half_up(sum(response_minutes) / len(response_minutes)))
        if response_minutes else None
    )

    completed = list(completed_tasks)
    with_deadline = [t for t in completed if t.deadline and t.completed_at]
    on_time = sum(1 for t in with_deadline if as_aware(t.completed_at) <= as_aware(t.deadline))
    on_time_rate = on_time / len(with_deadline) * 100 if with_deadline else None

    return ArtistMetrics(
        acceptance_rate=acceptance_rate,
        avg_response_time_minutes=avg_response,
        on_time_rate=on_time_rate,
        experience_level=experience_level_for(len(completed)),
        completed_tasks=len(completed),
    )


class MetricsUpdater:
    def __init__(self, repo):
        self.repo = repo

    def update_artist_metrics(self, artist_id: str) -> Optional[ArtistMetrics]:
        """Recompute and store an artist's metrics. No-op without offer history."""
        offers = self.repo.offers.get_resolved_offers_for_artist(artist_id)
        if not offers:
            logger.debug(f"Artist {artist_id} has no resolved offers, metrics unchanged")
            return None

        completed = self.repo.tasks.get_completed_tasks_for_artist(artist_id)
        metrics = compute_artist_metrics(offers, completed)
        if metrics is None:
            return None

        self.repo.freelancers.update_performance_metrics(
            artist_id,
            acceptance_rate=metrics.acceptance_rate,
            avg_response_time_minutes=metrics.avg_response_time_minutes,
            on_time_rate=metrics.on_time_rate,
            experience_level=metrics.experience_level,
            completed_tasks=metrics.completed_tasks,
        )
        logger.info(
            f"Updated metrics for artist {artist_id}: acceptance={metrics.acceptance_rate:.1f}%, "
            f"level={metrics.experience_level.value}, completed={metrics.completed_tasks}"
        )
        return metrics
