#!/usr/bin/env python3
"""
Artist Ranking Service - Ranks eligible artists for a task.

Loads the active config, the approved+available artists, their current
workload and the client's favorites, scores every artist and returns the
non-excluded ones sorted by total score (highest first).
"""

from datetime import datetime
from typing import List, Optional
import logging

from core.assignment.config_provider import AlgorithmConfigProvider
from core.assignment.models import ArtistScore, TaskData
from core.assignment.scoring import calculate_match_score

logger = logging.getLogger(__name__)


class ArtistRankingService:
    """
    Ranks artists against a task, widening the pool with escalation level.

    Escalation level 1 uses the active config as-is; level 2 and above lower
    the skill threshold and raise the workload cap (see
    AlgorithmConfig.for_escalation_level). Broadcast at level 3 is the
    caller's decision, not a different ranking.
    """

    def __init__(self, repo, config_provider: AlgorithmConfigProvider):
        self.repo = repo
        self.config_provider = config_provider

    def rank_artists_for_task(
        self,
        task: TaskData,
        escalation_level: int = 1,
        now: Optional[datetime] = None
    ) -> List[ArtistScore]:
        config = self.config_provider.get_active_config()

        artists = self.repo.freelancers.get_available_artists()
        if not artists:
            logger.info(f"No available artists to rank for task {task.id}")
            return []

        active_counts = self.repo.freelancers.get_active_task_counts()
        favorite_ids = self.repo.affinities.get_favorite_artist_ids(task.client_id)

        adjusted = config.for_escalation_level(escalation_level)

        scores = [
            calculate_match_score(
                artist,
                task,
                active_counts.get(artist.user_id, 0),
                adjusted,
                is_favorite=artist.user_id in favorite_ids,
                now=now,
            )
            for artist in artists
        ]

        eligible = [score for score in scores if not score.excluded]
        # sorted() is stable, so ties keep candidate load order
        eligible = sorted(eligible, key=lambda s: s.total_score, reverse=True)

        logger.info(
            f"Ranked {len(eligible)}/{len(scores)} artists for task {task.id} "
            f"(escalation level {escalation_level})"
        )
        return eligible

    def find_next_best_artist(
        self,
        task: TaskData,
        escalation_level: int = 1,
        now: Optional[datetime] = None
    ) -> Optional[ArtistScore]:
        """Best-ranked artist that has not been offered this task yet.

        None means the pool is exhausted at this level; callers escalate or
        broadcast.
        """
        previously_offered = set(self.repo.offers.get_offered_artist_ids(task.id))
        ranked = self.rank_artists_for_task(task, escalation_level, now=now)

        for score in ranked:
            if score.artist.user_id not in previously_offered:
                return score

        logger.info(
            f"No un-offered artist left for task {task.id} at escalation level {escalation_level} "
            f"({len(previously_offered)} already offered)"
        )
        return None
