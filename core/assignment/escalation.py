#!/usr/bin/env python3
"""
Escalation Coordinator - Picks the next step after an offer is declined or
expires.

Levels:
1. Offer to the best-ranked artists one at a time (up to level1_max_offers)
2. Offer with relaxed thresholds (up to level2_max_offers)
3. Broadcast to all eligible artists for level3_broadcast_minutes
   (performed outside this core; the task is only put into broadcast state)
4. Unassignable, handed to an admin
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Any
import logging

from core.assignment.config_provider import AlgorithmConfigProvider
from core.assignment.models import ArtistScore, TaskData
from core.assignment.offers import OfferLifecycleManager
from core.assignment.ranking import ArtistRankingService

logger = logging.getLogger(__name__)

BROADCAST_LEVEL = 3
ADMIN_LEVEL = 4


class EscalationAction(str, Enum):
    OFFERED = "offered"
    BROADCAST = "broadcast"
    ESCALATED_TO_ADMIN = "escalated_to_admin"


@dataclass
class EscalationOutcome:
    action: EscalationAction
    escalation_level: int
    artist_score: Optional[ArtistScore] = None
    offer_id: Any = None


class EscalationCoordinator:
    def __init__(
        self,
        repo,
        config_provider: AlgorithmConfigProvider,
        ranking: ArtistRankingService,
        offers: OfferLifecycleManager
    ):
        self.repo = repo
        self.config_provider = config_provider
        self.ranking = ranking
        self.offers = offers

    def _next_level(self, current_level: int, offers_so_far: int) -> int:
        """Escalate once the offers made so far reach the current level's cumulative cap."""
        settings = self.config_provider.get_active_config().escalation_settings
        if current_level == 1:
            cap = settings.level1_max_offers
        else:
            cap = settings.level1_max_offers + settings.level2_max_offers
        if offers_so_far >= cap and current_level < BROADCAST_LEVEL:
            return current_level + 1
        return current_level

    def handle_declined_or_expired(
        self,
        task: TaskData,
        now: Optional[datetime] = None
    ) -> EscalationOutcome:
        """Offer the task to the next artist, or escalate when none is left."""
        if task.escalation_level >= ADMIN_LEVEL:
            logger.info(f"Task {task.id} is already with an admin, no further offers")
            return EscalationOutcome(EscalationAction.ESCALATED_TO_ADMIN, task.escalation_level)

        offers_so_far = len(self.offers.get_previously_offered_artists(task.id))
        level = self._next_level(task.escalation_level, offers_so_far)
        if level != task.escalation_level:
            logger.info(
                f"Task {task.id} escalated from level {task.escalation_level} to {level} "
                f"after {offers_so_far} offers"
            )

        best = self.ranking.find_next_best_artist(task, level, now=now)
        if best is not None:
            offer_id = self.offers.create_task_offer(task.id, best, level, now=now, urgency=task.urgency)
            return EscalationOutcome(EscalationAction.OFFERED, level, best, offer_id)

        if level < BROADCAST_LEVEL:
            self.repo.tasks.reset_for_broadcast(task.id, BROADCAST_LEVEL)
            logger.info(f"Task {task.id} moved to broadcast: no more artists to offer to")
            return EscalationOutcome(EscalationAction.BROADCAST, BROADCAST_LEVEL)

        self.repo.tasks.mark_unassignable(task.id, ADMIN_LEVEL)
        logger.warning(
            f"Task {task.id} unassignable after all escalation levels ({offers_so_far} offers)"
        )
        return EscalationOutcome(EscalationAction.ESCALATED_TO_ADMIN, ADMIN_LEVEL)
