#!/usr/bin/env python3
"""
Offer Lifecycle Manager - Time-boxed task offers.

Offer responses move PENDING -> ACCEPTED | REJECTED | EXPIRED and never
change again. Creating an offer is the one task state transition this
module performs: the task becomes OFFERED to the selected artist.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Any
import logging

from core.config_loader import AlgorithmConfig
from core.enums import OfferResponse, TaskUrgency
from core.assignment.clock import as_aware, utc_now
from core.assignment.config_provider import AlgorithmConfigProvider
from core.assignment.exceptions import OfferNotFoundError, OfferStateError
from core.assignment.models import ArtistScore

logger = logging.getLogger(__name__)


def calculate_offer_expiration(
    urgency: TaskUrgency,
    config: AlgorithmConfig,
    now: Optional[datetime] = None
) -> datetime:
    """now + the acceptance window for this urgency tier."""
    start = as_aware(now) if now is not None else utc_now()
    return start + timedelta(minutes=config.acceptance_windows.minutes_for(urgency))


class OfferLifecycleManager:
    """Creates, resolves and expires task offers."""

    def __init__(
        self,
        repo,
        config_provider: AlgorithmConfigProvider,
        fallback_urgency: TaskUrgency = TaskUrgency.STANDARD
    ):
        self.repo = repo
        self.config_provider = config_provider
        self.fallback_urgency = fallback_urgency

    def get_acceptance_window(self, urgency: TaskUrgency) -> int:
        """Minutes an artist has to respond, per the active config."""
        return self.config_provider.get_active_config().acceptance_windows.minutes_for(urgency)

    def _task_urgency(self, task_id: Any) -> TaskUrgency:
        raw = self.repo.tasks.get_urgency(task_id)
        if not raw:
            return self.fallback_urgency
        try:
            return TaskUrgency(raw)
        except ValueError:
            logger.warning(f"Task {task_id} has unknown urgency {raw!r}, using {self.fallback_urgency.value}")
            return self.fallback_urgency

    def create_task_offer(
        self,
        task_id: Any,
        artist_score: ArtistScore,
        escalation_level: int = 1,
        now: Optional[datetime] = None,
        urgency: Optional[TaskUrgency] = None
    ) -> Any:
        """Persist a PENDING offer and move the task to OFFERED.

        Pass the urgency the task was ranked with so the acceptance window
        matches it; without one the stored urgency is looked up.
        Returns the new offer id.
        """
        config = self.config_provider.get_active_config()
        if urgency is None:
            urgency = self._task_urgency(task_id)
        expires_at = calculate_offer_expiration(urgency, config, now)
        artist_id = artist_score.artist.user_id

        offer = self.repo.offers.create_offer(
            task_id=task_id,
            artist_id=artist_id,
            match_score=artist_score.total_score,
            escalation_level=escalation_level,
            expires_at=expires_at,
            score_breakdown=artist_score.breakdown.to_dict(),
        )
        self.repo.tasks.mark_offered(task_id, artist_id, expires_at, escalation_level)

        logger.info(
            f"Offered task {task_id} to artist {artist_id} "
            f"(score={artist_score.total_score}, level={escalation_level}, "
            f"urgency={urgency.value}, expires={expires_at.isoformat()})"
        )
        return offer.id

    def get_previously_offered_artists(self, task_id: Any) -> List[str]:
        return self.repo.offers.get_offered_artist_ids(task_id)

    def record_response(
        self,
        response: OfferResponse,
        offer_id: Any = None,
        task_id: Any = None,
        artist_id: Optional[str] = None,
        reason: Optional[str] = None,
        note: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Any:
        """Resolve a PENDING offer, located by id or by (task_id, artist_id).

        Raises OfferNotFoundError if there is no such offer and
        OfferStateError if it was already resolved.
        """
        response = OfferResponse(response)
        if response is OfferResponse.PENDING:
            raise OfferStateError("An offer cannot be moved back to PENDING")

        if offer_id is not None:
            offer = self.repo.offers.get_offer(offer_id)
        else:
            offer = self.repo.offers.get_offer_for_artist(task_id, artist_id)

        if offer is None:
            raise OfferNotFoundError(
                f"No offer found (offer_id={offer_id}, task_id={task_id}, artist_id={artist_id})"
            )

        if OfferResponse(offer.response).is_terminal:
            raise OfferStateError(f"Offer {offer.id} already resolved as {offer.response}")

        responded_at = as_aware(now) if now is not None else utc_now()
        self.repo.offers.resolve(offer, response, responded_at, reason, note)

        logger.info(f"Offer {offer.id} for task {offer.task_id} resolved as {response.value} by {offer.artist_id}")
        return offer

    def expire_overdue_offers(self, now: Optional[datetime] = None) -> List[Any]:
        """Mark PENDING offers whose window has passed as EXPIRED.

        The scheduler that calls this and the follow-up escalation live
        outside this module; the expired offers are returned for that purpose.
        No response timestamp is set, so expiries do not skew response times.
        """
        current = as_aware(now) if now is not None else utc_now()
        overdue = self.repo.offers.get_overdue_pending(current)

        if overdue:
            self.repo.offers.mark_expired(overdue)
            logger.info(f"Expired {len(overdue)} overdue offers")
        return overdue
