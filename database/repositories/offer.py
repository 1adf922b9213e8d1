import logging
from datetime import datetime, timezone
from typing import List, Optional, Any, Dict
from sqlalchemy import select

from core.enums import OfferResponse
from database.models import TaskOffer
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class OfferRepository(BaseRepository):
    def create_offer(
        self,
        task_id: Any,
        artist_id: str,
        match_score: float,
        escalation_level: int,
        expires_at: datetime,
        score_breakdown: Dict[str, Any]
    ) -> TaskOffer:
        offer = TaskOffer(
            task_id=task_id,
            artist_id=artist_id,
            match_score=match_score,
            escalation_level=escalation_level,
            offered_at=datetime.now(timezone.utc),
            expires_at=expires_at,
            response=OfferResponse.PENDING.value,
            score_breakdown=score_breakdown,
        )
        self.db.add(offer)
        self.db.flush()  # Generate ID; surfaces uq_task_offer_task_artist violations here
        return offer

    def get_offer(self, offer_id: Any) -> Optional[TaskOffer]:
        stmt = select(TaskOffer).where(TaskOffer.id == offer_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_offer_for_artist(self, task_id: Any, artist_id: str) -> Optional[TaskOffer]:
        """The artist's offer for this task, whatever its response (at most one per pair)."""
        stmt = select(TaskOffer).where(
            TaskOffer.task_id == task_id,
            TaskOffer.artist_id == artist_id
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def resolve(
        self,
        offer: TaskOffer,
        response: OfferResponse,
        responded_at: Optional[datetime],
        reason: Optional[str] = None,
        note: Optional[str] = None
    ) -> TaskOffer:
        offer.response = OfferResponse(response).value
        offer.responded_at = responded_at
        if response is OfferResponse.REJECTED:
            offer.decline_reason = reason
            offer.decline_note = note
        self.db.flush()  # Later queries in this unit of work must see the resolved offer
        return offer

    def mark_expired(self, offers: List[TaskOffer]) -> None:
        """EXPIRED without a responded_at, so expiries stay out of response times."""
        for offer in offers:
            offer.response = OfferResponse.EXPIRED.value
        self.db.flush()

    def get_offered_artist_ids(self, task_id: Any) -> List[str]:
        """Artists with an offer for this task, whatever its response."""
        stmt = select(TaskOffer.artist_id).where(TaskOffer.task_id == task_id)
        return list(self.db.execute(stmt).scalars().all())

    def get_resolved_offers_for_artist(self, artist_id: str) -> List[TaskOffer]:
        stmt = select(TaskOffer).where(
            TaskOffer.artist_id == artist_id,
            TaskOffer.response != OfferResponse.PENDING.value
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_overdue_pending(self, now: datetime, limit: int = 500) -> List[TaskOffer]:
        stmt = (
            select(TaskOffer)
            .where(
                TaskOffer.response == OfferResponse.PENDING.value,
                TaskOffer.expires_at <= now
            )
            .order_by(TaskOffer.expires_at)
            .limit(limit)
            .with_for_update(skip_locked=True)
        )
        return list(self.db.execute(stmt).scalars().all())
