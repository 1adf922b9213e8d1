import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Set
from sqlalchemy import select, func

from core.enums import ExperienceLevel, TERMINAL_TASK_STATUSES
from core.utils import to_optional_float
from core.assignment.models import ArtistData
from database.models import FreelancerProfile, User, Task, ClientArtistAffinity
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


def _experience_level(raw: Optional[str]) -> ExperienceLevel:
    try:
        return ExperienceLevel(raw) if raw else ExperienceLevel.JUNIOR
    except ValueError:
        logger.warning(f"Unknown experience level {raw!r}, treating as JUNIOR")
        return ExperienceLevel.JUNIOR


def to_artist_data(profile: Any, user: Any) -> ArtistData:
    """Build a scoring snapshot from a profile row and its user row.

    Missing values fall back to the most conservative defaults so a sparse
    profile still ranks instead of failing the whole pass.
    """
    return ArtistData(
        user_id=profile.user_id,
        name=getattr(user, 'name', '') or '',
        email=getattr(user, 'email', '') or '',
        timezone=profile.timezone,
        experience_level=_experience_level(profile.experience_level),
        rating=to_optional_float(profile.rating) or 0.0,
        completed_tasks=profile.completed_tasks or 0,
        acceptance_rate=to_optional_float(profile.acceptance_rate),
        on_time_rate=to_optional_float(profile.on_time_rate),
        max_concurrent_tasks=profile.max_concurrent_tasks,
        working_hours_start=profile.working_hours_start or "09:00",
        working_hours_end=profile.working_hours_end or "18:00",
        accepts_urgent_tasks=bool(profile.accepts_urgent_tasks),
        vacation_mode=bool(profile.vacation_mode),
        skills=list(profile.skills or []),
        specializations=list(profile.specializations or []),
        preferred_categories=list(profile.preferred_categories or []),
    )


class FreelancerRepository(BaseRepository):
    def get_available_artists(self) -> List[ArtistData]:
        """All approved artists that are currently marked available."""
        stmt = (
            select(FreelancerProfile, User)
            .join(User, FreelancerProfile.user_id == User.id)
            .where(
                FreelancerProfile.status == 'APPROVED',
                FreelancerProfile.availability.is_(True)
            )
        )
        rows = self.db.execute(stmt).all()
        return [to_artist_data(profile, user) for profile, user in rows]

    def get_active_task_counts(self) -> Dict[str, int]:
        """Non-terminal task count per assigned artist."""
        terminal = [status.value for status in TERMINAL_TASK_STATUSES]
        stmt = (
            select(Task.freelancer_id, func.count())
            .where(
                Task.freelancer_id.is_not(None),
                Task.status.not_in(terminal)
            )
            .group_by(Task.freelancer_id)
        )
        return {artist_id: int(count) for artist_id, count in self.db.execute(stmt).all()}

    def get_profile(self, artist_id: str) -> Optional[FreelancerProfile]:
        stmt = select(FreelancerProfile).where(FreelancerProfile.user_id == artist_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def update_performance_metrics(
        self,
        artist_id: str,
        acceptance_rate: float,
        avg_response_time_minutes: Optional[int],
        on_time_rate: Optional[float],
        experience_level: ExperienceLevel,
        completed_tasks: int
    ) -> bool:
        profile = self.get_profile(artist_id)
        if profile is None:
            logger.warning(f"No freelancer profile for artist {artist_id}, metrics not saved")
            return False

        profile.acceptance_rate = acceptance_rate
        profile.avg_response_time_minutes = avg_response_time_minutes
        profile.on_time_rate = on_time_rate
        profile.experience_level = ExperienceLevel(experience_level).value
        profile.completed_tasks = completed_tasks
        profile.updated_at = datetime.now(timezone.utc)
        return True


class AffinityRepository(BaseRepository):
    def get_favorite_artist_ids(self, client_id: str) -> Set[str]:
        stmt = select(ClientArtistAffinity.artist_id).where(
            ClientArtistAffinity.client_id == client_id,
            ClientArtistAffinity.is_favorite.is_(True)
        )
        return set(self.db.execute(stmt).scalars().all())
