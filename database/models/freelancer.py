import uuid

from sqlalchemy import Column, Text, Boolean, Integer, Numeric, TIMESTAMP, ForeignKey, func, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from .base import Base


class FreelancerProfile(Base):
    """
    Artist profile used for task matching.

    Performance fields (rating aside) are recomputed from offer/task history
    by the metrics updater; availability flags are toggled by the artist.
    """
    __tablename__ = 'freelancer_profiles'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)

    status = Column(Text, nullable=False, default='PENDING')  # PENDING|APPROVED|REJECTED
    availability = Column(Boolean, nullable=False, default=True)

    skills = Column(JSONB, default=list)
    specializations = Column(JSONB, default=list)
    preferred_categories = Column(JSONB, default=list)

    timezone = Column(Text, nullable=True)  # IANA name
    experience_level = Column(Text, nullable=True, default='JUNIOR')
    rating = Column(Numeric(3, 2), default=0)
    completed_tasks = Column(Integer, nullable=False, default=0)
    acceptance_rate = Column(Numeric(5, 2), nullable=True)
    on_time_rate = Column(Numeric(5, 2), nullable=True)
    avg_response_time_minutes = Column(Integer, nullable=True)

    max_concurrent_tasks = Column(Integer, nullable=False, default=3)
    working_hours_start = Column(Text, nullable=True, default='09:00')
    working_hours_end = Column(Text, nullable=True, default='18:00')
    accepts_urgent_tasks = Column(Boolean, nullable=False, default=True)
    vacation_mode = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=func.now())

    user = relationship("User", back_populates="freelancer_profile")

    __table_args__ = (
        Index('idx_freelancer_status_availability', 'status', 'availability'),
    )


class ClientArtistAffinity(Base):
    """Per-client relationship with an artist (favorites)."""
    __tablename__ = 'client_artist_affinity'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    artist_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    is_favorite = Column(Boolean, nullable=False, default=False)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))

    __table_args__ = (
        Index('idx_affinity_client', 'client_id'),
    )
