import uuid

from sqlalchemy import Column, Text, Integer, Numeric, TIMESTAMP, ForeignKey, func, UniqueConstraint, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship

from .base import Base


class TaskCategory(Base):
    __tablename__ = 'task_categories'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    slug = Column(Text, nullable=False, unique=True)


class Task(Base):
    """
    A client design task.

    complexity/urgency are nullable: when absent they are derived from the
    estimate, description and deadline at ranking time.
    """
    __tablename__ = 'tasks'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    freelancer_id = Column(Text, ForeignKey('users.id'), nullable=True)
    category_id = Column(UUID(as_uuid=True), ForeignKey('task_categories.id'), nullable=True)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')
    status = Column(Text, nullable=False, default='PENDING')

    complexity = Column(Text, nullable=True)
    urgency = Column(Text, nullable=True)
    required_skills = Column(JSONB, default=list)
    estimated_hours = Column(Numeric(5, 2), nullable=True)

    deadline = Column(TIMESTAMP(timezone=True), nullable=True)
    assigned_at = Column(TIMESTAMP(timezone=True), nullable=True)
    working_deadline = Column(TIMESTAMP(timezone=True), nullable=True)
    completed_at = Column(TIMESTAMP(timezone=True), nullable=True)

    # Offer tracking
    offered_to = Column(Text, ForeignKey('users.id'), nullable=True)
    offer_expires_at = Column(TIMESTAMP(timezone=True), nullable=True)
    escalation_level = Column(Integer, nullable=False, default=1)

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=func.now())

    category = relationship("TaskCategory")
    offers = relationship("TaskOffer", back_populates="task", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_tasks_freelancer_status', 'freelancer_id', 'status'),
        Index('idx_tasks_status', 'status'),
    )


class TaskOffer(Base):
    """
    One artist being offered one task at one escalation level.

    Terminal once response leaves PENDING. The (task_id, artist_id) unique
    constraint is the storage-level guard against duplicate offers when two
    ranking passes race for the same task.
    """
    __tablename__ = 'task_offers'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    task_id = Column(UUID(as_uuid=True), ForeignKey('tasks.id', ondelete='CASCADE'), nullable=False)
    artist_id = Column(Text, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    match_score = Column(Numeric(5, 2), nullable=False)
    score_breakdown = Column(JSONB, default={})
    escalation_level = Column(Integer, nullable=False, default=1)

    offered_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    response = Column(Text, nullable=False, default='PENDING')  # PENDING|ACCEPTED|REJECTED|EXPIRED
    responded_at = Column(TIMESTAMP(timezone=True), nullable=True)
    decline_reason = Column(Text, nullable=True)
    decline_note = Column(Text, nullable=True)

    task = relationship("Task", back_populates="offers")

    __table_args__ = (
        UniqueConstraint('task_id', 'artist_id', name='uq_task_offer_task_artist'),
        Index('idx_task_offer_artist_response', 'artist_id', 'response'),
        Index('idx_task_offer_pending_expiry', 'response', 'expires_at'),
    )
