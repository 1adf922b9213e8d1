import uuid

from sqlalchemy import Column, Text, Boolean, Integer, TIMESTAMP, func, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.dialects.postgresql import UUID, JSONB

from .base import Base


class AssignmentAlgorithmConfig(Base):
    """
    Versioned, admin-editable matching configuration.

    Each section column holds the JSON form of the matching AlgorithmConfig
    section. At most one row is active; drafts are inactive until published.
    """
    __tablename__ = 'assignment_algorithm_config'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    version = Column(Integer, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)

    weights = Column(JSONB, nullable=False)
    acceptance_windows = Column(JSONB, nullable=False)
    escalation_settings = Column(JSONB, nullable=False)
    timezone_settings = Column(JSONB, nullable=False)
    experience_matrix = Column(JSONB, nullable=False)
    workload_settings = Column(JSONB, nullable=False)
    exclusion_rules = Column(JSONB, nullable=False)
    bonus_modifiers = Column(JSONB, nullable=False)

    created_by = Column(Text, nullable=True)
    published_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=func.now())

    __table_args__ = (
        Index('idx_algorithm_config_active', 'is_active'),
    )
