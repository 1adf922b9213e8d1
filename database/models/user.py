from sqlalchemy import Column, Text, TIMESTAMP, func, Index
from sqlalchemy.sql import text as sql_text
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    Account record shared by clients, artists and admins.

    Authentication lives elsewhere; the assignment engine only reads the
    display name and email of artists.
    """
    __tablename__ = 'users'

    id = Column(Text, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False, unique=True)
    role = Column(Text, nullable=False, default='CLIENT')

    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"))
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=sql_text("timezone('UTC', now())"), onupdate=func.now())

    freelancer_profile = relationship("FreelancerProfile", back_populates="user", uselist=False)

    __table_args__ = (
        Index('idx_users_email', 'email'),
    )
