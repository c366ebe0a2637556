"""
Client profile model, one row per identity-provider account.
"""

from sqlalchemy import Column, DateTime, String

from .base import UUID, Base, utcnow


class Client(Base):
    """
    Profile record for a signed-in client.

    The primary key is the identity provider's user id, so a profile can be
    created lazily the first time a principal is seen.
    """

    __tablename__ = "clients"

    id = Column(UUID(), primary_key=True)
    email = Column(String(255), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False, default="Unknown")
    phone = Column(String(50))
    role = Column(String(50), nullable=False, default="client")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
