"""
Provides the User model: people who can be assigned tasks or join a
project team.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class User(BaseModel):
    """
    Represents a person referenced by task assignments and team membership.

    :ivar name: Display name.
    :type name: str
    :ivar email: Contact email address.
    :type email: str
    """

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)

    assignments = relationship("TaskAssignment", back_populates="user")
    memberships = relationship("TeamMember", back_populates="user")
