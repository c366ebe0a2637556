"""
Team membership model.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel, utcnow


class TeamMember(BaseModel):
    __tablename__ = "projectteam"

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    role = Column(String(100), nullable=False, default="Member")
    added_at = Column(DateTime(timezone=True), default=utcnow)

    project = relationship("Project", back_populates="team")
    user = relationship("User", back_populates="memberships")
