"""
Project model and its link to templates.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel, utcnow


class Project(BaseModel):
    """
    Represents a client project.

    ``password`` and ``token`` are access-control fields; when either is set
    the project can only be viewed by callers presenting matching
    credentials. ``status`` is optional: when it is null the status is
    derived from phase progress.
    """

    __tablename__ = "projects"

    name = Column(String(255), nullable=False)
    description = Column(Text)
    project_type = Column(String(100), nullable=False, default="Standard")
    status = Column(String(50))
    password = Column(String(255))
    token = Column(String(255))
    created_by_user_id = Column(Integer, ForeignKey("users.id"))
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    template_links = relationship(
        "ProjectTemplate", back_populates="project", cascade="all, delete-orphan"
    )
    phases = relationship("Phase", back_populates="project", cascade="all, delete-orphan")
    team = relationship("TeamMember", back_populates="project", cascade="all, delete-orphan")

    @property
    def is_protected(self) -> bool:
        return bool(self.password or self.token)


class ProjectTemplate(BaseModel):
    """Association between a project and a template it follows."""

    __tablename__ = "projecttemplates"

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    template_id = Column(Integer, ForeignKey("templates.id"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    added_at = Column(DateTime(timezone=True), default=utcnow)

    project = relationship("Project", back_populates="template_links")
    template = relationship("Template")
