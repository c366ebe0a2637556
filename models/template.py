"""
Template models: the reusable plan a project's phases are instantiated from.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class Template(BaseModel):
    __tablename__ = "templates"

    name = Column(String(255), nullable=False)
    category = Column(String(100), nullable=False, default="General")
    description = Column(Text)

    template_phases = relationship(
        "TemplatePhase",
        back_populates="template",
        cascade="all, delete-orphan",
        order_by=lambda: [TemplatePhase.order, TemplatePhase.id],
    )


class TemplatePhase(BaseModel):
    """A planned stage of a template. ``order`` defines display sequence."""

    __tablename__ = "templatephases"

    template_id = Column(Integer, ForeignKey("templates.id"), nullable=False)
    name = Column(String(255), nullable=False)
    order = Column("phase_order", Integer, nullable=False, default=0)

    template = relationship("Template", back_populates="template_phases")
    template_tasks = relationship(
        "TemplateTask",
        back_populates="template_phase",
        cascade="all, delete-orphan",
        order_by="TemplateTask.id",
    )


class TemplateTask(BaseModel):
    """A planned task. Plan data only, it never carries a status."""

    __tablename__ = "templatetasks"

    template_phase_id = Column(Integer, ForeignKey("templatephases.id"), nullable=False)
    description = Column(Text, nullable=False)

    template_phase = relationship("TemplatePhase", back_populates="template_tasks")
