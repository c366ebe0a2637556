"""
Actual project work: phases, their tasks and task assignments.

These are the project-specific instances of a template's plan. Task
``status`` is free text, but only "Not Started", "In Progress" and
"Completed" are meaningful to progress aggregation.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel, utcnow


class Phase(BaseModel):
    __tablename__ = "phases"

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    template_id = Column(Integer, ForeignKey("templates.id"))
    name = Column(String(255), nullable=False)
    order = Column("phase_order", Integer, nullable=False, default=0)
    status = Column(String(50))

    project = relationship("Project", back_populates="phases")
    tasks = relationship(
        "Task", back_populates="phase", cascade="all, delete-orphan", order_by="Task.id"
    )


class Task(BaseModel):
    __tablename__ = "tasks"

    phase_id = Column(Integer, ForeignKey("phases.id"), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(50), nullable=False, default="Not Started")
    due_date = Column(DateTime(timezone=True))

    phase = relationship("Phase", back_populates="tasks")
    assignments = relationship(
        "TaskAssignment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskAssignment.id",
    )


class TaskAssignment(BaseModel):
    """Binds a task to a user. ``completed_at`` is null until the user is done."""

    __tablename__ = "taskassignments"

    task_id = Column(Integer, ForeignKey("tasks.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    assigned_at = Column(DateTime(timezone=True), default=utcnow)
    completed_at = Column(DateTime(timezone=True))

    task = relationship("Task", back_populates="assignments")
    user = relationship("User", back_populates="assignments")
