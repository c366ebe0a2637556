"""
Models package initialization.
"""

from .base import Base, BaseModel
from .client import Client
from .phase import Phase, Task, TaskAssignment
from .project import Project, ProjectTemplate
from .team import TeamMember
from .template import Template, TemplatePhase, TemplateTask
from .user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Client",
    "Project",
    "ProjectTemplate",
    "Template",
    "TemplatePhase",
    "TemplateTask",
    "Phase",
    "Task",
    "TaskAssignment",
    "TeamMember",
]
