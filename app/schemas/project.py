"""Project aggregate schemas for response serialization.

The aggregate mirrors the project tree: templates carry both their plan
(``template_phases`` / ``template_tasks``) and the project's actual work
instantiated from that plan (``phases`` / ``tasks``).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .base import CamelSchema


class UserSummary(CamelSchema):
    id: int
    name: str
    email: str


class TaskAssignmentDetail(CamelSchema):
    id: int
    assigned_at: datetime | None = None
    completed_at: datetime | None = None
    user: UserSummary


class TaskDetail(CamelSchema):
    id: int
    description: str
    status: str
    due_date: datetime | None = None
    created_at: datetime | None = None
    assignments: list[TaskAssignmentDetail] = Field(default_factory=list)


class PhaseDetail(CamelSchema):
    """An actual phase of project work.

    ``status`` is the stored value when present, otherwise the computed one;
    ``computed_status`` is always derived from the tasks.
    """

    id: int
    project_id: int
    template_id: int | None = None
    name: str
    order: int
    status: str
    computed_status: str
    created_at: datetime | None = None
    tasks: list[TaskDetail] = Field(default_factory=list)


class TemplateTaskDetail(CamelSchema):
    id: int
    template_phase_id: int
    description: str
    created_at: datetime | None = None


class TemplatePhaseDetail(CamelSchema):
    id: int
    template_id: int
    name: str
    order: int
    created_at: datetime | None = None
    template_tasks: list[TemplateTaskDetail] = Field(default_factory=list)


class TemplateDetail(CamelSchema):
    id: int
    name: str
    category: str
    description: str | None = None
    is_active: bool = True
    added_at: datetime | None = None
    completion_percentage: int = 0
    template_phases: list[TemplatePhaseDetail] = Field(default_factory=list)
    phases: list[PhaseDetail] = Field(default_factory=list)


class TeamMemberDetail(CamelSchema):
    id: int
    role: str
    added_at: datetime | None = None
    user: UserSummary


class ProjectStatistics(CamelSchema):
    """Roll-up counts and percentages derived from an assembled project."""

    total_phases: int = 0
    completed_phases: int = 0
    completion_percentage: int = 0
    total_tasks: int = 0
    completed_tasks: int = 0
    task_completion_percentage: int = 0
    overdue_tasks: int = 0
    total_assignments: int = 0
    completed_assignments: int = 0
    assignment_completion_percentage: int = 0
    total_template_phases: int = 0
    total_template_tasks: int = 0


class PhaseProgress(CamelSchema):
    percentage: int
    completed: int
    total: int
    status: str


class TemplateProgress(CamelSchema):
    percentage: int
    completed_phases: int
    total_phases: int
    completed_tasks: int
    total_tasks: int


class ProjectAggregate(CamelSchema):
    """Denormalized project returned to callers.

    Access-control fields are never part of the aggregate.
    """

    id: int
    name: str
    description: str | None = None
    project_type: str
    status: str
    computed_status: str
    created_by_user_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    templates: list[TemplateDetail] = Field(default_factory=list)
    team: list[TeamMemberDetail] = Field(default_factory=list)
    statistics: ProjectStatistics = Field(default_factory=ProjectStatistics)


class ProjectDetailResponse(CamelSchema):
    project: ProjectAggregate
    requires_auth: bool = False
