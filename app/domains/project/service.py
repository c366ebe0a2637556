"""Project aggregation service.

Builds the denormalized project aggregate: project record, active templates
with their plan and the project's actual phases, team, and statistics.
"""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import TypeVar

from app.domains.project.repository import ProjectRepository
from app.domains.project.statistics import (
    compute_phase_status,
    compute_project_status,
    compute_statistics,
    template_progress,
)
from app.exceptions.project import ProjectNotFoundError
from app.schemas.project import (
    PhaseDetail,
    ProjectAggregate,
    TaskAssignmentDetail,
    TaskDetail,
    TeamMemberDetail,
    TemplateDetail,
    TemplatePhaseDetail,
    TemplateTaskDetail,
    UserSummary,
)
from models import Phase, Project, ProjectTemplate, TeamMember, TemplatePhase

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BranchFailure:
    branch: str
    error: str


@dataclass
class AggregationDiagnostics:
    """Secondary fetches that failed during one aggregation call."""

    project_id: int
    failures: list[BranchFailure] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


class ProjectAggregator:
    """Assemble a ``ProjectAggregate`` from a ``ProjectRepository``.

    A failure on any secondary branch (templates, template phases, phases,
    team) leaves that branch empty and is recorded in ``diagnostics``; only a
    missing or unreadable project record aborts the call.
    """

    def __init__(self, repository: ProjectRepository):
        self.repository = repository
        self.diagnostics: AggregationDiagnostics | None = None

    async def aggregate(
        self,
        project_id: int,
        project: Project | None = None,
        now: datetime | None = None,
    ) -> ProjectAggregate:
        """Build the aggregate for ``project_id``.

        ``project`` may be passed when the record was already read (by the
        access gate) to avoid a second lookup.
        """
        self.diagnostics = AggregationDiagnostics(project_id=project_id)

        if project is None:
            project = await self._load_project(project_id)
        record = self._project_fields(project)
        stored_status = record.pop("stored_status")

        links = await self._fetch_branch(
            "templates",
            lambda: self.repository.get_active_template_links(project_id),
            self._template_shells,
        )
        phases = await self._fetch_branch(
            "phases",
            lambda: self.repository.get_phases(project_id),
            self._phase_details,
        )

        templates = []
        for shell in links:
            template_phases = await self._fetch_branch(
                f"template_phases:{shell['id']}",
                lambda template_id=shell["id"]: self.repository.get_template_phases(template_id),
                self._template_phase_details,
            )
            template = TemplateDetail(
                **shell,
                template_phases=template_phases,
                phases=[phase for phase in phases if phase.template_id == shell["id"]],
            )
            templates.append(
                template.model_copy(
                    update={"completion_percentage": template_progress(template).percentage}
                )
            )

        team = await self._fetch_branch(
            "team",
            lambda: self.repository.get_team(project_id),
            self._team_details,
        )

        all_phases = [phase for template in templates for phase in template.phases]
        computed_status = compute_project_status(all_phases)
        statistics = compute_statistics(templates, now=now)

        logger.info(
            "Aggregated project %s: %d templates, %d phases, %d tasks, %d team members",
            project_id,
            len(templates),
            statistics.total_phases,
            statistics.total_tasks,
            len(team),
        )

        return ProjectAggregate(
            **record,
            status=stored_status or computed_status,
            computed_status=computed_status,
            templates=templates,
            team=team,
            statistics=statistics,
        )

    async def _load_project(self, project_id: int) -> Project:
        try:
            project = await self.repository.get_project(project_id)
        except Exception as e:
            logger.error("Project fetch failed for %s: %s", project_id, str(e))
            raise ProjectNotFoundError() from e
        if project is None:
            raise ProjectNotFoundError()
        return project

    async def _fetch_branch(
        self,
        branch: str,
        fetch: Callable[[], Awaitable[Sequence]],
        convert: Callable[[Sequence], list[T]],
    ) -> list[T]:
        # Rows are converted straight away: recovering from a later failed
        # read expires every ORM instance held by the session.
        try:
            return convert(await fetch())
        except Exception as e:
            project_id = self.diagnostics.project_id
            logger.warning("Fetching %s failed for project %s: %s", branch, project_id, str(e))
            self.diagnostics.failures.append(BranchFailure(branch=branch, error=str(e)))
            await self._recover(branch)
            return []

    async def _recover(self, branch: str) -> None:
        try:
            await self.repository.recover()
        except Exception as e:
            logger.warning("Could not reset data access after %s failure: %s", branch, str(e))

    # Conversion helpers

    @staticmethod
    def _project_fields(project: Project) -> dict:
        return {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "project_type": project.project_type,
            "stored_status": project.status,
            "created_by_user_id": project.created_by_user_id,
            "created_at": project.created_at,
            "updated_at": project.updated_at,
        }

    @staticmethod
    def _template_shells(links: Sequence[ProjectTemplate]) -> list[dict]:
        shells = []
        for link in links:
            template = link.template
            if template is None:
                continue
            shells.append(
                {
                    "id": template.id,
                    "name": template.name,
                    "category": template.category,
                    "description": template.description,
                    "is_active": link.is_active,
                    "added_at": link.added_at,
                }
            )
        return shells

    @staticmethod
    def _phase_details(phases: Sequence[Phase]) -> list[PhaseDetail]:
        details = []
        for phase in sorted(phases, key=lambda p: (p.order, p.id)):
            tasks = [
                TaskDetail(
                    id=task.id,
                    description=task.description,
                    status=task.status,
                    due_date=task.due_date,
                    created_at=task.created_at,
                    assignments=[
                        TaskAssignmentDetail(
                            id=assignment.id,
                            assigned_at=assignment.assigned_at,
                            completed_at=assignment.completed_at,
                            user=UserSummary.model_validate(assignment.user),
                        )
                        for assignment in task.assignments
                        if assignment.user is not None
                    ],
                )
                for task in sorted(phase.tasks, key=lambda t: t.id)
            ]
            computed_status = compute_phase_status(tasks)
            details.append(
                PhaseDetail(
                    id=phase.id,
                    project_id=phase.project_id,
                    template_id=phase.template_id,
                    name=phase.name,
                    order=phase.order,
                    status=phase.status or computed_status,
                    computed_status=computed_status,
                    created_at=phase.created_at,
                    tasks=tasks,
                )
            )
        return details

    @staticmethod
    def _template_phase_details(
        template_phases: Sequence[TemplatePhase],
    ) -> list[TemplatePhaseDetail]:
        return [
            TemplatePhaseDetail(
                id=template_phase.id,
                template_id=template_phase.template_id,
                name=template_phase.name,
                order=template_phase.order,
                created_at=template_phase.created_at,
                template_tasks=[
                    TemplateTaskDetail.model_validate(template_task)
                    for template_task in template_phase.template_tasks
                ],
            )
            for template_phase in sorted(template_phases, key=lambda tp: (tp.order, tp.id))
        ]

    @staticmethod
    def _team_details(members: Sequence[TeamMember]) -> list[TeamMemberDetail]:
        return [
            TeamMemberDetail(
                id=member.id,
                role=member.role,
                added_at=member.added_at,
                user=UserSummary.model_validate(member.user),
            )
            for member in members
            if member.user is not None
        ]
