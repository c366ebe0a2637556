"""Progress statistics for an assembled project tree.

Everything here is a pure function of its input, so the API and any consumer
holding a fetched aggregate derive identical numbers. The only input not
taken from the tree is the clock used for ``overdue_tasks``.
"""

import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from app.schemas.project import (
    PhaseDetail,
    PhaseProgress,
    ProjectStatistics,
    TaskDetail,
    TemplateDetail,
    TemplateProgress,
)

NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
COMPLETED = "Completed"


def completion_percentage(completed: int, total: int) -> int:
    """Whole percentage of ``completed`` over ``total``, rounding halves up.

    Returns 0 when ``total`` is 0.
    """
    if total <= 0:
        return 0
    return math.floor((completed / total) * 100 + 0.5)


def _rollup_status(statuses: Sequence[str]) -> str:
    if not statuses:
        return NOT_STARTED
    completed = sum(1 for status in statuses if status == COMPLETED)
    if completed == len(statuses):
        return COMPLETED
    if completed > 0 or any(status == IN_PROGRESS for status in statuses):
        return IN_PROGRESS
    return NOT_STARTED


def compute_phase_status(tasks: Sequence[TaskDetail]) -> str:
    return _rollup_status([task.status for task in tasks])


def compute_project_status(phases: Sequence[PhaseDetail]) -> str:
    """Project status from phase progress, using each phase's computed status."""
    return _rollup_status([compute_phase_status(phase.tasks) for phase in phases])


def phase_progress(phase: PhaseDetail) -> PhaseProgress:
    total = len(phase.tasks)
    completed = sum(1 for task in phase.tasks if task.status == COMPLETED)
    return PhaseProgress(
        percentage=completion_percentage(completed, total),
        completed=completed,
        total=total,
        status=compute_phase_status(phase.tasks),
    )


def template_progress(template: TemplateDetail) -> TemplateProgress:
    """Progress of one template's actual phases; the percentage is task based."""
    tasks = [task for phase in template.phases for task in phase.tasks]
    completed_tasks = sum(1 for task in tasks if task.status == COMPLETED)
    completed_phases = sum(
        1 for phase in template.phases if compute_phase_status(phase.tasks) == COMPLETED
    )
    return TemplateProgress(
        percentage=completion_percentage(completed_tasks, len(tasks)),
        completed_phases=completed_phases,
        total_phases=len(template.phases),
        completed_tasks=completed_tasks,
        total_tasks=len(tasks),
    )


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from the store are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_overdue(task: TaskDetail, now: datetime) -> bool:
    if task.due_date is None or task.status == COMPLETED:
        return False
    return _as_utc(task.due_date) < _as_utc(now)


def compute_statistics(
    templates: Iterable[TemplateDetail], now: datetime | None = None
) -> ProjectStatistics:
    """Roll up phase, task and assignment counts across all templates.

    Actual progress comes from each template's ``phases``; the planned scope
    (``total_template_phases`` / ``total_template_tasks``) comes from its
    ``template_phases``.
    """
    now = now or datetime.now(timezone.utc)
    templates = list(templates)
    phases = [phase for template in templates for phase in template.phases]
    tasks = [task for phase in phases for task in phase.tasks]
    assignments = [assignment for task in tasks for assignment in task.assignments]

    completed_phases = sum(1 for phase in phases if compute_phase_status(phase.tasks) == COMPLETED)
    completed_tasks = sum(1 for task in tasks if task.status == COMPLETED)
    completed_assignments = sum(
        1 for assignment in assignments if assignment.completed_at is not None
    )

    return ProjectStatistics(
        total_phases=len(phases),
        completed_phases=completed_phases,
        completion_percentage=completion_percentage(completed_phases, len(phases)),
        total_tasks=len(tasks),
        completed_tasks=completed_tasks,
        task_completion_percentage=completion_percentage(completed_tasks, len(tasks)),
        overdue_tasks=sum(1 for task in tasks if is_overdue(task, now)),
        total_assignments=len(assignments),
        completed_assignments=completed_assignments,
        assignment_completion_percentage=completion_percentage(
            completed_assignments, len(assignments)
        ),
        total_template_phases=sum(len(template.template_phases) for template in templates),
        total_template_tasks=sum(
            len(template_phase.template_tasks)
            for template in templates
            for template_phase in template.template_phases
        ),
    )
