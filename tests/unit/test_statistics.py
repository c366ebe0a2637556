"""
Unit tests for progress statistics.

Covers the phase/project status roll-up, percentage rounding and the
project statistics computed from an assembled template tree.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.domains.project.statistics import (
    COMPLETED,
    IN_PROGRESS,
    NOT_STARTED,
    completion_percentage,
    compute_phase_status,
    compute_project_status,
    compute_statistics,
    is_overdue,
    phase_progress,
    template_progress,
)
from app.schemas.project import (
    PhaseDetail,
    ProjectStatistics,
    TaskAssignmentDetail,
    TaskDetail,
    TemplateDetail,
    TemplatePhaseDetail,
    TemplateTaskDetail,
    UserSummary,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
USER = UserSummary(id=1, name="Ana", email="ana@example.com")


def make_task(task_id, status, due_date=None, assignments=()):
    return TaskDetail(
        id=task_id,
        description=f"Task {task_id}",
        status=status,
        due_date=due_date,
        assignments=list(assignments),
    )


def make_assignment(assignment_id, completed=False):
    return TaskAssignmentDetail(
        id=assignment_id,
        assigned_at=NOW - timedelta(days=3),
        completed_at=NOW - timedelta(days=1) if completed else None,
        user=USER,
    )


def make_phase(phase_id, tasks, template_id=1, order=1, status=None):
    computed = compute_phase_status(tasks)
    return PhaseDetail(
        id=phase_id,
        project_id=1,
        template_id=template_id,
        name=f"Phase {phase_id}",
        order=order,
        status=status or computed,
        computed_status=computed,
        tasks=tasks,
    )


def make_template(template_id=1, phases=(), plan=()):
    """``plan`` is a list of template-task counts, one per template phase."""
    template_phases = [
        TemplatePhaseDetail(
            id=index + 1,
            template_id=template_id,
            name=f"Planned {index + 1}",
            order=index + 1,
            template_tasks=[
                TemplateTaskDetail(id=n, template_phase_id=index + 1, description=f"Plan {n}")
                for n in range(count)
            ],
        )
        for index, count in enumerate(plan)
    ]
    return TemplateDetail(
        id=template_id,
        name=f"Template {template_id}",
        category="Development",
        template_phases=template_phases,
        phases=list(phases),
    )


class TestCompletionPercentage:
    """Test cases for completion_percentage."""

    def test_zero_total_is_zero(self):
        assert completion_percentage(0, 0) == 0

    def test_exact_values(self):
        assert completion_percentage(1, 2) == 50
        assert completion_percentage(3, 3) == 100

    def test_halves_round_up(self):
        # 1/8 = 12.5%
        assert completion_percentage(1, 8) == 13
        # 5/8 = 62.5%
        assert completion_percentage(5, 8) == 63

    def test_thirds_round_to_nearest(self):
        assert completion_percentage(1, 3) == 33
        assert completion_percentage(2, 3) == 67


class TestPhaseStatus:
    """Test cases for the phase status roll-up."""

    def test_no_tasks_is_not_started(self):
        assert compute_phase_status([]) == NOT_STARTED

    def test_all_completed_is_completed(self):
        tasks = [make_task(1, COMPLETED), make_task(2, COMPLETED)]
        assert compute_phase_status(tasks) == COMPLETED

    def test_some_completed_is_in_progress(self):
        tasks = [make_task(1, COMPLETED), make_task(2, NOT_STARTED)]
        assert compute_phase_status(tasks) == IN_PROGRESS

    def test_any_in_progress_is_in_progress(self):
        tasks = [make_task(1, IN_PROGRESS), make_task(2, NOT_STARTED)]
        assert compute_phase_status(tasks) == IN_PROGRESS

    def test_nothing_started_is_not_started(self):
        tasks = [make_task(1, NOT_STARTED), make_task(2, NOT_STARTED)]
        assert compute_phase_status(tasks) == NOT_STARTED

    def test_unknown_status_does_not_count_as_completed(self):
        tasks = [make_task(1, COMPLETED), make_task(2, "Blocked")]
        assert compute_phase_status(tasks) == IN_PROGRESS

    @pytest.mark.parametrize(
        "statuses",
        [
            [COMPLETED],
            [COMPLETED, IN_PROGRESS],
            [NOT_STARTED, IN_PROGRESS, COMPLETED],
            [NOT_STARTED],
            ["completed"],
        ],
    )
    def test_completed_iff_nonempty_and_all_completed(self, statuses):
        tasks = [make_task(i, status) for i, status in enumerate(statuses)]
        expected = all(status == COMPLETED for status in statuses)
        assert (compute_phase_status(tasks) == COMPLETED) is expected


class TestProjectStatus:
    """Test cases for the project status roll-up."""

    def test_no_phases_is_not_started(self):
        assert compute_project_status([]) == NOT_STARTED

    def test_all_phases_complete(self):
        phases = [make_phase(1, [make_task(1, COMPLETED)]), make_phase(2, [make_task(2, COMPLETED)])]
        assert compute_project_status(phases) == COMPLETED

    def test_uses_computed_phase_status_not_stored(self):
        # Stored status claims completion but the tasks disagree.
        phase = make_phase(1, [make_task(1, NOT_STARTED)], status=COMPLETED)
        assert compute_project_status([phase]) == NOT_STARTED

    def test_empty_phase_keeps_project_in_progress(self):
        phases = [make_phase(1, [make_task(1, COMPLETED)]), make_phase(2, [])]
        assert compute_project_status(phases) == IN_PROGRESS


class TestProgressHelpers:
    """Test cases for phase_progress and template_progress."""

    def test_phase_progress(self):
        phase = make_phase(1, [make_task(1, COMPLETED), make_task(2, IN_PROGRESS)])

        progress = phase_progress(phase)

        assert progress.percentage == 50
        assert progress.completed == 1
        assert progress.total == 2
        assert progress.status == IN_PROGRESS

    def test_template_progress_is_task_based(self):
        phases = [
            make_phase(1, [make_task(1, COMPLETED)]),
            make_phase(2, [make_task(2, COMPLETED), make_task(3, NOT_STARTED), make_task(4, NOT_STARTED)]),
        ]
        progress = template_progress(make_template(phases=phases))

        # 2 of 4 tasks, although only 1 of 2 phases is complete
        assert progress.percentage == 50
        assert progress.completed_phases == 1
        assert progress.total_phases == 2
        assert progress.completed_tasks == 2
        assert progress.total_tasks == 4

    def test_template_without_tasks_is_zero_percent(self):
        progress = template_progress(make_template(phases=[make_phase(1, [])]))

        assert progress.percentage == 0
        assert progress.total_tasks == 0


class TestOverdue:
    """Test cases for is_overdue."""

    def test_past_due_and_open_is_overdue(self):
        assert is_overdue(make_task(1, IN_PROGRESS, due_date=NOW - timedelta(hours=1)), NOW)

    def test_completed_is_never_overdue(self):
        assert not is_overdue(make_task(1, COMPLETED, due_date=NOW - timedelta(days=5)), NOW)

    def test_future_due_date(self):
        assert not is_overdue(make_task(1, NOT_STARTED, due_date=NOW + timedelta(days=1)), NOW)

    def test_no_due_date(self):
        assert not is_overdue(make_task(1, NOT_STARTED), NOW)

    def test_naive_due_date_treated_as_utc(self):
        naive = (NOW - timedelta(minutes=1)).replace(tzinfo=None)
        assert is_overdue(make_task(1, NOT_STARTED, due_date=naive), NOW)


class TestComputeStatistics:
    """Test cases for compute_statistics."""

    def test_empty_project(self):
        assert compute_statistics([], now=NOW) == ProjectStatistics()

    def test_template_with_no_tasks_has_zero_percentages(self):
        statistics = compute_statistics([make_template(phases=[make_phase(1, [])])], now=NOW)

        assert statistics.total_phases == 1
        assert statistics.completed_phases == 0
        assert statistics.completion_percentage == 0
        assert statistics.task_completion_percentage == 0
        assert statistics.assignment_completion_percentage == 0

    def test_single_template_example(self):
        phase = make_phase(1, [make_task(1, COMPLETED), make_task(2, IN_PROGRESS)])
        template = make_template(phases=[phase], plan=[2])

        statistics = compute_statistics([template], now=NOW)

        assert statistics.total_tasks == 2
        assert statistics.completed_tasks == 1
        assert statistics.task_completion_percentage == 50
        assert statistics.total_phases == 1
        assert statistics.completed_phases == 0
        assert statistics.completion_percentage == 0
        assert statistics.total_template_phases == 1
        assert statistics.total_template_tasks == 2

    def test_counts_across_templates(self):
        first = make_template(
            template_id=1,
            phases=[
                make_phase(
                    1,
                    [
                        make_task(1, COMPLETED, assignments=[make_assignment(1, completed=True)]),
                        make_task(
                            2,
                            IN_PROGRESS,
                            due_date=NOW - timedelta(days=2),
                            assignments=[make_assignment(2), make_assignment(3, completed=True)],
                        ),
                    ],
                )
            ],
            plan=[2, 1],
        )
        second = make_template(
            template_id=2,
            phases=[
                make_phase(
                    2,
                    [make_task(3, COMPLETED, due_date=NOW - timedelta(days=2))],
                    template_id=2,
                )
            ],
            plan=[3],
        )

        statistics = compute_statistics([first, second], now=NOW)

        assert statistics.total_phases == 2
        assert statistics.completed_phases == 1
        assert statistics.completion_percentage == 50
        assert statistics.total_tasks == 3
        assert statistics.completed_tasks == 2
        assert statistics.task_completion_percentage == 67
        assert statistics.overdue_tasks == 1
        assert statistics.total_assignments == 3
        assert statistics.completed_assignments == 2
        assert statistics.assignment_completion_percentage == 67
        assert statistics.total_template_phases == 3
        assert statistics.total_template_tasks == 6

    def test_completed_phases_ignore_stored_status(self):
        phase = make_phase(1, [make_task(1, IN_PROGRESS)], status=COMPLETED)

        statistics = compute_statistics([make_template(phases=[phase])], now=NOW)

        assert statistics.completed_phases == 0

    def test_plan_is_independent_of_progress(self):
        statistics = compute_statistics([make_template(plan=[4, 0, 2])], now=NOW)

        assert statistics.total_phases == 0
        assert statistics.total_tasks == 0
        assert statistics.total_template_phases == 3
        assert statistics.total_template_tasks == 6

    def test_recomputing_from_serialized_tree_agrees(self):
        phase = make_phase(
            1,
            [
                make_task(1, COMPLETED, assignments=[make_assignment(1, completed=True)]),
                make_task(2, NOT_STARTED, due_date=NOW - timedelta(days=1)),
            ],
        )
        templates = [make_template(phases=[phase], plan=[2])]

        server_side = compute_statistics(templates, now=NOW)
        payload = [template.model_dump(mode="json", by_alias=True) for template in templates]
        client_side = compute_statistics(
            [TemplateDetail.model_validate(item) for item in payload], now=NOW
        )

        assert client_side == server_side
        assert client_side.model_dump_json(by_alias=True) == server_side.model_dump_json(
            by_alias=True
        )

    def test_serialized_field_names(self):
        dumped = ProjectStatistics().model_dump(by_alias=True)

        assert set(dumped) == {
            "totalPhases",
            "completedPhases",
            "completionPercentage",
            "totalTasks",
            "completedTasks",
            "taskCompletionPercentage",
            "overdueTasks",
            "totalAssignments",
            "completedAssignments",
            "assignmentCompletionPercentage",
            "totalTemplatePhases",
            "totalTemplateTasks",
        }
