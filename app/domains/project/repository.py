"""Read-only data access for the project tree.

The aggregator only talks to ``ProjectRepository``; how the tree is fetched
(one eager-loading query per level here, or per-entity lookups elsewhere) is
an implementation detail that must not change the assembled result.
"""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload

from models import (
    Phase,
    Project,
    ProjectTemplate,
    Task,
    TaskAssignment,
    TeamMember,
    TemplatePhase,
)


class ProjectRepository(Protocol):
    """Queries the project aggregate is built from."""

    async def get_project(self, project_id: int) -> Project | None: ...

    async def get_active_template_links(self, project_id: int) -> Sequence[ProjectTemplate]:
        """Active links, each with ``template`` loaded."""
        ...

    async def get_phases(self, project_id: int) -> Sequence[Phase]:
        """Phases ordered by ``order`` then id, with tasks, assignments and users loaded."""
        ...

    async def get_template_phases(self, template_id: int) -> Sequence[TemplatePhase]:
        """Template phases ordered by ``order`` then id, with template tasks loaded."""
        ...

    async def get_team(self, project_id: int) -> Sequence[TeamMember]:
        """Team members with ``user`` loaded."""
        ...

    async def recover(self) -> None:
        """Reset connection state after a failed read so later reads can run."""
        ...


class SQLAlchemyProjectRepository:
    """``ProjectRepository`` backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_project(self, project_id: int) -> Project | None:
        stmt = select(Project).where(Project.id == project_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_active_template_links(self, project_id: int) -> Sequence[ProjectTemplate]:
        stmt = (
            select(ProjectTemplate)
            .options(selectinload(ProjectTemplate.template))
            .where(
                and_(
                    ProjectTemplate.project_id == project_id,
                    ProjectTemplate.is_active.is_(True),
                )
            )
            .order_by(ProjectTemplate.id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_phases(self, project_id: int) -> Sequence[Phase]:
        stmt = (
            select(Phase)
            .options(
                selectinload(Phase.tasks)
                .selectinload(Task.assignments)
                .selectinload(TaskAssignment.user)
            )
            .where(Phase.project_id == project_id)
            .order_by(Phase.order, Phase.id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_template_phases(self, template_id: int) -> Sequence[TemplatePhase]:
        stmt = (
            select(TemplatePhase)
            .options(selectinload(TemplatePhase.template_tasks))
            .where(TemplatePhase.template_id == template_id)
            .order_by(TemplatePhase.order, TemplatePhase.id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_team(self, project_id: int) -> Sequence[TeamMember]:
        stmt = (
            select(TeamMember)
            .options(selectinload(TeamMember.user))
            .where(TeamMember.project_id == project_id)
            .order_by(TeamMember.id)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def recover(self) -> None:
        await self.db.rollback()
