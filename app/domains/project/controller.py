"""Project API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.domains.project.access import AccessGate
from app.domains.project.repository import SQLAlchemyProjectRepository
from app.domains.project.service import ProjectAggregator
from app.exceptions.base import BaseAppException, InternalServerError
from app.exceptions.project import InvalidProjectIdError, ProjectNotFoundError
from app.schemas.project import ProjectDetailResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/projects", tags=["projects"])


def parse_project_id(raw: str) -> int:
    """Blank ids are a bad request; ids that cannot exist are not found."""
    value = (raw or "").strip()
    if not value:
        raise InvalidProjectIdError()
    if not value.isdigit():
        raise ProjectNotFoundError()
    return int(value)


@router.get("/{project_id}", response_model=ProjectDetailResponse)
async def get_project(
    request: Request,
    project_id: str = Path(..., description="Project ID"),
    password: Optional[str] = Query(None, description="Project password, if required"),
    token: Optional[str] = Query(None, description="Project access token, if required"),
    db: AsyncSession = Depends(get_db),
):
    """Get a project's progress aggregate.

    Protected projects answer 401 with ``requiresAuth: true`` until matching
    credentials are supplied.
    """
    pid = parse_project_id(project_id)
    logger.info("Fetching project details for ID: %s", pid)

    try:
        repository = SQLAlchemyProjectRepository(db)
        decision = await AccessGate.from_settings(repository).require(pid, password, token)

        aggregator = ProjectAggregator(repository)
        project = await aggregator.aggregate(pid, project=decision.project)
        if aggregator.diagnostics and aggregator.diagnostics.is_partial:
            logger.warning(
                "Project %s returned with degraded branches: %s",
                pid,
                ", ".join(failure.branch for failure in aggregator.diagnostics.failures),
            )
    except BaseAppException:
        raise
    except Exception as e:
        logger.exception("Error in project details API for %s: %s", pid, str(e))
        raise InternalServerError() from e

    return ProjectDetailResponse(project=project, requires_auth=decision.requires_auth)
