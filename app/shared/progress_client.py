"""HTTP client for project progress.

Consumers that hold a fetched aggregate re-derive statistics locally with
the same ``compute_statistics`` the API uses, so both sides agree on every
number for the same tree.
"""

import logging
from datetime import datetime
from typing import Optional

import httpx

from app.domains.project.statistics import compute_statistics
from app.schemas.project import ProjectAggregate, ProjectStatistics

logger = logging.getLogger(__name__)


class ProjectAccessError(Exception):
    """Raised when the API refuses or fails a project request."""

    def __init__(self, status_code: int, message: str, requires_auth: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.requires_auth = requires_auth


class ProjectProgressClient:
    """Fetch project aggregates from the API.

    :ivar client: The underlying ``httpx.AsyncClient``; pass one in to share
        a connection pool or to target an in-process app in tests.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> "ProjectProgressClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def fetch_project(
        self,
        project_id: int | str,
        password: Optional[str] = None,
        token: Optional[str] = None,
    ) -> tuple[ProjectAggregate, bool]:
        """Return the project aggregate and the ``requiresAuth`` flag.

        Raises:
            ProjectAccessError: On any non-success response.
        """
        params = {}
        if password:
            params["password"] = password
        if token:
            params["token"] = token

        response = await self.client.get(f"/api/projects/{project_id}", params=params)
        if response.is_error:
            raise self._access_error(response)

        body = response.json()
        project = ProjectAggregate.model_validate(body["project"])
        return project, bool(body.get("requiresAuth", False))

    @staticmethod
    def _access_error(response: httpx.Response) -> ProjectAccessError:
        # Proxies in front of the API may answer with a non-JSON error page.
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        message = (
            body.get("error")
            or body.get("message")
            or response.reason_phrase
            or "Failed to fetch project"
        )
        return ProjectAccessError(
            response.status_code, message, requires_auth=bool(body.get("requiresAuth"))
        )

    async def fetch_statistics(
        self,
        project_id: int | str,
        password: Optional[str] = None,
        token: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ProjectStatistics:
        """Fetch a project and recompute its statistics from the returned tree."""
        project, _ = await self.fetch_project(project_id, password=password, token=token)
        statistics = compute_statistics(project.templates, now=now)
        if statistics != project.statistics:
            logger.debug(
                "Recomputed statistics for project %s differ from the server's copy", project_id
            )
        return statistics
