"""Access gate for project aggregates.

A project is public unless it carries a ``password`` and/or a ``token``.
Each non-empty field must be matched exactly by the caller.
"""

import logging
from dataclasses import dataclass

from app.core.config import settings
from app.domains.project.repository import ProjectRepository
from app.exceptions.project import (
    AUTH_INVALID_MESSAGE,
    AUTH_REQUIRED_MESSAGE,
    ProjectAuthInvalidError,
    ProjectAuthRequiredError,
    ProjectNotFoundError,
)
from models import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessDecision:
    authorized: bool
    requires_auth: bool
    error: str | None = None
    project: Project | None = None


class AccessGate:
    """Decide whether a caller may view a project.

    ``bypass_password`` / ``bypass_token`` form an operational override pair
    that opens any project; it is disabled unless both are configured.
    """

    def __init__(
        self,
        repository: ProjectRepository,
        bypass_password: str | None = None,
        bypass_token: str | None = None,
    ):
        self.repository = repository
        self.bypass_password = bypass_password
        self.bypass_token = bypass_token

    @classmethod
    def from_settings(cls, repository: ProjectRepository) -> "AccessGate":
        """Build a gate from settings. The override pair is never honoured in production."""
        if settings.is_production:
            if settings.has_access_bypass:
                logger.error("Access bypass credentials are set in production; ignoring them")
            return cls(repository)
        return cls(
            repository,
            bypass_password=settings.access_bypass_password,
            bypass_token=settings.access_bypass_token,
        )

    async def authorize(
        self,
        project_id: int,
        password: str | None = None,
        token: str | None = None,
    ) -> AccessDecision:
        """Classify a request for ``project_id``.

        Raises:
            ProjectNotFoundError: If the project does not exist.
        """
        try:
            project = await self.repository.get_project(project_id)
        except Exception as e:
            logger.error("Project lookup failed during access check for %s: %s", project_id, str(e))
            raise ProjectNotFoundError() from e
        if project is None:
            raise ProjectNotFoundError()

        # Empty query parameters count as not supplied.
        password = password or None
        token = token or None

        if not project.is_protected:
            return AccessDecision(authorized=True, requires_auth=False, project=project)

        if self._is_bypass(password, token):
            logger.warning("Access bypass credentials used for project %s", project_id)
            return AccessDecision(authorized=True, requires_auth=True, project=project)

        if password is None and token is None:
            return AccessDecision(
                authorized=False, requires_auth=True, error=AUTH_REQUIRED_MESSAGE
            )

        # Empty stored values count as unset.
        stored_password = project.password or None
        stored_token = project.token or None
        password_ok = stored_password is None or password == stored_password
        token_ok = stored_token is None or token == stored_token
        if password_ok and token_ok:
            return AccessDecision(authorized=True, requires_auth=True, project=project)

        logger.info("Rejected credentials for project %s", project_id)
        return AccessDecision(authorized=False, requires_auth=True, error=AUTH_INVALID_MESSAGE)

    async def require(
        self,
        project_id: int,
        password: str | None = None,
        token: str | None = None,
    ) -> AccessDecision:
        """Like ``authorize`` but raise when access is refused."""
        decision = await self.authorize(project_id, password, token)
        if decision.authorized:
            return decision
        if decision.error == AUTH_REQUIRED_MESSAGE:
            raise ProjectAuthRequiredError()
        raise ProjectAuthInvalidError()

    def _is_bypass(self, password: str | None, token: str | None) -> bool:
        if not (self.bypass_password and self.bypass_token):
            return False
        return password == self.bypass_password and token == self.bypass_token
