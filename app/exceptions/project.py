"""Project-related exceptions."""

from .base import BaseAppException

AUTH_REQUIRED_MESSAGE = "requires authentication"
AUTH_INVALID_MESSAGE = "invalid credentials"


class InvalidProjectIdError(BaseAppException):
    """Raised when the request carries no usable project id."""

    def __init__(self, message: str = "Project ID is required"):
        super().__init__(message=message, status_code=400, error_code="PROJECT_ID_REQUIRED")


class ProjectNotFoundError(BaseAppException):
    """Raised when a project does not exist."""

    def __init__(self, message: str = "Project not found"):
        super().__init__(message=message, status_code=404, error_code="PROJECT_NOT_FOUND")


class ProjectAuthRequiredError(BaseAppException):
    """Raised when a protected project is requested without credentials."""

    def __init__(self, message: str = AUTH_REQUIRED_MESSAGE):
        super().__init__(
            message=message,
            status_code=401,
            error_code="PROJECT_AUTH_REQUIRED",
            requires_auth=True,
        )


class ProjectAuthInvalidError(BaseAppException):
    """Raised when supplied project credentials do not match.

    The message is the same whichever of password or token failed.
    """

    def __init__(self, message: str = AUTH_INVALID_MESSAGE):
        super().__init__(
            message=message,
            status_code=401,
            error_code="PROJECT_AUTH_INVALID",
            requires_auth=True,
        )
