"""
Unit tests for application exceptions.
"""

from app.exceptions.base import BaseAppException, InternalServerError
from app.exceptions.project import (
    InvalidProjectIdError,
    ProjectAuthInvalidError,
    ProjectAuthRequiredError,
    ProjectNotFoundError,
)


class TestExceptions:
    """Test cases for exception status codes and detail payloads."""

    def test_base_exception_detail(self):
        exc = BaseAppException("Boom", status_code=418, error_code="TEAPOT", details={"a": 1})

        assert exc.status_code == 418
        assert exc.detail == {
            "message": "Boom",
            "error_code": "TEAPOT",
            "details": {"a": 1},
            "requires_auth": False,
        }

    def test_internal_error_hides_cause(self):
        exc = InternalServerError()

        assert exc.status_code == 500
        assert exc.detail["message"] == "Internal server error"
        assert exc.detail["details"] == {}

    def test_project_errors(self):
        assert InvalidProjectIdError().status_code == 400
        assert InvalidProjectIdError().error_code == "PROJECT_ID_REQUIRED"
        assert ProjectNotFoundError().status_code == 404
        assert ProjectNotFoundError().message == "Project not found"

    def test_auth_errors_flag_requires_auth(self):
        for exc in (ProjectAuthRequiredError(), ProjectAuthInvalidError()):
            assert exc.status_code == 401
            assert exc.requires_auth
            assert exc.detail["requires_auth"] is True

        assert ProjectAuthRequiredError().error_code == "PROJECT_AUTH_REQUIRED"
        assert ProjectAuthInvalidError().error_code == "PROJECT_AUTH_INVALID"
