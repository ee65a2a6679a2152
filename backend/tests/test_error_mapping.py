import pytest
from fastapi import status

from civic.access.errors import (
    ForbiddenError,
    InvalidImpersonationTransitionError,
    InvalidVisibilityShapeError,
    UnauthorizedError,
)
from civic.errors import (
    AuthError,
    ConflictError,
    PermissionError,
    UnprocessableError,
    app_error_for,
    error_payload,
    resolve_error_code,
)


@pytest.mark.parametrize(
    ("domain_error", "app_type", "status_code", "code"),
    [
        (InvalidVisibilityShapeError("window_inverted"), UnprocessableError, 422, "INVALID_VISIBILITY_SHAPE"),
        (UnauthorizedError("role_not_scoped"), AuthError, 401, "UNAUTHORIZED"),
        (ForbiddenError("edit_denied"), PermissionError, 403, "FORBIDDEN"),
        (InvalidImpersonationTransitionError("nested_impersonation"), ConflictError, 409, "INVALID_IMPERSONATION_TRANSITION"),
    ],
)
def test_domain_errors_map_to_http_errors(domain_error, app_type, status_code, code):
    app_error = app_error_for(domain_error)

    assert isinstance(app_error, app_type)
    assert app_error.status_code == status_code
    assert app_error.code == code
    assert app_error.details["reason"] == domain_error.reason


def test_domain_details_are_carried_over():
    error = ForbiddenError("delete_denied", details={"item_id": "item-1"})

    app_error = app_error_for(error)

    assert app_error.details == {"reason": "delete_denied", "item_id": "item-1"}
    assert app_error.message == PermissionError.message


def test_error_payload_shape():
    assert error_payload("FORBIDDEN", "Insufficient permissions", {"reason": "x"}) == {
        "error": {
            "code": "FORBIDDEN",
            "message": "Insufficient permissions",
            "details": {"reason": "x"},
        }
    }


def test_resolve_error_code():
    assert resolve_error_code(status.HTTP_422_UNPROCESSABLE_ENTITY) == "UNPROCESSABLE"
    assert resolve_error_code(status.HTTP_503_SERVICE_UNAVAILABLE) == "INTERNAL_ERROR"
    assert resolve_error_code(418) == "UNKNOWN_ERROR"
