"""Error Hierarchy — verifies codes, statuses and the response envelope."""

from shelterhub.core.errors import (
    AccessDeniedError, AuthenticationError, DatabaseError, ErrorContext,
    ResourceNotFoundError, ValidationFailedError,
)


def test_access_denied_and_not_found_are_distinct():
    denied = AccessDeniedError()
    missing = ResourceNotFoundError("Group", 7)
    assert (denied.http_status, denied.code) == (403, "ACCESS_DENIED")
    assert (missing.http_status, missing.code) == (404, "RESOURCE_NOT_FOUND")


def test_authentication_error_is_401():
    assert AuthenticationError().http_status == 401


def test_envelope_shape():
    body = AccessDeniedError("nope", ErrorContext(user_id=1, group_id=2)).to_response()
    error = body["error"]
    assert error["code"] == "ACCESS_DENIED"
    assert error["message"] == "nope"
    assert error["category"] == "authorization"
    assert "timestamp" in error


def test_validation_error_carries_details():
    body = ValidationFailedError("bad", field="tag_ids", details={"x": 1}).to_response()
    assert body["error"]["field"] == "tag_ids"
    assert body["error"]["details"] == {"x": 1}


def test_database_error_message_is_generic():
    err = DatabaseError("Database operation failed", "query")
    assert err.http_status == 503
    assert "SELECT" not in err.to_response()["error"]["message"]
