"""Tests for domain exceptions and their HTTP status mapping."""

import pytest

from sopdesk.core.exception_handlers import status_for
from sopdesk.domain.exceptions import (
    ConflictException,
    ContendedWriteException,
    ForbiddenException,
    InvalidCredentialException,
    KeyFetchException,
    MissingCredentialException,
    ResourceNotFoundException,
    ServiceUnavailableException,
    SopDeskException,
    UpstreamFailureException,
    ValidationException,
)


class TestSopDeskException:
    def test_to_dict_shape(self) -> None:
        exc = SopDeskException("boom", "SOME_CODE", {"k": "v"})
        assert exc.to_dict() == {"error": "SOME_CODE", "message": "boom", "details": {"k": "v"}}

    def test_error_code_defaults_to_class_name(self) -> None:
        assert SopDeskException("x").error_code == "SopDeskException"


class TestSubclasses:
    def test_validation_carries_field(self) -> None:
        exc = ValidationException("name is required", field="name")
        assert exc.error_code == "VALIDATION_ERROR"
        assert exc.details == {"field": "name"}

    def test_not_found_details(self) -> None:
        exc = ResourceNotFoundException("sop", "s1")
        assert exc.details == {"resource_type": "sop", "resource_id": "s1"}
        assert "s1" in exc.message

    def test_key_fetch_is_an_invalid_credential(self) -> None:
        exc = KeyFetchException("connect timeout")
        assert isinstance(exc, InvalidCredentialException)
        assert exc.error_code == "INVALID_CREDENTIAL"
        assert exc.reason == "connect timeout"
        assert "timeout" not in exc.message

    def test_upstream_failure_reason_optional(self) -> None:
        assert UpstreamFailureException("payments").details == {"service": "payments"}
        assert UpstreamFailureException("payments", "503").details["reason"] == "503"


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (MissingCredentialException(), 401),
        (InvalidCredentialException(), 401),
        (ForbiddenException(), 403),
        (ResourceNotFoundException("sop", "x"), 404),
        (ConflictException("employee", "subject_id", "u1"), 409),
        (ContendedWriteException("progress", "e1__s1"), 409),
        (ValidationException("bad"), 400),
        (UpstreamFailureException("certificates"), 502),
        (ServiceUnavailableException("payments"), 503),
    ],
)
def test_status_mapping(exc: SopDeskException, status: int) -> None:
    assert status_for(exc) == status
