"""Error types raised by use cases, repositories and integrations.

Each carries a stable error_code; core.exception_handlers turns the code
into an HTTP status and the exception into a JSON body.
"""

from typing import Any


class SopDeskException(Exception):
    """Root of the sopdesk error hierarchy.

    Attributes:
        message: Text safe to show to the client.
        error_code: Stable code clients can branch on.
        details: Structured context (field name, resource id, service).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SopDeskException):
    """Raised when input validation fails (e.g. missing or malformed field)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class MissingCredentialException(SopDeskException):
    """Raised when a request carries no bearer credential."""

    def __init__(self, message: str = "Missing token") -> None:
        super().__init__(message, "MISSING_CREDENTIAL")


class InvalidCredentialException(SopDeskException):
    """Raised when a bearer credential fails verification (signature, issuer, audience, expiry)."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message, "INVALID_CREDENTIAL")


class KeyFetchException(InvalidCredentialException):
    """Raised when the identity provider's public keys cannot be fetched.

    Surfaced to callers as an invalid credential; logged distinctly.
    """

    def __init__(self, reason: str) -> None:
        super().__init__("Invalid token")
        self.reason = reason


class ForbiddenException(SopDeskException):
    """Raised when the caller's role does not allow the operation."""

    def __init__(self, message: str = "Forbidden", required_role: str | None = None) -> None:
        """Initialize with message and optional role requirement.

        Args:
            message: Human-readable message.
            required_role: Role the route requires (e.g. 'admin', 'employee').
        """
        details = {"required_role": required_role} if required_role else {}
        super().__init__(message, "FORBIDDEN", details)


class ResourceNotFoundException(SopDeskException):
    """Raised when a requested resource is absent or owned by another tenant.

    The two cases are intentionally indistinguishable to the caller.
    """

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(SopDeskException):
    """Raised when creating a record whose unique key already exists."""

    def __init__(self, resource_type: str, key: str, value: str) -> None:
        super().__init__(
            f"{resource_type} with {key} '{value}' already exists",
            "CONFLICT",
            {"resource_type": resource_type, "key": key},
        )


class UpstreamFailureException(SopDeskException):
    """Raised when an external collaborator (payment gateway, certificate or media service) fails."""

    def __init__(self, service: str, reason: str | None = None) -> None:
        """Initialize with the failing service name.

        Args:
            service: Collaborator name (e.g. 'payments', 'certificates').
            reason: Optional short reason; never includes upstream secrets.
        """
        details: dict[str, Any] = {"service": service}
        if reason:
            details["reason"] = reason
        super().__init__(f"Upstream service failed: {service}", "UPSTREAM_FAILURE", details)


class ServiceUnavailableException(SopDeskException):
    """Raised when an optional integration is not configured for this deployment."""

    def __init__(self, capability: str) -> None:
        super().__init__(
            f"{capability} is not configured",
            "SERVICE_UNAVAILABLE",
            {"capability": capability},
        )


class ContendedWriteException(SopDeskException):
    """Raised when a conditional write keeps losing to concurrent writers; safe to retry."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} '{resource_id}' is being modified concurrently, retry the request",
            "CONTENDED_WRITE",
            {"resource_type": resource_type, "resource_id": resource_id, "retryable": True},
        )
