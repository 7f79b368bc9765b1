"""Service interfaces (ports) for external collaborators.

Identity verification, managed identity administration, payments,
certificate rendering, media signing and domain event publication.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from sopdesk.application.dtos.identity import VerifiedIdentity
    from sopdesk.application.dtos.subscription import PaymentOrder


class ITokenVerifier(Protocol):
    """Verifies a bearer credential against the identity provider."""

    async def verify(self, token: str) -> VerifiedIdentity:
        """Return the verified identity or raise InvalidCredentialException."""


class IManagedIdentity(Protocol):
    """Identity-provider admin operations (optional capability)."""

    async def get_uid_by_email(self, email: str) -> str | None:
        """Return the subject id registered for email, or None."""

    async def create_user(self, email: str, password: str, display_name: str) -> str:
        """Create an identity; return its subject id."""

    async def delete_user(self, uid: str) -> None:
        """Delete an identity (used to roll back a failed employee creation)."""


class IPaymentGateway(Protocol):
    """Payment gateway order creation (optional capability)."""

    async def create_order(
        self,
        order_id: str,
        amount: float,
        customer_id: str,
        customer_email: str,
    ) -> PaymentOrder:
        """Create an order; raise UpstreamFailureException on gateway errors."""


class ICertificateRenderer(Protocol):
    """Produces a completion certificate and returns a retrievable URL (optional capability)."""

    async def render(
        self,
        employee_name: str,
        sop_title: str,
        completed_at: datetime,
        reference: str,
    ) -> str:
        """Render and return the certificate URL; raise UpstreamFailureException on failure."""


class IMediaSigner(Protocol):
    """Issues signed direct-upload parameters for media storage (optional capability)."""

    async def sign_upload(self, owner_id: str, public_id: str | None = None) -> dict[str, Any]:
        """Return the presigned URL and form fields the client posts with its upload."""


class IEventPublisher(Protocol):
    """Best-effort domain event publication (never fails the caller)."""

    async def publish(
        self, owner_id: str, event_type: str, payload: dict[str, Any] | None = None
    ) -> None:
        """Deliver event to subscribers; delivery failures are isolated."""
