"""Payment gateway adapter."""

from sopdesk.infrastructure.external.payments.cashfree import (
    CashfreeGateway,
    verify_webhook_signature,
)

__all__ = ["CashfreeGateway", "verify_webhook_signature"]
