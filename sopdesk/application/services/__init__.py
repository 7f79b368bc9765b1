"""Application services: caller resolution and authorization checks."""

from sopdesk.application.services.authorization_service import (
    ensure_owned,
    require_admin,
    require_employee,
)
from sopdesk.application.services.caller_service import CallerResolver

__all__ = ["CallerResolver", "ensure_owned", "require_admin", "require_employee"]
