"""Authorization gate: role checks and tenant ownership checks.

Role failures raise ForbiddenException. Ownership failures raise
ResourceNotFoundException so that records of other tenants are
indistinguishable from missing ones.
"""

from __future__ import annotations

from typing import TypeVar

from sopdesk.domain.caller import Caller, EmployeeCaller, UserCaller
from sopdesk.domain.exceptions import ForbiddenException, ResourceNotFoundException

T = TypeVar("T")


def require_admin(caller: Caller) -> UserCaller:
    """Return caller if it is an admin user; else raise ForbiddenException."""
    if isinstance(caller, UserCaller) and caller.is_admin:
        return caller
    raise ForbiddenException("Admin access required", required_role="admin")


def require_employee(caller: Caller) -> EmployeeCaller:
    """Return caller if it is an employee; else raise ForbiddenException."""
    if isinstance(caller, EmployeeCaller):
        return caller
    raise ForbiddenException("Employee access required", required_role="employee")


def ensure_owned(
    caller: Caller,
    record: T | None,
    resource_type: str,
    resource_id: str,
) -> T:
    """Return record if it exists and belongs to the caller's tenant."""
    if record is None or getattr(record, "owner_id", None) != caller.owner_id:
        raise ResourceNotFoundException(resource_type, resource_id)
    return record
