"""Resolved caller identity.

An authenticated subject is resolved to exactly one of two variants:
an employee bound to its owner's tenant, or a user (admin or staff) whose
tenant is its own subject id. Routes match on the variant instead of
repeating lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from sopdesk.domain.enums import UserRole


@dataclass(frozen=True)
class EmployeeCaller:
    """Caller resolved from an Employee record."""

    subject_id: str
    email: str
    owner_id: str
    employee_id: str
    name: str

    @property
    def is_admin(self) -> bool:
        return False


@dataclass(frozen=True)
class UserCaller:
    """Caller resolved from a User record (created lazily with role staff)."""

    subject_id: str
    email: str
    role: UserRole

    @property
    def owner_id(self) -> str:
        """Tenant identifier: a user's tenant is its own subject id."""
        return self.subject_id

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


Caller: TypeAlias = EmployeeCaller | UserCaller
