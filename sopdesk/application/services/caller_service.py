"""Caller resolution: map a verified identity to an Employee or User caller."""

from __future__ import annotations

import logging

from sopdesk.application.dtos.identity import VerifiedIdentity
from sopdesk.application.dtos.user import UserResult
from sopdesk.application.interfaces.repositories import (
    IEmployeeRepository,
    IUserRepository,
)
from sopdesk.application.interfaces.services import IEventPublisher
from sopdesk.domain.caller import Caller, EmployeeCaller, UserCaller
from sopdesk.domain.enums import UserRole
from sopdesk.domain.exceptions import ForbiddenException

logger = logging.getLogger(__name__)


class CallerResolver:
    """Resolve the caller's tenant binding.

    An Employee record for the subject wins: the caller is bound to the
    employee's owner. Otherwise the subject is a User, created with role
    staff on first sight.
    """

    def __init__(
        self,
        employee_repo: IEmployeeRepository,
        user_repo: IUserRepository,
        events: IEventPublisher | None = None,
        admin_emails: set[str] | frozenset[str] = frozenset(),
    ) -> None:
        self.employee_repo = employee_repo
        self.user_repo = user_repo
        self.events = events
        self.admin_emails = {e.lower() for e in admin_emails}

    async def resolve(self, identity: VerifiedIdentity) -> Caller:
        employee = await self.employee_repo.get_by_id(identity.subject_id)
        if employee is not None:
            return EmployeeCaller(
                subject_id=identity.subject_id,
                email=identity.email,
                owner_id=employee.owner_id,
                employee_id=employee.id,
                name=employee.name,
            )
        user = await self.user_repo.get_or_create(identity.subject_id, identity.email)
        return UserCaller(subject_id=user.id, email=identity.email, role=user.role)

    async def register_admin(self, identity: VerifiedIdentity) -> UserResult:
        """Promote the caller's user record to admin.

        Employees cannot register. When an allow-list is configured the
        identity's email must be on it.
        """
        if await self.employee_repo.get_by_id(identity.subject_id) is not None:
            raise ForbiddenException("Employees cannot register as admin")
        if self.admin_emails and identity.email.lower() not in self.admin_emails:
            logger.warning(
                "Admin registration refused: subject_id=%s not on allow-list",
                identity.subject_id,
            )
            raise ForbiddenException("Email is not allowed to register as admin")

        user = await self.user_repo.set_role(identity.subject_id, identity.email, UserRole.ADMIN)
        logger.info("Admin registered: subject_id=%s", user.id)
        if self.events:
            await self.events.publish(user.id, "admin:registered", {"email": user.email})
        return user
