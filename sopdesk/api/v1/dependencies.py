"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the caller and the application services.
Services are built per request from the Capabilities stored on app.state
by the lifespan; routes depend only on these providers.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sopdesk.application.dtos.identity import VerifiedIdentity
from sopdesk.application.services.authorization_service import (
    require_admin,
    require_employee,
)
from sopdesk.application.services.caller_service import CallerResolver
from sopdesk.application.use_cases import (
    EmployeeService,
    SettingsService,
    SopCompletionService,
    SopService,
    StatsService,
    SubscriptionService,
    SystemLogService,
    TrainingService,
)
from sopdesk.core.capabilities import Capabilities
from sopdesk.core.config import Settings, get_settings
from sopdesk.domain.caller import Caller, EmployeeCaller, UserCaller
from sopdesk.domain.exceptions import (
    InvalidCredentialException,
    MissingCredentialException,
    ServiceUnavailableException,
)

_bearer = HTTPBearer(auto_error=False)


def get_capabilities(request: Request) -> Capabilities:
    caps = getattr(request.app.state, "capabilities", None)
    if caps is None:
        raise ServiceUnavailableException("record store")
    return caps


CapabilitiesDep = Annotated[Capabilities, Depends(get_capabilities)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_caller_resolver(caps: CapabilitiesDep, settings: SettingsDep) -> CallerResolver:
    return CallerResolver(
        caps.employees,
        caps.users,
        events=caps.events,
        admin_emails=settings.admin_emails,
    )


async def get_verified_identity(
    caps: CapabilitiesDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> VerifiedIdentity:
    """Verify the Authorization: Bearer credential. No header -> MissingCredential."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise MissingCredentialException()
    token = credentials.credentials.strip()
    if not token:
        raise InvalidCredentialException()
    return await caps.verifier.verify(token)


IdentityDep = Annotated[VerifiedIdentity, Depends(get_verified_identity)]


async def get_current_caller(
    request: Request,
    identity: IdentityDep,
    resolver: Annotated[CallerResolver, Depends(get_caller_resolver)],
) -> Caller:
    """Resolve the verified identity to an employee or user caller.

    The tenant is kept on request.state for error logging.
    """
    caller = await resolver.resolve(identity)
    request.state.owner_id = caller.owner_id
    return caller


CallerDep = Annotated[Caller, Depends(get_current_caller)]


def require_admin_caller(caller: CallerDep) -> UserCaller:
    return require_admin(caller)


def require_employee_caller(caller: CallerDep) -> EmployeeCaller:
    return require_employee(caller)


AdminDep = Annotated[UserCaller, Depends(require_admin_caller)]
EmployeeDep = Annotated[EmployeeCaller, Depends(require_employee_caller)]


# ---- Use case providers ----


def get_employee_service(caps: CapabilitiesDep) -> EmployeeService:
    return EmployeeService(
        caps.employees,
        caps.users,
        caps.sops,
        caps.trainings,
        caps.progress,
        caps.managed_identity,
        caps.events,
    )


def get_sop_service(caps: CapabilitiesDep, settings: SettingsDep) -> SopService:
    return SopService(
        caps.sops,
        caps.employees,
        caps.progress,
        caps.events,
        recent_limit=settings.recent_sops_limit,
    )


def get_sop_completion_service(caps: CapabilitiesDep) -> SopCompletionService:
    return SopCompletionService(caps.sops, caps.progress, caps.certificates, caps.events)


def get_training_service(caps: CapabilitiesDep) -> TrainingService:
    return TrainingService(caps.trainings, caps.employees, caps.events)


def get_stats_service(caps: CapabilitiesDep) -> StatsService:
    return StatsService(caps.employees, caps.sops, caps.trainings, caps.progress)


def get_settings_service(caps: CapabilitiesDep) -> SettingsService:
    return SettingsService(caps.settings)


def get_system_log_service(caps: CapabilitiesDep, settings: SettingsDep) -> SystemLogService:
    return SystemLogService(
        caps.system_logs,
        default_limit=settings.system_log_default_limit,
        max_limit=settings.system_log_max_limit,
    )


def get_subscription_service(caps: CapabilitiesDep, settings: SettingsDep) -> SubscriptionService:
    return SubscriptionService(
        caps.subscriptions,
        caps.payments,
        caps.events,
        plan_id=settings.subscription_plan_id,
    )
