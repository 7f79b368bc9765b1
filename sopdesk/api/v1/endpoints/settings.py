"""System settings API (admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from sopdesk.api.v1.dependencies import AdminDep, get_settings_service
from sopdesk.application.dtos.settings import SettingsResult
from sopdesk.application.use_cases import SettingsService
from sopdesk.core.limiter import limit_writes
from sopdesk.schemas.settings import SettingsResponse, SettingsUpdateRequest

router = APIRouter()

SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]


def _to_response(result: SettingsResult) -> SettingsResponse:
    return SettingsResponse(owner_id=result.owner_id, updated_at=result.updated_at, **result.groups)


@router.get("", response_model=SettingsResponse)
async def get_system_settings(caller: AdminDep, settings_svc: SettingsServiceDep):
    """Return the tenant's settings; defaults are stored on first access."""
    return _to_response(await settings_svc.get_settings(caller))


@router.put("", response_model=SettingsResponse)
@limit_writes
async def update_system_settings(
    request: Request,
    body: SettingsUpdateRequest,
    caller: AdminDep,
    settings_svc: SettingsServiceDep,
):
    patch = {group: values for group, values in body.model_dump(exclude_none=True).items()}
    return _to_response(await settings_svc.update_settings(caller, patch))
