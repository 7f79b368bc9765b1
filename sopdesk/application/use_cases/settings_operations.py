"""Per-tenant system settings: defaults on first read, per-group partial updates."""

from __future__ import annotations

import copy
from typing import Any

from sopdesk.application.dtos.settings import SettingsResult
from sopdesk.application.interfaces.repositories import ISettingsRepository
from sopdesk.domain.caller import UserCaller
from sopdesk.domain.exceptions import ResourceNotFoundException, ValidationException

DEFAULT_SETTINGS: dict[str, dict[str, Any]] = {
    "websocket": {
        "enabled": True,
        "reconnect_interval_seconds": 5,
    },
    "notifications": {
        "email_enabled": True,
        "sop_completion_alerts": True,
        "training_reminders": True,
    },
    "workflows": {
        "require_sop_acknowledgement": False,
        "auto_assign_new_employees": False,
    },
    "employees": {
        "default_role": "staff",
        "default_department": "",
    },
}


class SettingsService:
    """Read and update the caller's tenant settings."""

    def __init__(self, settings_repo: ISettingsRepository) -> None:
        self.settings_repo = settings_repo

    async def get_settings(self, caller: UserCaller) -> SettingsResult:
        """Return stored settings, creating them from defaults on first access.

        Groups or keys added to the defaults later are filled in on read.
        """
        stored = await self.settings_repo.get(caller.owner_id)
        if stored is None:
            stored = await self.settings_repo.create_if_absent(
                caller.owner_id, copy.deepcopy(DEFAULT_SETTINGS)
            )
        groups = {
            name: {**defaults, **stored.groups.get(name, {})}
            for name, defaults in DEFAULT_SETTINGS.items()
        }
        return SettingsResult(owner_id=stored.owner_id, groups=groups, updated_at=stored.updated_at)

    async def update_settings(
        self, caller: UserCaller, patch: dict[str, dict[str, Any]]
    ) -> SettingsResult:
        """Merge each group's keys into the stored group. Unknown groups or keys are rejected."""
        for group, values in patch.items():
            if group not in DEFAULT_SETTINGS:
                raise ValidationException(f"Unknown settings group: {group}", field=group)
            unknown = set(values) - set(DEFAULT_SETTINGS[group])
            if unknown:
                raise ValidationException(
                    f"Unknown settings keys: {', '.join(sorted(unknown))}", field=group
                )

        current = await self.get_settings(caller)
        if not patch:
            return current
        merged = {group: {**current.groups[group], **values} for group, values in patch.items()}
        updated = await self.settings_repo.update_groups(caller.owner_id, merged)
        if updated is None:
            raise ResourceNotFoundException("settings", caller.owner_id)
        return await self.get_settings(caller)
