"""Scripted in-memory broker for tests, the CLI and the demo TUI"""

import asyncio
import logging
from dataclasses import dataclass, field

from grantchain.permission.kinds import PermissionOutcome, SpecialPermission
from .base import PermissionBroker

logger = logging.getLogger(__name__)

GRANT = "grant"
DENY = "deny"
DENY_FOREVER = "deny_forever"
ANSWERS = (GRANT, DENY, DENY_FOREVER)


@dataclass
class BrokerCall:
    """One recorded interaction with the simulated platform"""
    kind: str
    permissions: list[str] = field(default_factory=list)


class SimulatedBroker(PermissionBroker):
    """
    A fake device whose user answers prompts from a script.

    - ``granted``: permissions already granted before the request starts
    - ``answers``: per permission, the answers the user gives to successive
      prompts (``grant``, ``deny`` or ``deny_forever``); once the script is
      exhausted the platform stops asking and denies permanently
    - ``settings_grants``: permissions the user turns on when a settings
      screen is opened

    A permission denied with ``deny_forever`` is never prompted again, later
    prompts report it denied without asking, like the real platform does.
    """

    def __init__(
        self,
        granted: list[str] | None = None,
        answers: dict[str, list[str]] | None = None,
        settings_grants: list[str] | None = None,
        platform_version: int = 33,
    ):
        self.granted: set[str] = {str(p) for p in granted or []}
        self.answers: dict[str, list[str]] = {
            str(p): list(a) for p, a in (answers or {}).items()
        }
        self.settings_grants: set[str] = {str(p) for p in settings_grants or []}
        self.platform_version = platform_version
        self.blocked: set[str] = set()
        self.calls: list[BrokerCall] = []

        for permission, script in self.answers.items():
            for answer in script:
                if answer not in ANSWERS:
                    raise ValueError(f"Unknown answer '{answer}' for {permission}")

    @property
    def prompts(self) -> list[list[str]]:
        """Permissions shown in each prompt, in order"""
        return [c.permissions for c in self.calls if c.kind == "prompt"]

    @property
    def settings_visits(self) -> list[str]:
        return [c.kind for c in self.calls if c.kind.endswith("settings")]

    def is_granted(self, permission: str) -> bool:
        return str(permission) in self.granted

    def _answer(self, permission: str) -> PermissionOutcome:
        if permission in self.granted:
            return PermissionOutcome(granted=True)
        if permission in self.blocked:
            return PermissionOutcome(granted=False, may_ask_again=False)

        script = self.answers.get(permission)
        answer = script.pop(0) if script else DENY_FOREVER
        logger.debug(f"Simulated user answered '{answer}' for {permission}")

        if answer == GRANT:
            self.granted.add(permission)
            return PermissionOutcome(granted=True)
        if answer == DENY_FOREVER:
            self.blocked.add(permission)
            return PermissionOutcome(granted=False, may_ask_again=False)
        return PermissionOutcome(granted=False, may_ask_again=True)

    async def request_permissions(self, permissions: list[str]) -> dict[str, PermissionOutcome]:
        self.calls.append(BrokerCall("prompt", [str(p) for p in permissions]))
        await asyncio.sleep(0)
        return {p: self._answer(str(p)) for p in permissions}

    async def request_background_location(self) -> PermissionOutcome:
        permission = SpecialPermission.BACKGROUND_LOCATION.value
        self.calls.append(BrokerCall("prompt", [permission]))
        await asyncio.sleep(0)
        return self._answer(permission)

    def can_draw_overlays(self) -> bool:
        return SpecialPermission.SYSTEM_ALERT_WINDOW.value in self.granted

    def can_write_system_settings(self) -> bool:
        return SpecialPermission.WRITE_SETTINGS.value in self.granted

    def is_external_storage_manager(self) -> bool:
        return SpecialPermission.MANAGE_EXTERNAL_STORAGE.value in self.granted

    async def _visit(self, screen: str, permissions: set[str]) -> None:
        self.calls.append(BrokerCall(screen, sorted(permissions)))
        await asyncio.sleep(0)
        turned_on = permissions & self.settings_grants
        self.granted |= turned_on
        self.blocked -= turned_on
        logger.debug(f"Returned from {screen}, turned on: {sorted(turned_on)}")

    async def open_app_settings(self) -> None:
        # The app details screen can toggle any prompt-based permission
        special = {k.value for k in SpecialPermission} - {SpecialPermission.BACKGROUND_LOCATION.value}
        await self._visit("app_settings", self.settings_grants - special)

    async def open_overlay_settings(self) -> None:
        await self._visit("overlay_settings", {SpecialPermission.SYSTEM_ALERT_WINDOW.value})

    async def open_write_settings(self) -> None:
        await self._visit("write_settings", {SpecialPermission.WRITE_SETTINGS.value})

    async def open_manage_storage_settings(self) -> None:
        await self._visit("manage_storage_settings", {SpecialPermission.MANAGE_EXTERNAL_STORAGE.value})
