"""Broker abstraction over the platform permission subsystem"""

from abc import ABC, abstractmethod

from grantchain.permission.kinds import PermissionOutcome, SpecialPermission


class PermissionBroker(ABC):
    """Base class for the host side of a permission request.

    A broker answers capability probes, shows the platform permission prompt
    and navigates to settings screens. Every coroutine resolves once the user
    is back in the application.
    """

    platform_version: int = 0

    @abstractmethod
    def is_granted(self, permission: str) -> bool:
        """Check whether a prompt-based permission is currently granted"""
        pass

    @abstractmethod
    async def request_permissions(self, permissions: list[str]) -> dict[str, PermissionOutcome]:
        """Show the platform prompt for the given permissions"""
        pass

    @abstractmethod
    async def request_background_location(self) -> PermissionOutcome:
        """Ask for background location access"""
        pass

    @abstractmethod
    def can_draw_overlays(self) -> bool:
        pass

    @abstractmethod
    def can_write_system_settings(self) -> bool:
        pass

    @abstractmethod
    def is_external_storage_manager(self) -> bool:
        pass

    @abstractmethod
    async def open_app_settings(self) -> None:
        """Open the application details screen and wait for the user to return"""
        pass

    @abstractmethod
    async def open_overlay_settings(self) -> None:
        pass

    @abstractmethod
    async def open_write_settings(self) -> None:
        pass

    @abstractmethod
    async def open_manage_storage_settings(self) -> None:
        pass

    def is_special_granted(self, kind: SpecialPermission) -> bool:
        """Probe a special permission through its dedicated check"""
        if kind == SpecialPermission.SYSTEM_ALERT_WINDOW:
            return self.can_draw_overlays()
        if kind == SpecialPermission.WRITE_SETTINGS:
            return self.can_write_system_settings()
        if kind == SpecialPermission.MANAGE_EXTERNAL_STORAGE:
            return self.is_external_storage_manager()
        return self.is_granted(kind.value)
