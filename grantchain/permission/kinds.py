"""Permission identifiers and result types"""

from dataclasses import dataclass, field
from enum import Enum


class SpecialPermission(str, Enum):
    """Permissions that are granted on a dedicated screen instead of a prompt."""
    BACKGROUND_LOCATION = "background_location"
    SYSTEM_ALERT_WINDOW = "system_alert_window"
    WRITE_SETTINGS = "write_settings"
    MANAGE_EXTERNAL_STORAGE = "manage_external_storage"


# Order in which special permission tasks run after the normal permissions
SPECIAL_PERMISSION_ORDER = [
    SpecialPermission.BACKGROUND_LOCATION,
    SpecialPermission.SYSTEM_ALERT_WINDOW,
    SpecialPermission.WRITE_SETTINGS,
    SpecialPermission.MANAGE_EXTERNAL_STORAGE,
]

# Overlay and write-settings permissions only exist from this platform version on
SETTINGS_PERMISSION_MIN_VERSION = 23


def as_special(permission: str) -> SpecialPermission | None:
    """Return the special kind for an identifier, or None for a normal permission."""
    try:
        return SpecialPermission(permission)
    except ValueError:
        return None


@dataclass
class PermissionOutcome:
    """What the broker reports for one prompted permission."""
    granted: bool
    may_ask_again: bool = True


@dataclass
class PermissionResult:
    """Final aggregated result of a permission request."""
    all_granted: bool
    granted: list[str] = field(default_factory=list)
    denied: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "all_granted": self.all_granted,
            "granted": [str(p.value) if isinstance(p, Enum) else p for p in self.granted],
            "denied": [str(p.value) if isinstance(p, Enum) else p for p in self.denied],
        }
