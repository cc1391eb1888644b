"""Permission request chain.

A request runs one task per permission category in a fixed order, lets the
caller explain denials or forward to the settings screen through scopes, and
reports a single aggregated result.
"""

from .kinds import (
    SpecialPermission,
    PermissionOutcome,
    PermissionResult,
    SPECIAL_PERMISSION_ORDER,
    as_special,
)
from .errors import (
    GrantChainError,
    RequestAlreadyRunningError,
    MissingResultCallbackError,
    ConfigError,
)
from .scope import ExplainScope, ForwardScope
from .tasks import (
    ChainTask,
    NormalPermissionsTask,
    BackgroundLocationTask,
    SystemAlertWindowTask,
    WriteSettingsTask,
    ManageExternalStorageTask,
)
from .chain import RequestChain
from .request import PermissionRequest
from .mediator import GrantChain

__all__ = [
    "SpecialPermission",
    "PermissionOutcome",
    "PermissionResult",
    "SPECIAL_PERMISSION_ORDER",
    "as_special",
    "GrantChainError",
    "RequestAlreadyRunningError",
    "MissingResultCallbackError",
    "ConfigError",
    "ExplainScope",
    "ForwardScope",
    "ChainTask",
    "NormalPermissionsTask",
    "BackgroundLocationTask",
    "SystemAlertWindowTask",
    "WriteSettingsTask",
    "ManageExternalStorageTask",
    "RequestChain",
    "PermissionRequest",
    "GrantChain",
]
