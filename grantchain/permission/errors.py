"""Errors raised on misuse of the permission request API"""


class GrantChainError(Exception):
    """Base class for grantchain errors."""


class RequestAlreadyRunningError(GrantChainError):
    """Raised when run() is called on a request that already started."""
    def __init__(self, request, message: str | None = None):
        self.request = request
        self.message = message or "Permission request is already running"
        super().__init__(self.message)


class MissingResultCallbackError(GrantChainError):
    """Raised when a request is started without a result callback."""
    def __init__(self, message: str | None = None):
        self.message = message or "A result callback is required to run a permission request"
        super().__init__(self.message)


class ConfigError(GrantChainError):
    """Raised when a configuration file cannot be loaded."""
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config {path}: {reason}")
