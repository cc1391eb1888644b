"""grantchain - orchestrates batched permission requests"""

from grantchain.permission import GrantChain, PermissionRequest, PermissionResult, SpecialPermission

__version__ = "0.1.0"

init = GrantChain.init

__all__ = ["GrantChain", "PermissionRequest", "PermissionResult", "SpecialPermission", "init"]
