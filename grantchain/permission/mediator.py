"""Entry point for building permission requests"""

from typing import Optional

from grantchain.dialog.base import DialogFactory
from .kinds import as_special
from .request import PermissionRequest


class GrantChain:
    """Creates permission requests bound to one broker and dialog factory"""

    def __init__(self, broker, dialog_factory: Optional[DialogFactory] = None, target_platform_version: int | None = None):
        self.broker = broker
        self.dialog_factory = dialog_factory
        self.target_platform_version = target_platform_version

    @classmethod
    def init(cls, broker, dialog_factory: Optional[DialogFactory] = None, target_platform_version: int | None = None) -> "GrantChain":
        return cls(broker, dialog_factory, target_platform_version)

    def permissions(self, *permissions: str) -> PermissionRequest:
        """Split identifiers into prompt-based and special permissions"""
        if len(permissions) == 1 and isinstance(permissions[0], (list, tuple, set)):
            permissions = tuple(permissions[0])
        normal, special = [], []
        for permission in permissions:
            kind = as_special(permission)
            if kind is None:
                normal.append(permission)
            else:
                special.append(kind)
        return PermissionRequest(
            self.broker,
            dialog_factory=self.dialog_factory,
            normal_permissions=normal,
            special_permissions=special,
            target_platform_version=self.target_platform_version,
        )

    def from_config(self, config) -> PermissionRequest:
        """Build a request from a RequestConfig"""
        request = PermissionRequest(
            self.broker,
            dialog_factory=self.dialog_factory,
            normal_permissions=config.normal_permissions,
            special_permissions=config.special_permissions,
            target_platform_version=config.target_platform_version or self.target_platform_version,
        )
        request.configure(
            explain_reason_before_request=config.explain_reason_before_request,
            dialog_tint_colors=config.dialog_tint_colors,
        )
        return request

    def is_granted(self, permission: str) -> bool:
        kind = as_special(permission)
        if kind is not None:
            return self.broker.is_special_granted(kind)
        return self.broker.is_granted(permission)
