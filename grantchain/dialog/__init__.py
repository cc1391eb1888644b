"""Permission dialogs: the capability interface and its adapters."""

from .base import DialogControl, PermissionDialog, DialogSpec, TextDialog, DialogFactory
from .auto import AutoDialog, auto_dialog_factory, ACCEPT, DECLINE, CANCEL

__all__ = [
    "DialogControl",
    "PermissionDialog",
    "DialogSpec",
    "TextDialog",
    "DialogFactory",
    "AutoDialog",
    "auto_dialog_factory",
    "ACCEPT",
    "DECLINE",
    "CANCEL",
]
