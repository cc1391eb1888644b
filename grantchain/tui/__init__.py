"""Textual front end: modal permission dialogs and a demo app."""

from .modals import PermissionDialogScreen, TextualDialog, textual_dialog_factory
from .themes import THEMES, pick_tint

__all__ = ["PermissionDialogScreen", "TextualDialog", "textual_dialog_factory", "THEMES", "pick_tint"]
