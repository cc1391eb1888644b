"""Scopes handed to explain and forward callbacks.

A scope only exposes the actions that are legal at the point the callback is
invoked, so caller code cannot drive the chain into an inconsistent state.
"""

from typing import TYPE_CHECKING, Callable, Optional

from grantchain.dialog.base import PermissionDialog

if TYPE_CHECKING:
    from .request import PermissionRequest
    from .tasks import ChainTask


class ExplainScope:
    """Actions available while explaining why permissions are needed"""

    def __init__(self, request: "PermissionRequest", task: "ChainTask"):
        self._request = request
        self._task = task

    def show_request_reason_dialog(
        self,
        permissions: list[str] | PermissionDialog,
        message: str = "",
        positive_text: str = "OK",
        negative_text: str | None = None,
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        """Show a rationale dialog. Positive requests ``permissions`` again,
        negative ends the task. ``permissions`` may also be a custom dialog."""
        dialog = self._resolve(permissions, message, positive_text, negative_text)
        self._request.show_dialog(self._task, dialog, request_again=True, on_cancel=on_cancel)

    def show_request_setting_dialog(
        self,
        permissions: list[str] | PermissionDialog,
        message: str = "",
        positive_text: str = "OK",
        negative_text: str | None = None,
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        """Like show_request_reason_dialog, but positive opens the app settings"""
        dialog = self._resolve(permissions, message, positive_text, negative_text)
        self._request.show_dialog(self._task, dialog, request_again=False, on_cancel=on_cancel)

    def retry_with(self, permissions: list[str]):
        self._task.retry_with(permissions)

    def finish(self):
        self._task.finish()

    def _resolve(self, permissions, message, positive_text, negative_text) -> PermissionDialog:
        if isinstance(permissions, PermissionDialog):
            return permissions
        return self._request.build_dialog(permissions, message, positive_text, negative_text)


class ForwardScope:
    """Actions available once permissions are permanently denied"""

    def __init__(self, request: "PermissionRequest", task: "ChainTask"):
        self._request = request
        self._task = task

    def show_forward_to_settings_dialog(
        self,
        permissions: list[str] | PermissionDialog,
        message: str = "",
        positive_text: str = "OK",
        negative_text: str | None = None,
    ):
        """Positive opens the app settings and waits for the user to come back,
        negative or cancel ends the task."""
        if isinstance(permissions, PermissionDialog):
            dialog = permissions
        else:
            dialog = self._request.build_dialog(permissions, message, positive_text, negative_text)
        self._request.show_dialog(
            self._task, dialog, request_again=False, on_cancel=self._task.finish,
        )

    def forward_to_settings(self, permissions: list[str]):
        self._request.forward_to_settings(self._task, permissions)

    def finish(self):
        self._task.finish()
