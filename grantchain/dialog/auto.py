"""Dialogs that answer themselves, for headless runs"""

import asyncio
import logging

from .base import DialogSpec, TextDialog

logger = logging.getLogger(__name__)

ACCEPT = "accept"
DECLINE = "decline"
CANCEL = "cancel"


class AutoDialog(TextDialog):
    """
    A dialog that presses one of its buttons on the next loop iteration.

    ``decline`` falls back to cancel when there is no negative button, and
    cancel falls back to accept when the dialog is not cancelable, so an
    automatic run always moves on.
    """

    def __init__(self, spec: DialogSpec, answer: str = ACCEPT, transcript: list[str] | None = None):
        super().__init__(spec)
        self.answer = answer
        self.transcript = transcript if transcript is not None else []

    def show(self):
        super().show()
        self.transcript.append(self.spec.message)
        logger.info(f"Dialog shown for {self.spec.permissions}: {self.spec.message}")
        asyncio.get_running_loop().call_soon(self._press)

    def _press(self):
        if not self.showing:
            return
        if self.answer == DECLINE and self.negative_control is not None:
            self.negative_control.click()
        elif self.answer in (DECLINE, CANCEL) and self.cancelable:
            self.cancel()
        else:
            self.positive_control.click()


def auto_dialog_factory(answer: str = ACCEPT, transcript: list[str] | None = None):
    """Return a dialog factory that builds AutoDialogs with the given answer"""
    def factory(spec: DialogSpec) -> AutoDialog:
        return AutoDialog(spec, answer=answer, transcript=transcript)
    return factory
