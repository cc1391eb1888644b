"""Dialog capability interface shared by every permission dialog"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


class DialogControl:
    """A clickable element of a dialog, such as a button"""

    def __init__(self, label: str):
        self.label = label
        self._on_click: Optional[Callable[[], None]] = None

    def set_on_click(self, handler: Callable[[], None] | None):
        self._on_click = handler

    def click(self):
        if self._on_click:
            self._on_click()


class PermissionDialog(ABC):
    """
    Base class for dialogs shown from an explain or forward callback.

    Rendering is left to the subclass. The request wires the button semantics
    onto ``positive_control`` and ``negative_control`` and calls ``show()``.
    """

    def __init__(self):
        self._on_cancel: Optional[Callable[[], None]] = None

    @abstractmethod
    def permissions_to_request(self) -> list[str]:
        """Permissions the positive action applies to"""
        pass

    @property
    @abstractmethod
    def positive_control(self) -> DialogControl:
        pass

    @property
    def negative_control(self) -> DialogControl | None:
        return None

    @abstractmethod
    def show(self):
        pass

    @abstractmethod
    def dismiss(self):
        pass

    @property
    def cancelable(self) -> bool:
        return self._on_cancel is not None

    def set_on_cancel(self, handler: Callable[[], None] | None):
        self._on_cancel = handler

    def cancel(self):
        """Back/escape pressed. Without a cancel handler the dialog stays open."""
        if self._on_cancel:
            self._on_cancel()


@dataclass
class DialogSpec:
    """Texts and colors for a dialog built from plain arguments"""
    permissions: list[str]
    message: str
    positive_text: str
    negative_text: str | None = None
    tint_colors: tuple[str, str] | None = None


class TextDialog(PermissionDialog):
    """A dialog built from a DialogSpec, with an optional negative button"""

    def __init__(self, spec: DialogSpec):
        super().__init__()
        self.spec = spec
        self._positive = DialogControl(spec.positive_text)
        self._negative = DialogControl(spec.negative_text) if spec.negative_text else None
        self.showing = False

    def permissions_to_request(self) -> list[str]:
        return list(self.spec.permissions)

    @property
    def positive_control(self) -> DialogControl:
        return self._positive

    @property
    def negative_control(self) -> DialogControl | None:
        return self._negative

    def show(self):
        self.showing = True

    def dismiss(self):
        self.showing = False


# Builds the dialog used when a scope is given plain texts
DialogFactory = Callable[[DialogSpec], PermissionDialog]
