"""Pytest configuration and shared fixtures"""

import asyncio

import pytest

from grantchain.broker import SimulatedBroker
from grantchain.dialog import DialogSpec, TextDialog


class DialogRecorder:
    """Dialog factory that keeps every dialog it builds so tests can click them"""

    def __init__(self):
        self.dialogs: list[TextDialog] = []

    def __call__(self, spec: DialogSpec) -> TextDialog:
        dialog = TextDialog(spec)
        self.dialogs.append(dialog)
        return dialog

    @property
    def showing(self) -> list[TextDialog]:
        return [d for d in self.dialogs if d.showing]

    @property
    def current(self) -> TextDialog:
        showing = self.showing
        assert len(showing) == 1, f"expected one open dialog, got {len(showing)}"
        return showing[0]


class ResultRecorder:
    """Result callback that records every invocation"""

    def __init__(self):
        self.calls: list[tuple[bool, list[str], list[str]]] = []

    def __call__(self, all_granted: bool, granted: list[str], denied: list[str]):
        self.calls.append((all_granted, granted, denied))

    @property
    def result(self) -> tuple[bool, list[str], list[str]]:
        assert len(self.calls) == 1, f"expected one result, got {len(self.calls)}"
        return self.calls[0]


async def settle(rounds: int = 20):
    """Let scheduled broker work and dialog clicks run"""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def dialogs():
    return DialogRecorder()


@pytest.fixture
def results():
    return ResultRecorder()


@pytest.fixture
def broker():
    return SimulatedBroker()
