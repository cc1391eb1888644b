"""Chain tasks, one per permission category"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from .kinds import PermissionOutcome, SpecialPermission
from .scope import ExplainScope, ForwardScope

if TYPE_CHECKING:
    from .chain import RequestChain
    from .request import PermissionRequest

logger = logging.getLogger(__name__)


class ChainTask(ABC):
    """
    One step of a request chain.

    A task is activated by the chain, suspends while the broker or a dialog
    is busy, and calls ``finish()`` exactly once, which hands control to the
    next task.
    """

    name = "task"

    def __init__(self, request: "PermissionRequest"):
        self.request = request
        self.chain: "RequestChain | None" = None
        self.explain_scope = ExplainScope(request, self)
        self.forward_scope = ForwardScope(request, self)
        self._finished = False
        # Set once a callback has shown a dialog or moved the task along
        self._engaged = False

    @property
    def finished(self) -> bool:
        return self._finished

    def activate(self):
        """Begin this task's probe and request cycle"""
        self._finished = False
        logger.debug(f"Activating {self.name} task")
        self.run()

    @abstractmethod
    def run(self):
        pass

    @abstractmethod
    def request_again(self, permissions: list[str]):
        """Issue this task's request again for ``permissions``"""
        pass

    def retry_with(self, permissions: list[str]):
        if self._finished:
            logger.warning(f"retry_with called on finished {self.name} task, ignoring")
            return
        self._engaged = True
        self.request_again(list(permissions))

    def finish(self):
        if self._finished:
            logger.warning(f"{self.name} task finished twice, ignoring")
            return
        self._finished = True
        self._engaged = True
        self.on_finish()
        logger.debug(f"{self.name} task finished")
        if self.chain is not None:
            self.chain.advance(self)

    def on_finish(self):
        """Classify whatever is still unresolved before the chain moves on"""
        pass

    def engage(self):
        self._engaged = True

    def on_settings_return(self, permissions: list[str]):
        """The user came back from the app settings screen"""
        for permission in permissions:
            if self.request.probe(permission):
                self.request.mark_granted(permission)
        self.finish()

    def on_request_failed(self, permissions: list[str], exc: BaseException):
        for permission in permissions:
            if not self.request.is_resolved(permission):
                self.request.mark_denied(permission)
        self.finish()

    def explain(self, permissions: list[str], before_request: bool):
        self._engaged = False
        try:
            self.request.explain_reason_callback(self.explain_scope, list(permissions), before_request)
        except Exception:
            self._callback_failed("explain")
            return
        self._ensure_progress("explain")

    def forward(self, permissions: list[str]):
        self._engaged = False
        try:
            self.request.forward_to_settings_callback(self.forward_scope, list(permissions))
        except Exception:
            self._callback_failed("forward")
            return
        self._ensure_progress("forward")

    def _callback_failed(self, phase: str):
        logger.exception(f"{phase} callback raised, finishing {self.name} task")
        self.request.dismiss_current_dialog()
        if not self._finished:
            self.finish()

    def _ensure_progress(self, phase: str):
        # A callback that neither shows a dialog nor acts would stall the chain
        if not self._engaged and not self._finished:
            logger.warning(f"{phase} callback returned without acting, finishing {self.name} task")
            self.finish()


class NormalPermissionsTask(ChainTask):
    """Requests every declared prompt-based permission in one batch"""

    name = "normal"

    def run(self):
        request = self.request
        pending = []
        for permission in request.normal_permissions:
            if request.probe(permission):
                request.mark_granted(permission)
            else:
                pending.append(permission)

        if not pending:
            self.finish()
            return

        if request.explain_before_request and request.explain_reason_callback:
            request.explain_before_request = False
            self.explain(pending, before_request=True)
        else:
            self.request_again(pending)

    def request_again(self, permissions: list[str]):
        logger.info(f"Requesting permissions: {permissions}")
        broker = self.request.broker
        self.request.launch(
            lambda: broker.request_permissions(list(permissions)),
            lambda outcomes: self._on_outcomes(permissions, outcomes),
            lambda exc: self.on_request_failed(permissions, exc),
        )

    def _on_outcomes(self, permissions: list[str], outcomes: dict[str, PermissionOutcome]):
        request = self.request
        denied_now = []
        for permission in permissions:
            outcome = outcomes.get(permission)
            if outcome is None:
                logger.warning(f"No outcome reported for {permission}, treating as denied")
                outcome = PermissionOutcome(granted=False)

            if outcome.granted:
                request.mark_granted(permission)
            elif outcome.may_ask_again:
                request.mark_denied(permission)
                denied_now.append(permission)
            else:
                request.mark_permanently_denied(permission)

        if denied_now and request.explain_reason_callback:
            self.explain(denied_now, before_request=False)
        elif request.temp_permanently_denied and request.forward_to_settings_callback:
            self.forward(request.take_permanently_denied())
        else:
            self.finish()

    def on_finish(self):
        for permission in self.request.normal_permissions:
            if not self.request.is_resolved(permission):
                self.request.mark_wont_request(permission)


class SpecialPermissionTask(ChainTask):
    """Base for tasks guarding a single settings-screen permission"""

    kind: SpecialPermission

    def __init__(self, request: "PermissionRequest"):
        super().__init__(request)
        self.name = self.kind.value

    @property
    def permission(self) -> str:
        return self.kind.value

    def run(self):
        request = self.request
        if not request.special_applies(self.kind):
            logger.debug(f"{self.permission} does not apply on this platform")
            request.mark_inapplicable(self.kind)
            self.finish()
            return

        if request.probe_special(self.kind):
            request.mark_granted(self.permission)
            self.finish()
            return

        if request.explain_reason_callback:
            self.explain([self.permission], before_request=False)
        else:
            self.finish()

    def request_again(self, permissions: list[str]):
        logger.info(f"Opening settings screen for {self.permission}")
        self.request.launch(
            self.open_screen,
            lambda _: self.on_settings_return([self.permission]),
            lambda exc: self.on_request_failed([self.permission], exc),
        )

    @abstractmethod
    async def open_screen(self):
        pass

    def on_settings_return(self, permissions: list[str]):
        if self.request.probe_special(self.kind):
            self.request.mark_granted(self.permission)
        else:
            self.request.mark_denied(self.permission)
        self.finish()

    def on_finish(self):
        if not self.request.is_resolved(self.permission):
            self.request.mark_denied(self.permission)


class BackgroundLocationTask(SpecialPermissionTask):
    kind = SpecialPermission.BACKGROUND_LOCATION

    async def open_screen(self):
        return await self.request.broker.request_background_location()

    def request_again(self, permissions: list[str]):
        logger.info(f"Requesting {self.permission}")
        self.request.launch(
            self.open_screen,
            self._on_outcome,
            lambda exc: self.on_request_failed([self.permission], exc),
        )

    def _on_outcome(self, outcome: PermissionOutcome):
        if outcome.granted:
            self.request.mark_granted(self.permission)
        elif outcome.may_ask_again:
            self.request.mark_denied(self.permission)
        else:
            self.request.mark_permanently_denied(self.permission, buffer=False)
        self.finish()


class SystemAlertWindowTask(SpecialPermissionTask):
    kind = SpecialPermission.SYSTEM_ALERT_WINDOW

    async def open_screen(self):
        await self.request.broker.open_overlay_settings()


class WriteSettingsTask(SpecialPermissionTask):
    kind = SpecialPermission.WRITE_SETTINGS

    async def open_screen(self):
        await self.request.broker.open_write_settings()


class ManageExternalStorageTask(SpecialPermissionTask):
    kind = SpecialPermission.MANAGE_EXTERNAL_STORAGE

    async def open_screen(self):
        await self.request.broker.open_manage_storage_settings()


SPECIAL_TASKS = {
    task.kind: task
    for task in (BackgroundLocationTask, SystemAlertWindowTask, WriteSettingsTask, ManageExternalStorageTask)
}
