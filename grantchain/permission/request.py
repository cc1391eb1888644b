"""Permission request: builds the task chain and aggregates its results"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional

from grantchain.dialog.base import DialogFactory, DialogSpec, PermissionDialog, TextDialog
from .chain import RequestChain
from .errors import MissingResultCallbackError, RequestAlreadyRunningError
from .kinds import (
    SETTINGS_PERMISSION_MIN_VERSION,
    SPECIAL_PERMISSION_ORDER,
    PermissionResult,
    SpecialPermission,
)
from .scope import ExplainScope, ForwardScope
from .tasks import SPECIAL_TASKS, ChainTask, NormalPermissionsTask

logger = logging.getLogger(__name__)

# Background location became a separate permission at this platform version
BACKGROUND_LOCATION_MIN_VERSION = 29
# All-files access and its settings screen exist from this platform version on
MANAGE_STORAGE_MIN_VERSION = 30

GRANTED = "granted"
DENIED = "denied"
PERMANENTLY_DENIED = "permanently_denied"
WONT_REQUEST = "wont_request"

ExplainReasonCallback = Callable[[ExplainScope, list[str], bool], None]
ForwardToSettingsCallback = Callable[[ForwardScope, list[str]], None]
RequestCallback = Callable[[bool, list[str], list[str]], None]


class PermissionRequest:
    """
    A batch of permissions requested together.

    Tasks run in a fixed order (normal permissions first, then each declared
    special permission) and the result callback fires exactly once, after the
    last task finishes. Every declared permission then sits in exactly one of
    granted, denied, permanently denied or won't request.
    """

    def __init__(
        self,
        broker,
        dialog_factory: Optional[DialogFactory] = None,
        normal_permissions: Iterable[str] = (),
        special_permissions: Iterable[SpecialPermission] = (),
        target_platform_version: int | None = None,
    ):
        self.broker = broker
        self.dialog_factory: DialogFactory = dialog_factory or TextDialog
        self.target_platform_version = target_platform_version
        self.normal_permissions: list[str] = []
        self.special_permissions: list[SpecialPermission] = []
        self.declare(normal_permissions, special_permissions)

        self.explain_before_request = False
        self.dialog_tint_colors: tuple[str, str] | None = None
        self.explain_reason_callback: Optional[ExplainReasonCallback] = None
        self.forward_to_settings_callback: Optional[ForwardToSettingsCallback] = None
        self.result_callback: Optional[RequestCallback] = None

        # permission -> result bucket, in classification order
        self._results: dict[str, str] = {}
        self.temp_permanently_denied: list[str] = []
        self.forward_permissions: list[str] = []
        self.current_dialog: PermissionDialog | None = None
        self.chain: RequestChain | None = None

        self._started = False
        self._finalized = False
        self._released = False
        self._inflight: set[asyncio.Future] = set()
        self._waiter: asyncio.Future | None = None

    # Configuration

    def declare(self, normal_permissions: Iterable[str], special_permissions: Iterable[SpecialPermission]):
        for permission in normal_permissions:
            if permission not in self.normal_permissions:
                self.normal_permissions.append(permission)
        for kind in special_permissions:
            kind = SpecialPermission(kind)
            if kind not in self.special_permissions:
                self.special_permissions.append(kind)
        return self

    def configure(
        self,
        explain_reason_before_request: bool | None = None,
        explain_callback: Optional[ExplainReasonCallback] = None,
        forward_callback: Optional[ForwardToSettingsCallback] = None,
        dialog_tint_colors: tuple[str, str] | None = None,
    ):
        if explain_reason_before_request is not None:
            self.explain_before_request = explain_reason_before_request
        if explain_callback is not None:
            self.explain_reason_callback = explain_callback
        if forward_callback is not None:
            self.forward_to_settings_callback = forward_callback
        if dialog_tint_colors is not None:
            self.dialog_tint_colors = tuple(dialog_tint_colors)
        return self

    def explain_reason_before_request(self):
        self.explain_before_request = True
        return self

    def on_explain_request_reason(self, callback: ExplainReasonCallback):
        self.explain_reason_callback = callback
        return self

    def on_forward_to_settings(self, callback: ForwardToSettingsCallback):
        self.forward_to_settings_callback = callback
        return self

    def set_dialog_tint_color(self, light: str, dark: str):
        self.dialog_tint_colors = (light, dark)
        return self

    # Running

    def run(self, callback: RequestCallback):
        """Start the chain. ``callback(all_granted, granted, denied)`` fires once.

        Prompts and settings screens are awaited on the running event loop, so
        unless every permission is already granted this must be called from
        inside one.
        """
        if callback is None:
            raise MissingResultCallbackError()
        if self._started:
            raise RequestAlreadyRunningError(self)
        self._started = True
        self.result_callback = callback

        tasks: list[ChainTask] = []
        if self.normal_permissions:
            tasks.append(NormalPermissionsTask(self))
        for kind in SPECIAL_PERMISSION_ORDER:
            if kind in self.special_permissions:
                tasks.append(SPECIAL_TASKS[kind](self))

        logger.info(
            f"Starting permission request: normal={self.normal_permissions} "
            f"special={[k.value for k in self.special_permissions]}"
        )
        self.chain = RequestChain(tasks, self._finalize)
        self.chain.start()

    async def request(self) -> PermissionResult:
        """Run the chain and wait for its result"""
        loop = asyncio.get_running_loop()
        self._waiter = loop.create_future()
        waiter = self._waiter

        def on_result(all_granted: bool, granted: list[str], denied: list[str]):
            if not waiter.done():
                waiter.set_result(PermissionResult(all_granted, granted, denied))

        self.run(on_result)
        return await waiter

    def release(self):
        """Tear down after the hosting context went away.

        Dismisses the open dialog and drops outstanding broker work so that no
        callback fires afterwards.
        """
        if self._released:
            return
        self._released = True
        logger.info("Permission request released")
        self.dismiss_current_dialog()
        for future in list(self._inflight):
            future.cancel()
        if self._waiter is not None and not self._waiter.done():
            self._waiter.cancel()

    @property
    def released(self) -> bool:
        return self._released

    def launch(
        self,
        work: Callable[[], Awaitable[Any]],
        on_result: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ):
        """Run broker work on the event loop and resume the chain when it completes"""
        if self._released:
            logger.debug("Request released, not launching broker work")
            return
        loop = asyncio.get_running_loop()
        future = loop.create_task(work())
        self._inflight.add(future)

        def done(f: asyncio.Future):
            self._inflight.discard(f)
            if f.cancelled() or self._released:
                return
            exc = f.exception()
            if exc is not None:
                logger.error(f"Broker call failed: {exc}")
                on_error(exc)
            else:
                on_result(f.result())

        future.add_done_callback(done)

    # Dialogs and settings

    def build_dialog(
        self,
        permissions: list[str],
        message: str,
        positive_text: str,
        negative_text: str | None = None,
    ) -> PermissionDialog:
        return self.dialog_factory(DialogSpec(
            permissions=list(permissions),
            message=message,
            positive_text=positive_text,
            negative_text=negative_text,
            tint_colors=self.dialog_tint_colors,
        ))

    def show_dialog(
        self,
        task: ChainTask,
        dialog: PermissionDialog,
        request_again: bool,
        on_cancel: Optional[Callable[[], None]] = None,
    ):
        """Show a dialog for ``task`` and wire its buttons.

        Positive either requests the dialog's permissions again or forwards them
        to the app settings, negative finishes the task. Clicks on a dialog that
        was already closed or replaced are ignored.
        """
        task.engage()
        permissions = dialog.permissions_to_request()
        if not permissions:
            task.finish()
            return

        self.dismiss_current_dialog()
        self.current_dialog = dialog

        def on_positive():
            if self.current_dialog is not dialog:
                return
            self._close(dialog)
            if request_again:
                task.retry_with(permissions)
            else:
                self.forward_to_settings(task, permissions)

        def on_negative():
            if self.current_dialog is not dialog:
                return
            self._close(dialog)
            task.finish()

        def on_cancelled():
            if self.current_dialog is not dialog:
                return
            self._close(dialog)
            on_cancel()

        dialog.positive_control.set_on_click(on_positive)
        if dialog.negative_control is not None:
            dialog.negative_control.set_on_click(on_negative)
        dialog.set_on_cancel(on_cancelled if on_cancel else None)
        dialog.show()

    def dismiss_current_dialog(self):
        if self.current_dialog is not None:
            self._close(self.current_dialog)

    def _close(self, dialog: PermissionDialog):
        dialog.dismiss()
        if self.current_dialog is dialog:
            self.current_dialog = None

    def forward_to_settings(self, task: ChainTask, permissions: list[str]):
        task.engage()
        self.forward_permissions = list(permissions)
        logger.info(f"Forwarding to app settings for {permissions}")
        self.launch(
            self.broker.open_app_settings,
            lambda _: task.on_settings_return(list(self.forward_permissions)),
            lambda exc: task.on_request_failed(list(self.forward_permissions), exc),
        )

    # Probing and classification

    def probe(self, permission: str) -> bool:
        return self.broker.is_granted(permission)

    def probe_special(self, kind: SpecialPermission) -> bool:
        return self.broker.is_special_granted(kind)

    def special_applies(self, kind: SpecialPermission) -> bool:
        platform = self.broker.platform_version
        if kind in (SpecialPermission.SYSTEM_ALERT_WINDOW, SpecialPermission.WRITE_SETTINGS):
            target = self.target_platform_version
            if target is None:
                target = platform
            return min(platform, target) >= SETTINGS_PERMISSION_MIN_VERSION
        if kind == SpecialPermission.BACKGROUND_LOCATION:
            return platform >= BACKGROUND_LOCATION_MIN_VERSION
        if kind == SpecialPermission.MANAGE_EXTERNAL_STORAGE:
            return platform >= MANAGE_STORAGE_MIN_VERSION
        return True

    def mark_inapplicable(self, kind: SpecialPermission):
        if kind == SpecialPermission.BACKGROUND_LOCATION:
            if not self.is_resolved(kind.value):
                self._mark(kind.value, WONT_REQUEST)
        elif kind == SpecialPermission.MANAGE_EXTERNAL_STORAGE:
            # Cannot be granted on this platform
            self.mark_denied(kind.value)
        else:
            # No settings model below the threshold: the capability is implied
            self._mark(kind.value, GRANTED)

    def _mark(self, permission: str, bucket: str):
        self._results.pop(permission, None)
        self._results[permission] = bucket

    def mark_granted(self, permission: str):
        self._mark(permission, GRANTED)
        if permission in self.temp_permanently_denied:
            self.temp_permanently_denied.remove(permission)

    def mark_denied(self, permission: str):
        self._mark(permission, DENIED)

    def mark_permanently_denied(self, permission: str, buffer: bool = True):
        self._mark(permission, PERMANENTLY_DENIED)
        if buffer and permission not in self.temp_permanently_denied:
            self.temp_permanently_denied.append(permission)

    def mark_wont_request(self, permission: str):
        self._mark(permission, WONT_REQUEST)

    def take_permanently_denied(self) -> list[str]:
        buffered = [p for p in self.temp_permanently_denied if self._results.get(p) == PERMANENTLY_DENIED]
        self.temp_permanently_denied.clear()
        return buffered

    def is_resolved(self, permission: str) -> bool:
        return permission in self._results

    def _bucket(self, bucket: str) -> list[str]:
        return [p for p, b in self._results.items() if b == bucket]

    @property
    def granted(self) -> list[str]:
        return self._bucket(GRANTED)

    @property
    def denied(self) -> list[str]:
        return self._bucket(DENIED)

    @property
    def permanently_denied(self) -> list[str]:
        return self._bucket(PERMANENTLY_DENIED)

    @property
    def wont_request(self) -> list[str]:
        return self._bucket(WONT_REQUEST)

    # Aggregation

    def _finalize(self):
        if self._finalized or self._released:
            return
        self._finalized = True

        for permission in self.normal_permissions:
            if not self.is_resolved(permission):
                self.mark_wont_request(permission)

        # Special permissions may change while the chain runs, trust a fresh probe
        for kind in self.special_permissions:
            if not self.special_applies(kind):
                self.mark_inapplicable(kind)
            elif self.probe_special(kind):
                self.mark_granted(kind.value)
            elif self._results.get(kind.value, GRANTED) == GRANTED:
                self.mark_denied(kind.value)

        granted = self.granted
        denied = self.denied + self.permanently_denied + self.wont_request
        all_granted = not denied
        logger.info(f"Permission request finished: granted={granted} denied={denied}")
        self.result_callback(all_granted, list(granted), list(denied))
