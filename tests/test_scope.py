"""Tests for explain and forward scopes and dialog wiring"""

import pytest

from grantchain import GrantChain
from grantchain.broker import SimulatedBroker
from grantchain.dialog import DialogControl, PermissionDialog

from conftest import settle


class CustomDialog(PermissionDialog):
    """A caller-supplied dialog with its own controls"""

    def __init__(self, permissions: list[str], with_negative: bool = True):
        super().__init__()
        self._permissions = permissions
        self._positive = DialogControl("Sure")
        self._negative = DialogControl("No") if with_negative else None
        self.shown = 0
        self.dismissed = 0

    def permissions_to_request(self) -> list[str]:
        return self._permissions

    @property
    def positive_control(self) -> DialogControl:
        return self._positive

    @property
    def negative_control(self) -> DialogControl | None:
        return self._negative

    def show(self):
        self.shown += 1

    def dismiss(self):
        self.dismissed += 1


def reason_dialog(scope, denied, before_request):
    scope.show_request_reason_dialog(denied, "We need these", "Allow", "Deny")


class TestExplainScope:
    """ExplainScope dialog wiring"""

    @pytest.mark.asyncio
    async def test_positive_requests_dialog_permissions_again(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny", "grant"], "contacts": ["deny", "grant"]})
        request = GrantChain.init(broker, dialogs).permissions("camera", "contacts")

        def explain(scope, denied, before_request):
            scope.show_request_reason_dialog(["contacts"], "Only contacts", "Allow", "Deny")

        request.on_explain_request_reason(explain)
        request.run(results)
        await settle()

        dialog = dialogs.current
        assert dialog.spec.message == "Only contacts"
        dialog.positive_control.click()
        assert not dialog.showing
        await settle()

        assert broker.prompts == [["camera", "contacts"], ["contacts"]]
        # camera was left out of the retry, so it stays denied
        assert results.result == (False, ["contacts"], ["camera"])

    @pytest.mark.asyncio
    async def test_negative_finishes_task(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny"]})
        request = (
            GrantChain.init(broker, dialogs)
            .permissions("camera")
            .on_explain_request_reason(reason_dialog)
        )
        request.run(results)
        await settle()

        dialogs.current.negative_control.click()

        assert results.result == (False, [], ["camera"])
        assert request.denied == ["camera"]
        assert broker.prompts == [["camera"]]

    @pytest.mark.asyncio
    async def test_cancel_without_handler_keeps_dialog_open(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny"]})
        request = (
            GrantChain.init(broker, dialogs)
            .permissions("camera")
            .on_explain_request_reason(reason_dialog)
        )
        request.run(results)
        await settle()

        dialog = dialogs.current
        assert not dialog.cancelable
        dialog.cancel()
        await settle()

        assert dialog.showing
        assert results.calls == []

    @pytest.mark.asyncio
    async def test_cancel_escalates_to_setting_dialog(self, dialogs, results):
        """Cancel handler swaps the rationale for a settings dialog"""
        broker = SimulatedBroker(answers={"camera": ["deny"]}, settings_grants=["camera"])

        def explain(scope, denied, before_request):
            scope.show_request_reason_dialog(
                denied, "We need the camera", "Allow", "Deny",
                on_cancel=lambda: scope.show_request_setting_dialog(denied, "Enable it in settings", "Settings", "Skip"),
            )

        request = GrantChain.init(broker, dialogs).permissions("camera").on_explain_request_reason(explain)
        request.run(results)
        await settle()

        reason = dialogs.current
        reason.cancel()

        setting = dialogs.current
        assert setting is not reason
        assert setting.spec.message == "Enable it in settings"

        setting.positive_control.click()
        await settle()

        assert broker.settings_visits == ["app_settings"]
        assert results.result == (True, ["camera"], [])

    @pytest.mark.asyncio
    async def test_custom_dialog_is_wired(self, results):
        broker = SimulatedBroker(answers={"camera": ["deny", "grant"]})
        custom = []

        def explain(scope, denied, before_request):
            dialog = CustomDialog(denied)
            custom.append(dialog)
            scope.show_request_reason_dialog(dialog)

        request = GrantChain.init(broker).permissions("camera").on_explain_request_reason(explain)
        request.run(results)
        await settle()

        assert custom[0].shown == 1
        custom[0].positive_control.click()
        await settle()

        assert custom[0].dismissed == 1
        assert results.result == (True, ["camera"], [])

    @pytest.mark.asyncio
    async def test_dialog_without_permissions_finishes(self, results):
        broker = SimulatedBroker(answers={"camera": ["deny"]})
        shown = []

        def explain(scope, denied, before_request):
            dialog = CustomDialog([])
            shown.append(dialog)
            scope.show_request_reason_dialog(dialog)

        request = GrantChain.init(broker).permissions("camera").on_explain_request_reason(explain)
        request.run(results)
        await settle()

        assert shown[0].shown == 0
        assert results.result == (False, [], ["camera"])

    @pytest.mark.asyncio
    async def test_new_dialog_dismisses_previous(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny"]})

        def explain(scope, denied, before_request):
            scope.show_request_reason_dialog(denied, "first", "Allow", "Deny")
            scope.show_request_reason_dialog(denied, "second", "Allow", "Deny")

        request = GrantChain.init(broker, dialogs).permissions("camera").on_explain_request_reason(explain)
        request.run(results)
        await settle()

        assert [d.spec.message for d in dialogs.showing] == ["second"]

    @pytest.mark.asyncio
    async def test_tint_colors_reach_dialog_spec(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny"]})
        request = (
            GrantChain.init(broker, dialogs)
            .permissions("camera")
            .set_dialog_tint_color("#ff0000", "#00ff00")
            .on_explain_request_reason(reason_dialog)
        )
        request.run(results)
        await settle()

        assert dialogs.current.spec.tint_colors == ("#ff0000", "#00ff00")

    @pytest.mark.asyncio
    async def test_closed_dialog_ignores_further_clicks(self, dialogs, results):
        """Only the first click on a dialog acts, later ones cannot start another prompt"""
        broker = SimulatedBroker(answers={"camera": ["deny", "deny"]})
        request = GrantChain.init(broker, dialogs).permissions("camera").on_explain_request_reason(reason_dialog)
        request.run(results)
        await settle()

        first = dialogs.current
        first.positive_control.click()
        first.positive_control.click()
        first.negative_control.click()
        await settle()

        assert broker.prompts == [["camera"], ["camera"]]
        assert dialogs.current is not first
        assert results.calls == []


class TestForwardScope:
    """ForwardScope dialog wiring"""

    @pytest.mark.asyncio
    async def test_cancel_finishes_task(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny_forever"]})
        request = (
            GrantChain.init(broker, dialogs)
            .permissions("camera")
            .on_forward_to_settings(
                lambda scope, denied: scope.show_forward_to_settings_dialog(denied, "Open settings", "Settings")
            )
        )
        request.run(results)
        await settle()

        dialog = dialogs.current
        assert dialog.negative_control is None
        dialog.cancel()

        assert not dialog.showing
        assert results.result == (False, [], ["camera"])
        assert broker.settings_visits == []

    @pytest.mark.asyncio
    async def test_forward_to_settings_without_dialog(self, results):
        broker = SimulatedBroker(answers={"camera": ["deny_forever"]}, settings_grants=["camera"])
        request = (
            GrantChain.init(broker)
            .permissions("camera")
            .on_forward_to_settings(lambda scope, denied: scope.forward_to_settings(denied))
        )
        request.run(results)
        await settle()

        assert broker.settings_visits == ["app_settings"]
        assert results.result == (True, ["camera"], [])

    @pytest.mark.asyncio
    async def test_settings_return_keeps_still_blocked_denied(self, dialogs, results):
        broker = SimulatedBroker(answers={"camera": ["deny_forever"], "contacts": ["deny_forever"]}, settings_grants=["contacts"])
        request = (
            GrantChain.init(broker, dialogs)
            .permissions("camera", "contacts")
            .on_forward_to_settings(
                lambda scope, denied: scope.show_forward_to_settings_dialog(denied, "Open settings", "Settings", "Cancel")
            )
        )
        request.run(results)
        await settle()

        dialogs.current.positive_control.click()
        await settle()

        assert results.result == (False, ["contacts"], ["camera"])
        assert request.permanently_denied == ["camera"]
