"""Run a configured permission request against a scripted device"""

import logging
from dataclasses import dataclass, field

from grantchain.broker.simulated import SimulatedBroker
from grantchain.config import Config, DialogTextConfig, RequestConfig, ScenarioConfig
from grantchain.dialog.auto import auto_dialog_factory
from grantchain.dialog.base import DialogFactory
from grantchain.permission.mediator import GrantChain
from grantchain.permission.kinds import PermissionResult
from grantchain.permission.request import PermissionRequest
from grantchain.permission.scope import ExplainScope, ForwardScope

logger = logging.getLogger(__name__)


@dataclass
class SimulationReport:
    """Outcome of a simulated request"""
    result: PermissionResult
    dialogs: list[str] = field(default_factory=list)
    prompts: list[list[str]] = field(default_factory=list)
    settings_visits: list[str] = field(default_factory=list)


def wire_default_callbacks(request: PermissionRequest, config: RequestConfig) -> PermissionRequest:
    """Attach explain and forward callbacks that show dialogs with the configured texts"""
    texts: DialogTextConfig = config.dialogs

    def explain(scope: ExplainScope, denied: list[str], before_request: bool):
        scope.show_request_reason_dialog(
            denied, texts.explain_message, texts.explain_positive, texts.explain_negative,
        )

    def forward(scope: ForwardScope, denied: list[str]):
        scope.show_forward_to_settings_dialog(
            denied, texts.forward_message, texts.forward_positive, texts.forward_negative,
        )

    if config.explain_on_denial or config.explain_reason_before_request:
        request.on_explain_request_reason(explain)
    if config.forward_to_settings:
        request.on_forward_to_settings(forward)
    return request


def build_broker(scenario: ScenarioConfig) -> SimulatedBroker:
    return SimulatedBroker(
        granted=scenario.granted,
        answers={p: list(a) for p, a in scenario.answers.items()},
        settings_grants=scenario.settings_grants,
        platform_version=scenario.platform_version,
    )


def build_request(config: Config, broker, dialog_factory: DialogFactory) -> PermissionRequest:
    chain = GrantChain.init(broker, dialog_factory)
    request = chain.from_config(config.request)
    return wire_default_callbacks(request, config.request)


async def simulate(config: Config) -> SimulationReport:
    """Run the configured request with dialogs that answer themselves"""
    broker = build_broker(config.scenario)
    transcript: list[str] = []
    factory = auto_dialog_factory(config.scenario.dialog_answer, transcript)
    request = build_request(config, broker, factory)

    result = await request.request()
    logger.info(f"Simulation finished, all granted: {result.all_granted}")
    return SimulationReport(
        result=result,
        dialogs=transcript,
        prompts=broker.prompts,
        settings_visits=broker.settings_visits,
    )
