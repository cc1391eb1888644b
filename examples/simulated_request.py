#!/usr/bin/env python
"""
Simulated request - walks a permission request through a scripted device

This example:
1. Declares two prompt permissions and all-files access
2. Denies the camera once, then grants it after the rationale dialog
3. Blocks the microphone, which gets forwarded to the settings screen
4. Prints the aggregated result
"""

import asyncio

import grantchain
from grantchain.broker import SimulatedBroker
from grantchain.dialog import auto_dialog_factory


async def main():
    broker = SimulatedBroker(
        answers={"camera": ["deny", "grant"], "microphone": ["deny_forever"]},
        settings_grants=["microphone", "manage_external_storage"],
    )
    transcript: list[str] = []

    request = (
        grantchain.init(broker, auto_dialog_factory("accept", transcript))
        .permissions("camera", "microphone", "manage_external_storage")
        .on_explain_request_reason(
            lambda scope, denied, before: scope.show_request_reason_dialog(
                denied, f"Needed to continue: {', '.join(denied)}", "Allow", "Deny"
            )
        )
        .on_forward_to_settings(
            lambda scope, denied: scope.show_forward_to_settings_dialog(
                denied, f"Allow in settings: {', '.join(denied)}", "Settings", "Cancel"
            )
        )
    )

    result = await request.request()

    print("Dialogs shown:")
    for message in transcript:
        print(f"  - {message}")
    print(f"Prompts: {broker.prompts}")
    print(f"Settings visits: {broker.settings_visits}")
    print(f"All granted: {result.all_granted}")
    print(f"Granted: {result.granted}")
    print(f"Denied: {result.denied}")


if __name__ == "__main__":
    asyncio.run(main())
