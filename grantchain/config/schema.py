"""Configuration schemas using Pydantic"""

from pydantic import BaseModel, Field, field_validator
from typing import Literal

from grantchain.permission.kinds import SpecialPermission

Answer = Literal["grant", "deny", "deny_forever"]
DialogAnswer = Literal["accept", "decline", "cancel"]


class DialogTextConfig(BaseModel):
    """Texts used by the default explain and forward callbacks"""
    explain_message: str = "The following permissions are needed to continue"
    explain_positive: str = "Allow"
    explain_negative: str | None = "Deny"
    forward_message: str = "Please allow the following permissions in settings"
    forward_positive: str = "Settings"
    forward_negative: str | None = "Cancel"


class RequestConfig(BaseModel):
    """What to request and how the request behaves"""
    normal_permissions: list[str] = Field(default_factory=list)
    special_permissions: list[SpecialPermission] = Field(default_factory=list)
    explain_reason_before_request: bool = False
    explain_on_denial: bool = True
    forward_to_settings: bool = True
    dialog_tint_colors: tuple[str, str] | None = None
    target_platform_version: int | None = None
    dialogs: DialogTextConfig = Field(default_factory=DialogTextConfig)

    @field_validator("normal_permissions")
    @classmethod
    def _no_special_in_normal(cls, value: list[str]) -> list[str]:
        special = {k.value for k in SpecialPermission}
        misplaced = [p for p in value if p in special]
        if misplaced:
            raise ValueError(f"special permissions listed as normal: {misplaced}")
        return value


class ScenarioConfig(BaseModel):
    """Scripted device used by the simulator"""
    platform_version: int = 33
    granted: list[str] = Field(default_factory=list)
    answers: dict[str, list[Answer]] = Field(default_factory=dict)
    settings_grants: list[str] = Field(default_factory=list)
    dialog_answer: DialogAnswer = "accept"
