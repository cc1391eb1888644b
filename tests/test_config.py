"""Tests for configuration loading and request building"""

import json

import pytest

from grantchain import GrantChain, SpecialPermission
from grantchain.broker import SimulatedBroker
from grantchain.config import Config, RequestConfig
from grantchain.permission import ConfigError


class TestConfig:
    def test_defaults(self):
        config = Config()

        assert config.request.normal_permissions == []
        assert config.request.special_permissions == []
        assert config.request.explain_reason_before_request is False
        assert config.scenario.platform_version == 33
        assert config.scenario.dialog_answer == "accept"

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "grantchain.json"
        path.write_text(json.dumps({
            "request": {
                "normal_permissions": ["camera"],
                "special_permissions": ["write_settings"],
                "explain_reason_before_request": True,
                "dialog_tint_colors": ["#111111", "#eeeeee"],
            },
            "scenario": {"answers": {"camera": ["deny", "grant"]}},
        }))

        config = Config.load(path)

        assert config.request.normal_permissions == ["camera"]
        assert config.request.special_permissions == [SpecialPermission.WRITE_SETTINGS]
        assert config.request.dialog_tint_colors == ("#111111", "#eeeeee")
        assert config.scenario.answers == {"camera": ["deny", "grant"]}

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"
        config = Config(request=RequestConfig(normal_permissions=["contacts"]))

        config.save(path)

        assert Config.load(path).request.normal_permissions == ["contacts"]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(ConfigError):
            Config.load(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError) as exc:
            Config.load(path)
        assert exc.value.path == path

    def test_special_permission_in_normal_list_rejected(self, tmp_path):
        path = tmp_path / "grantchain.json"
        path.write_text(json.dumps({"request": {"normal_permissions": ["write_settings"]}}))
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_unknown_answer_rejected(self, tmp_path):
        path = tmp_path / "grantchain.json"
        path.write_text(json.dumps({"scenario": {"answers": {"camera": ["maybe"]}}}))
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_no_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert Config.load() == Config()


class TestRequestFromConfig:
    def test_from_config_applies_flags(self):
        config = RequestConfig(
            normal_permissions=["camera"],
            special_permissions=[SpecialPermission.SYSTEM_ALERT_WINDOW],
            explain_reason_before_request=True,
            dialog_tint_colors=("#111111", "#eeeeee"),
            target_platform_version=22,
        )

        request = GrantChain.init(SimulatedBroker()).from_config(config)

        assert request.normal_permissions == ["camera"]
        assert request.special_permissions == [SpecialPermission.SYSTEM_ALERT_WINDOW]
        assert request.explain_before_request is True
        assert request.dialog_tint_colors == ("#111111", "#eeeeee")
        assert request.special_applies(SpecialPermission.SYSTEM_ALERT_WINDOW) is False

    def test_permissions_split_by_kind(self):
        request = GrantChain.init(SimulatedBroker()).permissions(["camera", "write_settings", "camera"])

        assert request.normal_permissions == ["camera"]
        assert request.special_permissions == [SpecialPermission.WRITE_SETTINGS]
