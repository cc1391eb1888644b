"""Tests for the grantchain CLI"""

import json

import pytest
from typer.testing import CliRunner

from grantchain.cli import app


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    return CliRunner()


class TestSimulate:
    def test_granted_after_retry(self, runner):
        result = runner.invoke(app, ["simulate", "camera", "--answer", "camera=deny,grant", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["all_granted"] is True
        assert data["granted"] == ["camera"]
        assert data["prompts"] == [["camera"], ["camera"]]
        assert len(data["dialogs"]) == 1

    def test_declined_forward_exits_nonzero(self, runner):
        result = runner.invoke(
            app, ["simulate", "camera", "-a", "camera=deny_forever", "--dialog", "decline", "--json"],
        )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["denied"] == ["camera"]
        assert data["settings_visits"] == []

    def test_special_permission_from_settings(self, runner):
        result = runner.invoke(
            app, ["simulate", "manage_external_storage", "-s", "manage_external_storage", "--json"],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["granted"] == ["manage_external_storage"]
        assert data["settings_visits"] == ["manage_storage_settings"]

    def test_table_output(self, runner):
        result = runner.invoke(app, ["simulate", "camera", "-g", "camera"])

        assert result.exit_code == 0
        assert "camera" in result.stdout
        assert "All granted" in result.stdout

    def test_bad_answer_format(self, runner):
        result = runner.invoke(app, ["simulate", "camera", "-a", "camera"])

        assert result.exit_code != 0

    def test_uses_config_file(self, runner, tmp_path):
        config = tmp_path / "custom.json"
        config.write_text(json.dumps({
            "request": {"normal_permissions": ["contacts"]},
            "scenario": {"granted": ["contacts"]},
        }))

        result = runner.invoke(app, ["simulate", "--config", str(config), "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["granted"] == ["contacts"]

    def test_missing_config_file(self, runner):
        result = runner.invoke(app, ["simulate", "--config", "missing.json"])

        assert result.exit_code == 2


class TestInit:
    def test_writes_config(self, runner, tmp_path):
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        data = json.loads((tmp_path / "grantchain.json").read_text())
        assert "request" in data and "scenario" in data

    def test_refuses_to_overwrite(self, runner, tmp_path):
        (tmp_path / "grantchain.json").write_text("{}")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert (tmp_path / "grantchain.json").read_text() == "{}"
