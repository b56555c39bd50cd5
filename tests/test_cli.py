from __future__ import annotations

import json

import pytest
import structlog

from apps.agent import cli


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BREVO_API_KEY", raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    yield
    # main() points structlog at the captured stderr
    structlog.reset_defaults()


def test_list_prints_every_ability(capsys):
    assert cli.main(["list"]) == 0
    lines = [l for l in capsys.readouterr().out.splitlines() if l.startswith("- ")]
    assert len(lines) == 22
    assert any("brevo/delete-contact" in l and "destructive" in l for l in lines)


def test_describe(capsys):
    assert cli.main(["describe", "brevo/list-contacts"]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["name"] == "brevo/list-contacts"
    assert doc["input_schema"]["properties"]["limit"]["maximum"] == 1000


def test_describe_unknown(capsys):
    assert cli.main(["describe", "brevo/nope"]) == 1
    assert "error" in capsys.readouterr().err


def test_run_without_key_fails_cleanly(capsys):
    assert cli.main(["run", "brevo/get-account"]) == 1
    out = json.loads(capsys.readouterr().out)
    assert out == {
        "success": False,
        "message": "Brevo API key not configured. Install and configure the Brevo plugin first.",
    }


def test_run_bad_json(capsys):
    assert cli.main(["run", "brevo/list-contacts", "{not json"]) == 2
    assert "invalid JSON" in capsys.readouterr().err


def test_run_missing_config_file(capsys):
    assert cli.main(["run", "brevo/get-account", "--config", "missing.yaml"]) == 2


def test_run_without_capability_is_denied(capsys):
    assert cli.main(["run", "brevo/get-account", "--capability", "read"]) == 1
    assert "Permission denied" in json.loads(capsys.readouterr().out)["message"]


def test_audited_run_shows_in_runs(capsys):
    assert cli.main(["init-db"]) == 0
    cli.main(["run", "brevo/get-account", "--audit"])
    capsys.readouterr()

    assert cli.main(["runs", "--status", "error"]) == 0
    out = capsys.readouterr().out
    assert "ability=brevo/get-account" in out
    assert "status=error" in out


def test_runs_empty(capsys):
    assert cli.main(["runs"]) == 0
    assert "No ability runs recorded." in capsys.readouterr().out
