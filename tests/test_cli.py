import pytest

from tidestudio import cli
from tidestudio.client import EXECUTE_PATH, QUERY_PATH

from fakes import FakeTransport, configured


@pytest.fixture
def backend(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.setattr(cli, "STUDIO_ROOT", str(tmp_path))
    transport = FakeTransport(configured(True, {
        EXECUTE_PATH: {"success": True, "output": "done"},
        QUERY_PATH: {"success": True, "result": "rows"},
    }))
    monkeypatch.setattr(cli, "Transport", lambda url: transport)
    return transport


def _main(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


def test_model_command(backend, capsys):
    assert _main(["model", "User", "--fields", "name:string", "--soft-deletes"]) == 0
    assert backend.calls[-1][2] == {"command": 'make model User --fields "name:string" --soft-deletes'}
    out = capsys.readouterr().out
    assert "[generator-output]\ndone" in out
    assert "✓ Success: Model generation completed successfully." in out


def test_preview_makes_no_request(backend, capsys):
    assert _main(["preview", "User", "--no-timestamps"]) == 0
    assert backend.paths("POST") == []
    assert "tideorm make model User --timestamps=false" in capsys.readouterr().out


def test_risky_query_with_yes(backend):
    assert _main(["query", "DROP TABLE users", "--yes"]) == 0
    assert backend.calls[-1] == ("POST", QUERY_PATH, {"query": "DROP TABLE users"})


def test_risky_action_declined(backend, monkeypatch, capsys):
    monkeypatch.setattr("builtins.input", lambda prompt="": "n")
    assert _main(["action", "db-drop"]) == 1
    assert EXECUTE_PATH not in backend.paths()
    assert "Cancelled." in capsys.readouterr().out


def test_risky_action_accepted(backend, monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt="": "y")
    assert _main(["action", "migrate-fresh"]) == 0
    assert backend.calls[-1][2] == {"command": "migrate fresh"}


def test_check_reports_missing_config(backend, capsys):
    backend.responses["/api/config-check"] = {"exists": False}
    assert _main(["check"]) == 1
    assert "tideorm.toml not found" in capsys.readouterr().out


def test_invalid_config_exits_2(backend, monkeypatch):
    monkeypatch.setenv("TIDE_STUDIO_PORT", "nope")
    assert _main(["check"]) == 2
