import subprocess

import pytest

from tidestudio.config import DEFAULTS
from tidestudio.web import app as webapp
from tidestudio.web import tool_runner


@pytest.fixture
def project(tmp_path, monkeypatch):
    cfg = dict(DEFAULTS, project_dir=str(tmp_path))
    monkeypatch.setattr(webapp, "_cfg", cfg)
    return tmp_path


@pytest.fixture
def client(project):
    return webapp.app.test_client()


def _init(project):
    (project / "tideorm.toml").write_text("[database]\n")


def test_config_check(client, project):
    assert client.get("/api/config-check").get_json() == {"exists": False}
    _init(project)
    assert client.get("/api/config-check").get_json() == {"exists": True}


def test_index_and_no_cache(client):
    resp = client.get("/")
    assert resp.get_json()["name"] == "TideORM Studio"
    assert resp.headers["Cache-Control"] == "no-cache"


def test_config_endpoint_masks_secrets(client, monkeypatch):
    monkeypatch.setitem(webapp._cfg, "api_token", "s3cret")
    data = client.get("/api/config").get_json()
    assert data["api_token"] == "********"
    assert data["tool"] == "tideorm"
    assert "/api/config" in client.get("/").get_json()["endpoints"]


def test_unknown_path(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_execute_requires_config(client):
    data = client.post("/api/execute", json={"command": "migrate status"}).get_json()
    assert data == {"success": False, "error": webapp.CONFIG_MISSING}


def test_execute_requires_command(client, project):
    _init(project)
    data = client.post("/api/execute", json={"command": "  "}).get_json()
    assert data == {"success": False, "error": "No command provided"}


def test_execute_runs_tool(client, project, monkeypatch):
    _init(project)
    seen = {}

    def fake_run(args, **kwargs):
        seen["args"] = args
        seen["cwd"] = kwargs["cwd"]
        seen["stdin"] = kwargs["stdin"]
        return subprocess.CompletedProcess(args, 0, stdout="Created model\n", stderr="")

    monkeypatch.setattr(tool_runner.subprocess, "run", fake_run)
    data = client.post(
        "/api/execute", json={"command": 'make model User --fields "name:string,email:string"'}
    ).get_json()
    assert data == {"success": True, "output": "Created model\n"}
    assert seen["args"] == [
        "tideorm", "make", "model", "User", "--fields", "name:string,email:string",
    ]
    assert seen["cwd"] == str(project)
    assert seen["stdin"] is subprocess.DEVNULL


def test_query_acknowledged(client):
    data = client.post("/api/query", json={"query": "SELECT 1"}).get_json()
    assert data["success"] is True
    assert data["result"].startswith("Query received: SELECT 1")


def test_query_requires_text(client):
    data = client.post("/api/query", data="not json").get_json()
    assert data == {"success": False, "error": "No query provided"}


# ── tool_runner ────────────────────────────────────────────────


def _cfg(tmp_path):
    return dict(DEFAULTS, project_dir=str(tmp_path))


def test_output_combines_streams(tmp_path, monkeypatch):
    monkeypatch.setattr(
        tool_runner.subprocess, "run",
        lambda args, **kw: subprocess.CompletedProcess(args, 1, stdout="out", stderr="err"),
    )
    assert tool_runner.run_tool(_cfg(tmp_path), "db status") == {
        "success": False, "output": "out\nerr",
    }


def test_stderr_only(tmp_path, monkeypatch):
    monkeypatch.setattr(
        tool_runner.subprocess, "run",
        lambda args, **kw: subprocess.CompletedProcess(args, 2, stdout="", stderr="boom"),
    )
    assert tool_runner.run_tool(_cfg(tmp_path), "db status")["output"] == "boom"


def test_missing_binary(tmp_path, monkeypatch):
    def missing(args, **kw):
        raise FileNotFoundError(2, "No such file or directory", args[0])

    monkeypatch.setattr(tool_runner.subprocess, "run", missing)
    result = tool_runner.run_tool(_cfg(tmp_path), "db status")
    assert result["success"] is False
    assert result["error"].startswith("Failed to execute command:")


def test_timeout(tmp_path, monkeypatch):
    def slow(args, **kw):
        raise subprocess.TimeoutExpired(args, kw["timeout"])

    monkeypatch.setattr(tool_runner.subprocess, "run", slow)
    result = tool_runner.run_tool(_cfg(tmp_path), "migrate run")
    assert result == {"success": False, "error": "Command timed out after 300s"}


def test_unbalanced_quotes(tmp_path):
    result = tool_runner.run_tool(_cfg(tmp_path), 'make model "User')
    assert result["success"] is False
    assert result["error"].startswith("Invalid command")
