"""app.py — Flask backend for tide-studio.

Answers the endpoints the studio front-ends use: the config check,
CLI command execution and the SQL playground.
"""

import logging
import os
import threading

from flask import Flask, jsonify, request

from .. import __version__
from ..config import get, get_bool, get_int, load_config, to_display
from . import tool_runner

logger = logging.getLogger(__name__)

app = Flask(__name__)

STUDIO_ROOT = os.environ.get(
    "STUDIO_ROOT",
    os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))),
)
_cfg = None
_cfg_lock = threading.Lock()

CONFIG_MISSING = "No tideorm.toml found. Run 'tideorm init' first."


def get_cfg():
    global _cfg
    with _cfg_lock:
        if _cfg is None:
            _cfg = load_config(STUDIO_ROOT)
        return _cfg


@app.before_request
def _log_request():
    if get_bool(get_cfg(), "verbose"):
        logger.info("<- %s %s", request.method, request.path)


@app.after_request
def _no_cache(response):
    response.headers["Cache-Control"] = "no-cache"
    return response


@app.errorhandler(404)
def _not_found(_error):
    return jsonify({"error": "Not found"}), 404


def _body_field(name):
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return ""
    value = data.get(name)
    return value.strip() if isinstance(value, str) else ""


# ── Index ───────────────────────────────────────────────────────


@app.route("/")
def index():
    cfg = get_cfg()
    return jsonify({
        "name": "TideORM Studio",
        "version": __version__,
        "config_exists": tool_runner.config_present(cfg),
        "endpoints": ["/api/config-check", "/api/config", "/api/execute", "/api/query"],
    })


# ── Config ──────────────────────────────────────────────────────


@app.route("/api/config-check")
def api_config_check():
    return jsonify({"exists": tool_runner.config_present(get_cfg())})


@app.route("/api/config")
def api_get_config():
    return jsonify(to_display(get_cfg()))


# ── Execute ─────────────────────────────────────────────────────


@app.route("/api/execute", methods=["POST"])
def api_execute():
    cfg = get_cfg()
    if not tool_runner.config_present(cfg):
        return jsonify({"success": False, "error": CONFIG_MISSING})

    command = _body_field("command")
    if not command:
        return jsonify({"success": False, "error": "No command provided"})

    return jsonify(tool_runner.run_tool(cfg, command))


# ── Query ───────────────────────────────────────────────────────


@app.route("/api/query", methods=["POST"])
def api_query():
    query = _body_field("query")
    if not query:
        return jsonify({"success": False, "error": "No query provided"})

    logger.info("Executing query: %s", query)
    # No database connection is held by the studio; the query is acknowledged.
    result = (
        f"Query received: {query}\n\n"
        "Note: Direct SQL execution requires database connection configuration.\n"
        f"Use '{get(get_cfg(), 'tool', 'tideorm')} db' commands for database operations."
    )
    return jsonify({"success": True, "result": result})


# ── Main ────────────────────────────────────────────────────────


def serve(host=None, port=None):
    cfg = get_cfg()
    host = host or get(cfg, "host", "127.0.0.1")
    port = port or get_int(cfg, "port", 8080)
    rule = "━" * 60

    print(rule)
    print("🌊 TideORM Studio")
    print(rule)
    print()
    print(f"  Starting server at: http://{host}:{port}")
    print()
    print("  → Open the URL above in your browser")
    print("  → Press Ctrl+C to stop the server")
    print()
    print(rule)

    if not tool_runner.config_present(cfg):
        print()
        print(f"  ⚠ Warning: No {get(cfg, 'config_file', 'tideorm.toml')} found in {cfg['project_dir']}")
        print("  → Some CLI features will be disabled")
        print("  → Run 'tideorm init' to create a project configuration")
        print()

    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    serve()
