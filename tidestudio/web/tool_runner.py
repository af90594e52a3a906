"""tool_runner.py — Run the tideorm binary for the backend.

Commands arrive as a single string from the studio and are split with shell
quoting rules, never passed through a shell.
"""

import logging
import os
import shlex
import subprocess

from ..config import get, get_int

logger = logging.getLogger(__name__)


def config_present(cfg):
    """True if the project configuration file exists in the project dir."""
    path = os.path.join(cfg["project_dir"], get(cfg, "config_file", "tideorm.toml"))
    return os.path.isfile(path)


def _combine(stdout, stderr):
    if not stdout:
        return stderr
    if stderr:
        return f"{stdout}\n{stderr}"
    return stdout


def run_tool(cfg, command):
    """Run `<tool> <args>` in the project directory.

    Returns a response dict: {"success": bool, "output": str} or
    {"success": False, "error": str} when the tool could not be run.
    """
    tool = get(cfg, "tool", "tideorm")
    timeout = get_int(cfg, "command_timeout", 300)
    try:
        args = shlex.split(command)
    except ValueError as e:
        return {"success": False, "error": f"Invalid command: {e}"}

    logger.info("Executing: %s %s", tool, command)
    try:
        result = subprocess.run(
            [tool] + args, capture_output=True, text=True, stdin=subprocess.DEVNULL,
            timeout=timeout or None, cwd=cfg["project_dir"],
        )
    except subprocess.TimeoutExpired:
        return {"success": False, "error": f"Command timed out after {timeout}s"}
    except OSError as e:
        return {"success": False, "error": f"Failed to execute command: {e}"}

    return {
        "success": result.returncode == 0,
        "output": _combine(result.stdout, result.stderr),
    }
