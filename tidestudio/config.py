"""config.py — Configuration loading and validation.

Reads the built-in defaults, then config/default.yaml under the project
root, then ~/.config/tide-studio/config.yaml, then TIDE_STUDIO_<KEY>
environment variables. Later layers win. Values are kept as strings;
use get_int()/get_bool() for typed access.
"""

import logging
import os
import re

import yaml

logger = logging.getLogger(__name__)

DEFAULTS = {
    "host": "127.0.0.1",
    "port": "8080",
    "backend_url": "http://127.0.0.1:8080",
    "tool": "tideorm",
    "config_file": "tideorm.toml",
    "project_dir": "",
    "command_timeout": "300",
    "toast_ttl_ms": "5000",
    "log_level": "info",
    "verbose": "false",
}

ENV_PREFIX = "TIDE_STUDIO_"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
_TRUE = ("true", "1", "yes", "on")


def _stringify(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _load_yaml(filepath):
    """Read a flat key: value YAML mapping. Nested values are ignored."""
    with open(filepath) as f:
        doc = yaml.safe_load(f)
    if not isinstance(doc, dict):
        if doc is not None:
            logger.warning("Ignoring %s: top level is not a mapping", filepath)
        return {}
    result = {}
    for key, value in doc.items():
        if isinstance(value, (dict, list)):
            logger.debug("Ignoring nested key %r in %s", key, filepath)
            continue
        result[str(key)] = _stringify(value)
    return result


def user_config_path():
    config_dir = os.environ.get(
        "XDG_CONFIG_HOME", os.path.expanduser("~/.config")
    )
    return os.path.join(config_dir, "tide-studio", "config.yaml")


def load_config(root=None):
    """Load merged configuration: defaults -> default.yaml -> user -> env.

    Returns a dict with all config keys.
    """
    cfg = dict(DEFAULTS)

    if root:
        default_path = os.path.join(root, "config", "default.yaml")
        if os.path.isfile(default_path):
            cfg.update(_load_yaml(default_path))

    user_path = user_config_path()
    if os.path.isfile(user_path):
        cfg.update(_load_yaml(user_path))

    for key in list(cfg):
        env_val = os.environ.get(ENV_PREFIX + key.upper())
        if env_val is not None:
            cfg[key] = env_val

    # Derived values
    if not cfg.get("project_dir"):
        cfg["project_dir"] = os.getcwd()

    return cfg


def get(cfg, key, default=None):
    """Get a config value with optional fallback."""
    return cfg.get(key, default) or default


def get_int(cfg, key, default=0):
    try:
        return int(cfg.get(key, default))
    except (TypeError, ValueError):
        return default


def get_bool(cfg, key, default=False):
    value = cfg.get(key)
    if value is None or value == "":
        return default
    return str(value).lower() in _TRUE


def validate(cfg):
    """Validate configuration values. Returns (ok: bool, errors: list[str])."""
    errors = []
    port = cfg.get("port", "")
    if not re.match(r"^[0-9]+$", port) or not 0 < int(port) < 65536:
        errors.append("'port' must be a number between 1 and 65535")
    ttl = cfg.get("toast_ttl_ms", "")
    if not re.match(r"^[0-9]+$", ttl) or int(ttl) == 0:
        errors.append("'toast_ttl_ms' must be a positive integer")
    if not re.match(r"^https?://", cfg.get("backend_url", "")):
        errors.append("'backend_url' must start with http:// or https://")
    if cfg.get("log_level", "").lower() not in LOG_LEVELS:
        errors.append(f"'log_level' must be one of {', '.join(LOG_LEVELS)}")
    if not re.match(r"^[0-9]+$", cfg.get("command_timeout", "")):
        errors.append("'command_timeout' must be a number of seconds")
    return len(errors) == 0, errors


def to_display(cfg):
    """Return config dict with sensitive values masked."""
    masked = {}
    for k, v in sorted(cfg.items()):
        lowered = k.lower()
        if "key" in lowered or "secret" in lowered or "token" in lowered:
            masked[k] = "********"
        else:
            masked[k] = v
    return masked
