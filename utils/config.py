"""
╔══════════════════════════════════════════╗
║    ChatGPT Bridge — Utilities: Config    ║
╚══════════════════════════════════════════╝

Loads config.yaml over built-in defaults, then applies env overrides:
  CHATGPT_BRIDGE_CONFIG     →  alternative config file path
  CHATGPT_BRIDGE_APP_NAME   →  app.name
  CHATGPT_BRIDGE_LOG_LEVEL  →  agent.log_level
  CHATGPT_BRIDGE_MAX_WAIT   →  poller.max_wait_seconds
"""

import copy
import os

import yaml

from brain.poller import validate_budget

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

DEFAULTS = {
    "app": {
        "name": "ChatGPT",
        "launch_wait": 2,
        "sidebar_path": "group 1 of group 1 of window 1",
        "new_chat_labels": ["New chat"],
    },
    "injector": {
        "select_delay": 1.0,
        "paste_delay": 0.5,
    },
    "poller": {
        "max_wait_seconds": 120,
        "tick_interval_seconds": 1,
        "required_stable_ticks": 3,
    },
    "extractor": {
        "streaming_glyphs": ["▍", "▌"],
        "chrome_labels": ["Regenerate response", "Continue generating", "Regenerate"],
        "short_reply_chars": 120,
    },
    "server": {
        "name": "ChatGPT MCP Tool",
        "busy_policy": "block",
        "lock_timeout": 300,
    },
    "agent": {
        "log_level": "INFO",
        "log_file": "logs/chatgpt_bridge.log",
    },
}


def _merge(base, override):
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path=None):
    """Load configuration from config.yaml with env var overrides.

    Raises ValueError on poller settings under which a poll could never end.
    """
    config = copy.deepcopy(DEFAULTS)

    config_path = path or os.environ.get("CHATGPT_BRIDGE_CONFIG") or os.path.join(BASE_DIR, "config.yaml")
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            _merge(config, yaml.safe_load(f) or {})

    if os.environ.get("CHATGPT_BRIDGE_APP_NAME"):
        config["app"]["name"] = os.environ["CHATGPT_BRIDGE_APP_NAME"]
    if os.environ.get("CHATGPT_BRIDGE_LOG_LEVEL"):
        config["agent"]["log_level"] = os.environ["CHATGPT_BRIDGE_LOG_LEVEL"]
    if os.environ.get("CHATGPT_BRIDGE_MAX_WAIT"):
        config["poller"]["max_wait_seconds"] = int(os.environ["CHATGPT_BRIDGE_MAX_WAIT"])

    poller = config["poller"]
    validate_budget(poller["max_wait_seconds"], poller["tick_interval_seconds"], poller["required_stable_ticks"])
    return config
