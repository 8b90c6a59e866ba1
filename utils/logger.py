"""
╔══════════════════════════════════════════╗
║    ChatGPT Bridge — Utilities: Logger    ║
╚══════════════════════════════════════════╝

Console (stderr) + rotating file logging. stdout is reserved for
the MCP stdio transport, so nothing here may write to it.
"""

import logging
import logging.handlers
import os
import sys


def setup_logger(config, base_dir):
    """Set up the bridge logger with stderr and rotating file handlers."""
    log_level = getattr(logging, config["agent"]["log_level"].upper(), logging.INFO)
    log_file = os.path.join(base_dir, config["agent"]["log_file"])
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    logger = logging.getLogger("chatgpt_bridge")
    if logger.handlers:
        return logger
    logger.setLevel(log_level)
    logger.propagate = False

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    console.setFormatter(logging.Formatter("  %(message)s"))

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    logger.addHandler(console)
    logger.addHandler(file_handler)

    return logger
