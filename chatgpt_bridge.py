#!/usr/bin/env python3
"""
╔══════════════════════════════════════════════════════════╗
║                                                          ║
║            ChatGPT Bridge — MCP server for the           ║
║                ChatGPT desktop app on macOS              ║
║                                                          ║
╚══════════════════════════════════════════════════════════╝

Usage:
    python chatgpt_bridge.py          # serve the `chatgpt` tool on stdio

Register it with an MCP host, e.g.:
    {"command": "python", "args": ["/path/to/chatgpt_bridge.py"]}
"""

import logging
import os
import sys

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, BASE_DIR)

from bridge import ChatGPTBridge
from dispatcher import ToolDispatcher
from hands.automation import probe_automation
from server import create_server
from utils.config import load_config
from utils.errors import BridgeError
from utils.logger import setup_logger

logger = logging.getLogger("chatgpt_bridge")


def build(config, automation=None):
    """Wire config + automation backend into a ready MCP server."""
    automation = automation or probe_automation()
    bridge = ChatGPTBridge(config, automation)
    dispatcher = ToolDispatcher(bridge)
    return create_server(dispatcher, name=config["server"]["name"])


def main():
    try:
        config = load_config()
    except ValueError as e:
        sys.exit(f"Invalid config: {e}")
    setup_logger(config, BASE_DIR)
    logger.info("⚙️  Config loaded")

    try:
        server = build(config)
    except BridgeError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logger.info(f"{config['server']['name']} running on stdio (app: {config['app']['name']})")
    server.run()


if __name__ == "__main__":
    main()
