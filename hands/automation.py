"""
╔══════════════════════════════════════════════════════════════╗
║      ChatGPT Bridge — Hands: Automation Interface            ║
╠══════════════════════════════════════════════════════════════╣
║  The primitives the bridge needs from the host OS automation ║
║  layer. One implementation per platform, picked once at      ║
║  startup by probe_automation(). Business logic never asks    ║
║  which platform it is running on.                            ║
╚══════════════════════════════════════════════════════════════╝
"""

import logging
import shutil
import sys

from utils.errors import AutomationUnavailable

log = logging.getLogger("chatgpt_bridge.automation")


class UIAutomation:
    """Imperative UI-scripting primitives. No retries, no policy.

    Every method raises utils.errors.AutomationError on failure.
    """

    def is_process_running(self, name):
        raise NotImplementedError

    def activate_application(self, name):
        """Bring `name` to the front, launching it if needed."""
        raise NotImplementedError

    def has_window(self, name):
        raise NotImplementedError

    def get_front_window_text_nodes(self, name):
        """Descriptions of every static-text element of the front window, in document order."""
        raise NotImplementedError

    def click_control(self, name, label, path):
        raise NotImplementedError

    def send_keystrokes(self, name, text):
        raise NotImplementedError

    def send_key_combo(self, name, keys):
        """Press a shortcut such as 'command+v' or 'return'."""
        raise NotImplementedError

    def get_clipboard(self):
        raise NotImplementedError

    def set_clipboard(self, text):
        raise NotImplementedError

    def get_button_names(self, name, path):
        raise NotImplementedError

    def get_element_descriptions(self, name, role):
        raise NotImplementedError


def probe_automation(platform=None):
    """Return the automation backend for this host."""
    platform = platform or sys.platform
    if platform == "darwin":
        if not shutil.which("osascript"):
            raise AutomationUnavailable("osascript not found on PATH", guidance=False)
        from hands.mac_control import MacAutomation
        log.info("🖐  Automation backend: macOS (AppleScript / System Events)")
        return MacAutomation()
    raise AutomationUnavailable(
        f"No UI automation backend for platform '{platform}'. The ChatGPT desktop bridge runs on macOS only.",
        guidance=False,
    )
