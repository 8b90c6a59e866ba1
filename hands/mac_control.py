"""
╔══════════════════════════════════════════════════════════════╗
║      ChatGPT Bridge — Hands: Mac Controller                  ║
╠══════════════════════════════════════════════════════════════╣
║  macOS implementation of the automation primitives:          ║
║    • Apps — running check, activate/launch, window check     ║
║    • Keyboard — keystrokes, shortcuts (key codes)            ║
║    • Clipboard — pbcopy / pbpaste                            ║
║    • Accessibility — static-text dump, buttons, descriptions ║
║                                                              ║
║  Everything goes through System Events via osascript, so the ║
║  host process needs Accessibility permission.                ║
╚══════════════════════════════════════════════════════════════╝
"""

import logging
import os
import subprocess

from hands.automation import UIAutomation
from utils.errors import AutomationError

log = logging.getLogger("chatgpt_bridge.mac_control")

# Separates nodes in AppleScript list output; text nodes may contain newlines
NODE_SEPARATOR = "\x1e"

# pbcopy/pbpaste pick their encoding from the locale, which MCP hosts often leave unset
CLIPBOARD_ENV = {**os.environ, "LANG": "en_US.UTF-8", "LC_CTYPE": "UTF-8"}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Core: AppleScript Runners
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _run_applescript(script, timeout=30):
    """Run an AppleScript via stdin and return structured result."""
    try:
        result = subprocess.run(
            ["osascript", "-"],
            input=script, capture_output=True, text=True, encoding="utf-8", timeout=timeout
        )
        if result.returncode == 0:
            return {"success": True, "content": result.stdout.rstrip("\n")}
        else:
            return {"success": False, "error": True, "content": f"AppleScript error: {result.stderr.strip()}"}
    except subprocess.TimeoutExpired:
        return {"success": False, "error": True, "content": f"AppleScript timed out after {timeout}s"}
    except Exception as e:
        return {"success": False, "error": True, "content": f"Error: {e}"}


def _run_cmd(cmd, input_text=None, timeout=10, env=None):
    """Run a command and return structured result. Output is not stripped."""
    try:
        result = subprocess.run(
            cmd, input=input_text, capture_output=True, text=True,
            encoding="utf-8", env=env, timeout=timeout
        )
        if result.returncode == 0:
            return {"success": True, "content": result.stdout}
        else:
            return {"success": False, "error": True, "content": result.stderr.strip() or f"Exit code {result.returncode}"}
    except Exception as e:
        return {"success": False, "error": True, "content": f"Error: {e}"}


def _check(result):
    if not result["success"]:
        raise AutomationError(result["content"])
    return result["content"]


def _quote(text):
    """Quote a Python string as an AppleScript string literal."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Key combos
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

SPECIAL_KEYS = {
    "return": 36, "enter": 36, "tab": 48, "space": 49,
    "delete": 51, "escape": 53, "esc": 53,
    "up": 126, "down": 125, "left": 123, "right": 124,
    "home": 115, "end": 119, "pageup": 116, "pagedown": 121,
}

MODIFIERS = {
    "command": "command down", "cmd": "command down",
    "control": "control down", "ctrl": "control down",
    "option": "option down", "alt": "option down",
    "shift": "shift down",
}


def key_combo_command(keys):
    """
    Translate 'command+v', 'command+shift+p', 'return' into the
    System Events command that presses it.
    """
    parts = [p.strip() for p in keys.lower().split("+")]
    key = parts[-1]
    modifier_str = ", ".join(MODIFIERS.get(m, f"{m} down") for m in parts[:-1])

    if key in SPECIAL_KEYS:
        command = f"key code {SPECIAL_KEYS[key]}"
    else:
        command = f"keystroke {_quote(key)}"
    if modifier_str:
        command += f" using {{{modifier_str}}}"
    return command


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Backend
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MacAutomation(UIAutomation):
    """System Events backend. Each call is one osascript run."""

    def __init__(self, timeout=30):
        self.timeout = timeout

    def _script(self, script):
        return _check(_run_applescript(script, timeout=self.timeout))

    def _in_process(self, name, body):
        return self._script(f'''
        tell application "System Events"
            tell process {_quote(name)}
                {body}
            end tell
        end tell
        ''')

    # ── Apps ─────────────────────────────────────────

    def is_process_running(self, name):
        out = self._script(f'''
        tell application "System Events"
            return application process {_quote(name)} exists
        end tell
        ''')
        return out.strip().lower() == "true"

    def activate_application(self, name):
        self._script(f"tell application {_quote(name)} to activate")

    def has_window(self, name):
        out = self._in_process(name, "return (count of windows) > 0")
        return out.strip().lower() == "true"

    # ── Accessibility ────────────────────────────────

    def get_front_window_text_nodes(self, name):
        out = self._in_process(name, '''
                set allUIElements to entire contents of front window
                set conversationText to {}
                repeat with e in allUIElements
                    try
                        if (role of e) is "AXStaticText" then
                            set d to description of e
                            if d is not missing value then set end of conversationText to (d as text)
                        end if
                    end try
                end repeat
                set AppleScript's text item delimiters to (character id 30)
                return conversationText as text''')
        if not out:
            return []
        return out.split(NODE_SEPARATOR)

    def click_control(self, name, label, path):
        self._in_process(name, f"click button {_quote(label)} of {path}")

    def get_button_names(self, name, path):
        out = self._in_process(name, f'''
                set names to {{}}
                repeat with b in (buttons of {path})
                    set n to name of b
                    if n is not missing value then set end of names to (n as text)
                end repeat
                set AppleScript's text item delimiters to (character id 30)
                return names as text''')
        return out.split(NODE_SEPARATOR) if out else []

    def get_element_descriptions(self, name, role):
        out = self._in_process(name, f'''
                set descs to {{}}
                repeat with e in (entire contents of front window)
                    try
                        if (role of e) is {_quote(role)} then
                            set d to description of e
                            if d is not missing value then set end of descs to (d as text)
                        end if
                    end try
                end repeat
                set AppleScript's text item delimiters to (character id 30)
                return descs as text''')
        return out.split(NODE_SEPARATOR) if out else []

    # ── Keyboard ─────────────────────────────────────

    def send_keystrokes(self, name, text):
        self._in_process(name, f"keystroke {_quote(text)}")

    def send_key_combo(self, name, keys):
        self._in_process(name, key_combo_command(keys))

    # ── Clipboard ────────────────────────────────────

    def get_clipboard(self):
        return _check(_run_cmd(["pbpaste"], env=CLIPBOARD_ENV))

    def set_clipboard(self, text):
        _check(_run_cmd(["pbcopy"], input_text=text, env=CLIPBOARD_ENV))
        log.debug(f"Copied {len(text)} chars to clipboard")
