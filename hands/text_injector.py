"""
╔══════════════════════════════════════════╗
║  ChatGPT Bridge — Hands: Text Injector   ║
╚══════════════════════════════════════════╝

Delivers a prompt into the ChatGPT input field by pasting it, since
System Events `keystroke` mangles anything outside plain ASCII.
The user's clipboard is saved first and put back on every exit path.

    with injector.inject(prompt) as delivery:
        poller.poll(prompt, on_first_snapshot=delivery.restore_clipboard)
"""

import logging
import time
from contextlib import contextmanager

from utils.errors import AutomationError, InjectionFailed

log = logging.getLogger("chatgpt_bridge.injector")


class ClipboardGuard:
    """Holds the saved clipboard and restores it at most once."""

    def __init__(self, automation):
        self.automation = automation
        self.saved = None
        self.restored = False

    def save(self):
        self.saved = self.automation.get_clipboard()

    def restore_clipboard(self):
        if self.restored or self.saved is None:
            return
        self.restored = True
        try:
            self.automation.set_clipboard(self.saved)
            log.debug("📋 Clipboard restored")
        except AutomationError as e:
            log.warning(f"📋 Could not restore clipboard: {e}")


class TextInjector:
    def __init__(self, automation, app_name, sidebar_path="group 1 of group 1 of window 1",
                 select_delay=1.0, paste_delay=0.5, sleep=time.sleep):
        self.automation = automation
        self.app_name = app_name
        self.sidebar_path = sidebar_path
        self.select_delay = select_delay
        self.paste_delay = paste_delay
        self._sleep = sleep

    def select_conversation(self, conversation_id):
        """Best-effort: a missing sidebar button leaves the current chat active."""
        try:
            self.automation.click_control(self.app_name, conversation_id, self.sidebar_path)
            self._sleep(self.select_delay)
            log.info(f"💬 Switched to conversation {conversation_id!r}")
        except AutomationError as e:
            log.warning(f"💬 Conversation {conversation_id!r} not selectable, using the active one: {e}")

    @contextmanager
    def inject(self, prompt_text, conversation_id=None):
        """Paste and submit `prompt_text`; yields the clipboard guard."""
        if conversation_id:
            self.select_conversation(conversation_id)

        guard = ClipboardGuard(self.automation)
        try:
            try:
                guard.save()
                self.automation.send_key_combo(self.app_name, "command+a")
                self.automation.send_key_combo(self.app_name, "delete")
                self.automation.set_clipboard(prompt_text)
                self.automation.send_key_combo(self.app_name, "command+v")
                self._sleep(self.paste_delay)
                self.automation.send_key_combo(self.app_name, "return")
            except AutomationError as e:
                raise InjectionFailed(f"Could not deliver prompt to {self.app_name}: {e}") from e
            log.info(f"📨 Prompt submitted ({len(prompt_text)} chars)")
            yield guard
        finally:
            guard.restore_clipboard()
