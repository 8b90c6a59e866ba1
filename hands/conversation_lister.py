"""
╔══════════════════════════════════════════╗
║ ChatGPT Bridge — Hands: Conversations    ║
╚══════════════════════════════════════════╝

Reads saved conversation titles from the ChatGPT sidebar.
"""

import logging

from utils.errors import AutomationError, AutomationUnavailable

log = logging.getLogger("chatgpt_bridge.conversations")


class ConversationLister:
    def __init__(self, automation, app_name, sidebar_path="group 1 of group 1 of window 1",
                 new_chat_labels=("New chat",)):
        self.automation = automation
        self.app_name = app_name
        self.sidebar_path = sidebar_path
        self.new_chat_labels = {label.strip().lower() for label in new_chat_labels}

    def _require_window(self):
        try:
            running = self.automation.is_process_running(self.app_name)
            has_window = running and self.automation.has_window(self.app_name)
        except AutomationError as e:
            raise AutomationUnavailable(f"Could not query {self.app_name}: {e}") from e
        if not running:
            raise AutomationUnavailable(f"{self.app_name} is not running.", guidance=False)
        if not has_window:
            raise AutomationUnavailable(f"{self.app_name} has no open window.", guidance=False)

    def _filter(self, names):
        titles = []
        for name in names:
            title = (name or "").strip()
            if not title or title.lower() in self.new_chat_labels or title in titles:
                continue
            titles.append(title)
        return titles

    def list_conversations(self):
        """Sidebar button names; every button description in the window only if the sidebar can't be read."""
        self._require_window()

        try:
            titles = self._filter(self.automation.get_button_names(self.app_name, self.sidebar_path))
            log.info(f"🗂  {len(titles)} conversation(s) found")
            return titles
        except AutomationError as e:
            log.debug(f"Sidebar button scan failed ({e}), scanning the whole window")

        try:
            titles = self._filter(self.automation.get_element_descriptions(self.app_name, "AXButton"))
        except AutomationError as e:
            raise AutomationUnavailable(f"Could not read conversations from {self.app_name}: {e}") from e
        log.info(f"🗂  {len(titles)} conversation(s) found")
        return titles
