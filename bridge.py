"""
╔══════════════════════════════════════════════════════════════╗
║      ChatGPT Bridge — Orchestrator                           ║
╠══════════════════════════════════════════════════════════════╣
║  One request at a time against the one ChatGPT window:       ║
║    ensure app ─▶ inject ─▶ poll ─▶ extract                   ║
║                                                              ║
║  The request lock is single-slot. busy_policy decides what a ║
║  second caller gets while a reply is streaming:              ║
║    block  — wait up to lock_timeout, then BridgeBusy         ║
║    reject — BridgeBusy right away                            ║
╚══════════════════════════════════════════════════════════════╝
"""

import logging
import threading
import time
from contextlib import contextmanager

from brain.extractor import ResponseExtractor
from brain.poller import ResponsePoller
from hands.conversation_lister import ConversationLister
from hands.text_injector import TextInjector
from utils.errors import ApplicationUnavailable, AutomationError, BridgeBusy, EmptyResponse

log = logging.getLogger("chatgpt_bridge.bridge")


class ChatGPTBridge:
    def __init__(self, config, automation, sleep=time.sleep):
        self.config = config
        self.automation = automation
        self._sleep = sleep

        app_cfg = config["app"]
        self.app_name = app_cfg["name"]
        self.launch_wait = app_cfg.get("launch_wait", 2)

        server_cfg = config.get("server", {})
        self.busy_policy = server_cfg.get("busy_policy", "block")
        self.lock_timeout = server_cfg.get("lock_timeout", 300)
        self._lock = threading.Lock()

        inj_cfg = config.get("injector", {})
        self.injector = TextInjector(
            automation, self.app_name,
            sidebar_path=app_cfg["sidebar_path"],
            select_delay=inj_cfg.get("select_delay", 1.0),
            paste_delay=inj_cfg.get("paste_delay", 0.5),
            sleep=sleep,
        )

        ext_cfg = config["extractor"]
        self.poller = ResponsePoller(
            automation, self.app_name,
            streaming_glyphs=ext_cfg["streaming_glyphs"],
            sleep=sleep,
        )
        self.extractor = ResponseExtractor(
            streaming_glyphs=ext_cfg["streaming_glyphs"],
            chrome_labels=ext_cfg["chrome_labels"],
            short_reply_chars=ext_cfg.get("short_reply_chars", 120),
        )
        self.lister = ConversationLister(
            automation, self.app_name,
            sidebar_path=app_cfg["sidebar_path"],
            new_chat_labels=app_cfg.get("new_chat_labels", ["New chat"]),
        )

    # ── Request lock ─────────────────────────────────

    @contextmanager
    def _exclusive(self):
        if self.busy_policy == "reject":
            acquired = self._lock.acquire(blocking=False)
        else:
            acquired = self._lock.acquire(timeout=self.lock_timeout)
        if not acquired:
            raise BridgeBusy(f"{self.app_name} is busy with another request. Try again when it finishes.")
        try:
            yield
        finally:
            self._lock.release()

    # ── App access ───────────────────────────────────

    def ensure_app(self):
        """Make sure the app is running and frontmost, launching it if needed."""
        try:
            running = self.automation.is_process_running(self.app_name)
            if not running:
                log.info(f"🚀 {self.app_name} is not running, attempting to launch...")
            self.automation.activate_application(self.app_name)
            if not running:
                self._sleep(self.launch_wait)
                running = self.automation.is_process_running(self.app_name)
        except AutomationError as e:
            raise ApplicationUnavailable(
                f"Could not activate {self.app_name}. Please make sure it is installed and start it manually. ({e})"
            ) from e
        if not running:
            raise ApplicationUnavailable(f"{self.app_name} did not start. Please start it manually.")

    # ── Operations ───────────────────────────────────

    def ask(self, prompt, conversation_id=None):
        """Send `prompt` and return the cleaned reply text."""
        poll_cfg = self.config["poller"]
        with self._exclusive():
            self.ensure_app()
            with self.injector.inject(prompt, conversation_id) as delivery:
                result = self.poller.poll(
                    prompt,
                    max_wait_seconds=poll_cfg["max_wait_seconds"],
                    tick_interval_seconds=poll_cfg["tick_interval_seconds"],
                    required_stable_ticks=poll_cfg["required_stable_ticks"],
                    on_first_snapshot=delivery.restore_clipboard,
                )

            if not result.text.strip():
                raise EmptyResponse(
                    f"No readable text found in the {self.app_name} window after {result.elapsed_seconds}s."
                )
            return self.extractor.extract(result.text, prompt)

    def get_conversations(self):
        with self._exclusive():
            return self.lister.list_conversations()
