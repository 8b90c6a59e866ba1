"""
╔══════════════════════════════════════════╗
║   ChatGPT Bridge — Test Suite: Bridge    ║
╚══════════════════════════════════════════╝

End-to-end ask / get_conversations through the orchestrator with a
scripted automation layer: app launch, empty and timed-out replies,
conversation listing fallbacks, and the single-slot request lock.
"""

import copy
import threading
import unittest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))
from bridge import ChatGPTBridge
from hands.conversation_lister import ConversationLister
from utils.config import DEFAULTS
from utils.errors import ApplicationUnavailable, AutomationUnavailable, BridgeBusy, EmptyResponse
from fake_automation import FakeAutomation, no_sleep


def _config(**poller):
    config = copy.deepcopy(DEFAULTS)
    config["poller"].update(poller)
    return config


class TestAsk(unittest.TestCase):

    def test_two_plus_two(self):
        automation = FakeAutomation(snapshots=[["What is 2+2?"], ["What is 2+2?", "4"]])
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        self.assertEqual(bridge.ask("What is 2+2?"), "4")
        self.assertEqual(automation.clipboard, "original clip")

    def test_clipboard_restored_after_first_snapshot(self):
        automation = FakeAutomation(snapshots=[["q", "a"]])
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        bridge.ask("q")
        names = automation.call_names()
        first_read = names.index("get_front_window_text_nodes")
        restore = len(names) - 1 - names[::-1].index("set_clipboard")
        self.assertEqual(restore, first_read + 1)

    def test_launches_app_when_not_running(self):
        automation = FakeAutomation(running=False, snapshots=[["q", "a."]])
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        self.assertEqual(bridge.ask("q"), "a.")
        self.assertIn("activate_application", automation.call_names())

    def test_app_cannot_launch(self):
        automation = FakeAutomation(running=False, launchable=False)
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        with self.assertRaises(ApplicationUnavailable):
            bridge.ask("q")
        self.assertNotIn("get_clipboard", automation.call_names())

    def test_activate_error_is_application_unavailable(self):
        automation = FakeAutomation(fail={"activate_application"})
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        with self.assertRaises(ApplicationUnavailable):
            bridge.ask("q")

    def test_timeout_returns_last_text(self):
        snapshots = [["q", f"noisy {i}"] for i in range(20)]
        automation = FakeAutomation(snapshots=snapshots)
        bridge = ChatGPTBridge(_config(max_wait_seconds=5), automation, sleep=no_sleep)
        self.assertEqual(bridge.ask("q"), "noisy 4")

    def test_chrome_only_reply_is_empty(self):
        automation = FakeAutomation(snapshots=[["Older chat", "What is 2+2?", "Regenerate"]])
        bridge = ChatGPTBridge(_config(), automation, sleep=no_sleep)
        self.assertEqual(bridge.ask("What is 2+2?"), "")

    def test_empty_after_timeout(self):
        automation = FakeAutomation(snapshots=[[]])
        bridge = ChatGPTBridge(_config(max_wait_seconds=5), automation, sleep=no_sleep)
        with self.assertRaises(EmptyResponse):
            bridge.ask("q")
        self.assertEqual(automation.clipboard, "original clip")

    def test_lock_released_after_error(self):
        automation = FakeAutomation(snapshots=[[]])
        bridge = ChatGPTBridge(_config(max_wait_seconds=2), automation, sleep=no_sleep)
        with self.assertRaises(EmptyResponse):
            bridge.ask("q")
        self.assertFalse(bridge._lock.locked())


class TestRequestLock(unittest.TestCase):

    def _busy_bridge(self, policy, lock_timeout=0.05):
        config = _config()
        config["server"]["busy_policy"] = policy
        config["server"]["lock_timeout"] = lock_timeout
        return ChatGPTBridge(config, FakeAutomation(buttons=["Chat A"]), sleep=no_sleep)

    def test_reject_policy(self):
        bridge = self._busy_bridge("reject")
        bridge._lock.acquire()
        try:
            with self.assertRaises(BridgeBusy):
                bridge.get_conversations()
        finally:
            bridge._lock.release()

    def test_block_policy_times_out(self):
        bridge = self._busy_bridge("block")
        bridge._lock.acquire()
        try:
            with self.assertRaises(BridgeBusy):
                bridge.get_conversations()
        finally:
            bridge._lock.release()

    def test_block_policy_waits_for_release(self):
        bridge = self._busy_bridge("block", lock_timeout=5)
        bridge._lock.acquire()
        timer = threading.Timer(0.05, bridge._lock.release)
        timer.start()
        self.assertEqual(bridge.get_conversations(), ["Chat A"])
        timer.join()


class TestConversationLister(unittest.TestCase):

    def test_sidebar_buttons(self):
        automation = FakeAutomation(buttons=["New chat", "Trip ideas", "Python help", ""])
        lister = ConversationLister(automation, "ChatGPT")
        self.assertEqual(lister.list_conversations(), ["Trip ideas", "Python help"])

    def test_only_new_chat_is_empty(self):
        automation = FakeAutomation(
            buttons=["New chat"],
            descriptions=["New chat", "Send message", "Attach files", "Toggle sidebar"],
        )
        lister = ConversationLister(automation, "ChatGPT")
        self.assertEqual(lister.list_conversations(), [])
        self.assertNotIn("get_element_descriptions", automation.call_names())

    def test_falls_back_to_descriptions(self):
        automation = FakeAutomation(buttons=None, descriptions=["new chat", "Recipes", "Recipes"])
        lister = ConversationLister(automation, "ChatGPT")
        self.assertEqual(lister.list_conversations(), ["Recipes"])
        self.assertIn("get_element_descriptions", automation.call_names())

    def test_not_running(self):
        lister = ConversationLister(FakeAutomation(running=False), "ChatGPT")
        with self.assertRaises(AutomationUnavailable):
            lister.list_conversations()

    def test_description_failure(self):
        automation = FakeAutomation(buttons=None, fail={"get_element_descriptions"})
        lister = ConversationLister(automation, "ChatGPT")
        with self.assertRaises(AutomationUnavailable):
            lister.list_conversations()


if __name__ == "__main__":
    unittest.main()
