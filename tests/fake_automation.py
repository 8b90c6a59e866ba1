"""Scripted stand-in for the OS automation layer, shared by the test suite."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
from hands.automation import UIAutomation
from utils.errors import AutomationError


class FakeAutomation(UIAutomation):
    """
    Replays `snapshots` one per get_front_window_text_nodes() call,
    repeating the last one forever. Records every call in `calls`.
    """

    def __init__(self, snapshots=None, running=True, launchable=True, clipboard="original clip",
                 buttons=None, descriptions=None, fail=()):
        self.snapshots = list(snapshots or [[]])
        self.running = running
        self.launchable = launchable
        self.clipboard = clipboard
        self.buttons = buttons
        self.descriptions = descriptions or []
        self.fail = set(fail)
        self.calls = []
        self.clipboard_history = []
        self._reads = 0

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise AutomationError(f"{name} failed")

    def is_process_running(self, name):
        self._record("is_process_running", name)
        return self.running

    def activate_application(self, name):
        self._record("activate_application", name)
        if self.launchable:
            self.running = True

    def has_window(self, name):
        self._record("has_window", name)
        return self.running

    def get_front_window_text_nodes(self, name):
        self._record("get_front_window_text_nodes", name)
        snapshot = self.snapshots[min(self._reads, len(self.snapshots) - 1)]
        self._reads += 1
        return list(snapshot)

    def click_control(self, name, label, path):
        self._record("click_control", name, label, path)

    def send_keystrokes(self, name, text):
        self._record("send_keystrokes", name, text)

    def send_key_combo(self, name, keys):
        self._record("send_key_combo", name, keys)

    def get_clipboard(self):
        self._record("get_clipboard")
        return self.clipboard

    def set_clipboard(self, text):
        self._record("set_clipboard", text)
        self.clipboard = text
        self.clipboard_history.append(text)

    def get_button_names(self, name, path):
        self._record("get_button_names", name, path)
        if self.buttons is None:
            raise AutomationError("Can't get group 1 of group 1 of window 1")
        return list(self.buttons)

    def get_element_descriptions(self, name, role):
        self._record("get_element_descriptions", name, role)
        return list(self.descriptions)

    def call_names(self):
        return [c[0] for c in self.calls]


def no_sleep(seconds):
    pass
