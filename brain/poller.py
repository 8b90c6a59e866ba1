"""
╔══════════════════════════════════════════════════════════════╗
║      ChatGPT Bridge — Brain: Response Poller                 ║
╠══════════════════════════════════════════════════════════════╣
║  Decides when ChatGPT has finished streaming a reply.        ║
║                                                              ║
║  The app never says "done", so every tick we:                ║
║    1. sleep one interval                                     ║
║    2. dump the front window's static text                    ║
║    3. count consecutive identical dumps                      ║
║    4. zero the count while the streaming cursor is visible   ║
║    5. add one more when a Regenerate-style button shows      ║
║                                                              ║
║  WAITING ──(stable_ticks >= required)──▶ STABLE              ║
║     └────(elapsed >= max_wait)─────────▶ TIMED_OUT           ║
╚══════════════════════════════════════════════════════════════╝
"""

import logging
import time
from dataclasses import dataclass, field

from brain.heuristics import (
    COMPLETION_LABELS,
    STREAMING_GLYPHS,
    has_completion_label,
    is_stable,
    is_streaming,
)
from utils.errors import AutomationError, AutomationUnavailable

log = logging.getLogger("chatgpt_bridge.poller")

WAITING = "WAITING"
STABLE = "STABLE"
TIMED_OUT = "TIMED_OUT"


@dataclass
class PollState:
    previous_text: str = ""
    stable_ticks: int = 0
    elapsed_seconds: float = 0


@dataclass
class PollResult:
    snapshot: list = field(default_factory=list)
    status: str = WAITING
    ticks: int = 0
    elapsed_seconds: float = 0

    @property
    def text(self):
        return "\n".join(self.snapshot)


def advance(state, current_text, glyphs=STREAMING_GLYPHS, labels=COMPLETION_LABELS):
    """Apply one tick's observation to `state` and return the new stable count."""
    if current_text == state.previous_text:
        state.stable_ticks += 1
    else:
        state.stable_ticks = 0
        state.previous_text = current_text

    if is_streaming(current_text, glyphs):
        # Cursor on screen beats any apparent stability
        state.stable_ticks = 0
    elif has_completion_label(current_text, labels):
        # Independent of the equality check above; may count twice in one tick
        state.stable_ticks += 1

    return state.stable_ticks


def validate_budget(max_wait_seconds, tick_interval_seconds, required_stable_ticks):
    """Raise ValueError for settings under which poll() could never return."""
    if tick_interval_seconds <= 0:
        raise ValueError(f"tick_interval_seconds must be > 0, got {tick_interval_seconds}")
    if required_stable_ticks <= 0:
        raise ValueError(f"required_stable_ticks must be > 0, got {required_stable_ticks}")
    if max_wait_seconds < 0:
        raise ValueError(f"max_wait_seconds must be >= 0, got {max_wait_seconds}")


class ResponsePoller:
    def __init__(self, automation, app_name, streaming_glyphs=STREAMING_GLYPHS,
                 completion_labels=COMPLETION_LABELS, sleep=time.sleep):
        self.automation = automation
        self.app_name = app_name
        self.streaming_glyphs = tuple(streaming_glyphs)
        self.completion_labels = tuple(completion_labels)
        self._sleep = sleep

    def sample(self):
        """One snapshot of the front window's static text."""
        try:
            return list(self.automation.get_front_window_text_nodes(self.app_name))
        except AutomationError as e:
            raise AutomationUnavailable(f"Could not read the {self.app_name} window: {e}") from e

    def poll(self, prompt_text, max_wait_seconds=120, tick_interval_seconds=1,
             required_stable_ticks=3, on_first_snapshot=None):
        """Block until the reply stops changing or the time budget runs out."""
        validate_budget(max_wait_seconds, tick_interval_seconds, required_stable_ticks)
        state = PollState()
        snapshot = []
        ticks = 0
        log.info(f"⏳ Waiting for reply to {len(prompt_text)}-char prompt (max {max_wait_seconds}s)")

        while True:
            self._sleep(tick_interval_seconds)
            state.elapsed_seconds += tick_interval_seconds
            ticks += 1

            snapshot = self.sample()
            if ticks == 1 and on_first_snapshot:
                on_first_snapshot()

            current_text = "\n".join(snapshot)
            advance(state, current_text, self.streaming_glyphs, self.completion_labels)
            log.debug(f"tick {ticks}: {len(snapshot)} nodes, {len(current_text)} chars, stable={state.stable_ticks}")

            if is_stable(state.stable_ticks, required_stable_ticks):
                log.info(f"✅ Reply stable after {state.elapsed_seconds}s ({ticks} ticks)")
                return PollResult(snapshot, STABLE, ticks, state.elapsed_seconds)
            if state.elapsed_seconds >= max_wait_seconds:
                log.warning(f"⌛ Reply not stable after {state.elapsed_seconds}s, using last snapshot")
                return PollResult(snapshot, TIMED_OUT, ticks, state.elapsed_seconds)
