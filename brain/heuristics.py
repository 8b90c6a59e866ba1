"""
╔══════════════════════════════════════════╗
║    ChatGPT Bridge — Brain: Heuristics    ║
╚══════════════════════════════════════════╝

String predicates over scraped transcript text. The poller and the
extractor only ever ask these questions, so the completion rules can
be exercised against synthetic snapshots with no UI at all.
"""

import re

STREAMING_GLYPHS = ("▍", "▌")

# Longest first: "Regenerate" must not eat the front of "Regenerate response"
CHROME_LABELS = ("Regenerate response", "Continue generating", "Regenerate")

COMPLETION_LABELS = ("regenerate", "continue generating")

SENTENCE_END = re.compile(r"[.!?…。！？]['\")\]”’*`]*$")


def is_streaming(text, glyphs=STREAMING_GLYPHS):
    """True while the streaming cursor is on screen."""
    return any(g in text for g in glyphs)


def is_stable(stable_ticks, required_stable_ticks):
    return stable_ticks >= required_stable_ticks


def has_completion_label(text, labels=COMPLETION_LABELS):
    """True if an affordance that only appears after generation is visible."""
    lowered = text.lower()
    return any(label.lower() in lowered for label in labels)


def contains_chrome_label(text, labels=CHROME_LABELS):
    return any(label in text for label in labels)


def looks_truncated(text, short_reply_chars=120):
    """
    Diagnostic only. A short capture with no closing punctuation and
    no paragraph break is often a reply caught mid-stream.
    """
    stripped = text.strip()
    if not stripped or len(stripped) >= short_reply_chars:
        return False
    if "\n\n" in stripped:
        return False
    return not SENTENCE_END.search(stripped)
