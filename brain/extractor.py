"""
╔══════════════════════════════════════════╗
║ ChatGPT Bridge — Brain: Reply Extractor  ║
╚══════════════════════════════════════════╝

Turns the raw static-text dump of the ChatGPT window into the answer:
everything after the last occurrence of the prompt, scrubbed of the
streaming cursor and button labels. When the prompt can't be found
the whole dump is returned (cleaned) rather than failing.
"""

import logging
import re

from brain.heuristics import CHROME_LABELS, STREAMING_GLYPHS, looks_truncated

log = logging.getLogger("chatgpt_bridge.extractor")


def prompt_pattern(prompt):
    """Regex for `prompt` that ignores how whitespace and line breaks were rendered."""
    words = prompt.split()
    if not words:
        return None
    return re.compile(r"\s+".join(re.escape(w) for w in words))


def locate_reply(raw_text, prompt):
    """Text after the last rendering of `prompt`, or None if it isn't there."""
    pattern = prompt_pattern(prompt)
    if pattern is None:
        return None
    last = None
    for last in pattern.finditer(raw_text):
        pass
    if last is None:
        return None
    return raw_text[last.end():]


def clean(text, glyphs=STREAMING_GLYPHS, labels=CHROME_LABELS):
    """Strip cursor glyphs and chrome labels, then trim."""
    labels = sorted(labels, key=len, reverse=True)
    previous = None
    while previous != text:
        previous = text
        for glyph in glyphs:
            text = text.replace(glyph, "")
        for label in labels:
            text = text.replace(label, "")
    return text.strip()


class ResponseExtractor:
    def __init__(self, streaming_glyphs=STREAMING_GLYPHS, chrome_labels=CHROME_LABELS,
                 short_reply_chars=120):
        self.streaming_glyphs = tuple(streaming_glyphs)
        self.chrome_labels = tuple(chrome_labels)
        self.short_reply_chars = short_reply_chars

    def clean(self, text):
        return clean(text, self.streaming_glyphs, self.chrome_labels)

    def extract(self, raw_text, prompt):
        reply = locate_reply(raw_text, prompt)

        if reply is None:
            log.info("🔎 Prompt not found in transcript, returning full window text")
            reply = raw_text
        elif not reply:
            log.info("🔎 Nothing after the prompt, returning full window text")
            reply = raw_text

        cleaned = self.clean(reply)

        if looks_truncated(cleaned, self.short_reply_chars):
            log.warning(f"✂️  Reply looks truncated ({len(cleaned)} chars): {cleaned[:60]!r}")
        return cleaned
