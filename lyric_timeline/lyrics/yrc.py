from __future__ import annotations

import logging
import math
from typing import Callable

import regex

from .model import LONG_NOTE_S, LyricWord, WordTimedLine

logger = logging.getLogger(__name__)

_HEADER_RE = regex.compile(r"^\[([^\]]*)\](.*)$")  # [startMs,durationMs]rest
_WORD_RE = regex.compile(r"\((\d+),(\d+),(\d+)\)([^(]*)")  # (startMs,durationMs,pitch)text

WordScanner = Callable[[str, float], list[LyricWord]]


def _parse_header(inner: str) -> tuple[float, float] | None:
    parts = inner.split(",")
    if len(parts) < 2:
        return None
    try:
        start_ms = float(parts[0])
        duration_ms = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(start_ms) and math.isfinite(duration_ms)):
        return None
    return start_ms / 1000, duration_ms / 1000


def make_word(start_ms: int, duration_ms: int, text: str, long_note_s: float, pitch: int = 0) -> LyricWord | None:
    """None for a zero-length syllable; the rest of the line survives it."""
    duration = duration_ms / 1000
    if duration <= 0:
        return None
    return LyricWord(
        start_time=start_ms / 1000,
        duration=duration,
        text=text,
        emphasized=duration >= long_note_s,
        pitch=pitch,
    )


def _parse_words(content: str, long_note_s: float) -> list[LyricWord]:
    words: list[LyricWord] = []
    for m in _WORD_RE.finditer(content):
        word = make_word(int(m.group(1)), int(m.group(2)), m.group(4), long_note_s, pitch=int(m.group(3)))
        if word is not None:
            words.append(word)
    return words


def parse_word_timed(
    text: str,
    scan_words: WordScanner,
    *,
    long_note_s: float = LONG_NOTE_S,
    label: str = "YRC",
) -> tuple[WordTimedLine, ...]:
    """
    Shared line loop of the bracket-header formats (YRC, QRC). `scan_words`
    turns the text after the `[startMs,durationMs]` header into words.
    """
    if not isinstance(text, str):
        return ()

    out: list[WordTimedLine] = []
    skipped = 0
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue

        m = _HEADER_RE.match(line)
        header = _parse_header(m.group(1)) if m else None
        if header is None:
            skipped += 1
            continue

        start, duration = header
        words = scan_words(m.group(2).strip(), long_note_s)
        line_text = "".join(w.text for w in words)
        if not words or not line_text:
            skipped += 1
            continue

        out.append(
            WordTimedLine(
                start_time=start,
                end_time=start + duration,
                text=line_text,
                words=tuple(words),
            )
        )

    if skipped:
        logger.debug("%s: skipped %s lines without usable timing", label, skipped)
    return tuple(out)


def parse_yrc(text: str, *, long_note_s: float = LONG_NOTE_S) -> tuple[WordTimedLine, ...]:
    """
    Parse word-level (YRC) lyrics:

        [16210,3460](16210,670,0)Test(16880,410,0) line

    Lines keep file order; lines without a valid header or without any
    surviving word are dropped.
    """
    return parse_word_timed(text, _parse_words, long_note_s=long_note_s, label="YRC")
