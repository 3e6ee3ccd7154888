from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from lyric_timeline.lyrics.model import AnyLine, LyricSet, LyricWord, WordTimedLine

if TYPE_CHECKING:
    from lyric_timeline.config import TimingConfig

# Empirically tuned against perceived highlight latency; keep exact values.
LOOKAHEAD_S = 0.6
WORD_END_LEAD_S = 0.1
WORD_START_LEAD_S = 0.2


class WordStatus(str, Enum):
    PENDING = "pending"
    PLAYING = "playing"
    PLAYED = "played"


@dataclass(frozen=True, slots=True)
class WordProgress:
    word: LyricWord
    status: WordStatus
    fraction: float


def find_current_line(lines: Sequence[AnyLine], current_time: float, lookahead: float = LOOKAHEAD_S) -> int:
    """
    Index of the active line-level line, or -1 before the first one.

    The cutoff is the first line starting at or after `current_time +
    lookahead`; the line before it is active. Past the last cutoff the last
    line stays active.
    """
    if not lines:
        return -1
    threshold = current_time + lookahead
    for i, line in enumerate(lines):
        if line.start_time >= threshold:
            return i - 1
    return len(lines) - 1


def _previous_with_words(lines: Sequence[AnyLine], idx: int) -> int:
    while idx >= 0 and not getattr(lines[idx], "words", ()):
        idx -= 1
    return idx


def find_current_word_line(
    lines: Sequence[AnyLine],
    current_time: float,
    end_lead: float = WORD_END_LEAD_S,
    start_lead: float = WORD_START_LEAD_S,
) -> int:
    """
    Index of the active word-level line, or -1 before the first one.

    A line stops the scan once its last word still ends at or after
    `current_time + end_lead` AND it starts at or after `current_time +
    start_lead`; the line with words before it is active. Lines without
    words are never active.
    """
    if not lines:
        return -1
    for i, line in enumerate(lines):
        words = getattr(line, "words", ())
        if not words:
            continue
        last = words[-1]
        line_end = last.start_time + last.duration
        if line_end >= current_time + end_lead and line.start_time >= current_time + start_lead:
            return _previous_with_words(lines, i - 1)
    return _previous_with_words(lines, len(lines) - 1)


def find_active_line(lyric_set: LyricSet, current_time: float, timing: TimingConfig | None = None) -> int:
    if timing is None:
        if lyric_set.word_timed:
            return find_current_word_line(lyric_set.lines, current_time)
        return find_current_line(lyric_set.lines, current_time)
    if lyric_set.word_timed:
        return find_current_word_line(
            lyric_set.lines,
            current_time,
            end_lead=timing.word_end_lead_s,
            start_lead=timing.word_start_lead_s,
        )
    return find_current_line(lyric_set.lines, current_time, lookahead=timing.lookahead_s)


def word_progress(line: WordTimedLine, current_time_ms: float) -> list[WordProgress]:
    out: list[WordProgress] = []
    for w in line.words:
        start_ms = w.start_time * 1000
        end_ms = start_ms + w.duration * 1000
        if current_time_ms < start_ms:
            out.append(WordProgress(w, WordStatus.PENDING, 0.0))
        elif current_time_ms > end_ms:
            out.append(WordProgress(w, WordStatus.PLAYED, 1.0))
        else:
            out.append(WordProgress(w, WordStatus.PLAYING, (current_time_ms - start_ms) / (end_ms - start_ms)))
    return out
