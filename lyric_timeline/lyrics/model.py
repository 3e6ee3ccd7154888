from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

LONG_NOTE_S = 2.0  # sustained-note threshold for emphasized words


class LineKind(str, Enum):
    LINE = "line"
    WORD = "word"


class LyricFormat(str, Enum):
    LINE = "line"  # LRC
    WORD = "word"  # YRC
    QRC = "qrc"
    TTML = "ttml"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class LyricWord:
    start_time: float
    duration: float
    text: str
    emphasized: bool = False
    pitch: int = 0

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration


@dataclass(frozen=True, slots=True)
class LyricLine:
    """Line-level (LRC) lyric: one timestamp, no word timing."""

    start_time: float
    text: str
    end_time: float | None = None
    translation: str | None = None
    romanization: str | None = None
    kind: LineKind = field(default=LineKind.LINE, init=False)


@dataclass(frozen=True, slots=True)
class WordTimedLine:
    """Word-level (YRC, QRC, TTML) lyric: line timing plus per-word timing."""

    start_time: float
    end_time: float
    text: str
    words: tuple[LyricWord, ...]
    translation: str | None = None
    romanization: str | None = None
    kind: LineKind = field(default=LineKind.WORD, init=False)


AnyLine = Union[LyricLine, WordTimedLine]


@dataclass(frozen=True, slots=True)
class LyricSet:
    lines: tuple[AnyLine, ...] = ()
    plain_lines: tuple[LyricLine, ...] = ()
    time_offset_ms: int = 0
    tags: tuple[tuple[str, str], ...] = ()  # (key, value) sorted by key
    has_translation: bool = False
    has_romanization: bool = False
    has_word_timing: bool = False
    has_word_translation: bool = False

    @classmethod
    def empty(cls) -> "LyricSet":
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def tag_map(self) -> dict[str, str]:
        return dict(self.tags)

    @property
    def word_timed(self) -> bool:
        return bool(self.lines) and self.lines[0].kind is LineKind.WORD
