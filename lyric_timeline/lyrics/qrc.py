from __future__ import annotations

import regex

from .model import LONG_NOTE_S, LyricWord, WordTimedLine
from .yrc import make_word, parse_word_timed

_WORD_RE = regex.compile(r"([^()]*)\((\d+),(\d+)\)")  # text(startMs,durationMs)


def _parse_words(content: str, long_note_s: float) -> list[LyricWord]:
    words: list[LyricWord] = []
    for m in _WORD_RE.finditer(content):
        word = make_word(int(m.group(2)), int(m.group(3)), m.group(1), long_note_s)
        if word is not None:
            words.append(word)
    return words


def parse_qrc(text: str, *, long_note_s: float = LONG_NOTE_S) -> tuple[WordTimedLine, ...]:
    """
    Parse QQ Music word-level (QRC) lyrics. Each word's timing follows its
    text, the reverse of YRC:

        [0,1000]Some(0,200) words(200,800)

    Metadata lines such as `[ver:qrc]` or `[ar:...]` carry no numeric header
    and are skipped. Drop rules match `parse_yrc`.
    """
    return parse_word_timed(text, _parse_words, long_note_s=long_note_s, label="QRC")
