from __future__ import annotations

import regex

from .model import LyricFormat

_TTML_RE = regex.compile(r"<(?:[\w-]+:)?tt(?:ml)?\b")  # <tt ...> / <tt:tt ...> / <ttml>
_WORD_GROUP_RE = regex.compile(r"\(\d+,\d+,\d+\)[^(\r\n]")  # (startMs,durationMs,pitch)text
_QRC_LINE_RE = regex.compile(
    r"^\s*\[\d+,\d+\][^\r\n]*?[^()\[\]\r\n]\(\d+,\d+\)", regex.MULTILINE
)  # [startMs,durationMs]text(startMs,durationMs)
_LRC_TS_RE = regex.compile(r"\[\d+:\d+(?:\.\d+)?\]")  # [mm:ss] / [mm:ss.xx]


def detect_format(text: object) -> LyricFormat:
    """
    Markup is checked first, then word-level syntax, then line-level: YRC
    and QRC files often carry LRC-style metadata lines as well.
    """
    if not isinstance(text, str) or not text.strip():
        return LyricFormat.UNKNOWN
    if _TTML_RE.search(text):
        return LyricFormat.TTML
    if _WORD_GROUP_RE.search(text):
        return LyricFormat.WORD
    if _QRC_LINE_RE.search(text):
        return LyricFormat.QRC
    if _LRC_TS_RE.search(text):
        return LyricFormat.LINE
    return LyricFormat.UNKNOWN


def coerce_format(hint: object) -> LyricFormat | None:
    """
    Map a caller's format hint ("lrc", "yrc", "qrc", "ttml" or a LyricFormat)
    to a LyricFormat; None when there is no usable hint.
    """
    if isinstance(hint, LyricFormat):
        return None if hint is LyricFormat.UNKNOWN else hint
    if not isinstance(hint, str):
        return None
    name = hint.strip().lower()
    if name == "lrc":
        return LyricFormat.LINE
    if name == "yrc":
        return LyricFormat.WORD
    try:
        fmt = LyricFormat(name)
    except ValueError:
        return None
    return None if fmt is LyricFormat.UNKNOWN else fmt
