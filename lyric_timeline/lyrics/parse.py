from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .detect import coerce_format, detect_format
from .errors import UnsupportedLyricsInput
from .lrc import LrcDocument, parse_lrc, parse_lrc_document
from .merge import MERGE_TOLERANCE_S, Channel, merge_translation
from .model import LONG_NOTE_S, LyricFormat, LyricLine, LyricSet, WordTimedLine
from .qrc import parse_qrc
from .ttml import parse_ttml
from .yrc import parse_yrc

logger = logging.getLogger(__name__)

# first non-empty key wins
_PRIMARY_KEYS = ("lrc", "lrcx")
_TRANSLATION_KEYS = ("tlrc", "tran")
_ROMANIZATION_KEYS = ("romalrc", "roma")
_WORD_KEYS = ("yrc",)
_QRC_KEYS = ("qrc",)
_TTML_KEYS = ("ttml",)
_WORD_TRANSLATION_KEYS = ("ytlrc",)

# bare-string input: detected (or hinted) format -> LyricChannels field
_STRING_CHANNEL = {
    LyricFormat.WORD: "yrc",
    LyricFormat.QRC: "qrc",
    LyricFormat.TTML: "ttml",
}


@dataclass(frozen=True, slots=True)
class LyricChannels:
    lrc: str | None = None
    translation: str | None = None
    romanization: str | None = None
    yrc: str | None = None
    word_translation: str | None = None
    qrc: str | None = None
    ttml: str | None = None

    @property
    def has_word_channel(self) -> bool:
        return bool(self.yrc or self.qrc or self.ttml)


def _channel_text(data: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if not value:
            continue
        # music-service responses wrap the text: {"lrc": {"lyric": "..."}}
        if isinstance(value, Mapping):
            value = value.get("lyric")
            if not value:
                continue
        if not isinstance(value, str):
            # treated as absent; other channels still parse
            logger.debug("Ignoring channel '%s': expected a string, got %s", key, type(value).__name__)
            continue
        return value
    return None


def channels_from(source: object, format_hint: object = None) -> LyricChannels:
    """
    `format_hint` ("lrc", "yrc", "qrc", "ttml" or a LyricFormat) skips
    detection for a bare string; an unrecognized hint falls back to it.
    """
    if isinstance(source, LyricChannels):
        return source
    if isinstance(source, str):
        if not source.strip():
            raise UnsupportedLyricsInput("Empty lyrics text")
        fmt = coerce_format(format_hint)
        if fmt is None:
            if format_hint is not None:
                logger.debug("Unknown format hint %r, detecting instead", format_hint)
            fmt = detect_format(source)
        return LyricChannels(**{_STRING_CHANNEL.get(fmt, "lrc"): source})
    if isinstance(source, Mapping):
        if not source:
            raise UnsupportedLyricsInput("Empty lyrics mapping")
        return LyricChannels(
            lrc=_channel_text(source, _PRIMARY_KEYS),
            translation=_channel_text(source, _TRANSLATION_KEYS),
            romanization=_channel_text(source, _ROMANIZATION_KEYS),
            yrc=_channel_text(source, _WORD_KEYS),
            word_translation=_channel_text(source, _WORD_TRANSLATION_KEYS),
            qrc=_channel_text(source, _QRC_KEYS),
            ttml=_channel_text(source, _TTML_KEYS),
        )
    raise UnsupportedLyricsInput(f"Unsupported lyrics input: {type(source).__name__}")


def _plain_from_words(word_lines: tuple[WordTimedLine, ...]) -> tuple[LyricLine, ...]:
    return tuple(
        LyricLine(
            start_time=w.start_time,
            text=w.text,
            end_time=w.end_time,
            translation=w.translation,
            romanization=w.romanization,
        )
        for w in word_lines
    )


def _parse_word_channel(channels: LyricChannels, long_note_s: float) -> tuple[WordTimedLine, ...]:
    # first channel that yields lines wins: yrc, then qrc, then ttml
    for text, parser in (
        (channels.yrc, parse_yrc),
        (channels.qrc, parse_qrc),
        (channels.ttml, parse_ttml),
    ):
        if text:
            lines = parser(text, long_note_s=long_note_s)
            if lines:
                return lines
    return ()


def build_lyric_set(
    channels: LyricChannels,
    *,
    long_note_s: float = LONG_NOTE_S,
    tolerance: float = MERGE_TOLERANCE_S,
) -> LyricSet:
    doc = parse_lrc_document(channels.lrc) if channels.lrc else LrcDocument(lines=())
    word_lines = _parse_word_channel(channels, long_note_s) if channels.has_word_channel else ()

    # TTML can carry its own translations
    has_word_translation = any(w.translation for w in word_lines)
    plain_lines = doc.lines
    if not plain_lines and word_lines:
        plain_lines = _plain_from_words(word_lines)

    if channels.translation:
        plain_lines = merge_translation(
            plain_lines, parse_lrc(channels.translation), Channel.TRANSLATION, tolerance=tolerance
        )
    if channels.romanization:
        plain_lines = merge_translation(
            plain_lines, parse_lrc(channels.romanization), Channel.ROMANIZATION, tolerance=tolerance
        )

    if channels.has_word_channel and channels.word_translation:
        word_lines = merge_translation(
            word_lines, parse_lrc(channels.word_translation), Channel.TRANSLATION, tolerance=tolerance
        )
        has_word_translation = True

    return LyricSet(
        lines=word_lines or plain_lines,
        plain_lines=plain_lines,
        time_offset_ms=doc.offset_ms,
        tags=tuple(sorted((doc.tags or {}).items())),
        has_translation=bool(channels.translation),
        has_romanization=bool(channels.romanization),
        has_word_timing=channels.has_word_channel,
        has_word_translation=has_word_translation,
    )


def parse_lyrics(
    source: object,
    *,
    format_hint: object = None,
    long_note_s: float = LONG_NOTE_S,
    tolerance: float = MERGE_TOLERANCE_S,
) -> LyricSet:
    """
    Parse raw lyrics into a LyricSet.

    `source` is a lyrics string (format auto-detected unless `format_hint`
    names one), a mapping of channels (lrc/lrcx, tlrc/tran, romalrc/roma,
    yrc, qrc, ttml, ytlrc) or a LyricChannels. A channel value of the wrong
    type is ignored on its own.
    Never raises: bad input and internal failures give LyricSet.empty().
    """
    if source is None:
        return LyricSet.empty()
    try:
        channels = channels_from(source, format_hint)
    except UnsupportedLyricsInput as e:
        logger.debug("Ignoring lyrics input: %s", e)
        return LyricSet.empty()

    try:
        return build_lyric_set(channels, long_note_s=long_note_s, tolerance=tolerance)
    except Exception:
        logger.exception("Lyrics parse failed, returning empty lyric set")
        return LyricSet.empty()
