from __future__ import annotations

import logging
from dataclasses import replace
from xml.dom import Node, minidom
from xml.parsers.expat import ExpatError

import regex

from .model import LONG_NOTE_S, LyricWord, WordTimedLine
from .yrc import make_word

logger = logging.getLogger(__name__)

_CLOCK_RE = regex.compile(r"^(?:(\d+):)?(\d+):(\d+(?:\.\d+)?)$")  # [hh:]mm:ss[.fff]
_OFFSET_RE = regex.compile(r"^(\d+(?:\.\d+)?)(h|m|s|ms)?$")  # 1.5s / 1500ms / 1500
_UNIT_MS = {"h": 3_600_000, "m": 60_000, "s": 1000, "ms": 1, None: 1}

_TEXT_NODES = (Node.TEXT_NODE, Node.CDATA_SECTION_NODE)


def parse_time_ms(value: str) -> int | None:
    """TTML time expression to milliseconds. A bare number counts as ms."""
    value = (value or "").strip()
    if not value:
        return None
    m = _CLOCK_RE.match(value)
    if m:
        hours = int(m.group(1) or 0)
        return round((hours * 3600 + int(m.group(2)) * 60 + float(m.group(3))) * 1000)
    m = _OFFSET_RE.match(value)
    if m:
        return round(float(m.group(1)) * _UNIT_MS[m.group(2)])
    return None


def _attr(el: minidom.Element, name: str) -> str:
    # `role` and `ttm:role` both match
    attrs = el.attributes
    for i in range(attrs.length):
        a = attrs.item(i)
        if (a.localName or a.name) == name:
            return a.value
    return ""


def _text(node: minidom.Node) -> str:
    if node.nodeType in _TEXT_NODES:
        return node.data
    return "".join(_text(c) for c in node.childNodes)


def _parse_line(p: minidom.Element, long_note_s: float) -> WordTimedLine | None:
    begin = parse_time_ms(_attr(p, "begin"))
    end = parse_time_ms(_attr(p, "end"))
    words: list[LyricWord] = []
    translation: str | None = None
    romanization: str | None = None
    pending = ""  # untimed text not yet attached to a word

    for node in p.childNodes:
        if node.nodeType in _TEXT_NODES:
            data = node.data
            if not data.strip() and "\n" in data:
                continue  # indentation
        elif node.nodeType == Node.ELEMENT_NODE and node.localName == "span":
            role = _attr(node, "role")
            if role == "x-translation":
                translation = _text(node).strip() or None
                continue
            if role == "x-roman":
                romanization = _text(node).strip() or None
                continue
            if role:
                continue  # background vocals and other side tracks
            data = _text(node)
            w_begin = parse_time_ms(_attr(node, "begin"))
            w_end = parse_time_ms(_attr(node, "end"))
            if w_begin is not None and w_end is not None:
                word = make_word(w_begin, w_end - w_begin, pending + data, long_note_s)
                pending = ""
                if word is not None:
                    words.append(word)
                continue
        else:
            continue

        if words:
            words[-1] = replace(words[-1], text=words[-1].text + data)
        else:
            pending += data

    if not words:
        # plain <p>: one word over the whole line
        if begin is None or end is None:
            return None
        word = make_word(begin, end - begin, pending.strip(), long_note_s)
        if word is None:
            return None
        words.append(word)

    line_text = "".join(w.text for w in words)
    if not line_text.strip():
        return None

    start = begin / 1000 if begin is not None else words[0].start_time
    stop = end / 1000 if end is not None else words[-1].end_time
    return WordTimedLine(
        start_time=start,
        end_time=stop,
        text=line_text,
        words=tuple(words),
        translation=translation,
        romanization=romanization,
    )


def parse_ttml(text: str, *, long_note_s: float = LONG_NOTE_S) -> tuple[WordTimedLine, ...]:
    """
    Parse TTML (Apple Music style) lyrics:

        <p begin="00:01.000" end="00:02.500">
          <span begin="00:01.000" end="00:01.400">Hel</span><span ...>lo</span>
          <span ttm:role="x-translation">Bonjour</span>
        </p>

    Every `<p>` becomes a word-timed line. Timed `<span>`s are its words;
    a `<p>` without them is one word spanning the line. Translation and
    romanization spans fill the matching line fields, other roles are
    ignored. Lines keep document order.
    """
    if not isinstance(text, str) or not text.strip():
        return ()
    try:
        dom = minidom.parseString(text)
    except ExpatError as e:
        logger.debug("TTML: not well-formed XML: %s", e)
        return ()

    out: list[WordTimedLine] = []
    skipped = 0
    try:
        for p in dom.getElementsByTagNameNS("*", "p"):
            line = _parse_line(p, long_note_s)
            if line is None:
                skipped += 1
                continue
            out.append(line)
    finally:
        dom.unlink()

    if skipped:
        logger.debug("TTML: skipped %s lines without usable timing", skipped)
    return tuple(out)
