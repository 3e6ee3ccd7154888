from __future__ import annotations

from dataclasses import dataclass

import regex

from .model import LyricLine

_TS_RE = regex.compile(r"\[(\d+):(\d+(?:\.\d+)?)\]")  # [mm:ss] / [mm:ss.xx] / [mm:ss.xxx]
_OFFSET_RE = regex.compile(r"^\[offset:\s*([+-]?\d+)\s*\]$", regex.IGNORECASE)
_TAG_RE = regex.compile(r"^\[([a-zA-Z]{1,8}):(.*)\]$")


@dataclass(frozen=True, slots=True)
class LrcDocument:
    lines: tuple[LyricLine, ...]
    offset_ms: int = 0
    tags: dict[str, str] | None = None


@dataclass(frozen=True, slots=True)
class LrcParseStats:
    lines_total: int
    lines_with_timestamps: int
    lines_ignored: int
    lines_emitted: int


def _parse_ts_to_s(minutes: str, seconds: str) -> float:
    return round(int(minutes) * 60 + float(seconds), 3)


def parse_lrc_with_stats(text: str) -> tuple[LrcDocument, LrcParseStats]:
    """
    Supported:
    - [mm:ss], [mm:ss.xx], [mm:ss.xxx]
    - multiple timestamps per line (repeated chorus)
    - [offset:+/-ms], recorded but not applied to the times
    - ID tags without timestamps: [ar:], [ti:], [al:], ...

    Result is normalized:
    - lines stably sorted by time, duplicates kept
    - entries at time <= 0 dropped (credits often sit at 00:00.00)
    - lines without text after the timestamps dropped
    """
    offset_ms = 0
    tags: dict[str, str] = {}
    lines: list[LyricLine] = []

    total = 0
    lines_with_ts = 0
    ignored = 0

    for raw in text.splitlines():
        total += 1
        line = raw.strip()
        if not line:
            ignored += 1
            continue

        ts = list(_TS_RE.finditer(line))
        if not ts:
            off = _OFFSET_RE.match(line)
            if off:
                offset_ms = int(off.group(1))
                continue
            tag = _TAG_RE.match(line)
            if tag:
                k = tag.group(1).strip().lower()
                v = tag.group(2).strip()
                if k and v:
                    tags[k] = v
                continue
            ignored += 1
            continue

        lines_with_ts += 1
        payload = _TS_RE.sub("", line).strip()
        if not payload:
            ignored += 1
            continue

        for m in ts:
            t = _parse_ts_to_s(m.group(1), m.group(2))
            if t <= 0:
                continue
            lines.append(LyricLine(start_time=t, text=payload))

    # sort is stable: equal timestamps keep file order
    lines.sort(key=lambda ln: ln.start_time)

    doc = LrcDocument(lines=tuple(lines), offset_ms=offset_ms, tags=tags)
    stats = LrcParseStats(
        lines_total=total,
        lines_with_timestamps=lines_with_ts,
        lines_ignored=ignored,
        lines_emitted=len(doc.lines),
    )
    return doc, stats


def parse_lrc_document(text: str) -> LrcDocument:
    doc, _stats = parse_lrc_with_stats(text)
    return doc


def parse_lrc(text: str) -> tuple[LyricLine, ...]:
    if not isinstance(text, str):
        return ()
    return parse_lrc_with_stats(text)[0].lines
