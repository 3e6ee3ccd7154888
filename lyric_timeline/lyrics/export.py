from __future__ import annotations

import json
import math

from .model import AnyLine, LyricSet, WordTimedLine


def format_time(ms: float, centiseconds: bool = False) -> str:
    """Display helper: 83456 -> "01:23" (or "01:23.45"). Non-finite or negative input renders as zero."""
    if ms is None or not math.isfinite(ms) or ms < 0:
        ms = 0
    total_cs = int(ms) // 10
    m, rem = divmod(total_cs, 6000)
    s, cs = divmod(rem, 100)
    if centiseconds:
        return f"{m:02d}:{s:02d}.{cs:02d}"
    return f"{m:02d}:{s:02d}"


def _line_json(ln: AnyLine) -> dict[str, object]:
    item: dict[str, object] = {
        "kind": ln.kind.value,
        "start_time": ln.start_time,
        "end_time": ln.end_time,
        "text": ln.text,
        "translation": ln.translation,
        "romanization": ln.romanization,
    }
    if isinstance(ln, WordTimedLine):
        item["words"] = [
            {
                "start_time": w.start_time,
                "duration": w.duration,
                "text": w.text,
                "emphasized": w.emphasized,
                "pitch": w.pitch,
            }
            for w in ln.words
        ]
    return item


def export_json(lyric_set: LyricSet) -> str:
    """Both timelines: `lines` (what lookups drive) and `plain_lines` (line-level view)."""
    return json.dumps(
        {
            "time_offset_ms": lyric_set.time_offset_ms,
            "tags": lyric_set.tag_map,
            "has_translation": lyric_set.has_translation,
            "has_romanization": lyric_set.has_romanization,
            "has_word_timing": lyric_set.has_word_timing,
            "has_word_translation": lyric_set.has_word_translation,
            "lines": [_line_json(ln) for ln in lyric_set.lines],
            "plain_lines": [_line_json(ln) for ln in lyric_set.plain_lines],
        },
        ensure_ascii=False,
        indent=2,
    )


def _fmt_lrc_time(seconds: float) -> str:
    # keep 2 decimals for compatibility
    return format_time(round(seconds * 1000), centiseconds=True)


def export_lrc(lyric_set: LyricSet, include_tags: bool = True, include_offset: bool = True) -> str:
    out: list[str] = []
    if include_tags:
        out.extend(f"[{k}:{v}]" for k, v in lyric_set.tags)
    if include_offset and lyric_set.time_offset_ms:
        out.append(f"[offset:{lyric_set.time_offset_ms}]")

    for ln in lyric_set.plain_lines:
        out.append(f"[{_fmt_lrc_time(ln.start_time)}]{ln.text}")
    return "\n".join(out) + ("\n" if out else "")


def _fmt_srt_time(ms: int) -> str:
    # HH:MM:SS,mmm
    h, rem = divmod(ms, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms2 = divmod(rem, 1_000)
    return f"{h:02d}:{m:02d}:{s:02d},{ms2:03d}"


def export_srt(lyric_set: LyricSet, last_line_duration_ms: int = 2000) -> str:
    """
    Cue end is the line's own end time when known, else the next start time;
    the last line ends at +last_line_duration_ms. Translations go on a second
    row of the cue.
    """
    lines = lyric_set.lines
    if not lines:
        return ""
    out: list[str] = []
    for i, ln in enumerate(lines, start=1):
        start = round(ln.start_time * 1000)
        if ln.end_time is not None:
            end = round(ln.end_time * 1000)
        elif i < len(lines):
            end = round(lines[i].start_time * 1000)
        else:
            end = start + last_line_duration_ms
        end = max(end, start + 1)
        out.append(str(i))
        out.append(f"{_fmt_srt_time(start)} --> {_fmt_srt_time(end)}")
        out.append(ln.text)
        if ln.translation:
            out.append(ln.translation)
        out.append("")
    return "\n".join(out)
