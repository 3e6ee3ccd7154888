from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import typer
from colorama import Fore, Style, just_fix_windows_console

from lyric_timeline.config import AppConfig, load_config
from lyric_timeline.logging_setup import setup_logging
from lyric_timeline.lyrics.detect import detect_format
from lyric_timeline.lyrics.errors import UnsupportedLyricsInput
from lyric_timeline.lyrics.export import export_json, export_lrc, export_srt, format_time
from lyric_timeline.lyrics.lrc import parse_lrc_with_stats
from lyric_timeline.lyrics.model import LyricFormat, LyricSet
from lyric_timeline.lyrics.parse import LyricChannels, channels_from, parse_lyrics
from lyric_timeline.sync.timeline import WordStatus
from lyric_timeline.sync.tracker import LyricTracker


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.callback()
def _root(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    """Inspect synced (LRC) and word-timed (YRC, QRC, TTML) lyric files."""
    setup_logging(debug)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise typer.BadParameter(f"cannot read {path}: {e}") from e


def _load_lyrics(
    cfg: AppConfig,
    path: Path,
    *,
    translation: Path | None = None,
    romanization: Path | None = None,
    words: Path | None = None,
    word_translation: Path | None = None,
) -> LyricSet:
    raw = _read_text(path)
    source: object = raw
    # .lrc/.yrc/.qrc/.ttml name the format; anything else is detected
    hint = path.suffix.lower().lstrip(".") or None
    if hint == "json":
        hint = None
        try:
            source = json.loads(raw)
        except ValueError as e:
            raise typer.BadParameter(f"{path} is not valid JSON: {e}") from e

    extra = {
        name: _read_text(p)
        for name, p in (
            ("translation", translation),
            ("romanization", romanization),
            ("yrc", words),
            ("word_translation", word_translation),
        )
        if p is not None
    }
    if extra:
        try:
            channels = channels_from(source, hint)
        except UnsupportedLyricsInput:
            channels = LyricChannels()
        source = replace(channels, **extra)

    return parse_lyrics(
        source,
        format_hint=hint,
        long_note_s=cfg.timing.long_note_s,
        tolerance=cfg.timing.merge_tolerance_s,
    )


@app.command()
def detect(lyrics_path: Path):
    """Print the detected lyric format (line, word, qrc, ttml or unknown)."""
    typer.echo(detect_format(_read_text(lyrics_path)).value)


@app.command()
def parse(
    lyrics_path: Path,
    translation: Path | None = typer.Option(None, "--translation", help="Translation LRC file"),
    romanization: Path | None = typer.Option(None, "--romanization", help="Romanization LRC file"),
    words: Path | None = typer.Option(None, "--words", help="Word-timed (YRC) file"),
    word_translation: Path | None = typer.Option(None, "--word-translation", help="Translation for the YRC file"),
):
    """Parse lyrics and print stats."""
    cfg = load_config()
    ls = _load_lyrics(
        cfg,
        lyrics_path,
        translation=translation,
        romanization=romanization,
        words=words,
        word_translation=word_translation,
    )
    raw = _read_text(lyrics_path)
    if lyrics_path.suffix.lower() != ".json" and detect_format(raw) is LyricFormat.LINE:
        _doc, stats = parse_lrc_with_stats(raw)
        typer.echo(f"lines_total={stats.lines_total}")
        typer.echo(f"lines_with_timestamps={stats.lines_with_timestamps}")
        typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"lines={len(ls.lines)}")
    typer.echo(f"word_timed={ls.word_timed}")
    typer.echo(f"has_translation={ls.has_translation}")
    typer.echo(f"has_romanization={ls.has_romanization}")
    typer.echo(f"has_word_timing={ls.has_word_timing}")
    typer.echo(f"has_word_translation={ls.has_word_translation}")
    typer.echo(f"offset_ms={ls.time_offset_ms}")
    typer.echo(f"tags={ls.tag_map}")


@app.command()
def at(
    lyrics_path: Path,
    seconds: float = typer.Argument(..., help="Playback position in seconds"),
    context_lines: int | None = typer.Option(None, "--context", help="Lines above/below current line"),
):
    """Show the active line (and word progress) at a playback position."""
    cfg = load_config()
    ls = _load_lyrics(cfg, lyrics_path)
    if ls.is_empty:
        typer.echo("No lyrics available", err=True)
        raise typer.Exit(code=1)

    just_fix_windows_console()
    current, dim, reset = (Fore.GREEN + Style.BRIGHT, Style.DIM, Style.RESET_ALL) if cfg.color else ("", "", "")
    context = cfg.context_lines if context_lines is None else context_lines

    tracker = LyricTracker.from_lyric_set(ls, cfg.timing)
    idx = tracker.current_index(seconds)
    typer.echo(f"[{format_time(seconds * 1000, centiseconds=True)}] line {idx}")

    start = max(idx - context, 0)
    end = min(max(idx, 0) + context + 1, len(ls.lines))
    for i in range(start, end):
        ln = ls.lines[i]
        marker = ">" if i == idx else " "
        style = current if i == idx else dim
        typer.echo(f"{marker} {format_time(ln.start_time * 1000)} {style}{ln.text}{reset}")
        if ln.translation:
            typer.echo(f"        {dim}{ln.translation}{reset}")

    for wp in tracker.progress(seconds):
        style = current if wp.status is WordStatus.PLAYING else dim
        typer.echo(f"  {style}{wp.word.text!r}{reset} {wp.status.value} {wp.fraction:.0%}")


@app.command()
def export(
    lyrics_path: Path,
    fmt: str = typer.Option("lrc", "--format", case_sensitive=False, help="lrc|srt|json"),
    out: Path | None = typer.Option(None, "--out", help="Output file (default: stdout)"),
):
    """Export lyrics to LRC/SRT/JSON (normalized)."""
    cfg = load_config()
    fmt_l = fmt.lower()
    if fmt_l not in ("lrc", "srt", "json"):
        raise typer.BadParameter("format must be one of: lrc, srt, json")
    ls = _load_lyrics(cfg, lyrics_path)
    if fmt_l == "json":
        data = export_json(ls)
    elif fmt_l == "lrc":
        data = export_lrc(ls)
    else:
        data = export_srt(ls)

    if out:
        out.write_text(data, encoding="utf-8")
    else:
        typer.echo(data, nl=False)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
