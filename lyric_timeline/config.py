from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from lyric_timeline.lyrics.merge import MERGE_TOLERANCE_S
from lyric_timeline.lyrics.model import LONG_NOTE_S
from lyric_timeline.sync.timeline import LOOKAHEAD_S, WORD_END_LEAD_S, WORD_START_LEAD_S

logger = logging.getLogger(__name__)

_ENV_PREFIX = "LYRIC_TIMELINE_"


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "lyric-timeline"
    return Path.home() / ".config" / "lyric-timeline"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class TimingConfig:
    lookahead_s: float = LOOKAHEAD_S
    word_end_lead_s: float = WORD_END_LEAD_S
    word_start_lead_s: float = WORD_START_LEAD_S
    long_note_s: float = LONG_NOTE_S
    merge_tolerance_s: float = MERGE_TOLERANCE_S


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path
    timing: TimingConfig

    # CLI output
    context_lines: int  # lines above/below current
    color: bool


def load_config() -> AppConfig:
    config_dir = _config_dir()
    file_data = _load_file(config_dir / "config.json")

    return AppConfig(
        config_dir=config_dir,
        timing=_load_timing(file_data.get("timing") or {}),
        context_lines=int(os.getenv(_ENV_PREFIX + "CONTEXT_LINES", "1")),
        color=os.getenv(_ENV_PREFIX + "COLOR", "1") not in ("0", "false", "False"),
    )


def _load_file(cfg_path: Path) -> dict[str, Any]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _load_timing(file_timing: dict[str, Any]) -> TimingConfig:
    # Priority per field: config.json → LYRIC_TIMELINE_<FIELD> → default
    defaults = TimingConfig()
    values: dict[str, float] = {}
    for name, default in asdict(defaults).items():
        raw = file_timing.get(name)
        if raw is None:
            raw = os.getenv(_ENV_PREFIX + name.upper())
        if raw is None:
            values[name] = default
            continue
        try:
            values[name] = float(raw)
        except (TypeError, ValueError):
            logger.warning("Invalid %s=%r, using %s", name, raw, default)
            values[name] = default
    return TimingConfig(**values)


def save_config_timing(timing: TimingConfig) -> None:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _load_file(cfg_path)
    data["timing"] = asdict(timing)
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
