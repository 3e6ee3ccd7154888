from __future__ import annotations

import logging
from dataclasses import replace
from enum import Enum
from typing import Sequence, TypeVar

from .model import AnyLine, LyricLine

logger = logging.getLogger(__name__)

MERGE_TOLERANCE_S = 0.1

L = TypeVar("L", bound=AnyLine)


class Channel(str, Enum):
    TRANSLATION = "translation"
    ROMANIZATION = "romanization"


def merge_translation(
    primary: Sequence[L],
    secondary: Sequence[LyricLine],
    channel: Channel = Channel.TRANSLATION,
    *,
    tolerance: float = MERGE_TOLERANCE_S,
) -> tuple[L, ...]:
    """
    Attach `secondary` texts onto `primary` lines by timestamp.

    Every secondary line goes to the FIRST primary line closer than
    `tolerance` seconds, not the closest one. Secondary lines without a match
    are dropped. Returns new lines; the inputs are left untouched.
    """
    merged = list(primary)
    if not merged or not secondary:
        return tuple(merged)

    field_name = Channel(channel).value
    dropped = 0
    for sec in secondary:
        for i, line in enumerate(merged):
            if abs(line.start_time - sec.start_time) < tolerance:
                merged[i] = replace(line, **{field_name: sec.text})
                break
        else:
            dropped += 1

    if dropped:
        logger.debug("%s: %s of %s lines had no match", field_name, dropped, len(secondary))
    return tuple(merged)
