from __future__ import annotations

from dataclasses import dataclass, field

from lyric_timeline.config import TimingConfig
from lyric_timeline.lyrics.model import LyricSet, WordTimedLine
from lyric_timeline.sync.timeline import WordProgress, find_active_line, word_progress


@dataclass(slots=True)
class LyricTracker:
    """
    Per-song lookup state, fed one playback sample per UI tick.
    Re-render only when changed_index() returns a value.
    """

    lyric_set: LyricSet
    timing: TimingConfig = field(default_factory=TimingConfig)
    last_idx: int = -1

    @classmethod
    def from_lyric_set(cls, lyric_set: LyricSet, timing: TimingConfig | None = None) -> "LyricTracker":
        return cls(lyric_set=lyric_set, timing=timing or TimingConfig())

    def _clock(self, now_s: float) -> float:
        # [offset:] belongs to the LRC channel; word-level times are absolute
        if self.lyric_set.word_timed:
            return now_s
        return now_s - self.lyric_set.time_offset_ms / 1000

    def current_index(self, now_s: float) -> int:
        return find_active_line(self.lyric_set, self._clock(now_s), self.timing)

    def changed_index(self, now_s: float) -> int | None:
        i = self.current_index(now_s)
        if i != self.last_idx:
            self.last_idx = i
            return i
        return None

    def progress(self, now_s: float) -> list[WordProgress]:
        i = self.current_index(now_s)
        if i < 0:
            return []
        line = self.lyric_set.lines[i]
        if not isinstance(line, WordTimedLine):
            return []
        return word_progress(line, self._clock(now_s) * 1000)
