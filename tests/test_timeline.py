import pytest

from lyric_timeline.config import TimingConfig
from lyric_timeline.lyrics.model import LyricLine, LyricSet, LyricWord, WordTimedLine
from lyric_timeline.sync.timeline import (
    WordStatus,
    find_active_line,
    find_current_line,
    find_current_word_line,
    word_progress,
)


def _plain(*times):
    return tuple(LyricLine(start_time=t, text=f"l{t}") for t in times)


def _word_line(start, end, *words):
    ws = tuple(LyricWord(start_time=s, duration=d, text=f"w{s}") for s, d in words)
    return WordTimedLine(start_time=start, end_time=end, text="".join(w.text for w in ws), words=ws)


LINES = _plain(0.0, 5.0, 10.0)
WORD_LINES = (
    _word_line(1.0, 2.0, (1.0, 0.5), (1.5, 0.5)),
    _word_line(5.0, 6.0, (5.0, 1.0)),
    _word_line(10.0, 11.0, (10.0, 1.0)),
)


class TestFindCurrentLine:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (4.3, 0),
            (4.4, 0),  # 4.4 + 0.6 == 5.0 still selects the t=5 cutoff
            (4.41, 1),
            (4.5, 1),
            (9.0, 1),
            (9.5, 2),
            (100.0, 2),
        ],
    )
    def test_lookahead(self, now, expected):
        assert find_current_line(LINES, now) == expected

    def test_before_first_line(self):
        assert find_current_line(_plain(1.0, 2.0), 0.0) == -1

    def test_empty(self):
        assert find_current_line((), 3.0) == -1

    def test_lookahead_override(self):
        assert find_current_line(LINES, 4.5, lookahead=0.0) == 0


class TestFindCurrentWordLine:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (0.0, -1),
            (0.9, 0),
            (4.7, 0),
            (4.9, 1),
            (9.0, 1),
            (20.0, 2),
        ],
    )
    def test_two_thresholds(self, now, expected):
        assert find_current_word_line(WORD_LINES, now) == expected

    def test_end_threshold_matters(self):
        # line 1's only word ends before its header start, so the end check lets the scan pass it
        lines = (WORD_LINES[0], _word_line(6.0, 7.0, (5.0, 0.5)), WORD_LINES[2])
        assert find_current_word_line(lines, 5.5) == 1

    def test_wordless_lines_never_active(self):
        empty = WordTimedLine(start_time=3.0, end_time=4.0, text="x", words=())
        lines = (WORD_LINES[0], empty, WORD_LINES[1])
        assert find_current_word_line(lines, 4.0) == 0
        assert find_current_word_line((WORD_LINES[0], empty), 20.0) == 0

    def test_empty(self):
        assert find_current_word_line((), 1.0) == -1


def test_find_active_line_dispatch():
    assert find_active_line(LyricSet(lines=LINES, plain_lines=LINES), 4.5) == 1
    assert find_active_line(LyricSet(lines=WORD_LINES), 4.9) == 1
    slow = TimingConfig(lookahead_s=0.0)
    assert find_active_line(LyricSet(lines=LINES, plain_lines=LINES), 4.5, slow) == 0


class TestWordProgress:
    def test_mid_word(self):
        progress = word_progress(WORD_LINES[0], 1250)
        assert [p.status for p in progress] == [WordStatus.PLAYING, WordStatus.PENDING]
        assert progress[0].fraction == pytest.approx(0.5)
        assert progress[1].fraction == 0.0

    def test_word_boundary(self):
        progress = word_progress(WORD_LINES[0], 1500)
        assert [p.status for p in progress] == [WordStatus.PLAYING, WordStatus.PLAYING]
        assert [p.fraction for p in progress] == pytest.approx([1.0, 0.0])

    def test_all_played(self):
        progress = word_progress(WORD_LINES[0], 2100)
        assert all(p.status is WordStatus.PLAYED and p.fraction == 1.0 for p in progress)
