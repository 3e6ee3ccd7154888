import pytest

from lyric_timeline.lyrics.model import LineKind
from lyric_timeline.lyrics.yrc import parse_yrc


def test_parse_word_line():
    (line,) = parse_yrc("[1000,2000](1000,500,0)Hi(1500,500,0) there")
    assert line.kind is LineKind.WORD
    assert line.start_time == 1.0
    assert line.end_time == 3.0
    assert line.text == "Hi there"
    assert [(w.start_time, w.duration, w.text) for w in line.words] == [(1.0, 0.5, "Hi"), (1.5, 0.5, " there")]


def test_zero_duration_word_dropped_line_kept():
    (line,) = parse_yrc("[1000,2000](1000,500,0)Hi(1500,0,0) ghost(1600,400,0) there")
    assert [w.text for w in line.words] == ["Hi", " there"]
    assert line.text == "Hi there"


def test_line_without_words_dropped():
    lines = parse_yrc("[1000,2000](1000,0,0)gone\n[4000,1000](4000,1000,0)kept\n[5000,500]plain text\n")
    assert [ln.text for ln in lines] == ["kept"]


@pytest.mark.parametrize(
    "header",
    ["[abc,2000]", "[1000,x]", "[1000]", "[nan,1000]", "[ti:Song]"],
)
def test_bad_header_discards_line(header):
    assert parse_yrc(f"{header}(1000,500,0)word") == ()


def test_metadata_lines_are_skipped():
    text = '{"t":0,"c":[{"tx":"credits"}]}\n[2000,1000](2000,1000,0)sing\n'
    lines = parse_yrc(text)
    assert len(lines) == 1
    assert lines[0].text == "sing"


def test_emphasized_long_note():
    (line,) = parse_yrc("[0,5000](0,1999,0)short(1999,2000,3)long")
    assert [w.emphasized for w in line.words] == [False, True]
    assert line.words[1].pitch == 3


def test_long_note_threshold_override():
    (line,) = parse_yrc("[0,5000](0,1000,0)a", long_note_s=1.0)
    assert line.words[0].emphasized is True


def test_input_order_kept():
    lines = parse_yrc("[5000,1000](5000,1000,0)b\n[1000,1000](1000,1000,0)a\n")
    assert [ln.text for ln in lines] == ["b", "a"]


def test_words_inside_line_interval():
    text = "[1000,2000](1000,500,0)Hi(1500,500,0) there(2000,1000,0)!\n[3500,1500](3500,700,0)Next(4200,800,0) one"
    for line in parse_yrc(text):
        for w in line.words:
            assert line.start_time <= w.start_time
            assert w.start_time + w.duration <= line.end_time + 1e-9
