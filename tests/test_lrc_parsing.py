from lyric_timeline.lyrics.lrc import parse_lrc, parse_lrc_document, parse_lrc_with_stats
from lyric_timeline.lyrics.model import LineKind


def test_parse_two_lines():
    lines = parse_lrc("[00:01.00]Hello\n[00:02.50]World")
    assert [ln.start_time for ln in lines] == [1.0, 2.5]
    assert [ln.text for ln in lines] == ["Hello", "World"]
    assert all(ln.kind is LineKind.LINE and ln.end_time is None for ln in lines)


def test_parse_multiple_timestamps():
    lines = parse_lrc("[00:01.00][00:05.00]Chorus")
    assert [ln.start_time for ln in lines] == [1.0, 5.0]
    assert [ln.text for ln in lines] == ["Chorus", "Chorus"]


def test_repeated_tags_are_sorted_into_place():
    lines = parse_lrc("[00:01.00][00:10.00]Chorus\n[00:05.00]Verse\n")
    assert [(ln.start_time, ln.text) for ln in lines] == [(1.0, "Chorus"), (5.0, "Verse"), (10.0, "Chorus")]


def test_same_timestamp_keeps_file_order():
    lines = parse_lrc("[00:03.00]b\n[00:03.00]a\n[00:03.00]b\n")
    assert [ln.text for ln in lines] == ["b", "a", "b"]


def test_zero_time_and_empty_text_dropped():
    lines = parse_lrc("[00:00.00]Lyricist: someone\n[00:01.00]\n[00:02.00]  kept  \n")
    assert [(ln.start_time, ln.text) for ln in lines] == [(2.0, "kept")]


def test_fraction_precision_and_long_minutes():
    lines = parse_lrc("[01:02.5]a\n[00:03.123]b\n[100:00]c\n")
    assert [ln.start_time for ln in lines] == [3.123, 62.5, 6000.0]


def test_malformed_tags_do_not_abort():
    lines = parse_lrc("[aa:bb]nope\n[00:xx]nope\ngarbage\n[00:04.00]fine\n")
    assert [ln.text for ln in lines] == ["fine"]


def test_non_string_gives_empty():
    assert parse_lrc(None) == ()  # type: ignore[arg-type]


def test_offset_and_tags_recorded_not_applied():
    doc = parse_lrc_document("[ar:Someone]\n[ti:Song]\n[offset:-1500]\n[00:01.00]x\n")
    assert doc.offset_ms == -1500
    assert doc.tags == {"ar": "Someone", "ti": "Song"}
    assert doc.lines[0].start_time == 1.0


def test_stats():
    _doc, stats = parse_lrc_with_stats("[ti:T]\n\n[00:01.00]a\n[00:02.00]\nplain\n[00:03.00][00:04.00]b\n")
    assert stats.lines_total == 6
    assert stats.lines_with_timestamps == 3
    assert stats.lines_ignored == 3
    assert stats.lines_emitted == 3


def test_idempotent():
    text = "[00:01.00][00:05.00]Chorus\n[00:02.00]Verse\n"
    assert parse_lrc(text) == parse_lrc(text)
