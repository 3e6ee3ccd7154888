import pytest

from lyric_timeline.lyrics.detect import coerce_format, detect_format
from lyric_timeline.lyrics.model import LyricFormat


@pytest.mark.parametrize(
    "text, expected",
    [
        ("[1000,2000](1000,500,0)Hi", LyricFormat.WORD),
        ("[ti:Song]\n[1000,2000](1000,500,0) there", LyricFormat.WORD),
        ("[ver:qrc]\n[ar:Artist]\n[0,1000]Test(0,200)word", LyricFormat.QRC),
        ("[0,1000]Hello (0,400)world(400,600)", LyricFormat.QRC),
        ('<?xml version="1.0"?><tt><p begin="00:00:01">Test</p></tt>', LyricFormat.TTML),
        ('<ttml><p begin="00:00:01.000" end="00:00:05.000">Test</p></ttml>', LyricFormat.TTML),
        ("[00:01.00]Hello", LyricFormat.LINE),
        ("[00:01]Hello", LyricFormat.LINE),
        ("[00:01.00]Sing along (x2)", LyricFormat.LINE),
        ("[1000,2000](1000,500,0)", LyricFormat.UNKNOWN),
        ("just some words", LyricFormat.UNKNOWN),
        ("", LyricFormat.UNKNOWN),
        (None, LyricFormat.UNKNOWN),
        (42, LyricFormat.UNKNOWN),
    ],
)
def test_detect_format(text, expected):
    assert detect_format(text) is expected


@pytest.mark.parametrize(
    "hint, expected",
    [
        ("lrc", LyricFormat.LINE),
        ("YRC", LyricFormat.WORD),
        ("qrc", LyricFormat.QRC),
        (" ttml ", LyricFormat.TTML),
        (LyricFormat.QRC, LyricFormat.QRC),
        (LyricFormat.UNKNOWN, None),
        ("txt", None),
        (None, None),
    ],
)
def test_coerce_format(hint, expected):
    assert coerce_format(hint) is expected
