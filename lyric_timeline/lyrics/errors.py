class LyricsError(ValueError):
    pass


class UnsupportedLyricsInput(LyricsError):
    pass
