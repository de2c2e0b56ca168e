class MusixmatchError(RuntimeError):
    pass


class TransportError(MusixmatchError):
    pass


class PayloadError(MusixmatchError, ValueError):
    """Embedded JSON body (subtitles, richsync) could not be decoded."""
