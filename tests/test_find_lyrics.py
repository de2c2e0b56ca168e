from __future__ import annotations

from mxm_lyrics.errors import TransportError
from mxm_lyrics.sources.musixmatch import HEADERS, RESTRICTED_MESSAGE, MusixmatchProvider
from mxm_lyrics.sources.types import LyricsError, TrackQuery
from tests.mocks.payloads import bundle, envelope, macro_response
from tests.mocks.transport_mock import FakeTransport

QUERY = TrackQuery(
    title="Bohemian Rhapsody",
    artist="Queen",
    album="A Night at the Opera",
    duration_ms=354320,
    track_id="spotify:track:7tFiyTwD0nx5a1eklYtX2J",
)


def _provider(response) -> tuple[MusixmatchProvider, FakeTransport]:
    transport = FakeTransport({"macro.subtitles.get": response})
    return MusixmatchProvider(transport, "tok"), transport


def test_request_parameters():
    provider, transport = _provider(macro_response(bundle()))
    provider.find_lyrics(QUERY)

    params = transport.params("macro.subtitles.get")
    assert params["q_track"] == "Bohemian Rhapsody"
    assert params["q_artist"] == params["q_artists"] == "Queen"
    assert params["q_album"] == "A Night at the Opera"
    assert params["track_spotify_id"] == QUERY.track_id
    assert params["q_duration"] == "354.32"
    assert params["f_subtitle_length"] == "354"
    assert params["part"] == "track_lyrics_translation_status"
    assert params["namespace"] == "lyrics_richsynched"
    assert params["usertoken"] == "tok"

    _url, _body, headers = transport.calls[0]
    assert headers == HEADERS


def test_returns_macro_calls_on_success():
    calls = bundle()
    provider, _ = _provider(macro_response(calls))
    assert provider.find_lyrics(QUERY) == calls


def test_matcher_failure_returns_error_with_mode():
    calls = bundle(matcher_status=404)
    calls["matcher.track.get"]["message"]["header"]["mode"] = "search"
    provider, _ = _provider(macro_response(calls))

    res = provider.find_lyrics(QUERY)
    assert res == LyricsError(error="Requested error: search", uri=QUERY.track_id)


def test_missing_matcher_is_an_error():
    provider, _ = _provider(macro_response({"track.lyrics.get": envelope([])}))
    res = provider.find_lyrics(QUERY)
    assert isinstance(res, LyricsError)
    assert res.uri == QUERY.track_id


def test_restricted_lyrics():
    provider, _ = _provider(macro_response(bundle(restricted=1, lyrics_body=None)))
    res = provider.find_lyrics(QUERY)
    assert res == LyricsError(error=RESTRICTED_MESSAGE, uri=QUERY.track_id)
    assert res.to_dict() == {"error": RESTRICTED_MESSAGE, "uri": QUERY.track_id}


def test_restricted_wins_over_valid_fields():
    calls = bundle(restricted=1, subtitles='[{"text": "x", "time": {"total": 1}}]')
    provider, _ = _provider(macro_response(calls))
    assert provider.find_lyrics(QUERY).error == RESTRICTED_MESSAGE


def test_empty_lyrics_body_list_passes_through():
    calls = bundle()
    calls["track.lyrics.get"] = envelope([], status_code=404)
    provider, _ = _provider(macro_response(calls))
    assert provider.find_lyrics(QUERY) == calls


def test_transport_failure_becomes_error():
    provider, _ = _provider(TransportError("timed out"))
    res = provider.find_lyrics(QUERY)
    assert res == LyricsError(error="Requested error: timed out", uri=QUERY.track_id)
