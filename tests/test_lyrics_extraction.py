from __future__ import annotations

import pytest

from mxm_lyrics.errors import PayloadError
from mxm_lyrics.sources.types import LyricLine
from tests.mocks.payloads import bundle, envelope, subtitle_body, track


class TestGetSynced:
    def test_lines_follow_subtitle_body(self, provider):
        source = [("Is this the real life?", 0.5), ("", 12.25), ("Is this just fantasy?", 17.75)]
        lines = provider.get_synced(bundle(subtitles=subtitle_body(*source)))

        assert len(lines) == len(source)
        assert [l.start_time_ms for l in lines] == [total * 1000 for _text, total in source]
        assert lines[0].text == "Is this the real life?"
        assert lines[1].text == "♪"

    def test_instrumental_marker(self, provider):
        lines = provider.get_synced(bundle(track(instrumental=1), subtitles=subtitle_body(("x", 1))))
        assert lines == [LyricLine(text="♪ Instrumental ♪", start_time_ms="0000")]
        assert lines[0].to_dict() == {"text": "♪ Instrumental ♪", "startTime": "0000"}

    def test_no_subtitles_flag(self, provider):
        assert provider.get_synced(bundle(track(has_subtitles=0), subtitles=subtitle_body(("x", 1)))) is None

    def test_flag_without_subtitle_body(self, provider):
        assert provider.get_synced(bundle()) is None

    def test_no_match_metadata(self, provider):
        assert provider.get_synced({}) is None
        assert provider.get_synced({"matcher.track.get": envelope([])}) is None

    def test_malformed_body_raises_payload_error(self, provider):
        with pytest.raises(PayloadError):
            provider.get_synced(bundle(subtitles="[{not json"))
        with pytest.raises(PayloadError):
            provider.get_synced(bundle(subtitles='[{"text": "no time"}]'))


class TestGetUnsynced:
    def test_splits_on_newline(self, provider):
        lines = provider.get_unsynced(bundle(lyrics_body="one\n\nthree"))
        assert [l.text for l in lines] == ["one", "", "three"]
        assert all(l.start_time_ms is None for l in lines)

    def test_crowd_lyrics_flag_is_enough(self, provider):
        lines = provider.get_unsynced(bundle(track(has_lyrics=0, has_lyrics_crowd=1), lyrics_body="a"))
        assert lines == [LyricLine(text="a")]

    def test_instrumental_has_no_start_time(self, provider):
        lines = provider.get_unsynced(bundle(track(instrumental=1)))
        assert lines == [LyricLine(text="♪ Instrumental ♪")]
        assert lines[0].to_dict() == {"text": "♪ Instrumental ♪"}
        assert "startTime" not in lines[0].to_dict()

    def test_no_lyrics_flags(self, provider):
        assert provider.get_unsynced(bundle(track(has_lyrics=0, has_lyrics_crowd=0))) is None

    def test_missing_body(self, provider):
        assert provider.get_unsynced(bundle(lyrics_body=None)) is None

    def test_no_match_metadata(self, provider):
        assert provider.get_unsynced({"track.lyrics.get": envelope({"lyrics": {"lyrics_body": "x"}})}) is None


def test_unsynced_non_string_body_is_absent(provider):
    calls = bundle()
    calls["track.lyrics.get"]["message"]["body"]["lyrics"]["lyrics_body"] = ["not", "text"]
    assert provider.get_unsynced(calls) is None
