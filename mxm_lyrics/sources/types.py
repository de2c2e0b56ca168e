from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

# Raw `macro_calls` mapping keyed by sub-call name ("matcher.track.get", ...)
TrackMetadataBundle = Mapping[str, Any]

INSTRUMENTAL_TEXT = "♪ Instrumental ♪"
EMPTY_LINE_TEXT = "♪"
# Instrumental synced marker keeps the provider-era string start time. UI code
# compares against it, so it is not normalized to 0.
INSTRUMENTAL_START_TIME = "0000"


@dataclass(frozen=True, slots=True)
class TrackQuery:
    title: str
    artist: str
    album: str = ""
    duration_ms: float = 0
    # external (Spotify) track id or URI, echoed back in errors
    track_id: str = ""

    @property
    def display(self) -> str:
        if self.artist and self.title:
            return f"{self.artist} - {self.title}"
        return self.title or self.artist or "Unknown track"


@dataclass(frozen=True, slots=True)
class LyricsError:
    error: str
    uri: str

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error, "uri": self.uri}


@dataclass(frozen=True, slots=True)
class LanguageEntry:
    iso_code2: str
    iso_code3: str
    display_name: str


@dataclass(frozen=True, slots=True)
class LyricLine:
    text: str
    # ms for synced lines, INSTRUMENTAL_START_TIME for the instrumental marker,
    # None for unsynced lines
    start_time_ms: float | str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"text": self.text}
        if self.start_time_ms is not None:
            out["startTime"] = self.start_time_ms
        return out


@dataclass(frozen=True, slots=True)
class KaraokeWord:
    word: str
    duration_ms: float


@dataclass(frozen=True, slots=True)
class KaraokeLine:
    start_time_ms: float
    words: tuple[KaraokeWord, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "startTime": self.start_time_ms,
            "text": [{"word": w.word, "time": w.duration_ms} for w in self.words],
        }


@dataclass(frozen=True, slots=True)
class CrowdTranslationTask:
    """A 100% complete crowd translation available for a track."""

    track_id: int | str
    from_language_name: str
    to_language_name: str
    to_iso_code3: str
    to_iso_code2: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.track_id,
            "from": self.from_language_name,
            "to": self.to_language_name,
            "code": self.to_iso_code3,
            "code1": self.to_iso_code2,
        }


@dataclass(frozen=True, slots=True)
class TranslatedLyrics:
    track_id: int | str
    from_language_name: str
    to_language_name: str
    iso_code3: str
    lines: tuple[LyricLine, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.track_id,
            "from": self.from_language_name,
            "to": self.to_language_name,
            "code": self.iso_code3,
            "translations": [line.to_dict() for line in self.lines],
        }
