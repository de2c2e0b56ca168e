from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Sequence

from mxm_lyrics.errors import PayloadError, TransportError
from mxm_lyrics.transport import JsonTransport, build_url

from .languages import LanguageTable, find_by_iso3
from .payload import (
    LYRICS_CALL,
    MATCHER_CALL,
    SUBTITLES_CALL,
    dig,
    is_ok,
    load_embedded,
    match_track,
    message_body,
    status_code,
)
from .types import (
    EMPTY_LINE_TEXT,
    INSTRUMENTAL_START_TIME,
    INSTRUMENTAL_TEXT,
    CrowdTranslationTask,
    KaraokeLine,
    KaraokeWord,
    LanguageEntry,
    LyricLine,
    LyricsError,
    TrackMetadataBundle,
    TrackQuery,
    TranslatedLyrics,
)

logger = logging.getLogger(__name__)

API_HOST = "apic-desktop.musixmatch.com"
APP_ID = "web-desktop-app-v1.0"

LANGUAGES_URL = f"https://{API_HOST}/ws/1.1/languages.get?format=json&app_id={APP_ID}&"
MACRO_SUBTITLES_URL = (
    f"https://{API_HOST}/ws/1.1/macro.subtitles.get?format=json&namespace=lyrics_richsynched"
    f"&subtitle_format=mxm&app_id={APP_ID}&"
)
RICHSYNC_URL = f"https://{API_HOST}/ws/1.1/track.richsync.get?format=json&subtitle_format=mxm&app_id={APP_ID}&"
TRANSLATIONS_URL = f"https://{API_HOST}/ws/1.1/crowd.track.translations.get?app_id={APP_ID}&"

HEADERS = {
    "authority": API_HOST,
    "cookie": "x-mxm-token-guid=",
}

# Only the first page is requested; lines beyond it stay untranslated.
TRANSLATIONS_PAGE_SIZE = 100

RESTRICTED_MESSAGE = "Unfortunately we're not authorized to show these lyrics."

# Fields tried in order when pairing a lyric line with a crowd translation
_TRANSLATION_MATCH_FIELDS = ("subtitle_matched_line", "matched_line", "snippet")


class MusixmatchProvider:
    name = "musixmatch"

    def __init__(self, transport: JsonTransport, token: str, *, languages: LanguageTable | None = None):
        self.transport = transport
        self.token = token
        self.languages = languages if languages is not None else LanguageTable()

    def _get(self, base_url: str, params: Mapping[str, Any]) -> Any:
        return self.transport.get_json(build_url(base_url, {**params, "usertoken": self.token}), None, HEADERS)

    # -- language table -------------------------------------------------

    def get_languages(self) -> tuple[LanguageEntry, ...]:
        if self.languages.loaded:
            logger.debug("Musixmatch languages cache hit")
            return self.languages.entries

        try:
            response = self._get(LANGUAGES_URL, {"get_romanized_info": 1})
        except TransportError as e:
            logger.warning("Failed to load Musixmatch languages: %s", e)
            return ()
        if not is_ok(response):
            logger.warning("Musixmatch languages.get returned status %s", status_code(response))
            return ()

        language_list = dig(message_body(response), "language_list")
        if not isinstance(language_list, list):
            logger.warning("Musixmatch languages.get returned no language list")
            return ()

        entries: list[LanguageEntry] = []
        for item in language_list:
            lang = dig(item, "language")
            if not isinstance(lang, Mapping):
                continue
            entries.append(
                LanguageEntry(
                    iso_code2=lang.get("language_iso_code_1") or "",
                    iso_code3=lang.get("language_iso_code_3") or "",
                    display_name=lang.get("language_name") or "",
                )
            )
        self.languages.populate(entries)
        return self.languages.entries

    # -- lookup ---------------------------------------------------------

    def find_lyrics(self, query: TrackQuery) -> TrackMetadataBundle | LyricsError:
        duration_s = query.duration_ms / 1000
        params = {
            "q_album": query.album,
            "q_artist": query.artist,
            "q_artists": query.artist,
            "q_track": query.title,
            "track_spotify_id": query.track_id,
            "q_duration": duration_s,
            "f_subtitle_length": math.floor(duration_s),
            "part": "track_lyrics_translation_status",
        }

        try:
            response = self._get(MACRO_SUBTITLES_URL, params)
        except TransportError as e:
            return LyricsError(error=f"Requested error: {e}", uri=query.track_id)

        calls = dig(message_body(response), "macro_calls")
        if not isinstance(calls, Mapping):
            calls = {}

        matcher = calls.get(MATCHER_CALL)
        if not is_ok(matcher):
            mode = dig(matcher, "message", "header", "mode") or "unknown"
            logger.info("Musixmatch matcher failed for %s: %s", query.display, mode)
            return LyricsError(error=f"Requested error: {mode}", uri=query.track_id)
        if dig(calls, LYRICS_CALL, "message", "body", "lyrics", "restricted"):
            logger.info("Musixmatch lyrics restricted for %s", query.display)
            return LyricsError(error=RESTRICTED_MESSAGE, uri=query.track_id)

        return calls

    # -- extractors -----------------------------------------------------

    def get_karaoke(self, bundle: TrackMetadataBundle) -> list[KaraokeLine] | None:
        track = match_track(bundle)
        if track is None:
            return None
        if not track.get("has_richsync") or track.get("instrumental"):
            return None

        params = {
            "f_subtitle_length": track.get("track_length"),
            "q_duration": track.get("track_length"),
            "commontrack_id": track.get("commontrack_id"),
        }
        try:
            response = self._get(RICHSYNC_URL, params)
        except TransportError as e:
            logger.warning("Musixmatch richsync fetch failed: %s", e)
            return None
        if not is_ok(response):
            return None

        raw = dig(message_body(response), "richsync", "richsync_body")
        if raw is None:
            return None
        body = load_embedded(raw, "richsync body")
        try:
            return [_karaoke_line(line) for line in body]
        except (KeyError, TypeError, AttributeError) as e:
            raise PayloadError(f"Malformed richsync line: {e!r}") from e

    def get_synced(self, bundle: TrackMetadataBundle) -> list[LyricLine] | None:
        track = match_track(bundle)
        if track is None:
            return None

        if track.get("instrumental"):
            return [LyricLine(text=INSTRUMENTAL_TEXT, start_time_ms=INSTRUMENTAL_START_TIME)]
        if not track.get("has_subtitles"):
            return None

        subtitle = dig(bundle, SUBTITLES_CALL, "message", "body", "subtitle_list", 0, "subtitle")
        if not isinstance(subtitle, Mapping):
            return None
        body = load_embedded(subtitle.get("subtitle_body"), "subtitle body")
        try:
            return [_synced_line(line) for line in body]
        except (KeyError, TypeError, AttributeError) as e:
            raise PayloadError(f"Malformed subtitle line: {e!r}") from e

    def get_unsynced(self, bundle: TrackMetadataBundle) -> list[LyricLine] | None:
        track = match_track(bundle)
        if track is None:
            return None

        if track.get("instrumental"):
            return [LyricLine(text=INSTRUMENTAL_TEXT)]
        if not (track.get("has_lyrics") or track.get("has_lyrics_crowd")):
            return None

        lyrics = dig(bundle, LYRICS_CALL, "message", "body", "lyrics", "lyrics_body")
        if not lyrics or not isinstance(lyrics, str):
            return None
        return [LyricLine(text=text) for text in lyrics.split("\n")]

    # -- crowd translations ---------------------------------------------

    def get_crowd_translation(self, bundle: TrackMetadataBundle) -> list[CrowdTranslationTask] | None:
        track = match_track(bundle)
        if track is None:
            return None

        statuses = track.get("track_lyrics_translation_status") or []
        if not statuses:
            return None

        complete = [s for s in statuses if isinstance(s, Mapping) and _completion(s) >= 1]
        if not complete:
            return None

        languages = self.get_languages()
        if not languages:
            logger.debug("Failed to get languages data, even if translation exist for %s", track.get("commontrack_id"))
            return None

        results: list[CrowdTranslationTask] = []
        for status in complete:
            target = find_by_iso3(languages, status.get("to"))
            if target is None:
                logger.debug("Failed to find language code %s", status.get("to"))
                continue
            source = find_by_iso3(languages, status.get("from"))
            results.append(
                CrowdTranslationTask(
                    track_id=track.get("commontrack_id"),
                    from_language_name=source.display_name if source else status.get("from") or "",
                    to_language_name=target.display_name,
                    to_iso_code3=target.iso_code3,
                    to_iso_code2=target.iso_code2,
                )
            )
        return results

    def fetch_translations_for_language(
        self, task: CrowdTranslationTask, synced_lines: Sequence[LyricLine]
    ) -> TranslatedLyrics:
        params = {
            "page": 1,
            "page_size": TRANSLATIONS_PAGE_SIZE,
            "commontrack_id": task.track_id,
            "selected_language": task.to_iso_code2,
        }
        try:
            response = self._get(TRANSLATIONS_URL, params)
            entries = dig(message_body(response), "translations_list") or []
        except TransportError as e:
            logger.warning("Failed to get translation body for %s: %s", task.to_iso_code3, e)
            entries = []

        translations = [t for t in (dig(e, "translation") for e in entries) if isinstance(t, Mapping)]

        lines: list[LyricLine] = []
        for line in synced_lines:
            match = _find_translation(translations, line.text)
            if match is None:
                lines.append(line)
            else:
                lines.append(LyricLine(text=match.get("description") or "", start_time_ms=line.start_time_ms))

        return TranslatedLyrics(
            track_id=task.track_id,
            from_language_name=task.from_language_name,
            to_language_name=task.to_language_name,
            iso_code3=task.to_iso_code3,
            lines=tuple(lines),
        )


def _synced_line(line: Mapping[str, Any]) -> LyricLine:
    return LyricLine(text=line.get("text") or EMPTY_LINE_TEXT, start_time_ms=line["time"]["total"] * 1000)


def _karaoke_line(line: Mapping[str, Any]) -> KaraokeLine:
    start_ms = line["ts"] * 1000
    end_ms = line["te"] * 1000
    words = line.get("l") or []

    out: list[KaraokeWord] = []
    for i, word in enumerate(words):
        offset = word.get("o")
        word_ms = offset * 1000 if offset is not None else math.nan
        next_offset = words[i + 1].get("o") if i + 1 < len(words) else None
        if next_offset is not None:
            duration = next_offset * 1000 - word_ms
        else:
            # TODO: confirm whether `o` is line-relative; this subtracts it plus `ts` from the absolute `te`
            duration = end_ms - (word_ms + start_ms)
        out.append(KaraokeWord(word=word.get("c", ""), duration_ms=duration))
    return KaraokeLine(start_time_ms=start_ms, words=tuple(out))


def _completion(status: Mapping[str, Any]) -> float:
    try:
        return float(status.get("perc") or 0)
    except (TypeError, ValueError):
        return 0.0


def _find_translation(translations: Sequence[Mapping[str, Any]], text: str) -> Mapping[str, Any] | None:
    for field in _TRANSLATION_MATCH_FIELDS:
        for t in translations:
            if t.get(field) == text:
                return t
    return None
