from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence, TypeVar

from mxm_lyrics.config import AppConfig
from mxm_lyrics.errors import PayloadError
from mxm_lyrics.transport import JsonTransport, RequestsTransport

from .languages import LanguageTable
from .musixmatch import MusixmatchProvider
from .types import (
    CrowdTranslationTask,
    KaraokeLine,
    LyricLine,
    LyricsError,
    TrackMetadataBundle,
    TrackQuery,
    TranslatedLyrics,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class LyricsResponse:
    uri: str
    error: str | None = None
    synced: list[LyricLine] | None = None
    unsynced: list[LyricLine] | None = None
    karaoke: list[KaraokeLine] | None = None
    translations: list[CrowdTranslationTask] | None = None

    @property
    def has_lyrics(self) -> bool:
        return bool(self.synced or self.unsynced or self.karaoke)


class LyricsService:
    def __init__(
        self,
        cfg: AppConfig,
        *,
        transport: JsonTransport | None = None,
        languages: LanguageTable | None = None,
    ):
        self.cfg = cfg
        self.transport = transport or RequestsTransport(timeout_s=cfg.http_timeout_s)
        self.provider = MusixmatchProvider(self.transport, cfg.token, languages=languages)

    def get_lyrics(self, query: TrackQuery, *, karaoke: bool = True) -> LyricsResponse:
        if not self.cfg.token:
            logger.debug("No Musixmatch token configured, requests may be rejected")

        bundle = self.provider.find_lyrics(query)
        if isinstance(bundle, LyricsError):
            return LyricsResponse(uri=bundle.uri, error=bundle.error)

        return LyricsResponse(
            uri=query.track_id,
            synced=self._extract("synced", self.provider.get_synced, bundle),
            unsynced=self._extract("unsynced", self.provider.get_unsynced, bundle),
            karaoke=self._extract("karaoke", self.provider.get_karaoke, bundle) if karaoke else None,
            translations=self.provider.get_crowd_translation(bundle),
        )

    def get_translations(
        self, tasks: Sequence[CrowdTranslationTask], synced: Sequence[LyricLine]
    ) -> list[TranslatedLyrics]:
        return [self.provider.fetch_translations_for_language(task, synced) for task in tasks]

    @staticmethod
    def _extract(kind: str, fn: Callable[[TrackMetadataBundle], T | None], bundle: TrackMetadataBundle) -> T | None:
        try:
            return fn(bundle)
        except PayloadError as e:
            logger.warning("Dropping %s lyrics: %s", kind, e)
            return None
