from __future__ import annotations

from typing import Iterable

from .types import LanguageEntry


class LanguageTable:
    """
    Write-once holder for the Musixmatch language list.

    Owned by whoever builds the provider; share one instance to share the
    cached list. Empty until the first successful load, never refreshed.
    """

    def __init__(self) -> None:
        self._entries: tuple[LanguageEntry, ...] | None = None

    @property
    def loaded(self) -> bool:
        return self._entries is not None

    @property
    def entries(self) -> tuple[LanguageEntry, ...]:
        return self._entries or ()

    def populate(self, entries: Iterable[LanguageEntry]) -> None:
        self._entries = tuple(entries)


def find_by_iso3(languages: Iterable[LanguageEntry], code: str | None) -> LanguageEntry | None:
    if not code:
        return None
    return next((lang for lang in languages if lang.iso_code3 == code), None)
