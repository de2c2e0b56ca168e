from __future__ import annotations

import pytest

from mxm_lyrics.sources.languages import LanguageTable
from mxm_lyrics.sources.musixmatch import MusixmatchProvider
from tests.mocks.payloads import DEFAULT_LANGUAGES
from tests.mocks.transport_mock import FakeTransport


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport({"languages.get": DEFAULT_LANGUAGES})


@pytest.fixture
def provider(transport: FakeTransport) -> MusixmatchProvider:
    return MusixmatchProvider(transport, "tok-123", languages=LanguageTable())
