"""
Presence-checked access into Musixmatch payloads.

The API wraps every response as {"message": {"header": {...}, "body": ...}} and
sends `"body": []` instead of an object when there is nothing to return, so
every step of a lookup has to tolerate a missing key or a non-mapping value.
"""

from __future__ import annotations

import json
from typing import Any, Mapping

from mxm_lyrics.errors import PayloadError

STATUS_OK = 200

MATCHER_CALL = "matcher.track.get"
LYRICS_CALL = "track.lyrics.get"
SUBTITLES_CALL = "track.subtitles.get"


def dig(obj: Any, *path: str | int) -> Any:
    for key in path:
        if isinstance(key, int):
            if not isinstance(obj, list) or not -len(obj) <= key < len(obj):
                return None
            obj = obj[key]
        else:
            if not isinstance(obj, Mapping):
                return None
            obj = obj.get(key)
        if obj is None:
            return None
    return obj


def status_code(response: Any) -> Any:
    return dig(response, "message", "header", "status_code")


def is_ok(response: Any) -> bool:
    return status_code(response) == STATUS_OK


def message_body(response: Any) -> Any:
    return dig(response, "message", "body")


def match_track(bundle: Any) -> Mapping[str, Any] | None:
    """`track` object of the matcher sub-call, None when there was no match."""
    body = dig(bundle, MATCHER_CALL, "message", "body")
    if not isinstance(body, Mapping) or not body:
        return None
    track = body.get("track")
    # a matcher body without a track reads like a track with no flags set
    return track if isinstance(track, Mapping) else {}


def load_embedded(raw: Any, what: str) -> Any:
    """Decode a JSON document the API ships as a string field."""
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        raise PayloadError(f"Malformed {what}: {e}") from e
