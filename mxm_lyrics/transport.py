from __future__ import annotations

import logging
from typing import Any, Mapping

import requests

from .errors import TransportError

logger = logging.getLogger(__name__)

# encodeURIComponent leaves these unescaped on top of the RFC 3986 unreserved set
_SAFE = "!~*'()"


def _format_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_url(base_url: str, params: Mapping[str, Any]) -> str:
    """
    Append `params` to a base URL that already ends with `?` or `&`.

    Values are percent-encoded, keys are used verbatim and the map order is kept.
    """
    query = "&".join(
        f"{key}={requests.utils.quote(_format_value(value), safe=_SAFE)}" for key, value in params.items()
    )
    return base_url + query


class JsonTransport:
    def get_json(self, url: str, body: Any = None, headers: Mapping[str, str] | None = None) -> Any:
        raise NotImplementedError


class RequestsTransport(JsonTransport):
    def __init__(self, *, timeout_s: float = 10.0, session: requests.Session | None = None):
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def get_json(self, url: str, body: Any = None, headers: Mapping[str, str] | None = None) -> Any:
        try:
            r = self.session.get(url, data=body, headers=dict(headers or {}), timeout=self.timeout_s)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            logger.warning("HTTP GET failed for %s: %s", url.split("?", 1)[0], e)
            raise TransportError(str(e)) from e
        except ValueError as e:
            raise TransportError(f"Response is not JSON: {e}") from e
