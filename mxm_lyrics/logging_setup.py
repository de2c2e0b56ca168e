from __future__ import annotations

import logging
import os
import re

# urllib3 logs full request lines at DEBUG, user token included
_TOKEN_RE = re.compile(r"(usertoken=)[^&\s\"']+")


class RedactTokenFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        redacted = _TOKEN_RE.sub(r"\1***", msg)
        if redacted != msg:
            record.msg, record.args = redacted, None
        return True


def _resolve_level(debug: bool) -> int:
    level_name = os.getenv("MXM_LYRICS_LOG_LEVEL")
    if level_name:
        level = logging.getLevelName(level_name.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if debug else logging.INFO


def setup_logging(debug: bool) -> None:
    level = _resolve_level(debug)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RedactTokenFilter) for f in handler.filters):
            handler.addFilter(RedactTokenFilter())
    # urllib3 connection chatter only when explicitly debugging
    logging.getLogger("urllib3").setLevel(logging.DEBUG if debug else logging.WARNING)
