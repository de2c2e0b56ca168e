from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


def _config_dir() -> Path:
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "mxm-lyrics"
    return Path.home() / ".config" / "mxm-lyrics"


def _config_file() -> Path:
    return _config_dir() / "config.json"


@dataclass(frozen=True)
class AppConfig:
    config_dir: Path

    # Musixmatch
    token: str

    # HTTP
    http_timeout_s: float


def load_config() -> AppConfig:
    config_dir = _config_dir()
    return AppConfig(
        config_dir=config_dir,
        token=_load_token(config_dir),
        http_timeout_s=float(os.getenv("MXM_LYRICS_HTTP_TIMEOUT", "10.0")),
    )


def _read_config_json(cfg_path: Path) -> dict[str, str]:
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", cfg_path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _load_token(config_dir: Path) -> str:
    # Priority: config.json → MXM_LYRICS_TOKEN → ""
    data = _read_config_json(config_dir / "config.json")
    token = str(data.get("token") or "").strip()
    if token:
        return token
    return os.getenv("MXM_LYRICS_TOKEN", "").strip()


def save_config_token(token: str) -> Path:
    cfg_path = _config_file()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    data = _read_config_json(cfg_path)
    data["token"] = token.strip()
    cfg_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return cfg_path
