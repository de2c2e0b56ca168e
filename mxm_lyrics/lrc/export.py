from __future__ import annotations

import json
from typing import Sequence

from mxm_lyrics.sources.service import LyricsResponse
from mxm_lyrics.sources.types import INSTRUMENTAL_START_TIME, LyricLine, TranslatedLyrics


def export_json(res: LyricsResponse, translated: Sequence[TranslatedLyrics] = ()) -> str:
    def _lines(lines):
        return None if lines is None else [line.to_dict() for line in lines]

    data: dict[str, object] = {"uri": res.uri}
    if res.error:
        data["error"] = res.error
    else:
        data.update(
            synced=_lines(res.synced),
            unsynced=_lines(res.unsynced),
            karaoke=_lines(res.karaoke),
            translations=_lines(res.translations),
        )
        if translated:
            data["translated"] = [t.to_dict() for t in translated]
    return json.dumps(data, ensure_ascii=False, indent=2)


def _fmt_lrc_time(ms: float | str) -> str:
    if ms == INSTRUMENTAL_START_TIME:
        ms = 0
    m, rem = divmod(int(round(float(ms))), 60_000)
    s, ms2 = divmod(rem, 1_000)
    # keep 2 decimals for compatibility
    return f"{m:02d}:{s:02d}.{ms2 // 10:02d}"


def export_lrc(lines: Sequence[LyricLine]) -> str:
    out: list[str] = []
    for line in lines:
        if line.start_time_ms is None:
            out.append(line.text)
        else:
            out.append(f"[{_fmt_lrc_time(line.start_time_ms)}]{line.text}")
    return "\n".join(out) + ("\n" if out else "")
