from __future__ import annotations

import typer

from mxm_lyrics.config import load_config, save_config_token
from mxm_lyrics.logging_setup import setup_logging
from mxm_lyrics.lrc.export import export_json, export_lrc
from mxm_lyrics.sources.service import LyricsService
from mxm_lyrics.sources.types import TrackQuery, TranslatedLyrics


app = typer.Typer(no_args_is_help=True, add_completion=False)


@app.command()
def lookup(
    title: str = typer.Option(..., "--title", "-t", help="Track title"),
    artist: str = typer.Option(..., "--artist", "-a", help="Artist name"),
    album: str = typer.Option("", "--album", help="Album name"),
    duration_ms: float = typer.Option(0, "--duration-ms", help="Track length in milliseconds"),
    track_id: str = typer.Option("", "--track-id", help="External (Spotify) track id or URI"),
    fmt: str = typer.Option("json", "--format", case_sensitive=False, help="json|lrc|plain"),
    translate: str | None = typer.Option(None, "--translate", help="ISO 639-1 code of a crowd translation"),
    no_karaoke: bool = typer.Option(False, "--no-karaoke", help="Skip the word-synced lookup"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Look up lyrics for one track and print the normalized result.
    """
    setup_logging(debug)
    fmt_l = fmt.lower()
    if fmt_l not in ("json", "lrc", "plain"):
        raise typer.BadParameter("format must be one of: json, lrc, plain")

    service = LyricsService(load_config())
    query = TrackQuery(title=title, artist=artist, album=album, duration_ms=duration_ms, track_id=track_id)
    res = service.get_lyrics(query, karaoke=not no_karaoke)
    if res.error:
        typer.echo(res.error, err=True)
        raise typer.Exit(code=1)

    translated: list[TranslatedLyrics] = []
    if translate:
        tasks = [t for t in res.translations or [] if t.to_iso_code2.lower() == translate.lower()]
        if not tasks:
            typer.echo(f"No complete '{translate}' translation for {query.display}", err=True)
        elif not res.synced:
            typer.echo("Translations need synced lyrics", err=True)
        else:
            translated = service.get_translations(tasks, res.synced)

    if fmt_l == "json":
        typer.echo(export_json(res, translated))
        return

    if translated:
        lines = translated[0].lines
    elif fmt_l == "lrc":
        lines = res.synced or res.unsynced
    else:
        lines = res.unsynced or res.synced
    if not lines:
        typer.echo(f"No lyrics found for {query.display}", err=True)
        raise typer.Exit(code=1)
    if fmt_l == "lrc":
        typer.echo(export_lrc(lines), nl=False)
    else:
        for line in lines:
            typer.echo(line.text)


@app.command()
def languages():
    """List the languages Musixmatch knows about."""
    service = LyricsService(load_config())
    entries = service.provider.get_languages()
    if not entries:
        typer.echo("Could not load the language list", err=True)
        raise typer.Exit(code=1)
    for lang in entries:
        typer.echo(f"{lang.iso_code3}\t{lang.iso_code2}\t{lang.display_name}")


@app.command()
def token(value: str = typer.Argument(..., help="Musixmatch user token")):
    """Save the Musixmatch user token to the config file."""
    path = save_config_token(value)
    typer.echo(f"Token saved: {path}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
