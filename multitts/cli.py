"""Command-line interface for multitts.

Provides ``multitts providers``, ``models``, ``voices``, ``languages``,
``capabilities`` and ``generate`` commands. The entry point is registered via
``pyproject.toml`` as ``multitts = "multitts.cli:cli"``.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import click

from multitts.config import LOG_LEVEL
from multitts.errors import ConfigError, TTSError
from multitts.tts.client import TTSClient
from multitts.tts.registry import default_registry
from multitts.tts.types import ProviderName

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_PROVIDER_CHOICE = click.Choice([p.value for p in ProviderName])
_FORMAT_CHOICE = click.Choice(["mp3", "wav", "ogg_vorbis", "pcm", "opus", "aac", "flac"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    """Configure the root logger for terminal output."""
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    raise SystemExit(1)


def _build_client() -> TTSClient:
    return TTSClient()


async def _generate(params: dict[str, Any]) -> bytes:
    async with _build_client() as client:
        return await client.generate(params)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """multitts -- one interface to several text-to-speech vendors."""
    _setup_logging(verbose)


# ---------------------------------------------------------------------------
# Introspection
# ---------------------------------------------------------------------------


@cli.command()
def providers() -> None:
    """List the available providers."""
    for name in default_registry.names():
        click.echo(name)


@cli.command()
@click.argument("provider", type=_PROVIDER_CHOICE)
def models(provider: str) -> None:
    """List the models a provider offers."""
    for model in default_registry.models(provider):
        line = f"{model.id}\t{model.name}"
        if model.description:
            line += f"\t{model.description}"
        click.echo(line)


@cli.command()
@click.argument("provider", type=_PROVIDER_CHOICE)
def voices(provider: str) -> None:
    """List the voices a provider offers."""
    for voice in default_registry.voices(provider):
        details = ", ".join(v for v in (voice.gender, voice.locale or voice.language) if v)
        click.echo(f"{voice.id}\t{voice.name}\t({details})")


@cli.command()
@click.argument("provider", type=_PROVIDER_CHOICE)
def languages(provider: str) -> None:
    """List the languages a provider supports."""
    for language in default_registry.languages(provider):
        code = f"{language.code} ({language.locale})" if language.locale else language.code
        click.echo(f"{code}\t{language.name}")


@cli.command()
@click.argument("provider", type=_PROVIDER_CHOICE)
def capabilities(provider: str) -> None:
    """Show a provider's limits and supported formats."""
    caps = default_registry.capabilities(provider)
    max_length = caps.max_text_length if caps.max_text_length is not None else "unbounded"
    click.echo(f"  Streaming:       {'yes' if caps.streaming else 'no'}")
    click.echo(f"  Formats:         {', '.join(caps.formats)}")
    click.echo(f"  Sample rates:    {', '.join(str(rate) for rate in caps.sample_rates)}")
    click.echo(f"  Max text length: {max_length}")


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--provider", "-p", required=True, type=_PROVIDER_CHOICE, help="TTS provider")
@click.option("--text", "-t", default=None, help="Text to synthesize")
@click.option(
    "--input",
    "input_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the text from a file",
)
@click.option("--voice", default=None, help="Voice id (provider default if omitted)")
@click.option("--model", default=None, help="Model id (provider default if omitted)")
@click.option("--format", "fmt", default="mp3", type=_FORMAT_CHOICE, help="Audio format")
@click.option("--speed", default=None, type=float, help="Speaking rate")
@click.option("--api-key", default=None, help="API key overriding the configured one")
@click.option("--max-attempts", default=None, type=click.IntRange(min=0), help="Retries per chunk")
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Where to write the audio",
)
def generate(
    provider: str,
    text: str | None,
    input_path: Path | None,
    voice: str | None,
    model: str | None,
    fmt: str,
    speed: float | None,
    api_key: str | None,
    max_attempts: int | None,
    output: Path,
) -> None:
    """Synthesize speech and write the audio to a file."""
    if (text is None) == (input_path is None):
        raise click.UsageError("Provide exactly one of --text or --input.")
    if input_path is not None:
        text = input_path.read_text(encoding="utf-8")

    params: dict[str, Any] = {"provider": provider, "text": text, "format": fmt}
    for key, value in (("voice", voice), ("model", model), ("speed", speed), ("api_key", api_key)):
        if value is not None:
            params[key] = value
    if max_attempts is not None:
        params["retry_opts"] = {"max_attempts": max_attempts}

    try:
        audio = asyncio.run(_generate(params))
    except TTSError as exc:
        logger.debug("Generation failed: %r", exc)
        _fail(f"Generation failed [{exc.code.value}]: {exc.message}")
        return
    except ConfigError as exc:
        _fail(f"Configuration error: {exc}")
        return

    output.write_bytes(audio)
    click.echo(click.style(f"Wrote {len(audio)} bytes to {output}", fg="green"))
