"""`voicecode config …` commands."""

from __future__ import annotations

import sys

import click

from voicecode.config import env_file_path, env_file_permissions_ok, load_config, upsert_env_var


@click.group(name="config")
def config_group() -> None:
    """Manage voicecode configuration."""


@config_group.command("path")
def config_path() -> None:
    """Print the env file location."""
    click.echo(str(env_file_path()))


@config_group.command("show")
def config_show() -> None:
    """Show the effective settings (the API key is never printed)."""
    config = load_config()
    click.echo(f"env_file: {env_file_path()}")
    click.echo(f"api_key: {'set' if config.api_key else 'missing'}")
    click.echo(f"base_url: {config.base_url or '(default)'}")
    click.echo(f"completion_model: {config.completion_model}")
    click.echo(f"transcribe_model: {config.transcribe_model}")
    click.echo(f"live_server_command: {config.live_server_command or '(default)'}")
    click.echo(f"silence_seconds: {config.silence_seconds}")
    click.echo(f"silence_threshold: {config.silence_threshold}")
    click.echo(f"max_record_seconds: {config.max_record_seconds}")
    device = config.device_index
    click.echo(f"device: {device if device is not None else '(default)'}")


@config_group.command("set-api-key")
@click.argument("api_key", required=False)
@click.option(
    "--from-stdin",
    is_flag=True,
    help="Read the API key from stdin (avoids shell history).",
)
def config_set_api_key(api_key: str | None, from_stdin: bool) -> None:
    """Store the OpenAI API key in the voicecode env file."""
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped stdin")
        api_key = (sys.stdin.read() or "").strip()

    if not api_key:
        api_key = click.prompt("OpenAI API key", hide_input=True, confirmation_prompt=True).strip()

    if not api_key:
        raise click.ClickException("API key is empty")

    env_path = upsert_env_var("OPENAI_API_KEY", api_key)
    click.echo(f"Wrote OPENAI_API_KEY to: {env_path}")
    if env_file_permissions_ok(env_path) is False:
        click.echo("Warning: env file permissions are not 0600", err=True)
