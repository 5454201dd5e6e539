"""Command-line entry point.

Flags override the UNITWATCH_* environment; anything not given on the
command line keeps its environment or built-in default.
"""

from __future__ import annotations

import asyncio

import click

from unitwatch.config import load_config, validate_duration, validate_log_level
from unitwatch.models.config import UnitWatchConfig


def _duration(ctx: click.Context, param: click.Parameter, value: str | None) -> str | None:
    if value is None:
        return None
    try:
        return validate_duration(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc


@click.command()
@click.argument("slack_webhook_url", required=False)
@click.option("--slack-channel", help="Slack channel name.")
@click.option("--slack-username", help="Slack username.")
@click.option("--slack-icon-url", help="Slack avatar URL.")
@click.option("--webhook-url", help="Generic JSON webhook receiving every transition.")
@click.option("--state-file", type=click.Path(dir_okay=False), help="Path to the state file.")
@click.option("--interval", callback=_duration, help="Status polling interval, e.g. 500ms or 2s.")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Log level.",
)
def cli(
    slack_webhook_url: str | None,
    slack_channel: str | None,
    slack_username: str | None,
    slack_icon_url: str | None,
    webhook_url: str | None,
    state_file: str | None,
    interval: str | None,
    log_level: str | None,
) -> None:
    """Watch systemd units and report every change to Slack."""
    from unitwatch.app import main

    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(f"invalid environment configuration: {exc}") from exc

    apply_overrides(
        config,
        slack_webhook_url=slack_webhook_url,
        slack_channel=slack_channel,
        slack_username=slack_username,
        slack_icon_url=slack_icon_url,
        webhook_url=webhook_url,
        state_file=state_file,
        interval=interval,
        log_level=log_level,
    )
    asyncio.run(main(config))


def apply_overrides(config: UnitWatchConfig, **flags: str | None) -> UnitWatchConfig:
    """Copy every flag that was given onto *config*, in place."""
    targets = {
        "slack_webhook_url": (config.slack, "webhook_url"),
        "slack_channel": (config.slack, "channel"),
        "slack_username": (config.slack, "username"),
        "slack_icon_url": (config.slack, "icon_url"),
        "webhook_url": (config.webhook, "url"),
        "state_file": (config.watch, "state_file"),
        "interval": (config.watch, "interval"),
        "log_level": (config.log, "level"),
    }
    for flag, value in flags.items():
        if value is None:
            continue
        section, attr = targets[flag]
        if flag == "log_level":
            value = validate_log_level(value)
        setattr(section, attr, value)
    return config
