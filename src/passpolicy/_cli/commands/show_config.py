import json
from typing import Literal

import click

from ... import exc
from ..._conf import Settings
from ...policy import PolicyConfiguration
from ..exc import CLIError

__all__ = ["show_config"]


@click.command("show-config")
@click.option(
    "-o",
    "--output",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.pass_context
def show_config(ctx: click.Context, output: Literal["text", "json"]) -> None:
    """
    Validate the configuration and print the policy that would be in force.

    Exits with a non-zero status if the thresholds are out of range or inconsistent.
    """
    if not (settings := ctx.find_object(Settings)):
        raise RuntimeError("Configuration not found")

    try:
        policy = PolicyConfiguration.load(settings.policy)
    except exc.ConfigError as ex:
        raise CLIError("Invalid password policy: %s" % ex) from ex

    values: dict[str, object] = {
        **policy.as_settings(),
        "dictionary.enabled": settings.dictionary_enabled,
        "dictionary.path": settings.dictionary_path,
        "dictionary.failure_mode": settings.dictionary_failure_mode,
    }

    match output:
        case "json":
            click.echo(json.dumps(values, indent=2))
        case _:
            for key, value in values.items():
                click.echo("%s = %s" % (key, json.dumps(value)))
