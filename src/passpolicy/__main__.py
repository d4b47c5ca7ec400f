#!/usr/bin/env python3

import logging
import pathlib

import click
import lazy_object_proxy

from passpolicy._cli.commands.check import check
from passpolicy._cli.commands.show_config import show_config
from passpolicy._cli.settings import ConfigOption, validate_config


@click.group()
@click.option("-D", "--debug/--no-debug", default=False, help="Enable debug mode.")
@click.option(
    "-c",
    "--config",
    type=click.Path(
        dir_okay=False,
        exists=True,
        readable=True,
        path_type=pathlib.Path,
    ),
    help="Path to a YAML configuration file.",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config: ConfigOption) -> None:
    """Check passwords against the password policy."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
    )
    ctx.meta["passpolicy.config"] = config
    ctx.obj = lazy_object_proxy.Proxy(lambda: validate_config(fn=config))


cli.add_command(check)
cli.add_command(show_config)


def main() -> None:
    cli(auto_envvar_prefix="PASSPOLICY")


if __name__ == "__main__":
    main()
