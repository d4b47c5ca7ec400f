import logging
import signal
from collections.abc import Mapping
from typing import Any, Iterator

import click
import pydantic

from ... import exc
from ..._conf import Settings
from ...dto.verdict import Rejected, Verdict
from ...hook import PasswordCheckHook, PasswordType
from ...state import install_reload_handler
from ...util.model import convert_errors
from ..exc import CLIError, PasswordRejected
from ..settings import validate_config

__all__ = ["check"]

logger = logging.getLogger(__name__)


def build_hook(ctx: click.Context) -> PasswordCheckHook:
    if not (settings := ctx.find_object(Settings)):
        raise RuntimeError("Configuration not found")

    try:
        return PasswordCheckHook.from_settings(settings)
    except exc.ConfigError as ex:
        raise CLIError("Invalid password policy: %s" % ex) from ex


def read_batch(stream: Iterator[str]) -> Iterator[tuple[str, str]]:
    """Yields ``(account name, password)`` for each non-empty line."""
    for lineno, line in enumerate(stream, start=1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        account_name, sep, password = line.partition("\t")
        if not sep:
            raise CLIError(
                "Line %d: expected '<account name><TAB><password>'" % lineno
            )
        yield account_name, password


def run_batch(
    ctx: click.Context, hook: PasswordCheckHook, password_type: PasswordType
) -> None:
    config_path = ctx.meta.get("passpolicy.config")

    def load_policy() -> Mapping[str, Any]:
        try:
            return validate_config(fn=config_path).policy
        except CLIError as ex:
            raise exc.ConfigSourceError(
                "{ctx[reason]}",
                ctx=exc.ConfigSourceError.Context(reason=ex.format_message()),
            ) from ex

    if hasattr(signal, "SIGHUP"):
        install_reload_handler(hook.state, load_policy)
        logger.debug("SIGHUP reloads the policy from %r", config_path)

    rejected = 0
    for account_name, password in read_batch(click.get_text_stream("stdin")):
        verdict = check_one(hook, account_name, password, password_type)
        if isinstance(verdict, Rejected):
            rejected += 1
            click.echo("%s\trejected\t%s" % (account_name, verdict.reason.message))
        else:
            click.echo("%s\taccepted" % account_name)

    if rejected:
        raise PasswordRejected("%d password(s) rejected" % rejected)


def check_one(
    hook: PasswordCheckHook,
    account_name: str,
    password: str,
    password_type: PasswordType,
) -> Verdict:
    try:
        return hook.check(account_name, password, password_type)
    except pydantic.ValidationError as ex:
        raise CLIError(
            "Invalid input for account %r: %s" % (account_name, convert_errors(ex))
        ) from ex
    except (exc.DictionaryUnavailableError, exc.UnsupportedHashSchemeError) as ex:
        raise CLIError(str(ex)) from ex


@click.command()
@click.option(
    "-u",
    "--user",
    "account_name",
    help="Name of the account the password belongs to. Required unless --batch.",
)
@click.option(
    "--hashed",
    "scheme",
    type=click.Choice(["md5", "scram-sha-256"]),
    default=None,
    help=(
        "Treat the input as a password digest in the given scheme. Only the "
        "'password equals user name' check can be applied to digests."
    ),
)
@click.option(
    "--password-stdin",
    is_flag=True,
    default=False,
    help="Read the password from the first line of standard input.",
)
@click.option(
    "--batch",
    is_flag=True,
    default=False,
    help=(
        "Read '<account name><TAB><password>' lines from standard input and report a "
        "verdict per line. Sending SIGHUP reloads the policy from the configuration "
        "file."
    ),
)
@click.pass_context
def check(
    ctx: click.Context,
    account_name: str | None,
    scheme: PasswordType | None,
    password_stdin: bool,
    batch: bool,
) -> None:
    """
    Check a password against the password policy.

    Exits with status 0 if the password is accepted and 65 if it is rejected.

    Examples:

    \b
      # Prompt for a password
      $ passpolicy check -u alice
    \b
      # Check a password digest
      $ echo md5c6cd... | passpolicy check -u alice --hashed md5 --password-stdin
    \b
      # Check many passwords
      $ passpolicy -c policy.yaml check --batch < passwords.tsv
    """
    password_type: PasswordType = scheme or "plaintext"
    hook = build_hook(ctx)

    if batch:
        run_batch(ctx, hook, password_type)
        return

    if not account_name:
        raise click.UsageError("Missing option '-u' / '--user'.", ctx=ctx)

    if password_stdin:
        password = click.get_text_stream("stdin").readline().rstrip("\r\n")
    else:
        password = click.prompt("Password", hide_input=True)

    verdict = check_one(hook, account_name, password, password_type)
    if isinstance(verdict, Rejected):
        raise PasswordRejected(verdict.reason.message)

    click.secho("Password accepted", fg="green")
