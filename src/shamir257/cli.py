"""Command line interface for splitting and combining secrets.

Exit codes: ``0`` on success, ``2`` for invalid arguments, invalid shares or
failed reconstruction, ``1`` for anything unexpected.
"""

from __future__ import annotations

import base64
import binascii
import functools
import logging
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import click

from . import audit
from .codec import deserialize_many_shares, deserialize_share, serialize_share
from .config import Settings, load_settings
from .errors import ShamirArgumentError, ShamirError
from .share import Share
from .sharer import MAX_SHARES, MIN_SHARES, MIN_THRESHOLD, combine, split

_logger = logging.getLogger(__name__)


class ShamirCliError(click.ClickException):
    """Domain failure reported to the user with exit code 2."""

    exit_code = 2


def _handle_errors(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ShamirError as exc:
            raise ShamirCliError(str(exc)) from exc
        except (click.ClickException, click.Abort, click.exceptions.Exit):
            raise
        except Exception as exc:
            _logger.debug("Unexpected failure", exc_info=True)
            raise click.ClickException(f"Unexpected error: {exc}") from exc

    return wrapper


def _settings() -> Settings:
    ctx = click.get_current_context()
    settings = ctx.find_object(Settings)
    return settings if settings is not None else load_settings()


def _record(settings: Settings, event: str, **details) -> None:
    if settings.audit_dir is None:
        return
    path = audit.record_event(settings.audit_dir, event, details=details)
    _logger.info("Recorded audit event %s at %s", event, path)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


# ---------------------------------------------------------------------------
# split
# ---------------------------------------------------------------------------


def _prompt_split_inputs(
    shares: Optional[int],
    threshold: Optional[int],
    secret_text: Optional[str],
    secret_base64: Optional[str],
    out: Optional[str],
):
    if shares is None:
        shares = click.prompt(
            "Number of shares", type=click.IntRange(MIN_SHARES, MAX_SHARES), err=True
        )
    if threshold is None:
        threshold = click.prompt(
            "Threshold", type=click.IntRange(MIN_THRESHOLD, max(shares, MIN_THRESHOLD)), err=True
        )
    if _blank(secret_text) and _blank(secret_base64):
        kind = click.prompt(
            "Secret input type",
            type=click.Choice(["text", "base64"], case_sensitive=False),
            default="text",
            err=True,
        )
        if kind.lower() == "base64":
            secret_base64 = click.prompt("Secret (base64)", hide_input=True, err=True)
        else:
            secret_text = click.prompt("Secret (text)", hide_input=True, err=True)
    if _blank(out):
        out = click.prompt(
            "Output file path (optional)", default="", show_default=False, err=True
        ).strip() or None
    return shares, threshold, secret_text, secret_base64, out


def _resolve_secret(secret_text: Optional[str], secret_base64: Optional[str], limit: int) -> bytes:
    if not _blank(secret_text) and not _blank(secret_base64):
        raise ShamirArgumentError(
            "Provide exactly one secret input: --secret-text or --secret-base64."
        )
    if _blank(secret_text) and _blank(secret_base64):
        raise ShamirArgumentError("Provide one secret input: --secret-text or --secret-base64.")

    if not _blank(secret_text):
        secret = secret_text.encode("utf-8")
    else:
        try:
            secret = base64.b64decode(secret_base64.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ShamirArgumentError("The value for --secret-base64 is not valid base64.") from exc
        if not secret:
            raise ShamirArgumentError("Secret base64 must decode to at least one byte.")

    if len(secret) > limit:
        raise ShamirArgumentError(f"Secret is {len(secret)} bytes; the limit is {limit} bytes.")
    return secret


@click.command("split")
@click.option("--shares", "shares", type=int, help="Number of shares to produce (2-256).")
@click.option("--threshold", type=int, help="Shares required to reconstruct (2-shares).")
@click.option("--secret-text", help="Secret given as UTF-8 text.")
@click.option("--secret-base64", help="Secret given as base64.")
@click.option("--out", "out", type=click.Path(dir_okay=False), help="Also write shares to this file.")
@_handle_errors
def split_command(
    shares: Optional[int],
    threshold: Optional[int],
    secret_text: Optional[str],
    secret_base64: Optional[str],
    out: Optional[str],
) -> None:
    """Split a secret into JSON shares, one per line."""
    settings = _settings()
    if shares is None or threshold is None or (_blank(secret_text) and _blank(secret_base64)):
        shares, threshold, secret_text, secret_base64, out = _prompt_split_inputs(
            shares, threshold, secret_text, secret_base64, out
        )

    secret = _resolve_secret(secret_text, secret_base64, settings.max_secret_bytes)
    lines = [serialize_share(share) for share in split(secret, shares, threshold)]
    for line in lines:
        click.echo(line)

    if not _blank(out):
        Path(out).write_text("\n".join(lines) + "\n", encoding="utf-8")
        click.echo(f"Wrote {len(lines)} share(s) to {out}.", err=True)

    _record(settings, "split", shares=shares, threshold=threshold, secret_length=len(secret))


# ---------------------------------------------------------------------------
# combine
# ---------------------------------------------------------------------------


def _read_pasted_lines() -> List[str]:
    click.echo("Paste share JSON lines. Enter an empty line to finish.", err=True)
    stream = click.get_text_stream("stdin")
    lines: List[str] = []
    while True:
        line = stream.readline()
        if not line or not line.strip():
            return lines
        lines.append(line.rstrip("\r\n"))


def _load_shares(share_json: Sequence[str], shares_file: Optional[str]) -> List[Share]:
    shares = [deserialize_share(item) for item in share_json if not _blank(item)]
    if not _blank(shares_file):
        path = Path(shares_file)
        if not path.is_file():
            raise ShamirArgumentError(f"Shares file does not exist: {shares_file}")
        with path.open(encoding="utf-8") as handle:
            shares.extend(deserialize_many_shares(handle))
    if not shares:
        raise ShamirArgumentError("No shares were loaded from the provided inputs.")
    return shares


@click.command("combine")
@click.option("--share-json", "share_json", multiple=True, help="One share as JSON; repeatable.")
@click.option("--shares-file", help="File with one JSON share per line.")
@click.option("--as-text", is_flag=True, help="Print the secret as UTF-8 text instead of base64.")
@_handle_errors
def combine_command(share_json: Sequence[str], shares_file: Optional[str], as_text: bool) -> None:
    """Reconstruct a secret from JSON shares."""
    settings = _settings()
    share_json = list(share_json)
    if not share_json and _blank(shares_file):
        shares_file = click.prompt(
            "Shares file path (leave blank to paste JSON lines)",
            default="",
            show_default=False,
            err=True,
        ).strip() or None
        if shares_file is None:
            share_json = _read_pasted_lines()
        if not as_text:
            output = click.prompt(
                "Output format",
                type=click.Choice(["base64", "text"], case_sensitive=False),
                default="base64",
                err=True,
            )
            as_text = output.lower() == "text"

    if not share_json and _blank(shares_file):
        raise ShamirArgumentError("Provide shares through --share-json and/or --shares-file.")

    shares = _load_shares(share_json, shares_file)
    secret = combine(shares)

    if as_text:
        try:
            click.echo(secret.decode("utf-8"))
        except UnicodeDecodeError as exc:
            raise ShamirArgumentError(
                "Reconstructed secret is not valid UTF-8 text. Omit --as-text to emit base64."
            ) from exc
    else:
        click.echo(base64.b64encode(secret).decode("ascii"))

    _record(
        settings,
        "combine",
        shares=len(shares),
        threshold=shares[0].threshold,
        secret_length=len(secret),
    )


# ---------------------------------------------------------------------------
# entry point
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
@click.version_option(package_name="shamir257")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Shamir secret sharing over GF(257).

    Missing required options are prompted for interactively.
    """
    settings = load_settings()
    ctx.obj = settings
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.numeric_log_level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        mode = click.prompt(
            "Mode", type=click.Choice(["split", "combine"], case_sensitive=False), err=True
        )
        command = split_command if mode.lower() == "split" else combine_command
        ctx.invoke(command)


cli.add_command(split_command)
cli.add_command(combine_command)


def main() -> None:
    cli(prog_name="shamir257")


if __name__ == "__main__":
    main()
