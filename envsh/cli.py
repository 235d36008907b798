"""envsh: send files and URLs to envs.sh from the command line.

Usage:
    envsh FILE|URL [-d] [-s] [-S] [-e TIME]
    envsh manage URL TOKEN (-e EXPIRES | -d)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence
from urllib.parse import urlparse

import httpx
from pydantic import ValidationError

from envsh.config import VERSION, Settings, get_settings
from envsh.errors import EnvshError, ParseError
from envsh.models.submission import (
    Delete,
    ManagementAction,
    Operation,
    SendFile,
    SendRemoteUrl,
    SetExpiry,
    ShortenUrl,
    SubmissionOptions,
)
from envsh.services.management_builder import build_management
from envsh.services.response_interpreter import (
    MANAGEMENT_ACK,
    interpret_management,
    interpret_submission,
)
from envsh.services.submission_builder import build_submission
from envsh.services.timespec import parse_timespec
from envsh.services.transport import EnvsClient

logger = logging.getLogger(__name__)

URL_SCHEMES = ("http", "https")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def configure_logging(settings: Settings, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )
    # basicConfig leaves an already-configured root logger alone
    logging.getLogger().setLevel(level)
    # Keep noisy libraries at WARNING
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Argument parsers
# ---------------------------------------------------------------------------

def build_submit_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envsh",
        description="Send a file or URL to the envs.sh file host / URL shortener. "
        "Use 'envsh manage URL TOKEN ...' to modify an existing URL.",
    )
    parser.add_argument("target", metavar="FILE|URL", help="A file or URL to send")
    parser.add_argument(
        "-d", "--display-secret", action="store_true",
        help="Print X-Token (and expiry date)",
    )
    parser.add_argument(
        "-s", "--shorten", action="store_true",
        help="Shorten a URL instead of sending the file it points to",
    )
    parser.add_argument(
        "-S", "--secret", action="store_true",
        help="Make the resulting URL difficult to guess",
    )
    parser.add_argument(
        "-e", "--expires", metavar="TIME",
        help="When the URL should expire, in hours or epoch milliseconds",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def build_manage_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envsh manage",
        description="Modify or delete a URL previously sent to envs.sh",
    )
    parser.add_argument("url", metavar="URL", help="Existing envs.sh URL")
    parser.add_argument("token", metavar="TOKEN", help="Secret X-Token to manage URL")
    parser.add_argument(
        "-e", "--expires", metavar="EXPIRES",
        help="When the URL should expire, in hours or epoch milliseconds",
    )
    parser.add_argument(
        "-d", "--delete", action="store_true",
        help="Delete the shared URL immediately",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


# ---------------------------------------------------------------------------
# Preconditions: everything here runs before any network access
# ---------------------------------------------------------------------------

def _is_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in URL_SCHEMES and bool(parsed.netloc)


def operation_from_args(args: argparse.Namespace) -> Operation:
    """Turn submit arguments into an Operation, validating flag combinations."""
    if args.shorten and args.display_secret:
        raise ParseError(
            ParseError.Kind.CONFLICTING_OPTIONS,
            "--display-secret cannot be used with --shorten",
        )

    options = SubmissionOptions(
        secret=args.secret,
        display_secret=args.display_secret,
        expires=parse_timespec(args.expires) if args.expires is not None else None,
    )

    target = args.target.strip()
    if not target:
        raise ParseError(ParseError.Kind.INVALID_TARGET, "FILE|URL must not be empty")

    if _is_url(target):
        if args.shorten:
            return ShortenUrl(target, options)
        return SendRemoteUrl(target, options)

    if args.shorten:
        raise ParseError(
            ParseError.Kind.INVALID_TARGET,
            f"--shorten cannot be used with file path {target}",
        )
    return SendFile(Path(target), options)


def management_action_from_args(
    args: argparse.Namespace,
    settings: Settings,
) -> ManagementAction:
    """Exactly one of --expires / --delete must be given."""
    if args.delete and args.expires is not None:
        raise ParseError(
            ParseError.Kind.CONFLICTING_OPTIONS,
            "--expires and --delete are mutually exclusive",
        )
    if not args.delete and args.expires is None:
        raise ParseError(
            ParseError.Kind.MISSING_OPTION,
            "one of --expires or --delete is required",
        )

    parsed = urlparse(args.url)
    if parsed.scheme != settings.host_scheme or parsed.hostname != settings.host_hostname:
        raise ParseError(
            ParseError.Kind.INVALID_TARGET,
            f"invalid URL {args.url!r}: url must start with \"{settings.host_url}\"",
        )
    if not args.token:
        raise ParseError(ParseError.Kind.MISSING_OPTION, "TOKEN must not be empty")

    if args.delete:
        return Delete()
    return SetExpiry(parse_timespec(args.expires))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _new_client(
    settings: Settings,
    transport: Optional[httpx.BaseTransport],
) -> EnvsClient:
    return EnvsClient(
        timeout=settings.timeout,
        user_agent=settings.user_agent,
        transport=transport,
    )


def run_submit(
    args: argparse.Namespace,
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> None:
    op = operation_from_args(args)
    request = build_submission(op, settings.host_url)

    with _new_client(settings, transport) as client:
        response = client.send(request)

    result = interpret_submission(
        response,
        display_secret=op.options.display_secret,
        tz_name=settings.display_timezone,
    )
    print(f"Succesful! {result.url}")
    if result.expires_display:
        print(f"Expires at {result.expires_display}")
    if result.token:
        print(f"X-Token: {result.token}")


def run_manage(
    args: argparse.Namespace,
    settings: Settings,
    transport: Optional[httpx.BaseTransport] = None,
) -> None:
    action = management_action_from_args(args, settings)
    request = build_management(action, args.url, args.token)

    with _new_client(settings, transport) as client:
        response = client.send(request)

    result = interpret_management(response)
    if result.message:
        logger.debug("Host acknowledged: %s", result.message)
    print(MANAGEMENT_ACK)


def main(
    argv: Optional[Sequence[str]] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] == "manage":
        args = build_manage_parser().parse_args(argv[1:])
        command = run_manage
    else:
        args = build_submit_parser().parse_args(argv)
        command = run_submit

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"error: invalid configuration: {e}", file=sys.stderr)
        return ParseError.exit_code

    configure_logging(settings, args.verbose)

    try:
        command(args, settings, transport=transport)
    except EnvshError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return e.exit_code
    return 0


if __name__ == "__main__":
    sys.exit(main())
