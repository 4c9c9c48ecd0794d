"""
Entry point for the audioboo_client component.
"""

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from pathlib import Path

from .application.exceptions import AudiobooError
from .infrastructure.containers import Container

logger = logging.getLogger(__name__)

_DECODE_KINDS = ("posts", "registration", "status", "unlink", "upload")


def setup_logging(level: str):
    """Applies basic logging configuration."""
    logging.basicConfig(level=level)


def _print_result(result) -> int:
    """Prints a decoded response as JSON; returns the process exit code."""
    if result is None:
        return 1
    print(json.dumps(dataclasses.asdict(result), indent=2, default=str))
    return 0


def _report_failures(sink) -> None:
    for failure in sink.drain():
        print(f"{type(failure).__name__}: {failure}", file=sys.stderr)


def decode_file(container: Container, kind: str, path: Path) -> int:
    """Decodes a saved response body of the given kind."""

    decoder = container.decoder()
    sink = container.sink()
    raw = path.read_text(encoding="utf-8")

    decode = {
        "posts": decoder.post_page,
        "registration": decoder.registration,
        "status": decoder.link_status,
        "unlink": decoder.unlink,
        "upload": decoder.upload,
    }[kind]

    exit_code = _print_result(decode(raw, sink))
    _report_failures(sink)
    return exit_code


async def fetch_feed(container: Container, feed: str, params: dict) -> int:
    """Fetches one page of a post feed and prints it."""

    service = container.audioboo_service()
    try:
        result = await service.fetch_posts(feed, params=params or None)
    finally:
        await container.http_client().aclose()

    exit_code = _print_result(result)
    _report_failures(container.sink())
    return exit_code


async def fetch_status(container: Container) -> int:
    """Fetches the link status of this client and prints it."""

    service = container.audioboo_service()
    try:
        result = await service.fetch_status()
    finally:
        await container.http_client().aclose()

    exit_code = _print_result(result)
    _report_failures(container.sink())
    return exit_code


def _key_value(pair: str):
    key, sep, value = pair.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{pair}'")
    return key, value


def run_application(args: argparse.Namespace) -> int:
    """Wires and runs the requested command using the DI container."""

    container = Container()
    setup_logging(level=container.config().logging.level)

    try:
        if args.command == "decode":
            return decode_file(container, args.kind, args.path)
        if args.command == "fetch":
            return asyncio.run(
                fetch_feed(container, args.feed, dict(args.param or []))
            )
        return asyncio.run(fetch_status(container))
    except AudiobooError as e:
        logger.error(f"An application error occurred: {e}")
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Audioboo API client")
    commands = parser.add_subparsers(dest="command", required=True)

    decode = commands.add_parser(
        "decode", help="Decode a saved API response body."
    )
    decode.add_argument("kind", choices=_DECODE_KINDS)
    decode.add_argument("path", type=Path)

    fetch = commands.add_parser("fetch", help="Fetch a page of a post feed.")
    fetch.add_argument(
        "feed",
        help="A feed name from the [api.feeds] settings, e.g. 'recent'.",
    )
    fetch.add_argument(
        "--param",
        action="append",
        type=_key_value,
        metavar="KEY=VALUE",
        help="Extra query parameter; may be repeated.",
    )

    commands.add_parser("status", help="Fetch the link status of this client.")

    return parser


def main():
    cli_args = build_parser().parse_args()
    sys.exit(run_application(cli_args))


if __name__ == "__main__":
    main()
