"""Turnstile CLI — send requests through the standard pipeline.

Entry point registered as ``turnstile`` in ``pyproject.toml``::

    [project.scripts]
    turnstile = "turnstile.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``turnstile`` command."""
    parser = argparse.ArgumentParser(
        prog="turnstile",
        description="Turnstile — a chain-of-responsibility request pipeline.",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Logging level for pipeline loggers",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- turnstile request ------------------------------------------------
    request_parser = subparsers.add_parser("request", help="Process a single request")
    request_parser.add_argument("path", help="Request path (e.g. /api/profile)")
    request_parser.add_argument("-X", "--method", default="GET", help="HTTP method")
    request_parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        dest="headers",
        metavar="NAME: VALUE",
        help="Request header (repeatable)",
    )
    request_parser.add_argument("-d", "--data", default="", help="Request body")
    request_parser.add_argument(
        "--rate-limit",
        type=int,
        default=60,
        help="Maximum requests per minute per client",
    )

    # -- turnstile demo ---------------------------------------------------
    demo_parser = subparsers.add_parser("demo", help="Replay the scripted demo scenario")
    demo_parser.add_argument(
        "--rate-limit",
        type=int,
        default=5,
        help="Maximum requests per minute per client",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "request":
        from turnstile.cli._request import run_request

        run_request(args)
    elif args.command == "demo":
        from turnstile.cli._demo import run_demo

        run_demo(args)
