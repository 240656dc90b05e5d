"""``turnstile request`` — run one request through the standard pipeline."""

import argparse
import sys

from turnstile.errors import ConfigurationError
from turnstile.middleware.protocol import Middleware
from turnstile.pipeline import PipelineBuilder
from turnstile.server import Server


def standard_server(rate_limit: int, *extra: Middleware) -> Server:
    """Logging, rate limiting, authentication, authorization, validation.

    Any *extra* middleware runs after validation, in the order given.
    """
    builder = (
        PipelineBuilder()
        .logging()
        .rate_limiting(max_requests_per_minute=rate_limit)
        .authentication()
        .authorization()
        .validation()
    )
    for middleware in extra:
        builder.use(middleware)
    return Server(builder.build())


def parse_header(raw: str) -> tuple[str, str]:
    """Split ``"Name: value"`` into a pair. Raises ``ValueError`` without a colon."""
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        msg = f"Invalid header {raw!r}, expected 'Name: value'"
        raise ValueError(msg)
    return name.strip(), value.strip()


def run_request(args: argparse.Namespace) -> None:
    """Print ``STATUS BODY`` for one request; exit 1 on a non-2xx status."""
    try:
        headers = dict(parse_header(raw) for raw in args.headers)
        server = standard_server(args.rate_limit)
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    response = server.process(args.path, args.method, headers, args.data)
    print(f"{response.status} {response.body}")
    for name, value in response.headers.items():
        print(f"{name}: {value}")
    if not response.ok:
        raise SystemExit(1)
