"""``turnstile demo`` — scripted walk through the standard pipeline.

Shows each way a stage can act: continue (health check), enrich the context
(authenticated profile), and stop the chain early (missing credentials, then
the rate limit once the budget is spent).
"""

import argparse
import sys

from turnstile.cli._request import standard_server
from turnstile.context import RequestContext
from turnstile.errors import ConfigurationError
from turnstile.result import MiddlewareResult


def _annotate(context: RequestContext) -> MiddlewareResult:
    return context.with_metadata("demo", True).proceed()


def run_demo(args: argparse.Namespace) -> None:
    try:
        server = standard_server(args.rate_limit, _annotate)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    print("=== Testing pipeline ===")
    response = server.process("/health")
    print(f"Health check: {response.status}")

    response = server.process("/api/profile", headers={"Authorization": "bearer_user_token"})
    print(f"Profile request: {response.status} {response.body}")

    for attempt in range(1, 5):
        response = server.process("/api/profile")
        print(f"Anonymous profile request #{attempt}: {response.status} {response.body}")
