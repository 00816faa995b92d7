"""``sieve date``: parse an HTTP date and print it as ISO-8601 UTC."""

import argparse
import sys

from sieve.http.dates import parse_http_date


def run_date(args: argparse.Namespace) -> None:
    """Print ``args.value`` as an ISO-8601 UTC timestamp. Exits 1 if unparseable."""
    parsed = parse_http_date(args.value)
    if parsed is None:
        print(f"Error: not an HTTP date: {args.value!r}", file=sys.stderr)
        raise SystemExit(1)
    print(parsed.isoformat())
