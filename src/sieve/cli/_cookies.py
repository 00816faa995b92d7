"""``sieve cookies``: resolve a Set-Cookie header and print the cookies as JSON."""

import argparse
import dataclasses
import json
import sys

from sieve.config import ScrapeConfig
from sieve.errors import UsageError
from sieve.http.cookies import Cookie, extract_cookies


def cookie_to_dict(cookie: Cookie) -> dict[str, object]:
    return {
        "name": cookie.name,
        "value": cookie.value,
        "domain": cookie.domain,
        "path": cookie.path,
        "expires": cookie.expires.isoformat() if cookie.expires else None,
        "secure": cookie.secure,
        "http_only": cookie.http_only,
        "version": cookie.version,
    }


def run_cookies(args: argparse.Namespace) -> None:
    """Print the cookies in ``args.header`` as a JSON list.

    Settings come from ``SIEVE_*`` environment variables; ``--strict-max-age``
    overrides ``SIEVE_STRICT_MAX_AGE``. Exits with code 1 on a blank host.
    """
    config = ScrapeConfig.from_env()
    if args.strict_max_age:
        config = dataclasses.replace(config, strict_max_age=True)
    try:
        cookies = extract_cookies(args.header, args.host, config=config)
    except UsageError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(json.dumps([cookie_to_dict(c) for c in cookies], indent=2))
