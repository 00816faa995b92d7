"""Sieve CLI: inspect Set-Cookie headers, HTTP dates and HTML forms.

Entry point registered as ``sieve`` in ``pyproject.toml``::

    [project.scripts]
    sieve = "sieve.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``sieve`` command."""
    parser = argparse.ArgumentParser(
        prog="sieve",
        description="Sieve: Set-Cookie, HTTP date and HTML form tools for scrapers.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- sieve cookies ----------------------------------------------------
    cookies_parser = subparsers.add_parser("cookies", help="Resolve a Set-Cookie header")
    cookies_parser.add_argument("header", help="Raw Set-Cookie header value")
    cookies_parser.add_argument(
        "--host",
        required=True,
        help="Host name for cookies without a Domain attribute",
    )
    cookies_parser.add_argument(
        "--strict-max-age",
        action="store_true",
        help="Drop cookies whose Max-Age is not an integer",
    )

    # -- sieve date -------------------------------------------------------
    date_parser = subparsers.add_parser("date", help="Parse an HTTP date")
    date_parser.add_argument("value", help="Date string (e.g. 'Sun, 06 Nov 1994 08:49:37 GMT')")

    # -- sieve forms ------------------------------------------------------
    forms_parser = subparsers.add_parser("forms", help="List the forms in an HTML file")
    forms_parser.add_argument("file", help="HTML file to read ('-' for stdin)")
    forms_parser.add_argument(
        "--url",
        default="http://localhost/",
        help="URL the page was loaded from (resolves form actions)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "cookies":
        from sieve.cli._cookies import run_cookies

        run_cookies(args)
    elif args.command == "date":
        from sieve.cli._dates import run_date

        run_date(args)
    elif args.command == "forms":
        from sieve.cli._forms import run_forms

        run_forms(args)
