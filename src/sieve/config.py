"""Scraping configuration.

ScrapeConfig is a frozen dataclass, immutable after creation. Pass one to
``extract_cookies``, ``ResponseFactory`` or ``HtmlForm`` to change how
lenient they are.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields

_TRUTHY = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class ScrapeConfig:
    """Scraping configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ScrapeConfig(strict_max_age=True, default_charset="utf-8")
    """

    # Cookies
    strict_max_age: bool = False  # Drop cookies whose Max-Age is not an integer

    # Responses
    default_charset: str = "iso-8859-1"  # RFC 2616 3.7.1 default for text/*
    follow_meta_refresh: bool = True
    redirect_statuses: frozenset[int] = frozenset({301, 302, 303, 307, 308})
    error_status_threshold: int = 400

    # Forms
    strip_comments: bool = True  # Commented-out controls are not submitted

    @classmethod
    def from_env(cls, prefix: str = "SIEVE_") -> ScrapeConfig:
        """Build a config from ``{prefix}{FIELD}`` environment variables.

        Unset variables keep their defaults. ``SIEVE_REDIRECT_STATUSES``
        takes a comma-separated list of status codes.
        """
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = os.environ.get(f"{prefix}{f.name.upper()}")
            if raw is None:
                continue
            default = f.default
            if isinstance(default, bool):
                overrides[f.name] = raw.strip().lower() in _TRUTHY
            elif isinstance(default, int):
                overrides[f.name] = int(raw)
            elif isinstance(default, frozenset):
                overrides[f.name] = frozenset(
                    int(part) for part in raw.split(",") if part.strip()
                )
            else:
                overrides[f.name] = raw
        return cls(**overrides)
