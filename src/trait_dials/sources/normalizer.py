"""
Share-Link Normalization

Rewrites cloud-storage share links into URLs that return the raw file
instead of an interactive viewer page.

Rules are evaluated in order and the first rule whose host predicate
matches decides the outcome. No URL is transformed by more than one rule.
Unknown hosts and unparsable input pass through verbatim.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

_DRIVE_FILE_ID = re.compile(r"/d/([^/]+)")


@dataclass(frozen=True)
class RewriteRule:
    """A named (predicate, rewrite) pair; `rewrite` returns None to leave the URL untouched."""

    name: str
    matches: Callable[[str], bool]
    rewrite: Callable[[SplitResult], Optional[str]]


# ---------------------------------------------------------------------
# Query helpers
# ---------------------------------------------------------------------

def _query_pairs(parts: SplitResult) -> List[Tuple[str, str]]:
    return parse_qsl(parts.query, keep_blank_values=True)


def _with_query(parts: SplitResult, pairs: List[Tuple[str, str]]) -> str:
    return urlunsplit(parts._replace(query=urlencode(pairs)))


def _set_param(pairs: List[Tuple[str, str]], name: str, value: str) -> List[Tuple[str, str]]:
    """Replace the first `name` in place, drop later duplicates, append if absent."""
    result: List[Tuple[str, str]] = []
    replaced = False
    for key, current in pairs:
        if key != name:
            result.append((key, current))
        elif not replaced:
            result.append((name, value))
            replaced = True
    if not replaced:
        result.append((name, value))
    return result


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

def _rewrite_google_drive(parts: SplitResult) -> Optional[str]:
    match = _DRIVE_FILE_ID.search(parts.path)
    if not match:
        return None
    return f"https://drive.google.com/uc?export=download&id={match.group(1)}"


def _rewrite_dropbox(parts: SplitResult) -> Optional[str]:
    return _with_query(parts, _set_param(_query_pairs(parts), "dl", "1"))


def _rewrite_onedrive(parts: SplitResult) -> Optional[str]:
    pairs = _query_pairs(parts)
    if any(key == "download" for key, _ in pairs):
        return None
    return _with_query(parts, pairs + [("download", "1")])


REWRITE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule(
        name="google-drive",
        matches=lambda host: "drive.google.com" in host,
        rewrite=_rewrite_google_drive,
    ),
    RewriteRule(
        name="dropbox",
        matches=lambda host: "dropbox.com" in host,
        rewrite=_rewrite_dropbox,
    ),
    RewriteRule(
        name="onedrive",
        matches=lambda host: "1drv.ms" in host or "onedrive.live.com" in host,
        rewrite=_rewrite_onedrive,
    ),
)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def normalize_source_url(url: Optional[str]) -> str:
    """
    Return a direct-download form of `url`.

    Never raises. Empty input yields "", and input that does not parse as
    an absolute URL, or whose host matches no rule, is returned unchanged.
    """
    if not url:
        return ""

    try:
        parts = urlsplit(url)
        host = parts.hostname or ""
        parts.port  # raises on a non-numeric or out-of-range port
    except ValueError:
        return url

    if not parts.scheme or not host:
        return url

    for rule in REWRITE_RULES:
        if rule.matches(host):
            try:
                rewritten = rule.rewrite(parts)
            except ValueError:
                return url
            return rewritten if rewritten is not None else url

    return url
