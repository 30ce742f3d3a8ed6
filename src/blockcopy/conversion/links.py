"""Link normalization for copied content."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlparse

_DROPPED_SCHEMES_RE = re.compile(r"^(javascript:|void\(0\)|about:blank)", re.IGNORECASE)
_VERBATIM_SCHEMES_RE = re.compile(r"^(data:|blob:)", re.IGNORECASE)
_RELATIVE_PREFIX_RE = re.compile(r"^(/|\./|\.\./)")


@dataclass(frozen=True)
class NormalizedLink:
    """
    Result of normalizing an href.

    Attributes:
        raw: The trimmed input
        href: Usable URL ("" when dropped)
        drop: True when the link carries no destination worth keeping
    """

    raw: str
    href: str
    drop: bool


def is_root_path(url: str) -> bool:
    return (url or "").strip() == "/"


def is_same_origin_root(url: str, base: Optional[str]) -> bool:
    """True when url is the bare root page of base's origin."""
    if not base:
        return False
    parsed = urlparse(url)
    origin = urlparse(base)
    return (
        parsed.scheme == origin.scheme
        and parsed.netloc == origin.netloc
        and parsed.path in ("", "/")
        and not parsed.query
        and not parsed.fragment
    )


def is_relative_like(url: str) -> bool:
    """True for paths such as '/a', './a', '../a' or 'a/b'."""
    if not url:
        return False
    if _RELATIVE_PREFIX_RE.match(url):
        return True
    return "/" in url and "://" not in url and not url.startswith("//")


def normalize_link(raw_href: Optional[str], base: Optional[str] = None) -> NormalizedLink:
    """
    Normalize an href for use in copied output.

    Args:
        raw_href: href as written in the markup
        base: Page URL to resolve against

    Returns:
        NormalizedLink; links to nowhere (empty, '/', javascript:, the
        site's bare root) are marked as dropped

    Example:
        >>> normalize_link("../guide", "https://x.test/docs/api/")
        NormalizedLink(raw='../guide', href='https://x.test/docs/guide', drop=False)
    """
    raw = (raw_href or "").strip()
    if not raw or is_root_path(raw) or _DROPPED_SCHEMES_RE.match(raw):
        return NormalizedLink(raw=raw, href="", drop=True)

    if _VERBATIM_SCHEMES_RE.match(raw):
        return NormalizedLink(raw=raw, href=raw, drop=False)

    if base:
        resolved = urljoin(base, raw)
        if is_same_origin_root(resolved, base):
            return NormalizedLink(raw=raw, href="", drop=True)
        return NormalizedLink(raw=raw, href=resolved, drop=False)

    if urlparse(raw).scheme:
        return NormalizedLink(raw=raw, href=raw, drop=False)
    if is_relative_like(raw):
        return NormalizedLink(raw=raw, href=raw, drop=False)
    return NormalizedLink(raw=raw, href="", drop=True)
