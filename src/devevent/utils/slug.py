from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def generate_slug(title: str) -> str:
    """
    URL-friendly base slug for a title: lowercase, trimmed, special characters
    removed, whitespace runs turned into single hyphens, repeated hyphens
    collapsed. May return "" when nothing in the title is retainable.
    """
    slug = title.lower().strip()
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _HYPHENS.sub("-", slug)
