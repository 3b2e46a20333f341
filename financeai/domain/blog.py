"""Domain helpers for blog slugs, read time and search matching."""
from __future__ import annotations

import math
import re
import time
from typing import Iterable, Optional

SLUG_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")
_NON_SLUG = re.compile(r"[^a-z0-9]")
_DASH_RUN = re.compile(r"-+")
CHARS_PER_MINUTE = 200


def is_valid_slug(value: str | None) -> bool:
    """Return True when slug is lowercase alphanumerics separated by single dashes."""
    if not value:
        return False
    return bool(SLUG_PATTERN.fullmatch(value))


def slugify(topic: str) -> str:
    """Lowercase, map every other character to ``-`` and collapse runs."""
    slug = _DASH_RUN.sub("-", _NON_SLUG.sub("-", (topic or "").lower()))
    return slug.strip("-") or "post"


def generated_slug(topic: str, now_ms: Optional[int] = None) -> str:
    """Slug for AI-generated posts: slugified topic plus a millisecond timestamp."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{slugify(topic)}-{stamp}"


def estimate_read_time(content: str) -> int:
    return max(1, math.ceil(len(content or "") / CHARS_PER_MINUTE))


def matches_query(
    query: str,
    *,
    title: str,
    excerpt: str,
    content: str,
    tags: Iterable[str] | None,
) -> bool:
    """Case-insensitive substring match over title, excerpt, content or any tag."""
    needle = (query or "").lower()
    if needle in (title or "").lower():
        return True
    if needle in (excerpt or "").lower():
        return True
    if needle in (content or "").lower():
        return True
    return any(needle in (tag or "").lower() for tag in (tags or []))
