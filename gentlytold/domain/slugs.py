"""Slug helpers for memorial pages and stored blob keys."""

import re
from uuid import uuid4

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")

DEFAULT_SLUG_PATTERN = r"^[a-z0-9][a-z0-9-]{0,79}$"
FALLBACK_BASE = "memorial"


def slugify(value: str, max_length: int) -> str:
    s = _DISALLOWED.sub("", value.lower())
    s = _WHITESPACE.sub("-", s)
    s = _DASHES.sub("-", s)
    return s[:max_length]


def generate_slug(name: str, partner_name: str | None = None, suffix: str | None = None) -> str:
    """
    Build a memorial slug from the deceased's name (and partner, for couples).

    Couples sharing a last name get "first-first-last"; otherwise the partner
    slug is appended. A short random suffix keeps slugs unguessable.
    """
    base = slugify(name, 40)

    if partner_name:
        partner = slugify(partner_name, 20)
        name_parts = name.split()
        partner_parts = partner_name.split()
        if (
            len(name_parts) > 1
            and len(partner_parts) > 1
            and name_parts[-1].lower() == partner_parts[-1].lower()
        ):
            base = slugify(f"{name_parts[0]} {partner_parts[0]} {name_parts[-1]}", 50)
        else:
            base = f"{base}-{partner}"[:50]

    # Names with no ASCII letters or digits leave nothing to build on
    base = _DASHES.sub("-", base).strip("-") or FALLBACK_BASE

    if suffix is None:
        suffix = uuid4().hex[:4]
    return f"{base}-{suffix}"


def is_valid_slug(slug: str, pattern: str = DEFAULT_SLUG_PATTERN) -> bool:
    return bool(slug) and re.fullmatch(pattern, slug) is not None


def photo_key(slug: str, memory_id: str) -> str:
    return f"{slug}-{memory_id}"
