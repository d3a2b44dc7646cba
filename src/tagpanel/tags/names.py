"""Tag name identity.

Two tags are the same tag when their trimmed, case-folded names match.
Every component compares names through these helpers, never by object
identity or raw string equality.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tagpanel.models.tag import Tag


def normalise_name(name: str) -> str:
    """Return the comparison key for a tag name."""
    return name.strip().casefold()


def name_matches(tag: Tag, name: str) -> bool:
    """True if ``tag`` is named ``name`` under trimmed, case-insensitive comparison."""
    return normalise_name(tag.name) == normalise_name(name)


def names_equal(a: Tag, b: Tag) -> bool:
    """True if ``a`` and ``b`` denote the same tag."""
    return name_matches(a, b.name)


def find_by_name(tags: Iterable[Tag], name: str) -> Tag | None:
    """Return the first tag in ``tags`` named ``name``, or None."""
    return next((t for t in tags if name_matches(t, name)), None)
