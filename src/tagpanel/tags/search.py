"""Free-text tag search."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tagpanel.models.tag import Tag


def visible(tags: Iterable[Tag], query: str) -> list[Tag]:
    """Return tags whose name contains ``query``, case-insensitively.

    An empty query returns every tag. Order is preserved.
    """
    if not query:
        return list(tags)
    needle = query.casefold()
    return [t for t in tags if needle in t.name.casefold()]
