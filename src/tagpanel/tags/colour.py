"""Colour allocation for newly created tags."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tagpanel.models.tag import Tag


def next_colour(
    existing: Iterable[Tag],
    palette: Sequence[str],
    rng: random.Random | None = None,
) -> str:
    """Pick a colour for a new tag.

    Returns the first palette entry not used by any tag in ``existing``
    (case-insensitive). When every entry is taken, returns a random palette
    entry; duplicates are accepted in that case.

    Args:
        existing: Tags currently in the collection.
        palette: Ordered, non-empty list of allowed colours.
        rng: Random source for the exhausted-palette fallback. Defaults to
            the ``random`` module.

    Raises:
        ValueError: If ``palette`` is empty.
    """
    if not palette:
        msg = "Palette must contain at least one colour"
        raise ValueError(msg)

    used = {t.color.lower() for t in existing}
    for colour in palette:
        if colour.lower() not in used:
            return colour

    return (rng or random).choice(palette)  # nosec B311 - not security relevant
