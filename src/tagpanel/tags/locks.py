"""Locked tag names, tracked independently of the tag collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tagpanel.tags.names import normalise_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class LockSet:
    """Ordered set of locked tag names.

    Membership is trimmed and case-insensitive. Names need not exist in the
    collection; stale entries are kept until toggled off.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = list(names)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._names))

    def __len__(self) -> int:
        return len(self._names)

    def is_locked(self, name: str) -> bool:
        key = normalise_name(name)
        return any(normalise_name(n) == key for n in self._names)

    def toggle(self, name: str) -> tuple[str, ...]:
        """Unlock ``name`` if locked, otherwise lock it under its exact spelling.

        Returns the new set of names.
        """
        if self.is_locked(name):
            key = normalise_name(name)
            self._names = [n for n in self._names if normalise_name(n) != key]
            logger.debug("Unlocked tag %r", name)
        else:
            self._names.append(name)
            logger.debug("Locked tag %r", name)
        return self.names

    def rename(self, old: str, new: str) -> bool:
        """Move a lock from ``old`` to ``new``. Returns True if one was moved."""
        key = normalise_name(old)
        for i, n in enumerate(self._names):
            if normalise_name(n) == key:
                self._names[i] = new
                return True
        return False
