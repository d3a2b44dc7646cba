"""Ordered tag collection with validation and owner notifications.

The collection commits add/reorder/recolor/in-place updates itself and
then calls ``on_change`` with the full new sequence. Renames and deletes
are handed to the owner (``on_tag_renamed`` / ``on_tag_deleted``) without
a local commit: the owner must reconcile regions carrying the tag first and
then feed the new tag list back in through ``reset()``.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from tagpanel.tags.formats import resolve_format
from tagpanel.tags.names import name_matches, names_equal
from tagpanel.tags.validation import (
    DEFAULT_MAX_NAME_LENGTH,
    Rejected,
    ValidationResult,
    validate_tag,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from tagpanel.models.tag import Tag

logger = logging.getLogger(__name__)


def _reorder_list[T](items: list[T], old_index: int, new_index: int) -> list[T]:
    """Move an item within a list from old_index to new_index.

    Returns a new list with the item repositioned.
    """
    result = list(items)
    item = result.pop(old_index)
    result.insert(new_index, item)
    return result


def _log_warning(message: str) -> None:
    logger.warning("%s", message)


def _with_valid_format(tag: Tag) -> Tag:
    """Return ``tag`` with its format reset if it is not valid for its type."""
    tag_format = resolve_format(tag.type, tag.format)
    if tag_format == tag.format:
        return tag
    logger.debug(
        "Format %s not valid for %s; reset on %r", tag.format, tag.type, tag.name
    )
    return replace(tag, format=tag_format)


class TagCollection:
    """The ordered tags shown in the panel.

    Args:
        tags: Initial sequence, in display order.
        on_change: Called with the new sequence after every local commit.
        on_tag_renamed: Receives ``(old, new)`` instead of a local rename.
            When None, renames are committed locally like any other update.
        on_tag_deleted: Receives the tag name for a delete request.
        warn: Sink for user-facing validation warnings.
        max_name_length: Names at or above this length are rejected.
    """

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        *,
        on_change: Callable[[list[Tag]], None] | None = None,
        on_tag_renamed: Callable[[Tag, Tag], None] | None = None,
        on_tag_deleted: Callable[[str], None] | None = None,
        warn: Callable[[str], None] | None = None,
        max_name_length: int = DEFAULT_MAX_NAME_LENGTH,
    ) -> None:
        self._tags: list[Tag] = list(tags)
        self.on_change = on_change
        self.on_tag_renamed = on_tag_renamed
        self.on_tag_deleted = on_tag_deleted
        self.warn = warn or _log_warning
        self.max_name_length = max_name_length

    # ── Read access ──────────────────────────────────────────────────

    @property
    def tags(self) -> tuple[Tag, ...]:
        return tuple(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[Tag]:
        return iter(tuple(self._tags))

    def find(self, name: str) -> Tag | None:
        """Return the tag named ``name`` (trimmed, case-insensitive), or None."""
        return next((t for t in self._tags if name_matches(t, name)), None)

    def index_of(self, tag: Tag) -> int | None:
        """Return the index of the tag with ``tag``'s name, or None."""
        for i, t in enumerate(self._tags):
            if names_equal(t, tag):
                return i
        return None

    def reset(self, tags: Iterable[Tag]) -> None:
        """Adopt a new sequence supplied by the owner. Does not notify."""
        self._tags = list(tags)

    # ── Mutations ────────────────────────────────────────────────────

    def _commit(self, tags: list[Tag]) -> None:
        self._tags = tags
        if self.on_change is not None:
            self.on_change(list(tags))

    def _reject(self, result: Rejected) -> Rejected:
        logger.info("Tag rejected (%s): %s", result.reason, result.message)
        self.warn(result.message)
        return result

    def add(self, tag: Tag) -> ValidationResult:
        """Append ``tag`` if it passes validation.

        A format that is not valid for the tag's type is reset to
        ``NOT_SPECIFIED`` first. Returns ``Ok(tag)`` on commit, or the
        ``Rejected`` result after sending its message to the warning sink.
        """
        tag = _with_valid_format(tag)
        result = validate_tag(tag, self._tags, self.max_name_length)
        if isinstance(result, Rejected):
            return self._reject(result)

        logger.debug("Adding tag %r", tag.name)
        self._commit([*self._tags, tag])
        return result

    def update(self, old: Tag, new: Tag) -> ValidationResult | None:
        """Rename and/or recolour ``old`` to ``new``.

        Returns None (and does nothing) when neither name nor colour
        changed. Otherwise validates ``new`` against the other tags; a name
        change goes to ``on_tag_renamed`` and is not committed here, while a
        colour-only change replaces the tag in place. As in ``add``, a
        format invalid for ``new.type`` is reset to ``NOT_SPECIFIED``.
        """
        if names_equal(old, new) and old.color == new.color:
            return None

        new = _with_valid_format(new)

        others = [t for t in self._tags if not names_equal(t, old)]
        result = validate_tag(new, others, self.max_name_length)
        if isinstance(result, Rejected):
            return self._reject(result)

        if not names_equal(old, new) and self.on_tag_renamed is not None:
            logger.debug("Delegating rename %r -> %r", old.name, new.name)
            self.on_tag_renamed(old, new)
            return result

        logger.debug("Updating tag %r in place", old.name)
        self._commit([new if names_equal(t, old) else t for t in self._tags])
        return result

    def delete(self, tag: Tag) -> None:
        """Ask the owner to delete ``tag``. The local sequence is untouched."""
        if self.on_tag_deleted is None:
            logger.debug("No delete handler registered; ignoring %r", tag.name)
            return
        self.on_tag_deleted(tag.name)

    def reorder(self, tag: Tag, displacement: int) -> bool:
        """Move ``tag`` by ``displacement`` positions.

        Returns False without changing anything if the tag is unknown or the
        target index falls outside the sequence.
        """
        current = self.index_of(tag)
        if current is None:
            logger.debug("Reorder of unknown tag %r ignored", tag.name)
            return False
        new_index = current + displacement
        if new_index < 0 or new_index >= len(self._tags):
            logger.debug("Reorder of %r to %d out of bounds", tag.name, new_index)
            return False

        self._commit(_reorder_list(self._tags, current, new_index))
        return True

    def recolor(self, tag: Tag, color: str) -> Tag | None:
        """Set the colour of the tag named like ``tag``.

        Returns the recoloured tag, or None if no such tag exists.
        """
        index = self.index_of(tag)
        if index is None:
            logger.debug("Recolor of unknown tag %r ignored", tag.name)
            return None

        recoloured = replace(self._tags[index], color=color)
        tags = list(self._tags)
        tags[index] = recoloured
        self._commit(tags)
        return recoloured

