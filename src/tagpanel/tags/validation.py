"""Tag validation as a typed result.

Validation never raises: callers get ``Ok`` or ``Rejected`` and decide
locally how to surface the warning (the collection forwards
``Rejected.message`` to its warning sink and leaves its state unchanged).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from tagpanel.tags.names import normalise_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tagpanel.models.tag import Tag

DEFAULT_MAX_NAME_LENGTH = 128

EMPTY_NAME_WARNING = "Cannot have an empty tag name"
EXISTING_NAME_WARNING = "Tag name already exists. Choose another name"


class RejectReason(StrEnum):
    """Why a tag failed validation."""

    EMPTY_NAME = "empty_name"
    NAME_TOO_LONG = "name_too_long"
    DUPLICATE_NAME = "duplicate_name"


@dataclass(frozen=True, slots=True)
class Ok:
    """Validation passed; ``tag`` may be committed."""

    tag: Tag

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Rejected:
    """Validation failed; ``message`` is the user-facing warning."""

    reason: RejectReason
    message: str

    @property
    def ok(self) -> bool:
        return False


type ValidationResult = Ok | Rejected


def too_long_warning(max_length: int) -> str:
    return f"Tag name is too long (>= {max_length})."


def validate_length(
    tag: Tag, max_length: int = DEFAULT_MAX_NAME_LENGTH
) -> ValidationResult:
    """Check the trimmed name is non-empty and shorter than ``max_length``."""
    name = tag.name.strip()
    if not name:
        return Rejected(RejectReason.EMPTY_NAME, EMPTY_NAME_WARNING)
    if len(name) >= max_length:
        return Rejected(RejectReason.NAME_TOO_LONG, too_long_warning(max_length))
    return Ok(tag)


def validate_uniqueness(tag: Tag, others: Iterable[Tag]) -> ValidationResult:
    """Check no tag in ``others`` shares ``tag``'s name."""
    key = normalise_name(tag.name)
    if any(normalise_name(t.name) == key for t in others):
        return Rejected(RejectReason.DUPLICATE_NAME, EXISTING_NAME_WARNING)
    return Ok(tag)


def validate_tag(
    tag: Tag,
    others: Iterable[Tag],
    max_length: int = DEFAULT_MAX_NAME_LENGTH,
) -> ValidationResult:
    """Run length then uniqueness checks, returning the first rejection."""
    result = validate_length(tag, max_length)
    if isinstance(result, Rejected):
        return result
    return validate_uniqueness(tag, others)
