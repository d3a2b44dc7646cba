"""Data models for tagpanel tags, labels and regions."""

from tagpanel.models.tag import (
    DEFAULT_PALETTE,
    Label,
    Region,
    Tag,
    TagFormat,
    TagType,
)

__all__ = [
    "DEFAULT_PALETTE",
    "Label",
    "Region",
    "Tag",
    "TagFormat",
    "TagType",
]
