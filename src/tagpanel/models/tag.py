"""Data models for panel tags and the region data they are applied to.

Tags are plain frozen dataclasses: the panel never hands out a mutable
reference, so every edit produces a new ``Tag`` via ``dataclasses.replace``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TagType(StrEnum):
    """Data type a tag's labelled value is interpreted as."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    DATE = "date"
    TIME = "time"


class TagFormat(StrEnum):
    """Display/validation format of a tag's value, constrained by its type."""

    NOT_SPECIFIED = "not-specified"
    ALPHANUMERIC = "alphanumeric"
    NO_WHITESPACE = "no-whitespaces"
    CURRENCY = "currency"
    DAY_MONTH_YEAR = "dmy"
    MONTH_DAY_YEAR = "mdy"
    YEAR_MONTH_DAY = "ymd"


# Colorblind-accessible palette (tested with deuteranopia)
DEFAULT_PALETTE: tuple[str, ...] = (
    "#1f77b4",  # blue
    "#ff7f0e",  # orange
    "#2ca02c",  # green
    "#d62728",  # red
    "#9467bd",  # purple
    "#8c564b",  # brown
    "#e377c2",  # pink
    "#7f7f7f",  # gray
    "#bcbd22",  # olive
    "#17becf",  # cyan
)


@dataclass(frozen=True, slots=True)
class Tag:
    """A named, coloured label classification.

    Attributes:
        name: Display name, unique within a collection (trimmed, case-insensitive).
        color: Hex colour string (e.g. "#1f77b4").
        type: Value data type.
        format: Value format; always one of ``valid_formats(type)``.
    """

    name: str
    color: str
    type: TagType = TagType.STRING
    format: TagFormat = TagFormat.NOT_SPECIFIED


@dataclass(frozen=True, slots=True)
class Label:
    """Association between a tag name and the region ids labelled with it.

    Only read by the panel to show per-tag hover information.
    """

    label: str
    key: tuple[str, ...] = ()
    value: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Region:
    """A canvas region as seen by the panel: an id and its applied tag names."""

    id: str
    tags: frozenset[str] = field(default_factory=frozenset)
