"""Type to format compatibility table."""

from __future__ import annotations

from tagpanel.models.tag import TagFormat, TagType

_VALID_FORMATS: dict[TagType, tuple[TagFormat, ...]] = {
    TagType.STRING: (
        TagFormat.NOT_SPECIFIED,
        TagFormat.ALPHANUMERIC,
        TagFormat.NO_WHITESPACE,
    ),
    TagType.NUMBER: (TagFormat.NOT_SPECIFIED, TagFormat.CURRENCY),
    TagType.INTEGER: (TagFormat.NOT_SPECIFIED,),
    TagType.DATE: (
        TagFormat.NOT_SPECIFIED,
        TagFormat.DAY_MONTH_YEAR,
        TagFormat.MONTH_DAY_YEAR,
        TagFormat.YEAR_MONTH_DAY,
    ),
    TagType.TIME: (TagFormat.NOT_SPECIFIED,),
}

_FALLBACK: tuple[TagFormat, ...] = (TagFormat.NOT_SPECIFIED,)


def valid_formats(tag_type: TagType | str | None) -> tuple[TagFormat, ...]:
    """Return the ordered formats allowed for ``tag_type``.

    Always non-empty and always starts with ``NOT_SPECIFIED``. Unknown or
    missing types only allow ``NOT_SPECIFIED``.
    """
    try:
        return _VALID_FORMATS[TagType(tag_type)]
    except ValueError:
        return _FALLBACK


def resolve_format(
    tag_type: TagType | str | None,
    requested: TagFormat | None = None,
) -> TagFormat:
    """Return ``requested`` if valid for ``tag_type``, else ``NOT_SPECIFIED``."""
    if requested is not None and requested in valid_formats(tag_type):
        return requested
    return TagFormat.NOT_SPECIFIED
