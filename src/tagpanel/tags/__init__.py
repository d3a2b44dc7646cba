"""Tag panel core: collection, colours, formats, locks, selection, search.

``TagInputController`` lives in ``tagpanel.tags.controller`` and is not
re-exported here (it reads ``tagpanel.config``, which imports this package).
"""

from tagpanel.tags.collection import TagCollection
from tagpanel.tags.colour import next_colour
from tagpanel.tags.formats import resolve_format, valid_formats
from tagpanel.tags.interaction import (
    ClickContext,
    ClickIntent,
    InteractionStateMachine,
    OperationMode,
    SelectionState,
    transition,
)
from tagpanel.tags.locks import LockSet
from tagpanel.tags.names import find_by_name, name_matches, names_equal
from tagpanel.tags.search import visible
from tagpanel.tags.validation import Ok, RejectReason, Rejected, validate_tag

__all__ = [
    "ClickContext",
    "ClickIntent",
    "InteractionStateMachine",
    "LockSet",
    "Ok",
    "OperationMode",
    "RejectReason",
    "Rejected",
    "SelectionState",
    "TagCollection",
    "find_by_name",
    "name_matches",
    "names_equal",
    "next_colour",
    "resolve_format",
    "transition",
    "valid_formats",
    "validate_tag",
    "visible",
]
