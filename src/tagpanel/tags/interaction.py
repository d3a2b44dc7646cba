"""Tag selection and overlay mode state machine.

A click on a tag row arrives as a ``ClickIntent`` (which part was clicked,
which modifier keys were held). ``transition`` maps the current
``SelectionState`` plus the intent to the next state and, for modifier
clicks and "use as label" clicks, an instruction to forward the click to
the host. It has no side effects; ``InteractionStateMachine`` holds the
current state and performs the forwarding.

Invariant: ``mode`` is only ever non-NONE while a tag is selected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from tagpanel.tags.names import find_by_name, names_equal

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tagpanel.models.tag import Tag

logger = logging.getLogger(__name__)


class OperationMode(StrEnum):
    """Overlay editing affordance active on the selected tag."""

    NONE = "none"
    COLOR_PICKER = "color_picker"
    CONTEXTUAL_MENU = "contextual_menu"
    RENAME = "rename"


class Forward(StrEnum):
    """Host callback a click should be forwarded to."""

    TAG_CLICK = "tag_click"
    CTRL_TAG_CLICK = "ctrl_tag_click"


@dataclass(frozen=True, slots=True)
class SelectionState:
    selected_tag: Tag | None = None
    mode: OperationMode = OperationMode.NONE

    def __post_init__(self) -> None:
        if self.mode is not OperationMode.NONE and self.selected_tag is None:
            msg = f"Operation mode {self.mode} requires a selected tag"
            raise ValueError(msg)

    def is_selected(self, tag: Tag) -> bool:
        return self.selected_tag is not None and names_equal(self.selected_tag, tag)


@dataclass(frozen=True, slots=True)
class ClickIntent:
    """A click on a tag row.

    Attributes:
        tag: The tag whose row was clicked.
        ctrl_key: Ctrl was held.
        alt_key: Alt was held.
        clicked_dropdown: The click landed on the row's dropdown toggle.
        clicked_color: The click landed on the row's colour swatch.
    """

    tag: Tag
    ctrl_key: bool = False
    alt_key: bool = False
    clicked_dropdown: bool = False
    clicked_color: bool = False


@dataclass(frozen=True, slots=True)
class ClickContext:
    """Host state that affects click handling."""

    has_selected_regions: bool = False
    has_tag_click_handler: bool = False
    has_ctrl_tag_click_handler: bool = False


@dataclass(frozen=True, slots=True)
class Transition:
    state: SelectionState
    forward: Forward | None = None


def transition(
    state: SelectionState,
    intent: ClickIntent,
    context: ClickContext,
) -> Transition:
    """Compute the state after ``intent``.

    Rules are checked in order: ctrl-click (forwarded, state unchanged),
    alt-click (rename), dropdown (contextual menu toggle), colour swatch
    (colour picker toggle), then plain click (select/deselect, or forward
    as "use as label" while regions are selected).
    """
    tag = intent.tag

    if intent.ctrl_key and context.has_ctrl_tag_click_handler:
        return Transition(state, Forward.CTRL_TAG_CLICK)

    if intent.alt_key:
        return Transition(SelectionState(tag, OperationMode.RENAME))

    if intent.clicked_dropdown:
        if state.is_selected(tag) and state.mode is OperationMode.CONTEXTUAL_MENU:
            return Transition(SelectionState(tag, OperationMode.NONE))
        return Transition(SelectionState(tag, OperationMode.CONTEXTUAL_MENU))

    if intent.clicked_color:
        if state.mode is OperationMode.COLOR_PICKER:
            return Transition(replace(state, mode=OperationMode.NONE))
        return Transition(SelectionState(tag, OperationMode.COLOR_PICKER))

    already_selected = state.is_selected(tag)
    mode = state.mode if already_selected else OperationMode.NONE

    if context.has_selected_regions and context.has_tag_click_handler:
        return Transition(SelectionState(tag, mode), Forward.TAG_CLICK)

    if already_selected and state.mode is OperationMode.NONE:
        return Transition(SelectionState())
    return Transition(SelectionState(tag, mode))


class InteractionStateMachine:
    """Holds the current ``SelectionState`` and forwards clicks to the host.

    Args:
        on_tag_click: Host callback for "use as label" clicks.
        on_ctrl_tag_click: Host callback for ctrl-clicks.
    """

    def __init__(
        self,
        *,
        on_tag_click: Callable[[Tag], None] | None = None,
        on_ctrl_tag_click: Callable[[Tag], None] | None = None,
    ) -> None:
        self.state = SelectionState()
        self.on_tag_click = on_tag_click
        self.on_ctrl_tag_click = on_ctrl_tag_click

    @property
    def selected_tag(self) -> Tag | None:
        return self.state.selected_tag

    @property
    def mode(self) -> OperationMode:
        return self.state.mode

    def click(self, intent: ClickIntent, *, has_selected_regions: bool) -> None:
        context = ClickContext(
            has_selected_regions=has_selected_regions,
            has_tag_click_handler=self.on_tag_click is not None,
            has_ctrl_tag_click_handler=self.on_ctrl_tag_click is not None,
        )
        result = transition(self.state, intent, context)
        self.state = result.state

        if result.forward is Forward.CTRL_TAG_CLICK and self.on_ctrl_tag_click:
            self.on_ctrl_tag_click(intent.tag)
        elif result.forward is Forward.TAG_CLICK and self.on_tag_click:
            self.on_tag_click(intent.tag)

    def toggle_rename(self) -> None:
        """Toolbar edit: flip between RENAME and NONE on the selected tag."""
        if self.state.selected_tag is None:
            return
        mode = (
            OperationMode.NONE
            if self.state.mode is OperationMode.RENAME
            else OperationMode.RENAME
        )
        self.state = replace(self.state, mode=mode)

    def dismiss(self) -> None:
        """Close whatever overlay is open, keeping the selection."""
        if self.state.mode is OperationMode.NONE:
            logger.debug("Dismiss with no active overlay")
            return
        self.state = replace(self.state, mode=OperationMode.NONE)

    def reselect(self, tag: Tag) -> None:
        """Point the selection at ``tag`` (e.g. its updated version), keeping mode."""
        self.state = replace(self.state, selected_tag=tag)

    def clear(self) -> None:
        self.state = SelectionState()

    def tags_changed(self, tags: Iterable[Tag]) -> None:
        """Re-resolve the selection by name against a new host tag list.

        Clears the selection (and mode) if the tag no longer exists.
        """
        selected = self.state.selected_tag
        if selected is None:
            return
        found = find_by_name(tags, selected.name)
        if found is None:
            logger.debug("Selected tag %r no longer exists", selected.name)
            self.clear()
        else:
            self.reselect(found)
