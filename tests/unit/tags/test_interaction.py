"""Tests for the click transition function and InteractionStateMachine."""

from __future__ import annotations

import itertools

import pytest

from tagpanel.models.tag import Tag
from tagpanel.tags.interaction import (
    ClickContext,
    ClickIntent,
    Forward,
    InteractionStateMachine,
    OperationMode,
    SelectionState,
    transition,
)

X = Tag("X", "#111111")
Y = Tag("Y", "#222222")

NO_CONTEXT = ClickContext()
REGIONS_AND_HANDLERS = ClickContext(
    has_selected_regions=True,
    has_tag_click_handler=True,
    has_ctrl_tag_click_handler=True,
)


class TestSelectionState:
    def test_mode_without_selection_is_invalid(self) -> None:
        """A non-NONE mode requires a selected tag."""
        with pytest.raises(ValueError, match="requires a selected tag"):
            SelectionState(None, OperationMode.RENAME)

    def test_is_selected_uses_name_equality(self) -> None:
        state = SelectionState(X)
        assert state.is_selected(Tag(" x", "#999999"))
        assert not state.is_selected(Y)


class TestTransitionRules:
    def test_ctrl_click_forwarded_without_state_change(self) -> None:
        """Rule 1: ctrl-click with a handler only forwards."""
        state = SelectionState(Y, OperationMode.COLOR_PICKER)
        result = transition(state, ClickIntent(X, ctrl_key=True), REGIONS_AND_HANDLERS)
        assert result.state == state
        assert result.forward is Forward.CTRL_TAG_CLICK

    def test_ctrl_click_without_handler_falls_through(self) -> None:
        """Without a ctrl handler the click is handled like a plain click."""
        result = transition(SelectionState(), ClickIntent(X, ctrl_key=True), NO_CONTEXT)
        assert result.state == SelectionState(X)
        assert result.forward is None

    def test_alt_click_enters_rename(self) -> None:
        """Rule 2: alt selects the target in RENAME mode."""
        state = SelectionState(Y, OperationMode.CONTEXTUAL_MENU)
        result = transition(state, ClickIntent(X, alt_key=True), NO_CONTEXT)
        assert result.state == SelectionState(X, OperationMode.RENAME)

    def test_dropdown_toggles_contextual_menu(self) -> None:
        """Scenario: select X, dropdown opens the menu, dropdown again closes it."""
        dropdown = ClickIntent(X, clicked_dropdown=True)
        state = transition(SelectionState(), ClickIntent(X), NO_CONTEXT).state
        assert state == SelectionState(X, OperationMode.NONE)

        state = transition(state, dropdown, NO_CONTEXT).state
        assert state == SelectionState(X, OperationMode.CONTEXTUAL_MENU)

        state = transition(state, dropdown, NO_CONTEXT).state
        assert state == SelectionState(X, OperationMode.NONE)

    def test_dropdown_on_other_tag_moves_menu(self) -> None:
        state = SelectionState(X, OperationMode.CONTEXTUAL_MENU)
        result = transition(state, ClickIntent(Y, clicked_dropdown=True), NO_CONTEXT)
        assert result.state == SelectionState(Y, OperationMode.CONTEXTUAL_MENU)

    def test_dropdown_replaces_other_mode(self) -> None:
        """Entering the menu from the colour picker replaces it, never stacks."""
        state = SelectionState(X, OperationMode.COLOR_PICKER)
        result = transition(state, ClickIntent(X, clicked_dropdown=True), NO_CONTEXT)
        assert result.state.mode is OperationMode.CONTEXTUAL_MENU

    def test_colour_swatch_opens_picker(self) -> None:
        intent = ClickIntent(X, clicked_color=True)
        result = transition(SelectionState(), intent, NO_CONTEXT)
        assert result.state == SelectionState(X, OperationMode.COLOR_PICKER)

    def test_colour_swatch_closes_picker_keeping_prior_selection(self) -> None:
        """Rule 4: with the picker open, any swatch closes it; selection stays."""
        state = SelectionState(X, OperationMode.COLOR_PICKER)
        result = transition(state, ClickIntent(Y, clicked_color=True), NO_CONTEXT)
        assert result.state == SelectionState(X, OperationMode.NONE)

    def test_plain_click_selects(self) -> None:
        result = transition(SelectionState(), ClickIntent(X), NO_CONTEXT)
        assert result.state == SelectionState(X)
        assert result.forward is None

    def test_plain_click_on_selected_idle_tag_deselects(self) -> None:
        result = transition(SelectionState(X), ClickIntent(X), NO_CONTEXT)
        assert result.state == SelectionState()

    def test_plain_click_keeps_mode_on_same_tag(self) -> None:
        """Clicking the tag being renamed keeps RENAME instead of deselecting."""
        state = SelectionState(X, OperationMode.RENAME)
        result = transition(state, ClickIntent(X), NO_CONTEXT)
        assert result.state == state

    def test_plain_click_on_other_tag_resets_mode(self) -> None:
        state = SelectionState(X, OperationMode.RENAME)
        result = transition(state, ClickIntent(Y), NO_CONTEXT)
        assert result.state == SelectionState(Y, OperationMode.NONE)

    def test_plain_click_with_regions_forwards_and_keeps_selection(self) -> None:
        """Rule 5: 'use as label' never deselects."""
        result = transition(SelectionState(X), ClickIntent(X), REGIONS_AND_HANDLERS)
        assert result.state == SelectionState(X)
        assert result.forward is Forward.TAG_CLICK

    def test_regions_without_handler_behaves_like_plain_click(self) -> None:
        context = ClickContext(has_selected_regions=True)
        result = transition(SelectionState(X), ClickIntent(X), context)
        assert result.state == SelectionState()
        assert result.forward is None

    def test_handler_without_regions_does_not_forward(self) -> None:
        context = ClickContext(has_tag_click_handler=True)
        result = transition(SelectionState(), ClickIntent(X), context)
        assert result.forward is None

    def test_alt_beats_dropdown_and_colour(self) -> None:
        """Rules are evaluated in priority order."""
        intent = ClickIntent(X, alt_key=True, clicked_dropdown=True, clicked_color=True)
        result = transition(SelectionState(), intent, NO_CONTEXT)
        assert result.state.mode is OperationMode.RENAME


class TestModeExclusivity:
    def test_mode_never_active_without_selection(self) -> None:
        """Every reachable state from any click sequence honours the invariant."""
        flags = list(itertools.product([False, True], repeat=4))
        intents = [
            ClickIntent(tag, *f) for tag in (X, Y) for f in flags
        ]
        contexts = [NO_CONTEXT, REGIONS_AND_HANDLERS]
        frontier = {SelectionState()}
        seen: set[SelectionState] = set()
        while frontier:
            state = frontier.pop()
            seen.add(state)
            for intent in intents:
                for context in contexts:
                    nxt = transition(state, intent, context).state
                    assert (
                        nxt.mode is OperationMode.NONE or nxt.selected_tag is not None
                    )
                    if nxt not in seen:
                        frontier.add(nxt)


class TestInteractionStateMachine:
    def test_click_forwards_to_tag_click_handler(self) -> None:
        clicks: list[Tag] = []
        machine = InteractionStateMachine(on_tag_click=clicks.append)
        machine.click(ClickIntent(X), has_selected_regions=True)
        assert clicks == [X]
        assert machine.selected_tag == X

    def test_ctrl_click_forwards_to_ctrl_handler(self) -> None:
        ctrl: list[Tag] = []
        machine = InteractionStateMachine(on_ctrl_tag_click=ctrl.append)
        machine.click(ClickIntent(X, ctrl_key=True), has_selected_regions=False)
        assert ctrl == [X]
        assert machine.selected_tag is None

    def test_dismiss_keeps_selection(self) -> None:
        machine = InteractionStateMachine()
        machine.click(ClickIntent(X, clicked_dropdown=True), has_selected_regions=False)
        machine.dismiss()
        assert machine.state == SelectionState(X, OperationMode.NONE)

    def test_dismiss_with_no_overlay_is_noop(self) -> None:
        machine = InteractionStateMachine()
        machine.dismiss()
        assert machine.state == SelectionState()

    def test_toggle_rename(self) -> None:
        machine = InteractionStateMachine()
        machine.toggle_rename()
        assert machine.state == SelectionState()

        machine.click(ClickIntent(X), has_selected_regions=False)
        machine.toggle_rename()
        assert machine.mode is OperationMode.RENAME
        machine.toggle_rename()
        assert machine.mode is OperationMode.NONE

    def test_tags_changed_re_resolves_by_name(self) -> None:
        """The selection follows the tag with the same name in the new list."""
        machine = InteractionStateMachine()
        machine.click(ClickIntent(X, clicked_dropdown=True), has_selected_regions=False)
        recoloured = Tag("x", "#abcdef")
        machine.tags_changed([Y, recoloured])
        assert machine.selected_tag is recoloured
        assert machine.mode is OperationMode.CONTEXTUAL_MENU

    def test_tags_changed_clears_when_tag_gone(self) -> None:
        """A renamed/removed tag drops the selection and its mode."""
        machine = InteractionStateMachine()
        machine.click(ClickIntent(X, alt_key=True), has_selected_regions=False)
        machine.tags_changed([Y])
        assert machine.state == SelectionState()
