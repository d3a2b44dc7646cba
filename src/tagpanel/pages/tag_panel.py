"""NiceGUI rendering of the tag panel.

Thin adapter: every widget event is translated into a
``TagInputController`` call followed by a refresh of the panel. All
decisions (selection, modes, validation) live in the controller.

Route: /
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial
from typing import TYPE_CHECKING, Any

from nicegui import events, ui

from tagpanel.models.tag import Region, TagFormat, TagType
from tagpanel.session import SessionHost
from tagpanel.tags.interaction import ClickIntent, OperationMode

if TYPE_CHECKING:
    from collections.abc import Callable

    from tagpanel.models.tag import Tag
    from tagpanel.tags.controller import TagInputController, TagItemView

logger = logging.getLogger(__name__)

_SWATCH_BASE = "w-6 h-6 min-w-0 p-0 rounded-full"
_SWATCH_SELECTED = f"{_SWATCH_BASE} ring-2 ring-offset-1 ring-black"

# Modifier keys forwarded with row clicks
_CLICK_ARGS = ["ctrlKey", "altKey"]

_DEMO_REGIONS = (
    Region("region-1", frozenset()),
    Region("region-2", frozenset()),
    Region("region-3", frozenset()),
)


def notify_warning(message: str) -> None:
    """Surface a validation warning as a transient notice."""
    ui.notify(message, type="warning")


def click_intent(
    tag: Tag,
    args: Any,
    *,
    dropdown: bool = False,
    colour: bool = False,
) -> ClickIntent:
    """Build a ``ClickIntent`` from a DOM click event's forwarded args.

    ``args`` is the ``GenericEventArguments.args`` payload; anything that
    is not a dict (e.g. no args forwarded) counts as an unmodified click.
    """
    keys = args if isinstance(args, dict) else {}
    return ClickIntent(
        tag,
        ctrl_key=bool(keys.get("ctrlKey")),
        alt_key=bool(keys.get("altKey")),
        clicked_dropdown=dropdown,
        clicked_color=colour,
    )


# ── Rows ─────────────────────────────────────────────────────────────


def _render_tag_row(
    item: TagItemView,
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    tag = item.tag

    def _on_click(e: events.GenericEventArguments, **kw: bool) -> None:
        controller.click(click_intent(tag, e.args, **kw))
        refresh()

    row_classes = "items-center w-full gap-1 px-2 py-1 rounded cursor-pointer"
    if item.is_selected:
        row_classes += " bg-blue-100"
    with ui.row().classes(row_classes).props(
        f'data-testid="tag-row-{item.index}"'
    ) as row:
        swatch = ui.element("div").classes("w-5 h-5 rounded shrink-0").style(
            f"background-color: {tag.color}",
        )
        swatch.on(
            "click.stop",
            lambda e: _on_click(e, colour=True),
            _CLICK_ARGS,
        )

        if item.is_renaming:
            name_input = ui.input(value=tag.name).props("dense autofocus")

            def _commit_rename(_e: events.GenericEventArguments) -> None:
                new_name = name_input.value or ""
                controller.update_tag(tag, replace(tag, name=new_name))
                refresh()

            name_input.on("keydown.enter", _commit_rename)
            name_input.on("blur", _commit_rename)
        else:
            ui.label(tag.name).classes("flex-1 truncate")

        if item.applied_to_selected_regions:
            ui.icon("check").classes("text-green-600")
        if item.is_locked:
            ui.icon("lock").classes("text-gray-500")
        for label in item.labels:
            chip = ui.badge(str(len(label.value))).props("outline")
            chip.tooltip(", ".join(label.value) or label.label)
            chip.on("mouseenter", lambda _e, lb=label: controller.label_enter(lb))
            chip.on("mouseleave", lambda _e, lb=label: controller.label_leave(lb))

        dropdown = ui.button(icon="arrow_drop_down").props(
            "flat round dense size=sm"
        )
        dropdown.on(
            "click.stop",
            lambda e: _on_click(e, dropdown=True),
            _CLICK_ARGS,
        )

    row.on("click", _on_click, _CLICK_ARGS)


def _render_colour_picker(
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    selected = controller.selected_tag
    current = selected.color.lower() if selected else ""

    def _pick(colour: str) -> None:
        controller.change_color(colour)
        refresh()

    picker = ui.row().classes("gap-1 flex-wrap p-2")
    with picker.props("data-testid=tag-colour-picker"):
        for colour in controller.palette:
            btn = ui.button("", on_click=lambda _e, c=colour: _pick(c))
            btn.style(f"background-color: {colour} !important")
            is_current = colour.lower() == current
            btn.classes(_SWATCH_SELECTED if is_current else _SWATCH_BASE)


def _render_context_menu(
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    menu = controller.context_menu_items()
    if not menu:
        return
    type_entry, format_entry = menu

    def _on_type(e: events.ValueChangeEventArguments) -> None:
        controller.select_type(TagType(e.value))
        refresh()

    def _on_format(e: events.ValueChangeEventArguments) -> None:
        controller.select_format(TagFormat(e.value))
        refresh()

    with ui.card().classes("w-full p-2").props("data-testid=tag-context-menu"):
        ui.select(
            options={i.key: i.text for i in type_entry.items},
            value=next((i.key for i in type_entry.items if i.checked), None),
            label="Type",
            on_change=_on_type,
        ).props("dense outlined").classes("w-full")
        ui.select(
            options={i.key: i.text for i in format_entry.items},
            value=next((i.key for i in format_entry.items if i.checked), None),
            label="Format",
            on_change=_on_format,
        ).props("dense outlined").classes("w-full")
        ui.button(
            "Close",
            on_click=lambda: (controller.dismiss_menu(), refresh()),
        ).props("flat dense")


# ── Toolbar and boxes ────────────────────────────────────────────────


def _render_toolbar(
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    def _action(fn: Callable[[], object]) -> Callable[[], None]:
        def _run() -> None:
            fn()
            refresh()

        return _run

    has_selection = controller.selected_tag is not None
    move_up = partial(controller.move_selected, -1)
    move_down = partial(controller.move_selected, 1)
    buttons = (
        ("add", "Add tag", controller.toggle_add_box, True),
        ("search", "Search tags", controller.toggle_search_box, True),
        ("edit", "Rename tag", controller.edit_selected, has_selection),
        ("lock", "Lock tag", controller.lock_selected, has_selection),
        ("arrow_upward", "Move up", move_up, has_selection),
        ("arrow_downward", "Move down", move_down, has_selection),
        ("delete", "Delete tag", controller.delete_selected, has_selection),
    )
    with ui.row().classes("items-center w-full gap-0"):
        ui.label("Tags").classes("text-lg font-bold flex-1")
        for icon, tooltip, fn, enabled in buttons:
            btn = ui.button(icon=icon, on_click=_action(fn)).props(
                "flat round dense size=sm"
            )
            btn.tooltip(tooltip)
            if not enabled:
                btn.props("disable")


def _render_search_box(
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    def _on_change(e: events.ValueChangeEventArguments) -> None:
        controller.set_search_query(e.value or "")
        refresh()

    def _on_escape(_e: events.GenericEventArguments) -> None:
        controller.search_box_key("Escape")
        refresh()

    search = ui.input(
        placeholder="Search tags",
        value=controller.search_query,
        on_change=_on_change,
    ).props("dense autofocus clearable").classes("w-full")
    search.on("keydown.escape", _on_escape)


def _render_add_box(
    controller: TagInputController,
    refresh: Callable[[], None],
) -> None:
    add_input = ui.input(placeholder="Add new tag").props("dense autofocus")
    add_input.classes("w-full")

    def _on_key(key: str) -> None:
        add_input.value = controller.add_box_key(key, add_input.value or "")
        refresh()

    def _on_blur(_e: events.GenericEventArguments) -> None:
        add_input.value = controller.add_box_blur(add_input.value or "")
        refresh()

    add_input.on("keydown.enter", lambda _e: _on_key("Enter"))
    add_input.on("keydown.escape", lambda _e: _on_key("Escape"))
    add_input.on("blur", _on_blur)


def render_tag_panel(
    controller: TagInputController,
    on_refresh: Callable[[], None] | None = None,
) -> Callable[[], None]:
    """Render the panel for ``controller`` and return its refresh function.

    ``on_refresh`` runs after every panel refresh so the host can redraw
    state the panel's callbacks changed (e.g. region tags).
    """

    def refresh() -> None:
        panel.refresh()
        if on_refresh is not None:
            on_refresh()

    @ui.refreshable
    def panel() -> None:
        _render_toolbar(controller, refresh)
        if controller.search_box_open:
            _render_search_box(controller, refresh)
        with ui.column().classes("w-full gap-0"):
            for item in controller.items():
                _render_tag_row(item, controller, refresh)
        if controller.mode is OperationMode.COLOR_PICKER:
            _render_colour_picker(controller, refresh)
        elif controller.mode is OperationMode.CONTEXTUAL_MENU:
            _render_context_menu(controller, refresh)
        if controller.add_box_open:
            _render_add_box(controller, refresh)

    panel()
    return refresh


# ── Demo host page ───────────────────────────────────────────────────


@ui.page("/")
def tag_panel_page() -> None:
    """Tag panel hosted by an in-memory session with a few demo regions."""
    host = SessionHost(regions=_DEMO_REGIONS)
    controller = host.build_controller(warn=notify_warning)

    @ui.refreshable
    def region_view() -> None:
        for region in host.regions:
            tags = ", ".join(sorted(region.tags)) or "(untagged)"
            ui.label(f"{region.id}: {tags}").classes("text-sm")

    with ui.row().classes("w-full gap-4 p-4"):
        with ui.card().classes("w-80"):
            refresh = render_tag_panel(controller, on_refresh=region_view.refresh)

        with ui.card().classes("flex-1"):
            ui.label("Regions").classes("text-lg font-bold")

            def _on_select(e: events.ValueChangeEventArguments) -> None:
                host.select_regions(e.value or [])
                refresh()

            ui.select(
                options=[r.id for r in host.regions],
                multiple=True,
                label="Selected regions",
                on_change=_on_select,
            ).classes("w-full")
            region_view()
