"""Tag panel controller.

Wires the tag collection, lock set, selection state machine and search
filter to the host boundary: the host feeds its state in through the
``set_*`` methods and receives every outcome through ``HostCallbacks``.
Rendering code reads ``items()`` / ``context_menu_items()`` and calls the
event methods; it never touches the components directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from tagpanel.models.tag import Tag, TagFormat, TagType
from tagpanel.tags.collection import TagCollection
from tagpanel.tags.colour import next_colour
from tagpanel.tags.formats import resolve_format, valid_formats
from tagpanel.tags.interaction import (
    ClickIntent,
    InteractionStateMachine,
    OperationMode,
)
from tagpanel.tags.locks import LockSet
from tagpanel.tags.names import names_equal, normalise_name
from tagpanel.tags.search import visible
from tagpanel.tags.validation import Rejected

if TYPE_CHECKING:
    import random
    from collections.abc import Callable, Iterable, Sequence

    from tagpanel.models.tag import Label, Region
    from tagpanel.tags.validation import ValidationResult

logger = logging.getLogger(__name__)

TYPE_MENU_TEXT = "Type"
FORMAT_MENU_TEXT = "Format"


@dataclass(slots=True)
class HostCallbacks:
    """Notifications the panel sends to its host. Any may be left unset."""

    on_change: Callable[[list[Tag]], None] | None = None
    on_tag_renamed: Callable[[Tag, Tag], None] | None = None
    on_tag_deleted: Callable[[str], None] | None = None
    on_locked_tags_change: Callable[[list[str]], None] | None = None
    on_tag_changed: Callable[[Tag, Tag], None] | None = None
    on_tag_click: Callable[[Tag], None] | None = None
    on_ctrl_tag_click: Callable[[Tag], None] | None = None
    on_label_enter: Callable[[Label], None] | None = None
    on_label_leave: Callable[[Label], None] | None = None


@dataclass(frozen=True, slots=True)
class TagItemView:
    """Everything a renderer needs to draw one tag row."""

    tag: Tag
    index: int
    is_locked: bool
    is_selected: bool
    is_renaming: bool
    applied_to_selected_regions: bool
    labels: tuple[Label, ...]


@dataclass(frozen=True, slots=True)
class MenuItem:
    """One contextual menu entry; ``items`` holds its submenu."""

    key: str
    text: str
    can_check: bool = False
    checked: bool = False
    items: tuple[MenuItem, ...] = ()


class TagInputController:
    """State and event handling for one tag panel.

    Args:
        tags: Initial host tag list.
        host: Host notification callbacks.
        labels: Host label list, used for per-tag hover information.
        selected_regions: Regions currently selected on the host canvas.
        locked_tags: Initially locked tag names.
        show_tag_input_box: Keep the add box open initially. Defaults from
            ``PanelConfig``.
        show_search_box: Keep the search box open initially. Defaults from
            ``PanelConfig``.
        palette: Colours for new tags. Defaults from ``PaletteConfig``.
        max_name_length: Name length limit. Defaults from ``PanelConfig``.
        warn: Sink for user-facing warnings.
        rng: Random source for the exhausted-palette colour fallback.
    """

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        *,
        host: HostCallbacks | None = None,
        labels: Iterable[Label] = (),
        selected_regions: Iterable[Region] = (),
        locked_tags: Iterable[str] = (),
        show_tag_input_box: bool | None = None,
        show_search_box: bool | None = None,
        palette: Sequence[str] | None = None,
        max_name_length: int | None = None,
        warn: Callable[[str], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if None in (show_tag_input_box, show_search_box, palette, max_name_length):
            from tagpanel.config import get_settings  # noqa: PLC0415  -- config imports tags

            settings = get_settings()
            if show_tag_input_box is None:
                show_tag_input_box = settings.panel.show_tag_input_box
            if show_search_box is None:
                show_search_box = settings.panel.show_search_box
            if palette is None:
                palette = settings.palette.colours
            if max_name_length is None:
                max_name_length = settings.panel.max_name_length

        self.host = host or HostCallbacks()
        self.palette: tuple[str, ...] = tuple(palette)
        self.rng = rng

        self.collection = TagCollection(
            tags,
            on_change=self.host.on_change,
            on_tag_renamed=self.host.on_tag_renamed,
            on_tag_deleted=self.host.on_tag_deleted,
            warn=warn,
            max_name_length=max_name_length,
        )
        self.locks = LockSet(locked_tags)
        self.machine = InteractionStateMachine(
            on_tag_click=self.host.on_tag_click,
            on_ctrl_tag_click=self.host.on_ctrl_tag_click,
        )

        self.labels: tuple[Label, ...] = tuple(labels)
        self.selected_regions: tuple[Region, ...] = tuple(selected_regions)

        self.add_box_open = bool(show_tag_input_box)
        self.search_box_open = bool(show_search_box)
        self.search_query = ""

    # ── Read access ──────────────────────────────────────────────────

    @property
    def tags(self) -> tuple[Tag, ...]:
        return self.collection.tags

    @property
    def selected_tag(self) -> Tag | None:
        return self.machine.selected_tag

    @property
    def mode(self) -> OperationMode:
        return self.machine.mode

    def selected_region_tag_names(self) -> set[str]:
        """Union of the tag names applied to the selected regions."""
        names: set[str] = set()
        for region in self.selected_regions:
            names.update(region.tags)
        return names

    def labels_for(self, name: str) -> tuple[Label, ...]:
        return tuple(label for label in self.labels if label.label == name)

    def visible_tags(self) -> list[Tag]:
        return visible(self.collection, self.search_query)

    def items(self) -> list[TagItemView]:
        """View models for the visible rows, in display order."""
        applied = self.selected_region_tag_names()
        state = self.machine.state
        positions = {
            normalise_name(t.name): i for i, t in enumerate(self.collection)
        }
        views = []
        for tag in self.visible_tags():
            selected = state.is_selected(tag)
            views.append(
                TagItemView(
                    tag=tag,
                    index=positions[normalise_name(tag.name)],
                    is_locked=self.locks.is_locked(tag.name),
                    is_selected=selected,
                    is_renaming=selected and state.mode is OperationMode.RENAME,
                    applied_to_selected_regions=tag.name in applied,
                    labels=self.labels_for(tag.name),
                )
            )
        return views

    # ── Host props ───────────────────────────────────────────────────

    def set_tags(self, tags: Iterable[Tag]) -> None:
        """Adopt a new host tag list and re-resolve the selection by name."""
        new_tags = tuple(tags)
        if new_tags == self.collection.tags:
            return
        self.collection.reset(new_tags)
        self.machine.tags_changed(new_tags)

    def set_selected_regions(self, regions: Iterable[Region]) -> None:
        """Adopt the host's region selection.

        Any new non-empty value clears the tag selection, including the same
        regions carrying different tags.
        """
        new_regions = tuple(regions)
        changed = new_regions != self.selected_regions
        self.selected_regions = new_regions
        if changed and new_regions:
            self.machine.clear()

    def set_labels(self, labels: Iterable[Label]) -> None:
        self.labels = tuple(labels)

    def set_locked_tags(self, names: Iterable[str]) -> None:
        self.locks = LockSet(names)

    # ── Row events ───────────────────────────────────────────────────

    def click(self, intent: ClickIntent) -> None:
        self.machine.click(intent, has_selected_regions=bool(self.selected_regions))

    def dismiss_menu(self) -> None:
        """The contextual menu closed itself (outside click, escape...)."""
        self.machine.dismiss()

    def update_tag(self, old: Tag, new: Tag) -> ValidationResult | None:
        """Commit an inline rename/recolour from a tag row.

        Leaves rename mode unless the change is rejected; a rejected change
        keeps the row editable. An unchanged tag also leaves rename mode.
        """
        result = self.collection.update(old, new)
        if isinstance(result, Rejected):
            return result
        if result is None:
            self._leave_rename()
            return result

        committed_locally = (
            names_equal(old, new) or self.collection.on_tag_renamed is None
        )
        if committed_locally and self.machine.state.is_selected(old):
            self.machine.reselect(result.tag)
        self._leave_rename()
        return result

    def _leave_rename(self) -> None:
        if self.machine.mode is OperationMode.RENAME:
            self.machine.dismiss()

    def change_color(self, color: str) -> None:
        """Apply a colour chosen in the picker to the selected tag."""
        tag = self.machine.selected_tag
        if tag is None:
            return
        recoloured = self.collection.recolor(tag, color)
        if recoloured is not None:
            self.machine.reselect(recoloured)
        self.machine.dismiss()

    def label_enter(self, label: Label) -> None:
        if self.host.on_label_enter is not None:
            self.host.on_label_enter(label)

    def label_leave(self, label: Label) -> None:
        if self.host.on_label_leave is not None:
            self.host.on_label_leave(label)

    # ── Toolbar ──────────────────────────────────────────────────────

    def toggle_add_box(self) -> None:
        self.add_box_open = not self.add_box_open

    def toggle_search_box(self) -> None:
        self.search_box_open = not self.search_box_open
        self.search_query = ""

    def edit_selected(self) -> None:
        self.machine.toggle_rename()

    def lock_selected(self) -> None:
        tag = self.machine.selected_tag
        if tag is None:
            return
        names = self.locks.toggle(tag.name)
        if self.host.on_locked_tags_change is not None:
            self.host.on_locked_tags_change(list(names))

    def delete_selected(self) -> None:
        tag = self.machine.selected_tag
        if tag is None:
            return
        self.collection.delete(tag)

    def move_selected(self, displacement: int) -> bool:
        tag = self.machine.selected_tag
        if tag is None:
            return False
        return self.collection.reorder(tag, displacement)

    # ── Add box ──────────────────────────────────────────────────────

    def create_tag(self, value: str) -> ValidationResult:
        """Create a String tag named ``value`` with the next free colour."""
        tag = Tag(
            name=value.strip(),
            color=next_colour(self.collection, self.palette, self.rng),
            type=TagType.STRING,
            format=TagFormat.NOT_SPECIFIED,
        )
        return self.collection.add(tag)

    def add_box_key(self, key: str, value: str) -> str:
        """Handle a key press in the add box; returns the new input value."""
        if key == "Enter":
            self.create_tag(value)
            return ""
        if key == "Escape":
            self.add_box_open = False
        return value

    def add_box_blur(self, value: str) -> str:
        """Create a tag from a non-empty add box on blur."""
        if value:
            self.create_tag(value)
            return ""
        return value

    # ── Search box ───────────────────────────────────────────────────

    def set_search_query(self, query: str) -> None:
        self.search_query = query

    def search_box_key(self, key: str) -> None:
        if key == "Escape":
            self.search_box_open = False

    # ── Contextual menu ──────────────────────────────────────────────

    def context_menu_items(self) -> list[MenuItem]:
        """Type and format menus for the selected tag; empty with no selection."""
        tag = self.machine.selected_tag
        if tag is None:
            return []

        type_items = tuple(
            MenuItem(t.value, t.value, can_check=True, checked=t == tag.type)
            for t in TagType
        )
        format_items = tuple(
            MenuItem(f.value, f.value, can_check=True, checked=f == tag.format)
            for f in valid_formats(tag.type)
        )
        return [
            MenuItem("type", tag.type or TYPE_MENU_TEXT, items=type_items),
            MenuItem(
                key="format", text=tag.format or FORMAT_MENU_TEXT, items=format_items
            ),
        ]

    def select_type(
        self, tag_type: TagType, tag_format: TagFormat | None = None
    ) -> None:
        """Change the selected tag's type, resetting its format if needed."""
        tag = self.machine.selected_tag
        if tag is None or tag_type == tag.type:
            return
        new_tag = replace(
            tag, type=tag_type, format=resolve_format(tag_type, tag_format)
        )
        self._tag_changed(tag, new_tag)

    def select_format(self, tag_format: TagFormat) -> None:
        tag = self.machine.selected_tag
        if tag is None or tag_format == tag.format:
            return
        if tag_format not in valid_formats(tag.type):
            logger.debug("Format %s not valid for %s; ignored", tag_format, tag.type)
            return
        self._tag_changed(tag, replace(tag, format=tag_format))

    def _tag_changed(self, old: Tag, new: Tag) -> None:
        if self.host.on_tag_changed is not None:
            self.host.on_tag_changed(old, new)
