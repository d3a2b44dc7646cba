"""In-memory host for a tag panel.

``SessionHost`` owns the tags, regions, labels and locked names for one
editing session and implements the host side of the panel contract:
renames and deletes are reconciled against the regions carrying the tag
before the new tag list is committed, and every commit is fed back into
the attached controller as a fresh set of props.

Nothing here is persisted beyond the lifetime of the object.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from tagpanel.models.tag import Label, Region, Tag
from tagpanel.tags.controller import HostCallbacks, TagInputController
from tagpanel.tags.locks import LockSet
from tagpanel.tags.names import name_matches, names_equal, normalise_name

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger = logging.getLogger(__name__)


def _rename_in_region(region: Region, old: str, new: str) -> Region:
    key = normalise_name(old)
    if not any(normalise_name(n) == key for n in region.tags):
        return region
    tags = frozenset(new if normalise_name(n) == key else n for n in region.tags)
    return replace(region, tags=tags)


def _strip_from_region(region: Region, name: str) -> Region:
    key = normalise_name(name)
    kept = frozenset(n for n in region.tags if normalise_name(n) != key)
    return region if kept == region.tags else replace(region, tags=kept)


class SessionHost:
    """Reference host state for one panel.

    Args:
        tags: Initial tag list.
        regions: All regions on the canvas.
        labels: Label associations shown on hover.
        locked_tags: Initially locked tag names.
        on_label_hover: Optional callback receiving ``(label, entered)``.
    """

    def __init__(
        self,
        tags: Iterable[Tag] = (),
        regions: Iterable[Region] = (),
        labels: Iterable[Label] = (),
        locked_tags: Iterable[str] = (),
        *,
        on_label_hover: Callable[[Label, bool], None] | None = None,
    ) -> None:
        self.tags: list[Tag] = list(tags)
        self.regions: list[Region] = list(regions)
        self.labels: list[Label] = list(labels)
        self.locked_tags: list[str] = list(locked_tags)
        self.selected_region_ids: list[str] = []
        self.on_label_hover = on_label_hover
        self.controller: TagInputController | None = None

    # ── Wiring ───────────────────────────────────────────────────────

    def callbacks(self) -> HostCallbacks:
        return HostCallbacks(
            on_change=self._on_change,
            on_tag_renamed=self._on_tag_renamed,
            on_tag_deleted=self._on_tag_deleted,
            on_locked_tags_change=self._on_locked_tags_change,
            on_tag_changed=self._on_tag_changed,
            on_tag_click=self._on_tag_click,
            on_ctrl_tag_click=self._on_ctrl_tag_click,
            on_label_enter=self._on_label_enter,
            on_label_leave=self._on_label_leave,
        )

    def build_controller(self, **kwargs: Any) -> TagInputController:
        """Create a controller bound to this host's state and callbacks.

        ``kwargs`` are passed through to ``TagInputController``.
        """
        self.controller = TagInputController(
            self.tags,
            host=self.callbacks(),
            labels=self.labels,
            selected_regions=self.selected_regions(),
            locked_tags=self.locked_tags,
            **kwargs,
        )
        return self.controller

    def selected_regions(self) -> list[Region]:
        return [r for r in self.regions if r.id in self.selected_region_ids]

    def select_regions(self, region_ids: Iterable[str]) -> None:
        """Change the canvas selection and push it to the panel."""
        self.selected_region_ids = list(region_ids)
        if self.controller is not None:
            self.controller.set_selected_regions(self.selected_regions())

    def _refresh(self) -> None:
        """Feed committed host state back into the panel."""
        if self.controller is None:
            return
        self.controller.set_tags(self.tags)
        self.controller.set_labels(self.labels)
        self.controller.set_locked_tags(self.locked_tags)
        self.controller.set_selected_regions(self.selected_regions())

    # ── Panel notifications ──────────────────────────────────────────

    def _on_change(self, tags: list[Tag]) -> None:
        self.tags = list(tags)
        self._refresh()

    def _on_tag_renamed(self, old: Tag, new: Tag) -> None:
        """Relabel regions, labels and locks carrying ``old`` then commit ``new``."""
        self.regions = [_rename_in_region(r, old.name, new.name) for r in self.regions]
        self.labels = [
            replace(label, label=new.name) if label.label == old.name else label
            for label in self.labels
        ]
        locks = LockSet(self.locked_tags)
        if locks.rename(old.name, new.name):
            self.locked_tags = list(locks)
        self.tags = [new if names_equal(t, old) else t for t in self.tags]
        logger.info("Renamed tag %r to %r", old.name, new.name)
        self._refresh()

    def _on_tag_deleted(self, name: str) -> None:
        """Strip ``name`` from regions and labels then drop the tag.

        Lock entries are left alone; the lock set tolerates stale names.
        """
        self.regions = [_strip_from_region(r, name) for r in self.regions]
        self.labels = [label for label in self.labels if label.label != name]
        self.tags = [t for t in self.tags if not name_matches(t, name)]
        logger.info("Deleted tag %r", name)
        self._refresh()

    def _on_locked_tags_change(self, names: list[str]) -> None:
        self.locked_tags = list(names)
        self._refresh()

    def _on_tag_changed(self, old: Tag, new: Tag) -> None:
        self.tags = [new if names_equal(t, old) else t for t in self.tags]
        self._refresh()

    def _on_tag_click(self, tag: Tag) -> None:
        if self._toggle_on_selected_regions(tag):
            self._refresh()

    def _toggle_on_selected_regions(self, tag: Tag) -> bool:
        """Toggle ``tag`` on the selected regions without refreshing.

        Removes it when every selected region already carries it,
        otherwise adds it to all of them. Returns False with no regions
        selected.
        """
        selected = set(self.selected_region_ids)
        targets = [r for r in self.regions if r.id in selected]
        if not targets:
            return False
        remove = all(tag.name in r.tags for r in targets)
        updated = []
        for region in self.regions:
            if region.id in selected:
                tags = region.tags - {tag.name} if remove else region.tags | {tag.name}
                region = replace(region, tags=frozenset(tags))
            updated.append(region)
        self.regions = updated
        return True

    def _on_ctrl_tag_click(self, tag: Tag) -> None:
        """Lock ``tag`` (or unlock it) and apply it to the selected regions."""
        locks = LockSet(self.locked_tags)
        locks.toggle(tag.name)
        self.locked_tags = list(locks)
        self._toggle_on_selected_regions(tag)
        self._refresh()

    def _on_label_enter(self, label: Label) -> None:
        if self.on_label_hover is not None:
            self.on_label_hover(label, True)

    def _on_label_leave(self, label: Label) -> None:
        if self.on_label_hover is not None:
            self.on_label_hover(label, False)
