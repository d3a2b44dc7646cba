"""Shared pytest fixtures for tagpanel tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from tagpanel.config import get_settings
from tagpanel.models.tag import Label, Tag
from tagpanel.tags.controller import HostCallbacks, TagInputController

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

load_dotenv()

# Small deterministic palette so allocation is easy to reason about
TEST_PALETTE = ("#111111", "#222222", "#333333")


def make_tags(*names: str) -> list[Tag]:
    """Tags named ``names`` with colours assigned from TEST_PALETTE in turn."""
    return [
        Tag(name=name, color=TEST_PALETTE[i % len(TEST_PALETTE)])
        for i, name in enumerate(names)
    ]


@dataclass
class RecordingHost:
    """Host that records every notification the panel sends."""

    changes: list[list[Tag]] = field(default_factory=list)
    renames: list[tuple[Tag, Tag]] = field(default_factory=list)
    deletes: list[str] = field(default_factory=list)
    locked: list[list[str]] = field(default_factory=list)
    tag_changes: list[tuple[Tag, Tag]] = field(default_factory=list)
    clicks: list[Tag] = field(default_factory=list)
    ctrl_clicks: list[Tag] = field(default_factory=list)
    label_events: list[tuple[str, Label]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def callbacks(self, *, with_clicks: bool = True) -> HostCallbacks:
        return HostCallbacks(
            on_change=self.changes.append,
            on_tag_renamed=lambda old, new: self.renames.append((old, new)),
            on_tag_deleted=self.deletes.append,
            on_locked_tags_change=self.locked.append,
            on_tag_changed=lambda old, new: self.tag_changes.append((old, new)),
            on_tag_click=self.clicks.append if with_clicks else None,
            on_ctrl_tag_click=self.ctrl_clicks.append if with_clicks else None,
            on_label_enter=lambda lb: self.label_events.append(("enter", lb)),
            on_label_leave=lambda lb: self.label_events.append(("leave", lb)),
        )


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def abc_tags() -> list[Tag]:
    return make_tags("A", "B", "C")


@pytest.fixture
def tags_named() -> Callable[..., list[Tag]]:
    return make_tags


@pytest.fixture
def palette() -> tuple[str, ...]:
    return TEST_PALETTE


@pytest.fixture
def make_controller(
    host: RecordingHost,
) -> Callable[..., TagInputController]:
    """Factory for controllers wired to the recording host.

    Config-driven defaults are pinned so tests never depend on the
    environment.
    """

    def _make(tags: list[Tag] | None = None, **kwargs: object) -> TagInputController:
        options: dict[str, object] = {
            "host": host.callbacks(),
            "show_tag_input_box": False,
            "show_search_box": False,
            "palette": TEST_PALETTE,
            "max_name_length": 128,
            "warn": host.warnings.append,
        }
        options.update(kwargs)
        return TagInputController(tags or [], **options)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def clear_settings_cache() -> Iterator[None]:
    """Reset the cached Settings before and after a test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
