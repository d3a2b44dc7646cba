"""Tests for next_colour() palette allocation."""

from __future__ import annotations

import random

import pytest

from tagpanel.models.tag import Tag
from tagpanel.tags.colour import next_colour

PALETTE = ("#aa0000", "#00bb00", "#0000cc")


class TestNextColour:
    def test_empty_collection_gets_first_colour(self) -> None:
        """With no tags, the first palette entry is used."""
        assert next_colour([], PALETTE) == "#aa0000"

    def test_skips_used_colours_in_palette_order(self) -> None:
        """The first palette colour not in use is returned."""
        tags = [Tag("x", "#aa0000"), Tag("y", "#0000cc")]
        assert next_colour(tags, PALETTE) == "#00bb00"

    def test_comparison_is_case_insensitive(self) -> None:
        """'#AA0000' counts as using '#aa0000'."""
        tags = [Tag("x", "#AA0000")]
        assert next_colour(tags, PALETTE) == "#00bb00"

    def test_returns_unused_colour_while_palette_not_exhausted(self) -> None:
        """For k < palette size colours in use, the result is never one of them."""
        for k in range(len(PALETTE)):
            tags = [Tag(f"t{i}", PALETTE[i]) for i in range(k)]
            used = {t.color for t in tags}
            assert next_colour(tags, PALETTE) not in used

    def test_exhausted_palette_returns_palette_member(self) -> None:
        """Once every colour is used, some palette colour is still returned."""
        tags = [Tag(f"t{i}", c) for i, c in enumerate(PALETTE)]
        for seed in range(20):
            assert next_colour(tags, PALETTE, random.Random(seed)) in PALETTE

    def test_exhausted_palette_uses_injected_rng(self) -> None:
        """The fallback draws from the supplied random source."""
        tags = [Tag(f"t{i}", c) for i, c in enumerate(PALETTE)]
        expected = random.Random(7).choice(PALETTE)
        assert next_colour(tags, PALETTE, random.Random(7)) == expected

    def test_non_palette_colours_do_not_block_allocation(self) -> None:
        """Tags with colours outside the palette leave every entry free."""
        tags = [Tag("x", "#123456")]
        assert next_colour(tags, PALETTE) == "#aa0000"

    def test_empty_palette_raises(self) -> None:
        """An empty palette is a configuration error."""
        with pytest.raises(ValueError, match="at least one colour"):
            next_colour([], ())
