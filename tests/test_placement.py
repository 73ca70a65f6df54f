"""Tests for image marker placement."""

import pytest

from ldui.images.base import ImageReference
from ldui.images.placement import map_placements


def _refs(*offsets):
    return [ImageReference(url=f"{i}.png", ordinal=i, raw_offset=o) for i, o in enumerate(offsets)]


class TestMapPlacements:
    """Test map_placements function."""

    def test_proportional_offsets(self):
        """Test known offsets map proportionally onto lines."""
        hints = map_placements(_refs(0, 500, 999), markup_length=1000, total_lines=10)

        assert [(h.ordinal, h.line) for h in hints] == [(0, 0), (1, 5), (2, 9)]

    def test_offset_at_end_is_clamped(self):
        """Test an offset equal to the markup length stays on the last line."""
        hints = map_placements(_refs(1000), markup_length=1000, total_lines=10)

        assert hints[0].line == 9

    @pytest.mark.parametrize(
        "offsets",
        [(0, 500, 999), (None, None, None), (900, None, 10), (None, 0, None), (999, 998, 1)],
    )
    def test_bounds_and_monotonic(self, offsets):
        """Test lines stay within range and never decrease."""
        hints = map_placements(_refs(*offsets), markup_length=1000, total_lines=10)

        lines = [h.line for h in hints]
        assert len(hints) == 3
        assert all(0 <= line <= 9 for line in lines)
        assert lines == sorted(lines)
        assert [h.ordinal for h in hints] == [0, 1, 2]

    def test_fallback_spacing(self):
        """Test unresolved references are spread at least three lines apart."""
        hints = map_placements(_refs(None, None, None), markup_length=1000, total_lines=12)

        lines = [h.line for h in hints]
        assert lines == [3, 6, 9]
        assert all(b - a >= 3 for a, b in zip(lines, lines[1:]))

    def test_fallback_spacing_on_long_text(self):
        """Test spacing grows with the line count."""
        hints = map_placements(_refs(None, None), markup_length=1000, total_lines=30)

        assert [h.line for h in hints] == [10, 20]

    def test_fallback_clamped_on_short_text(self):
        """Test fallback positions are clamped to the last line."""
        hints = map_placements(_refs(None, None, None), markup_length=1000, total_lines=5)

        assert [h.line for h in hints] == [3, 4, 4]

    def test_zero_markup_length_uses_fallback(self):
        """Test a zero markup length falls back to even spacing."""
        hints = map_placements(_refs(0, 0), markup_length=0, total_lines=12)

        assert [h.line for h in hints] == [4, 8]

    def test_no_lines(self):
        """Test no output lines gives no hints."""
        assert map_placements(_refs(0, 1), markup_length=10, total_lines=0) == []

    def test_no_references(self):
        """Test no references gives no hints."""
        assert map_placements([], markup_length=10, total_lines=10) == []

    def test_orders_by_ordinal(self):
        """Test out-of-order input is returned ordinal-ordered."""
        refs = list(reversed(_refs(100, 200, 300)))

        hints = map_placements(refs, markup_length=1000, total_lines=10)

        assert [h.ordinal for h in hints] == [0, 1, 2]

    def test_deterministic(self):
        """Test identical input gives identical output."""
        refs = _refs(10, None, 700)

        assert map_placements(refs, 1000, 20) == map_placements(refs, 1000, 20)
