"""
Placement of image markers in reflowed text.

Cleaning markup into plain text strips tags and collapses whitespace, so the
line an image came from cannot be recovered exactly. Instead each image's
relative position in the markup is projected onto the output lines; images
that could not be located in the markup are spread evenly.
"""

from collections.abc import Sequence

from .base import ImageReference, PlacementHint

MIN_FALLBACK_SPACING = 3


def map_placements(
    references: Sequence[ImageReference],
    markup_length: int,
    total_lines: int,
) -> list[PlacementHint]:
    """
    Map image references to output line indices.

    Args:
        references: References extracted from the markup
        markup_length: Length of the markup, in the same unit as ``raw_offset``
        total_lines: Number of lines in the cleaned, reflowed text

    Returns:
        One hint per reference, ordered by ordinal with non-decreasing lines.
        Empty if there are no output lines.
    """
    if total_lines <= 0 or not references:
        return []

    last_line = total_lines - 1
    ordered = sorted(references, key=lambda ref: ref.ordinal)

    unresolved = [
        ref for ref in ordered if ref.raw_offset is None or markup_length <= 0
    ]
    spacing = max(MIN_FALLBACK_SPACING, total_lines // (len(unresolved) + 1))
    fallback = {
        ref.ordinal: min((k + 1) * spacing, last_line) for k, ref in enumerate(unresolved)
    }

    hints = []
    previous = 0
    for ref in ordered:
        if ref.ordinal in fallback:
            line = fallback[ref.ordinal]
        else:
            line = int(ref.raw_offset / markup_length * total_lines)
            line = min(max(line, 0), last_line)
        # Mixed resolved and fallback positions can cross; keep lines monotonic.
        line = max(line, previous)
        hints.append(PlacementHint(ordinal=ref.ordinal, line=line))
        previous = line

    return hints
