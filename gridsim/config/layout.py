"""Wall-layout helpers: ASCII maps and straight wall lines.

Cells are plain ``(row, col)`` tuples at this layer; the builder converts
them to Positions.
"""

from __future__ import annotations

WALL_CHAR = "#"


def walls_from_ascii(text: str) -> set[tuple[int, int]]:
    """Read wall cells from a text map, one line per row.

    Leading/trailing blank lines and per-line indentation are ignored, so a
    map can be written as an indented triple-quoted string.
    """
    lines = [line.strip() for line in text.strip("\n").splitlines()]
    return {
        (r, c)
        for r, line in enumerate(lines)
        for c, ch in enumerate(line)
        if ch == WALL_CHAR
    }


def wall_line(
    direction: str,
    start: tuple[int, int],
    end: tuple[int, int],
) -> list[tuple[int, int]]:
    """Cells of a horizontal or vertical wall from *start* to *end*, inclusive."""
    (r0, c0), (r1, c1) = start, end
    if direction == "horizontal":
        if r0 != r1:
            raise ValueError(f"horizontal wall needs equal rows, got {start} -> {end}")
        lo, hi = sorted((c0, c1))
        return [(r0, c) for c in range(lo, hi + 1)]
    if direction == "vertical":
        if c0 != c1:
            raise ValueError(f"vertical wall needs equal columns, got {start} -> {end}")
        lo, hi = sorted((r0, r1))
        return [(r, c0) for r in range(lo, hi + 1)]
    raise ValueError(f"direction must be 'horizontal' or 'vertical', got {direction!r}")
