"""Map grid checks: padding, player lookup and enclosure by flood fill."""

from __future__ import annotations

from collections.abc import Sequence

from raycub.header import SceneError

_PLAYER_CHARS = frozenset("NSEW")
_OPEN_TILES = frozenset("0NSWEDPA")


def copy_map(rows: Sequence[str], height: int, width: int) -> list[list[str]]:
    """Return a ``height`` x ``width`` grid of characters, padded with spaces."""
    return [
        [row[j] if j < len(row) else " " for j in range(width)]
        for row in rows[:height]
    ]


def find_char_position(grid: Sequence[Sequence[str]], char: str) -> tuple[int, int] | None:
    """Position of ``char`` if it occurs exactly once in ``grid``, else None."""
    found = None
    for i, row in enumerate(grid):
        for j, cell in enumerate(row):
            if cell == char:
                if found is not None:
                    return None
                found = (i, j)
    return found


def _size(rows: Sequence[str]) -> tuple[int, int]:
    return len(rows), max((len(row) for row in rows), default=0)


def is_enclosed(rows: Sequence[str], start: tuple[int, int]) -> bool:
    """True when the area reachable from ``start`` is closed off by walls.

    Reaching a space or the edge of the grid means the map leaks.
    """
    height, width = _size(rows)
    grid = copy_map(rows, height, width)
    sr, sc = start
    if grid[sr][sc] not in _OPEN_TILES:
        return False
    stack = [(sr, sc)]
    while stack:
        r, c = stack.pop()
        if r < 0 or c < 0 or r >= height or c >= width:
            return False
        cell = grid[r][c]
        if cell == " ":
            return False
        if cell not in _OPEN_TILES:
            continue
        grid[r][c] = "V"
        stack.extend(((r + 1, c), (r - 1, c), (r, c + 1), (r, c - 1)))
    return True


def locate_player(rows: Sequence[str]) -> tuple[int, int, str]:
    """Find the single player start and check the map is closed.

    Returns ``(row, column, direction)``; raises SceneError otherwise.
    """
    if not rows:
        raise SceneError("empty map")
    starts = [
        (y, x, ch)
        for y, row in enumerate(rows)
        for x, ch in enumerate(row)
        if ch in _PLAYER_CHARS
    ]
    if not starts:
        raise SceneError("no player found")
    if len(starts) > 1:
        raise SceneError("multiple player found")
    row, col, direction = starts[0]
    if not is_enclosed(rows, (row, col)):
        raise SceneError("fails map check")
    return row, col, direction