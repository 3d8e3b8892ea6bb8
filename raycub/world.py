"""The tile grid the game runs on, built from a validated scene."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

from raycub.header import SceneError
from raycub.scene import Scene

DOOR_TEXTURE = "./textures/door.xpm"
SPRITE_TEXTURE = "./textures/sprite.xpm"
ANIMATED_SPRITE_TEXTURES = (
    "./textures/animated_sprite_frame_1.xpm",
    "./textures/animated_sprite_frame_2.xpm",
    "./textures/animated_sprite_frame_3.xpm",
    "./textures/animated_sprite_frame_2.xpm",
)


class Tile(IntEnum):
    """Contents of one map cell."""

    EMPTY = 0
    WALL = 1
    DOOR = 2
    SPRITE = 3
    ANIMATED_SPRITE = 4


_CHAR_TILES = {
    "1": Tile.WALL,
    "0": Tile.EMPTY,
    "N": Tile.EMPTY,
    "S": Tile.EMPTY,
    "W": Tile.EMPTY,
    "E": Tile.EMPTY,
    " ": Tile.WALL,
    "D": Tile.DOOR,
    "P": Tile.SPRITE,
    "A": Tile.ANIMATED_SPRITE,
}
_WALKABLE = frozenset({Tile.EMPTY, Tile.SPRITE, Tile.ANIMATED_SPRITE})


def char_to_tile(c: str) -> Tile:
    """Tile for a map character; unknown characters are walls."""
    return _CHAR_TILES.get(c, Tile.WALL)


def pack_rgb(rgb: Sequence[int]) -> int:
    """Pack an ``(r, g, b)`` triple into ``0xRRGGBB``."""
    r, g, b = rgb
    return (r << 16) | (g << 8) | b


def map_size(rows: Sequence[str]) -> tuple[int, int]:
    """``(height, width)`` of the map, the width being the longest row."""
    return len(rows), max((len(row) for row in rows), default=0)


@dataclass
class WorldMap:
    """Tile grid, texture paths, colours and player start.

    Cells are addressed as ``(x, y)`` with ``x`` the row and ``y`` the column.
    """

    grid: list[list[Tile]]
    north_texture: str
    south_texture: str
    east_texture: str
    west_texture: str
    floor_color: int
    ceiling_color: int
    start_x: float
    start_y: float
    start_direction: str
    door_path: str = DOOR_TEXTURE
    sprite_path: str = SPRITE_TEXTURE
    animated_sprite_paths: tuple[str, ...] = ANIMATED_SPRITE_TEXTURES

    @property
    def height(self) -> int:
        return len(self.grid)

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @classmethod
    def from_scene(cls, scene: Scene) -> WorldMap:
        """Build the tile grid from a scene, padding short rows with walls."""
        header = scene.header
        if header.floor is None or header.ceiling is None:
            raise SceneError("missing floor or ceiling color")
        _, width = map_size(scene.rows)
        grid = [
            [char_to_tile(row[x]) if x < len(row) else Tile.WALL for x in range(width)]
            for row in scene.rows
        ]
        grid[scene.player_row][scene.player_col] = Tile.EMPTY
        return cls(
            grid=grid,
            north_texture=header.north or "",
            south_texture=header.south or "",
            east_texture=header.east or "",
            west_texture=header.west or "",
            floor_color=pack_rgb(header.floor),
            ceiling_color=pack_rgb(header.ceiling),
            start_x=scene.player_row + 0.5,
            start_y=scene.player_col + 0.5,
            start_direction=scene.player_dir,
        )

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.height and 0 <= y < self.width):
            raise IndexError(f"tile ({x}, {y}) is outside the map")

    def tile(self, x: int, y: int) -> Tile:
        """Tile at row ``x``, column ``y``."""
        self._check(x, y)
        return self.grid[x][y]

    def set_tile(self, x: int, y: int, value: int) -> None:
        """Replace the tile at row ``x``, column ``y``."""
        self._check(x, y)
        self.grid[x][y] = Tile(value)

    def is_walkable(self, x: int, y: int) -> bool:
        """True when the player may stand on the tile."""
        return self.tile(x, y) in _WALKABLE