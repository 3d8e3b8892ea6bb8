"""The frame buffer, wall textures, the minimap overlay and the FPS counter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import numpy as np
import pygame

from raycub.player import SCREEN_HEIGHT, SCREEN_WIDTH, TEXTURE_SIZE, Player
from raycub.world import Tile, WorldMap

MINIMAP_CELL = 10
MINIMAP_MARGIN = 10
MINIMAP_PLAYER_COLOR = 0xFF0000
_MINIMAP_COLORS = {
    Tile.WALL: 0xFFFFFF,
    Tile.DOOR: 0x8B4513,
    Tile.SPRITE: 0x00FF00,
    Tile.ANIMATED_SPRITE: 0xFFFF00,
}
_PIXEL_MASK = 0xFFFFFFFF


@dataclass
class Texture:
    """An image as a ``(height, width)`` array of packed ``0xRRGGBB`` colours."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        self.pixels = np.asarray(self.pixels, dtype=np.uint32)
        if self.pixels.ndim != 2 or self.pixels.size == 0:
            raise ValueError("texture must be a non-empty two-dimensional array")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> Texture:
        """Load an image file; raises OSError when it cannot be read."""
        try:
            surface = pygame.image.load(os.fspath(path))
        except (pygame.error, OSError) as exc:
            raise OSError(f"cannot load texture {os.fspath(path)}: {exc}") from exc
        rgb = pygame.surfarray.array3d(surface).astype(np.uint32)
        packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
        return cls(np.ascontiguousarray(packed.T))

    def sample(self, tex_x, tex_y):
        """Colour at coordinates given on the 64x64 texture grid, scaled to this image.

        Accepts integers or integer arrays; coordinates are clamped to the image.
        """
        ax = np.clip(np.asarray(tex_x) * self.width // TEXTURE_SIZE, 0, self.width - 1)
        ay = np.clip(np.asarray(tex_y) * self.height // TEXTURE_SIZE, 0, self.height - 1)
        value = self.pixels[ay, ax]
        if np.ndim(value) == 0:
            return int(value)
        return value


@dataclass
class Frame:
    """The screen image being drawn, indexed as ``pixels[y, x]``."""

    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def set_pixel(self, x: int, y: int, color: int) -> None:
        """Set one pixel; positions off the screen are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = color & _PIXEL_MASK

    def fill_column(self, x: int, start: int, end: int, color: int) -> None:
        """Paint rows ``start`` up to ``end`` of column ``x``, clipped to the screen."""
        if not 0 <= x < self.width:
            return
        start = max(start, 0)
        end = min(end, self.height)
        if start < end:
            self.pixels[start:end, x] = color & _PIXEL_MASK


@dataclass
class FpsCounter:
    """Frames per second, recomputed once a second has passed."""

    elapsed: float = 0.0
    frames: int = 0
    fps: float = 0.0

    def tick(self, frame_time: float) -> int:
        """Count one frame and return the current rate, truncated."""
        self.elapsed += frame_time
        self.frames += 1
        if self.elapsed >= 1.0:
            self.fps = self.frames / self.elapsed
            self.frames = 0
            self.elapsed = 0.0
        return int(self.fps)


def draw_minimap(frame: Frame, player: Player, world: WorldMap) -> None:
    """Paint the map in the top-left corner, one square per cell."""
    player_row, player_col = int(player.pos_x), int(player.pos_y)
    for i, row in enumerate(world.grid):
        top = MINIMAP_MARGIN + i * MINIMAP_CELL
        for j, tile in enumerate(row):
            if i == player_row and j == player_col:
                color = MINIMAP_PLAYER_COLOR
            else:
                color = _MINIMAP_COLORS.get(tile)
                if color is None:
                    continue
            left = MINIMAP_MARGIN + j * MINIMAP_CELL
            frame.pixels[top:top + MINIMAP_CELL, left:left + MINIMAP_CELL] = color