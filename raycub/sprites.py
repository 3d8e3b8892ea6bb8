"""Billboard sprites: collecting, sorting, projecting and drawing them."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from raycub.frame import Frame, Texture
from raycub.player import SCREEN_HEIGHT, SCREEN_WIDTH, Player
from raycub.world import Tile, WorldMap

SPRITE_TEXTURE_INDEX = 5
ANIMATED_TEXTURE_BASE = 6
ANIMATION_FRAMES = 4
FRAME_DURATION = 1.0
_SPRITE_TILES = (Tile.SPRITE, Tile.ANIMATED_SPRITE)


def _tdiv_int(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _tdiv(a, b: int):
    q = np.abs(a) // b
    return np.where(a < 0, -q, q)


def _transparent_mask(colors):
    return ((colors & 0xFFFFFF) == 0xFFFFFF) | ((colors & 0xF0F0F0) == 0xF0F0F0)


def is_transparent(color: int) -> bool:
    """True for the near-white colours that sprite images use as background."""
    return (
        (color & 0x00FFFFFF) == 0x00FFFFFF
        or (color & 0x00F0F0F0) == 0x00F0F0F0
        or color == 0xFFFFFF
    )


@dataclass
class Sprite:
    """A sprite at the centre of its cell, with its squared distance to the player."""

    x: float
    y: float
    kind: Tile
    distance: float


@dataclass
class SpriteProjection:
    """Where a sprite lands on screen."""

    transform_x: float
    transform_y: float
    screen_x: int
    height: int
    width: int
    depth: int
    draw_start_x: int
    draw_end_x: int
    draw_start_y: int
    draw_end_y: int


def collect_sprites(world: WorldMap, pos_x: float, pos_y: float) -> list[Sprite]:
    """All sprite cells of the map in row-major order."""
    sprites = []
    for i, row in enumerate(world.grid):
        for j, tile in enumerate(row):
            if tile in _SPRITE_TILES:
                sx, sy = i + 0.5, j + 0.5
                distance = (pos_x - sx) * (pos_x - sx) + (pos_y - sy) * (pos_y - sy)
                sprites.append(Sprite(sx, sy, Tile(tile), distance))
    return sprites


def sort_sprites(sprites: Sequence[Sprite]) -> list[Sprite]:
    """Farthest first; sprites at equal distance keep their order."""
    return sorted(sprites, key=lambda s: s.distance, reverse=True)


def project_sprite(player: Player, sprite: Sprite) -> SpriteProjection | None:
    """Project a sprite into screen space; None when it lies on the camera plane."""
    sprite_x = sprite.x - player.pos_x
    sprite_y = sprite.y - player.pos_y
    inv_det = 1.0 / (player.plane_x * player.dir_y - player.dir_x * player.plane_y)
    transform_x = inv_det * (player.dir_y * sprite_x - player.dir_x * sprite_y)
    transform_y = inv_det * (-player.plane_y * sprite_x + player.plane_x * sprite_y)
    if transform_y == 0:
        return None
    screen_x = int((SCREEN_WIDTH // 2) * (1 + transform_x / transform_y))
    size = abs(int(SCREEN_HEIGHT / transform_y))
    horizon = SCREEN_HEIGHT // 2 + player.pitch
    return SpriteProjection(
        transform_x=transform_x,
        transform_y=transform_y,
        screen_x=screen_x,
        height=size,
        width=size,
        depth=int(transform_y),
        draw_start_x=max(screen_x - size // 2, 0),
        draw_end_x=min(screen_x + size // 2, SCREEN_WIDTH - 1),
        draw_start_y=max(horizon - size // 2, 0),
        draw_end_y=min(horizon + size // 2, SCREEN_HEIGHT - 1),
    )


@dataclass
class SpriteAnimator:
    """Chooses sprite images, stepping the animation once per second."""

    timer: float = 0.0
    frame: int = 0

    def texture_for(self, sprite_type: int, frame_time: float,
                    textures: Sequence[Texture]) -> Texture:
        """Image for a sprite; animated sprites advance the shared animation."""
        if sprite_type != Tile.ANIMATED_SPRITE:
            return textures[SPRITE_TEXTURE_INDEX]
        self.timer += frame_time
        if self.timer >= FRAME_DURATION:
            self.frame = (self.frame + 1) % ANIMATION_FRAMES
            self.timer = 0.0
        return textures[ANIMATED_TEXTURE_BASE + self.frame]


def draw_sprite(frame: Frame, player: Player, projection: SpriteProjection,
                texture: Texture, z_buffer: Sequence[float]) -> None:
    """Draw the visible, non-transparent stripes of a projected sprite."""
    size = projection.height
    if size <= 0 or projection.depth <= 0:
        return
    ys = np.arange(projection.draw_start_y, projection.draw_end_y, dtype=np.int64)
    if ys.size == 0:
        return
    tex_w, tex_h = texture.width, texture.height
    d = (ys - player.pitch) * 256 - SCREEN_HEIGHT * 128 + size * 128
    tex_y = _tdiv(_tdiv(d * tex_h, size), 256)
    rows_ok = (tex_y >= 0) & (tex_y < tex_h)
    rows = ys[rows_ok]
    tex_rows = tex_y[rows_ok]
    left = projection.screen_x - size // 2
    for x in range(projection.draw_start_x, projection.draw_end_x):
        if not (0 < x < SCREEN_WIDTH and x < frame.width
                and projection.depth < z_buffer[x]):
            continue
        tex_x = _tdiv_int(_tdiv_int(256 * (x - left) * tex_w, size), 256)
        if not 0 <= tex_x < tex_w:
            continue
        colors = texture.pixels[tex_rows, tex_x]
        opaque = ~_transparent_mask(colors)
        frame.pixels[rows[opaque], x] = colors[opaque]


def render_sprites(frame: Frame, player: Player, world: WorldMap,
                   textures: Sequence[Texture], animator: SpriteAnimator,
                   z_buffer: Sequence[float]) -> None:
    """Draw every sprite of the map, farthest first, behind nearer walls."""
    sprites = sort_sprites(collect_sprites(world, player.pos_x, player.pos_y))
    for sprite in sprites:
        texture = animator.texture_for(sprite.kind, player.frame_time, textures)
        projection = project_sprite(player, sprite)
        if projection is not None:
            draw_sprite(frame, player, projection, texture, z_buffer)