"""Casting one ray per screen column and drawing the walls it hits."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from raycub.frame import Frame, Texture
from raycub.player import SCREEN_HEIGHT, SCREEN_WIDTH, TEXTURE_SIZE, Player
from raycub.world import Tile, WorldMap

MIN_WALL_DISTANCE = 0.01
MAX_LINE_FACTOR = 10
DOOR_TEXTURE_INDEX = 4
WALL_SHADE_MASK = 0x7F7F7F
_SOLID = (Tile.WALL, Tile.DOOR)


def _tdiv(a, b: int):
    """Integer division truncating towards zero, for arrays and a positive divisor."""
    q = np.abs(a) // b
    return np.where(a < 0, -q, q)


@dataclass
class RayHit:
    """Where the ray of one screen column met a wall, and how to draw it."""

    column: int
    ray_dir_x: float
    ray_dir_y: float
    map_x: int
    map_y: int
    step_x: int
    step_y: int
    side: int
    tile: Tile
    perp_wall_dist: float
    line_height: int
    draw_start: int
    draw_end: int


def cast_ray(player: Player, world: WorldMap, x: int) -> RayHit:
    """Trace the ray for screen column ``x`` through the grid until it hits a wall or door."""
    camera_x = 2 * x / SCREEN_WIDTH - 1
    ray_dir_x = player.dir_x + player.plane_x * camera_x
    ray_dir_y = player.dir_y + player.plane_y * camera_x
    map_x, map_y = int(player.pos_x), int(player.pos_y)
    delta_x = 1e30 if ray_dir_x == 0 else abs(1 / ray_dir_x)
    delta_y = 1e30 if ray_dir_y == 0 else abs(1 / ray_dir_y)
    if ray_dir_x < 0:
        step_x, side_x = -1, (player.pos_x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1.0 - player.pos_x) * delta_x
    if ray_dir_y < 0:
        step_y, side_y = -1, (player.pos_y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1.0 - player.pos_y) * delta_y

    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        tile = world.tile(map_x, map_y)
        if tile in _SOLID:
            break

    perp = side_x - delta_x if side == 0 else side_y - delta_y
    perp = max(perp, MIN_WALL_DISTANCE)
    line_height = min(int(SCREEN_HEIGHT / perp), SCREEN_HEIGHT * MAX_LINE_FACTOR)
    horizon = SCREEN_HEIGHT // 2 + player.pitch
    draw_start = max(horizon - line_height // 2, 0)
    draw_end = min(horizon + line_height // 2, SCREEN_HEIGHT - 1)
    return RayHit(
        column=x,
        ray_dir_x=ray_dir_x,
        ray_dir_y=ray_dir_y,
        map_x=map_x,
        map_y=map_y,
        step_x=step_x,
        step_y=step_y,
        side=side,
        tile=Tile(tile),
        perp_wall_dist=perp,
        line_height=line_height,
        draw_start=draw_start,
        draw_end=draw_end,
    )


def texture_x(player: Player, hit: RayHit) -> int:
    """Column of the 64-wide texture grid where the ray struck the wall."""
    if hit.side == 0:
        wall_x = player.pos_y + hit.perp_wall_dist * hit.ray_dir_y
    else:
        wall_x = player.pos_x + hit.perp_wall_dist * hit.ray_dir_x
    wall_x -= math.floor(wall_x)
    tex_x = int(wall_x * TEXTURE_SIZE)
    if (hit.side == 0 and hit.ray_dir_x < 0) or (hit.side == 1 and hit.ray_dir_y > 0):
        tex_x = TEXTURE_SIZE - tex_x - 1
    return min(max(tex_x, 0), TEXTURE_SIZE - 1)


def wall_texture_index(hit: RayHit) -> int:
    """Index of the texture for the face the ray hit; doors use their own."""
    if hit.tile == Tile.DOOR:
        return DOOR_TEXTURE_INDEX
    if hit.side == 0:
        return 2 if hit.step_x == -1 else 3
    return 0 if hit.step_y == -1 else 1


def render_column(frame: Frame, player: Player, world: WorldMap,
                  textures: Sequence[Texture], hit: RayHit) -> None:
    """Draw ceiling, textured wall slice and floor for one column."""
    x = hit.column
    frame.fill_column(x, 0, hit.draw_start, world.ceiling_color)
    frame.fill_column(x, hit.draw_end, SCREEN_HEIGHT, world.floor_color)
    if not 0 <= x < frame.width or hit.line_height <= 0:
        return
    start = max(hit.draw_start, 0)
    end = min(hit.draw_end, SCREEN_HEIGHT, frame.height)
    if start >= end:
        return
    texture = textures[wall_texture_index(hit)]
    tex_x = texture_x(player, hit)
    ys = np.arange(start, end, dtype=np.int64)
    d = (ys - (SCREEN_HEIGHT // 2 + player.pitch)) * 256 + hit.line_height * 128
    tex_y = np.clip(_tdiv(_tdiv(d * TEXTURE_SIZE, hit.line_height), 256),
                    0, TEXTURE_SIZE - 1)
    colors = np.asarray(texture.sample(tex_x, tex_y), dtype=np.uint32)
    if hit.side == 1:
        colors = (colors >> 1) & WALL_SHADE_MASK
    frame.pixels[start:end, x] = colors


def render_walls(frame: Frame, player: Player, world: WorldMap,
                 textures: Sequence[Texture]) -> list[float]:
    """Draw every column and return the wall distance of each, for sprite clipping."""
    z_buffer = []
    for x in range(SCREEN_WIDTH):
        hit = cast_ray(player, world, x)
        render_column(frame, player, world, textures, hit)
        z_buffer.append(hit.perp_wall_dist)
    return z_buffer