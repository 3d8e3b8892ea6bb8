"""Doors that open on demand and close again after a delay."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from raycub.world import Tile, WorldMap

REACH = 2.0
CLOSE_DELAY = 3.0


def is_door(world: WorldMap, x: int, y: int) -> bool:
    """True when the cell at row ``x``, column ``y`` is a closed door."""
    if not (0 <= x < world.height and 0 <= y < world.width):
        return False
    return world.tile(x, y) == Tile.DOOR


@dataclass
class Door:
    """One door cell and how long it has been open."""

    x: int
    y: int
    is_open: bool = False
    timer: float = 0.0

    def distance_to(self, pos_x: float, pos_y: float) -> float:
        return math.hypot(pos_x - self.x - 0.5, pos_y - self.y - 0.5)

    def contains(self, pos_x: float, pos_y: float) -> bool:
        return int(pos_x) == self.x and int(pos_y) == self.y


@dataclass
class DoorManager:
    """All doors of a map, in row-major order."""

    doors: list[Door] = field(default_factory=list)

    @classmethod
    def from_world(cls, world: WorldMap) -> DoorManager:
        """Collect every door tile of ``world``, all closed."""
        return cls([
            Door(x, y)
            for x, row in enumerate(world.grid)
            for y, tile in enumerate(row)
            if tile == Tile.DOOR
        ])

    def nearest(self, pos_x: float, pos_y: float) -> Door | None:
        """The closest door within reach of the position, if any."""
        best = None
        best_dist = REACH
        for door in self.doors:
            dist = door.distance_to(pos_x, pos_y)
            if dist < best_dist:
                best_dist = dist
                best = door
        return best

    def toggle(self, pos_x: float, pos_y: float, world: WorldMap) -> Door | None:
        """Open or close the nearest door and update the map; return it."""
        door = self.nearest(pos_x, pos_y)
        if door is None:
            return None
        door.is_open = not door.is_open
        door.timer = 0.0
        world.set_tile(door.x, door.y, Tile.EMPTY if door.is_open else Tile.DOOR)
        return door

    def update(self, pos_x: float, pos_y: float, frame_time: float,
               world: WorldMap) -> None:
        """Advance open doors' timers and close those that have waited long enough.

        A door never closes on the player standing in it.
        """
        for door in self.doors:
            if not door.is_open:
                continue
            door.timer += frame_time
            if door.timer >= CLOSE_DELAY and not door.contains(pos_x, pos_y):
                door.is_open = False
                door.timer = 0.0
                world.set_tile(door.x, door.y, Tile.DOOR)

    def state_at(self, x: int, y: int) -> bool:
        """True when the door at ``(x, y)`` is open; False if closed or absent."""
        for door in self.doors:
            if door.x == x and door.y == y:
                return door.is_open
        return False