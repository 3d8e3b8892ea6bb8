"""The player: position, view direction, timing and key state."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

from raycub.world import WorldMap

SCREEN_WIDTH = 1920
SCREEN_HEIGHT = 1080
TEXTURE_SIZE = 64
PLANE_SCALE = 0.66
MOUSE_SENSITIVITY = 0.002
INITIAL_FRAME_TIME = 0.016
MAX_FRAME_TIME = 0.1

KEY_W = 119
KEY_A = 97
KEY_S = 115
KEY_D = 100
KEY_E = 101
KEY_F = 102
KEY_M = 109
KEY_Q = 113
KEY_LEFT = 65361
KEY_RIGHT = 65363
KEY_ESCAPE = 65307

_DIRECTIONS = {
    "W": (0.0, -1.0),
    "E": (0.0, 1.0),
    "S": (1.0, 0.0),
    "N": (-1.0, 0.0),
}
_HOLD_KEYS = {
    KEY_W: "w",
    KEY_A: "a",
    KEY_S: "s",
    KEY_D: "d",
    KEY_LEFT: "left",
    KEY_RIGHT: "right",
    KEY_E: "e",
}
_TOGGLE_KEYS = {
    KEY_F: "fps",
    KEY_M: "minimap",
    KEY_Q: "mouse_lock",
}


def direction_vector(direction: str) -> tuple[float, float]:
    """Unit view direction for a start letter N, S, E or W."""
    try:
        return _DIRECTIONS[direction]
    except KeyError:
        raise ValueError(f"unknown direction {direction!r}") from None


@dataclass
class Keys:
    """Held movement keys and toggled display settings."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    left: bool = False
    right: bool = False
    minimap: bool = False
    fps: bool = False
    e: bool = False
    mouse_lock: bool = True


class KeyResult(Enum):
    """What a key press asks of the game."""

    NONE = "none"
    SETTING = "setting"
    MOVEMENT = "movement"
    USE = "use"
    QUIT = "quit"


@dataclass
class Player:
    """Camera state. ``x`` runs along map rows, ``y`` along columns."""

    pos_x: float
    pos_y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    base_move_speed: float
    base_rot_speed: float
    last_time: float
    frame_time: float = INITIAL_FRAME_TIME
    move_speed: float = 0.0
    rot_speed: float = 0.0
    pitch: int = 0
    keys: Keys = field(default_factory=Keys)

    @classmethod
    def from_world(cls, world: WorldMap, now: float) -> Player:
        """Place the player at the map's start, facing its start direction."""
        dir_x, dir_y = direction_vector(world.start_direction)
        scale = math.sqrt((SCREEN_WIDTH * SCREEN_HEIGHT) / (1920.0 * 1080.0))
        base_move = 1.0 * scale
        base_rot = 0.3 * scale
        return cls(
            pos_x=world.start_x,
            pos_y=world.start_y,
            dir_x=dir_x,
            dir_y=dir_y,
            plane_x=-dir_y * PLANE_SCALE,
            plane_y=dir_x * PLANE_SCALE,
            base_move_speed=base_move,
            base_rot_speed=base_rot,
            last_time=now,
            frame_time=INITIAL_FRAME_TIME,
            move_speed=base_move * INITIAL_FRAME_TIME,
            rot_speed=base_rot * INITIAL_FRAME_TIME,
        )

    def rotate(self, angle: float) -> None:
        """Turn the view direction and camera plane by ``angle`` radians."""
        c, s = math.cos(angle), math.sin(angle)
        old_dir_x = self.dir_x
        self.dir_x = self.dir_x * c - self.dir_y * s
        self.dir_y = old_dir_x * s + self.dir_y * c
        old_plane_x = self.plane_x
        self.plane_x = self.plane_x * c - self.plane_y * s
        self.plane_y = old_plane_x * s + self.plane_y * c

    def _step(self, world: WorldMap, dx: float, dy: float) -> None:
        if world.is_walkable(int(self.pos_x + dx), int(self.pos_y)):
            self.pos_x += dx
        if world.is_walkable(int(self.pos_x), int(self.pos_y + dy)):
            self.pos_y += dy

    def move_forward(self, world: WorldMap) -> None:
        speed = self.move_speed
        self._step(world, self.dir_x * speed, self.dir_y * speed)

    def move_backward(self, world: WorldMap) -> None:
        speed = self.move_speed
        self._step(world, -self.dir_x * speed, -self.dir_y * speed)

    def strafe_right(self, world: WorldMap) -> None:
        speed = self.move_speed
        self._step(world, -self.dir_y * speed, self.dir_x * speed)

    def strafe_left(self, world: WorldMap) -> None:
        speed = self.move_speed
        self._step(world, self.dir_y * speed, -self.dir_x * speed)

    def process_movement(self, world: WorldMap) -> None:
        """Apply every held movement and turning key once."""
        keys = self.keys
        if keys.w:
            self.move_forward(world)
        if keys.s:
            self.move_backward(world)
        if keys.a:
            self.strafe_left(world)
        if keys.d:
            self.strafe_right(world)
        if keys.right:
            self.rotate(self.rot_speed)
        if keys.left:
            self.rotate(-self.rot_speed)

    def update_timing(self, now: float) -> None:
        """Measure the frame time and scale the speeds by it."""
        self.frame_time = min(now - self.last_time, MAX_FRAME_TIME)
        self.last_time = now
        self.move_speed = self.base_move_speed * self.frame_time
        self.rot_speed = self.base_rot_speed * self.frame_time

    def adjust_pitch(self, delta_y: int) -> None:
        """Tilt the view; pitch stays within half the screen height."""
        limit = SCREEN_HEIGHT // 2
        self.pitch = max(-limit, min(limit, self.pitch - delta_y))

    def press(self, keycode: int) -> KeyResult:
        """Record a key press and say what the game should do with it."""
        toggle = _TOGGLE_KEYS.get(keycode)
        if toggle is not None:
            setattr(self.keys, toggle, not getattr(self.keys, toggle))
            return KeyResult.SETTING
        hold = _HOLD_KEYS.get(keycode)
        if hold is not None:
            setattr(self.keys, hold, True)
            return KeyResult.USE if keycode == KEY_E else KeyResult.MOVEMENT
        if keycode == KEY_ESCAPE:
            return KeyResult.QUIT
        return KeyResult.NONE

    def release(self, keycode: int) -> bool:
        """Record a key release; True when the key was a held key."""
        hold = _HOLD_KEYS.get(keycode)
        if hold is None:
            return False
        setattr(self.keys, hold, False)
        return True