"""The game loop: window, input handling and per-frame updates."""

from __future__ import annotations

import os
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
import pygame

from raycub.doors import DoorManager
from raycub.frame import Frame, FpsCounter, Texture, draw_minimap
from raycub.header import SceneError
from raycub.player import (
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_RIGHT,
    MOUSE_SENSITIVITY,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    KeyResult,
    Player,
)
from raycub.raycast import render_walls
from raycub.scene import Scene, load_scene
from raycub.sprites import SpriteAnimator, render_sprites
from raycub.world import WorldMap

WINDOW_TITLE = "raycub"
_FPS_TEXT_COLOR = (255, 255, 255)


def load_textures(world: WorldMap) -> list[Texture]:
    """Load every image the world needs.

    The order is east, west, north, south, door, static sprite, then
    the animation frames. Raises OSError when an image cannot be read.
    """
    paths = [
        world.east_texture,
        world.west_texture,
        world.north_texture,
        world.south_texture,
        world.door_path,
        world.sprite_path,
        *world.animated_sprite_paths,
    ]
    return [Texture.load(path) for path in paths]


def _pygame_keycode(key: int) -> int:
    """Translate a pygame key to the keycodes the player understands."""
    special = {
        pygame.K_LEFT: KEY_LEFT,
        pygame.K_RIGHT: KEY_RIGHT,
        pygame.K_ESCAPE: KEY_ESCAPE,
    }
    return special.get(key, key)


def _frame_to_rgb(pixels: np.ndarray) -> np.ndarray:
    """Unpack ``(height, width)`` 0xRRGGBB values to a ``(width, height, 3)`` array."""
    rgb = np.stack(
        ((pixels >> 16) & 0xFF, (pixels >> 8) & 0xFF, pixels & 0xFF), axis=-1
    ).astype(np.uint8)
    return rgb.transpose(1, 0, 2)


@dataclass
class Game:
    """Everything one running game holds."""

    world: WorldMap
    player: Player
    doors: DoorManager
    textures: Sequence[Texture]
    animator: SpriteAnimator = field(default_factory=SpriteAnimator)
    frame: Frame = field(default_factory=Frame)
    fps_counter: FpsCounter = field(default_factory=FpsCounter)
    center_x: int = SCREEN_WIDTH // 2
    center_y: int = SCREEN_HEIGHT // 2
    running: bool = True
    fps: int = 0

    @classmethod
    def from_scene(cls, scene: Scene, textures: Sequence[Texture], now: float) -> Game:
        """Set up the world, doors and player for a validated scene."""
        world = WorldMap.from_scene(scene)
        return cls(
            world=world,
            player=Player.from_world(world, now),
            doors=DoorManager.from_world(world),
            textures=list(textures),
        )

    def step(self, now: float) -> Frame:
        """Advance the game to time ``now`` and draw the next frame."""
        player = self.player
        player.update_timing(now)
        self.doors.update(player.pos_x, player.pos_y, player.frame_time, self.world)
        player.process_movement(self.world)
        z_buffer = render_walls(self.frame, player, self.world, self.textures)
        render_sprites(self.frame, player, self.world, self.textures,
                       self.animator, z_buffer)
        if player.keys.fps:
            self.fps = self.fps_counter.tick(player.frame_time)
        if player.keys.minimap:
            draw_minimap(self.frame, player, self.world)
        return self.frame

    def handle_key_down(self, keycode: int) -> KeyResult:
        """React to a key press; escape stops the game, E works the nearest door."""
        result = self.player.press(keycode)
        if result is KeyResult.USE:
            self.doors.toggle(self.player.pos_x, self.player.pos_y, self.world)
        elif result is KeyResult.QUIT:
            self.running = False
        return result

    def handle_key_up(self, keycode: int) -> bool:
        """React to a key release; True when a held key was let go."""
        return self.player.release(keycode)

    def handle_mouse(self, x: int, y: int) -> bool:
        """Turn and tilt by the pointer's offset from the window centre.

        Returns True when the pointer should be moved back to the centre.
        """
        player = self.player
        if not player.keys.mouse_lock:
            return False
        delta_x = x - self.center_x
        if delta_x:
            player.rotate(delta_x * MOUSE_SENSITIVITY)
        delta_y = y - self.center_y
        if delta_y:
            player.adjust_pitch(delta_y)
        return bool(delta_x or delta_y)

    def run(self) -> None:
        """Open the window and play until the window is closed or escape is pressed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
            pygame.display.set_caption(WINDOW_TITLE)
            pygame.mouse.set_visible(False)
            font = pygame.font.Font(None, 24)
            self.running = True
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        print("Cleaning and exiting...")
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        result = self.handle_key_down(_pygame_keycode(event.key))
                        if result is KeyResult.QUIT:
                            print("ESC pressed, exiting...")
                    elif event.type == pygame.KEYUP:
                        self.handle_key_up(_pygame_keycode(event.key))
                    elif event.type == pygame.MOUSEMOTION:
                        if self.handle_mouse(*event.pos):
                            pygame.mouse.set_pos((self.center_x, self.center_y))
                if not self.running:
                    break
                frame = self.step(time.time())
                pygame.surfarray.blit_array(screen, _frame_to_rgb(frame.pixels))
                if self.player.keys.fps:
                    text = font.render(str(self.fps), True, _FPS_TEXT_COLOR)
                    screen.blit(text, (10, SCREEN_HEIGHT - 8 - text.get_height()))
                pygame.display.flip()
        finally:
            pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Start the game on the scene named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "raycub"
        print(f"Usage: {prog} map.cub")
        return 1
    try:
        scene = load_scene(args[0])
    except SceneError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    try:
        textures = load_textures(WorldMap.from_scene(scene))
    except (OSError, SceneError):
        print("Error: Initialization failed")
        return 1
    game = Game.from_scene(scene, textures, time.time())
    game.run()
    return 0