# raycub

raycub is a first-person maze explorer. It uses raycasting to draw textured walls,
doors that open and close, and billboard sprites, some of them animated. Each
level is described by a `.cub` scene file. The game runs in a 1920×1080 pygame
window.

## Installation

```
pip install .
```

## Running

```
raycub path/to/level.cub
```

The command takes exactly one argument. With any other number of arguments it
prints a usage line and exits with status 1.

The scene file name must end in `.cub`. All four wall textures must be readable
files whose names end in `.xpm`. pygame loads them, and their pixels are sampled
on a 64×64 grid that is scaled to the real image size. The door and sprite
images are loaded from `./textures/`, relative to the working directory:
`door.xpm`, `sprite.xpm` and `animated_sprite_frame_1.xpm` to
`animated_sprite_frame_3.xpm`. The animation plays frames 1, 2, 3, 2 and moves on
one frame every second.

Exit status:

- 1 when the scene is malformed. An `Error: ...` message goes to stderr.
- 2 when the scene file or a wall texture cannot be opened. An `Error: ...` message goes to stderr.
- 1 when an image cannot be loaded at start-up. `Error: Initialization failed` is printed.
- 0 after a normal quit.

## Scene file format

The header comes first. It has six entries, in any order, and blank lines may
come between them:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

Each key is followed by a space. Leading whitespace is ignored, and so is
whitespace around the value. `F` and `C` give the floor and ceiling colours as
three integers from 0 to 255, separated by commas. No entry may appear twice.

The map comes after the header. Once the map has started, a blank line may be
followed only by more blank lines. The map may contain these characters:

| Char | Meaning                                  |
|------|------------------------------------------|
| `1`  | wall                                     |
| `0`  | floor                                    |
| `N` `S` `E` `W` | player start and facing direction |
| `D`  | door                                     |
| `P`  | static sprite                            |
| `A`  | animated sprite                          |
| ` `  | void (outside the map)                   |

The map needs exactly one player start. Everything the player can reach from it
must be enclosed by walls. A space or the edge of the map in the reachable area
makes the map invalid. Short rows are padded with walls.

## Controls

| Key          | Action                                        |
|--------------|-----------------------------------------------|
| W / S        | move forward / backward                       |
| A / D        | strafe left / right                           |
| ← / →        | turn                                          |
| mouse        | turn and look up/down (while mouse is locked) |
| E            | open or close the nearest door within 2 cells |
| M            | toggle minimap                                |
| F            | toggle FPS counter                            |
| Q            | toggle mouse lock                             |
| Esc          | quit                                          |

An open door closes by itself after three seconds, unless the player is standing
in the doorway. The player can walk over floor and sprite cells, but not through
walls or closed doors.

## Library use

The parsing and simulation modules work without opening a window:

```python
import time

from raycub.scene import load_scene
from raycub.world import WorldMap
from raycub.app import Game, load_textures

scene = load_scene("level.cub")        # raycub.header.SceneError if malformed
world = WorldMap.from_scene(scene)
textures = load_textures(world)        # OSError if an image cannot be read
game = Game.from_scene(scene, textures, time.time())
frame = game.step(time.time())         # frame.pixels: (1080, 1920) array of 0xRRGGBB
```

The modules are:

- `raycub.header`: the header lines and RGB values (`Header`, `parse_rgb`, `SceneError`).
- `raycub.mapcheck`: finding the player and checking that the map is enclosed (`locate_player`, `is_enclosed`).
- `raycub.scene`: reading and validating a whole file (`read_scene_lines`, `parse_scene`, `load_scene`).
- `raycub.world`: the tile grid (`WorldMap`, `Tile`).
- `raycub.player`: movement, keys and timing (`Player`, `Keys`, `KeyResult`).
- `raycub.doors`: the door state (`DoorManager`).
- `raycub.frame`: the frame buffer, textures, minimap and FPS counter (`Frame`, `Texture`, `draw_minimap`, `FpsCounter`).
- `raycub.raycast`: wall rendering (`cast_ray`, `render_walls`).
- `raycub.sprites`: sprite rendering (`render_sprites`).

## Limitations

The window size is fixed at 1920×1080. The game has no sound, no saving and no
level selection. Each run plays the single scene named on the command line.

## Tests

```
pip install .[test]
pytest
```