import math

import pytest

from raycub.player import (
    INITIAL_FRAME_TIME,
    KEY_A,
    KEY_E,
    KEY_ESCAPE,
    KEY_F,
    KEY_M,
    KEY_Q,
    KEY_W,
    MAX_FRAME_TIME,
    PLANE_SCALE,
    SCREEN_HEIGHT,
    KeyResult,
    Player,
    direction_vector,
)
from raycub.world import WorldMap, char_to_tile

ROWS = [
    "11111",
    "10001",
    "10001",
    "10001",
    "11111",
]


def make_world(direction="N", start=(2.5, 2.5)):
    grid = [[char_to_tile(c) for c in row] for row in ROWS]
    return WorldMap(
        grid=grid,
        north_texture="n.xpm",
        south_texture="s.xpm",
        east_texture="e.xpm",
        west_texture="w.xpm",
        floor_color=0,
        ceiling_color=0,
        start_x=start[0],
        start_y=start[1],
        start_direction=direction,
    )


def make_player(direction="N", start=(2.5, 2.5), now=100.0):
    world = make_world(direction, start)
    return Player.from_world(world, now), world


@pytest.mark.parametrize(
    "letter, expected",
    [("N", (-1.0, 0.0)), ("S", (1.0, 0.0)), ("E", (0.0, 1.0)), ("W", (0.0, -1.0))],
)
def test_direction_vector(letter, expected):
    assert direction_vector(letter) == expected


def test_direction_vector_rejects_unknown():
    with pytest.raises(ValueError):
        direction_vector("X")


@pytest.mark.parametrize("letter", "NSEW")
def test_from_world_sets_view(letter):
    player, world = make_player(letter)
    assert (player.pos_x, player.pos_y) == (world.start_x, world.start_y)
    assert (player.dir_x, player.dir_y) == direction_vector(letter)
    assert player.plane_x == pytest.approx(-player.dir_y * PLANE_SCALE)
    assert player.plane_y == pytest.approx(player.dir_x * PLANE_SCALE)
    assert player.frame_time == INITIAL_FRAME_TIME
    assert player.move_speed == pytest.approx(player.base_move_speed * INITIAL_FRAME_TIME)
    assert player.pitch == 0
    assert player.keys.mouse_lock is True


def test_rotate_preserves_lengths_and_orthogonality():
    player, _ = make_player()
    player.rotate(0.7)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    assert math.hypot(player.plane_x, player.plane_y) == pytest.approx(PLANE_SCALE)
    dot = player.dir_x * player.plane_x + player.dir_y * player.plane_y
    assert dot == pytest.approx(0.0, abs=1e-12)


def test_rotate_round_trip():
    player, _ = make_player("E")
    player.rotate(1.1)
    player.rotate(-1.1)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(1.0)


def test_move_forward_in_open_space():
    player, world = make_player("N")
    before = player.pos_x
    player.move_forward(world)
    assert player.pos_x == pytest.approx(before + player.dir_x * player.move_speed)
    assert player.pos_y == 2.5


def test_move_backward_undoes_forward():
    player, world = make_player("S")
    player.move_forward(world)
    player.move_backward(world)
    assert player.pos_x == pytest.approx(2.5)
    assert player.pos_y == pytest.approx(2.5)


def test_strafes_are_opposite():
    player, world = make_player("N")
    player.strafe_right(world)
    right_y = player.pos_y
    assert right_y < 2.5
    player.strafe_left(world)
    player.strafe_left(world)
    assert player.pos_y > 2.5


def test_walls_block_movement():
    player, world = make_player("N", start=(1.1, 2.5))
    player.move_speed = 0.5
    player.move_forward(world)
    assert player.pos_x == 1.1


def test_process_movement_follows_held_keys():
    player, world = make_player("N")
    twin, _ = make_player("N")
    assert player.press(KEY_W) is KeyResult.MOVEMENT
    player.process_movement(world)
    twin.move_forward(world)
    assert (player.pos_x, player.pos_y) == (twin.pos_x, twin.pos_y)
    assert player.release(KEY_W) is True
    player.process_movement(world)
    assert (player.pos_x, player.pos_y) == (twin.pos_x, twin.pos_y)


def test_update_timing_measures_frame():
    player, _ = make_player(now=100.0)
    player.update_timing(100.05)
    assert player.frame_time == pytest.approx(0.05)
    assert player.last_time == 100.05
    assert player.rot_speed == pytest.approx(player.base_rot_speed * player.frame_time)


def test_update_timing_caps_long_frames():
    player, _ = make_player(now=100.0)
    player.update_timing(105.0)
    assert player.frame_time == MAX_FRAME_TIME
    assert player.move_speed == pytest.approx(player.base_move_speed * MAX_FRAME_TIME)


def test_adjust_pitch_clamps():
    player, _ = make_player()
    player.adjust_pitch(-10)
    assert player.pitch == 10
    player.adjust_pitch(-SCREEN_HEIGHT * 2)
    assert player.pitch == SCREEN_HEIGHT // 2
    player.adjust_pitch(SCREEN_HEIGHT * 2)
    assert player.pitch == -(SCREEN_HEIGHT // 2)


def test_setting_keys_toggle():
    player, _ = make_player()
    assert player.press(KEY_F) is KeyResult.SETTING
    assert player.keys.fps is True
    player.press(KEY_F)
    assert player.keys.fps is False
    player.press(KEY_M)
    assert player.keys.minimap is True
    player.press(KEY_Q)
    assert player.keys.mouse_lock is False


def test_use_quit_and_unknown_keys():
    player, _ = make_player()
    assert player.press(KEY_E) is KeyResult.USE
    assert player.keys.e is True
    assert player.press(KEY_ESCAPE) is KeyResult.QUIT
    assert player.press(1) is KeyResult.NONE
    assert player.release(1) is False
    assert player.release(KEY_F) is False


def test_press_and_release_strafe_key():
    player, _ = make_player()
    player.press(KEY_A)
    assert player.keys.a is True
    player.release(KEY_A)
    assert player.keys.a is False