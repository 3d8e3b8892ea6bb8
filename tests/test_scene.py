import pytest

from raycub.header import Header, SceneError
from raycub.scene import (
    Scene,
    has_xpm_extension,
    load_scene,
    parse_scene,
    read_scene_lines,
    validate_textures,
)

MAP = ["111111", "100001", "10N0D1", "111111"]


@pytest.fixture
def texture(tmp_path):
    path = tmp_path / "wall.xpm"
    path.write_text("/* XPM */\n")
    return str(path)


def header_lines(tex):
    return [
        f"NO {tex}\n",
        f"SO {tex}\n",
        f"WE {tex}\n",
        f"EA {tex}\n",
        "\n",
        "F 220,100,0\n",
        "C 225,30,0\n",
        "\n",
    ]


def write_scene(tmp_path, tex, rows, name="level.cub"):
    path = tmp_path / name
    path.write_text("".join(header_lines(tex)) + "".join(r + "\n" for r in rows))
    return str(path)


def test_read_scene_lines_splits_header_and_map(texture):
    header, rows = read_scene_lines(header_lines(texture) + [r + "\n" for r in MAP])
    assert header.north == texture
    assert header.floor == (220, 100, 0)
    assert header.ceiling == (225, 30, 0)
    assert rows == MAP


def test_crlf_line_endings_are_stripped(texture):
    lines = [line.replace("\n", "\r\n") for line in header_lines(texture)]
    header, rows = read_scene_lines(lines + [r + "\r\n" for r in MAP])
    assert rows == MAP
    assert header.west == texture


def test_trailing_blank_lines_are_allowed(texture):
    _, rows = read_scene_lines(header_lines(texture) + [r + "\n" for r in MAP] + ["\n", "  \n"])
    assert rows == MAP


def test_blank_line_inside_map_is_rejected(texture):
    lines = header_lines(texture) + ["111\n", "\n", "111\n"]
    with pytest.raises(SceneError, match="empty line in middle of map"):
        read_scene_lines(lines)


def test_invalid_first_map_line(texture):
    with pytest.raises(SceneError, match="invalid character in map"):
        read_scene_lines(header_lines(texture) + ["11X1\n"])


def test_invalid_later_map_line(texture):
    with pytest.raises(SceneError, match="invalid character in map line"):
        read_scene_lines(header_lines(texture) + ["1111\n", "1Z01\n"])


def test_map_before_complete_header(texture):
    lines = [f"NO {texture}\n", "1111\n"]
    with pytest.raises(SceneError, match="invalid or duplicate header line"):
        read_scene_lines(lines)


def test_duplicate_header_after_complete_header(texture):
    lines = header_lines(texture) + [f"NO {texture}\n", "1111\n"]
    with pytest.raises(SceneError, match="duplicate NO texture"):
        read_scene_lines(lines)


def test_incomplete_header(texture):
    with pytest.raises(SceneError, match="incomplete header"):
        read_scene_lines([f"NO {texture}\n", f"SO {texture}\n"])


def test_no_map(texture):
    with pytest.raises(SceneError, match="no map found"):
        read_scene_lines(header_lines(texture))


def test_parse_scene_reads_file(tmp_path, texture):
    path = write_scene(tmp_path, texture, MAP)
    header, rows = parse_scene(path)
    assert rows == MAP
    assert header.is_complete()


@pytest.mark.parametrize(
    ("path", "expected"),
    [("wall.xpm", True), ("a.xpm", True), (".xpm", False), ("wall.png", False), ("", False), (None, False)],
)
def test_has_xpm_extension(path, expected):
    assert has_xpm_extension(path) is expected


def test_validate_textures_rejects_other_extension(tmp_path, texture):
    png = tmp_path / "wall.png"
    png.write_text("x")
    header = Header(north=str(png), south=texture, east=texture, west=texture,
                    floor=(1, 2, 3), ceiling=(4, 5, 6))
    with pytest.raises(SceneError, match="NO texture must be .xpm file"):
        validate_textures(header)


def test_validate_textures_missing_file(tmp_path, texture):
    header = Header(north=texture, south=str(tmp_path / "absent.xpm"), east=texture,
                    west=texture, floor=(1, 2, 3), ceiling=(4, 5, 6))
    with pytest.raises(OSError):
        validate_textures(header)


def test_validate_textures_missing_entry(texture):
    header = Header(north=texture, south=texture, west=texture,
                    floor=(1, 2, 3), ceiling=(4, 5, 6))
    with pytest.raises(SceneError, match="missing EA texture"):
        validate_textures(header)


def test_validate_textures_missing_floor(texture):
    header = Header(north=texture, south=texture, east=texture, west=texture,
                    ceiling=(4, 5, 6))
    with pytest.raises(SceneError, match="missing floor color"):
        validate_textures(header)


def test_load_scene_success(tmp_path, texture):
    scene = load_scene(write_scene(tmp_path, texture, MAP))
    assert isinstance(scene, Scene)
    assert scene.rows == MAP
    assert scene.player_dir == "N"
    assert scene.rows[scene.player_row][scene.player_col] == scene.player_dir


def test_load_scene_wrong_extension(tmp_path, texture):
    path = write_scene(tmp_path, texture, MAP, name="level.txt")
    with pytest.raises(SceneError, match=".cub extension"):
        load_scene(path)


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_scene(str(tmp_path / "absent.cub"))


def test_load_scene_open_map(tmp_path, texture):
    path = write_scene(tmp_path, texture, ["1111", "10N0", "1111"])
    with pytest.raises(SceneError, match="fails map check"):
        load_scene(path)


def test_load_scene_two_players(tmp_path, texture):
    path = write_scene(tmp_path, texture, ["11111", "1NS01", "11111"])
    with pytest.raises(SceneError, match="multiple player"):
        load_scene(path)