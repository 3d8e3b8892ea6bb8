"""Reading and checking a ``.cub`` scene file."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass

from raycub.header import (
    Header,
    SceneError,
    check_if_valid,
    has_cub_extension,
    is_blank,
    skip_ws,
)
from raycub.mapcheck import locate_player

_PRESENCE_ORDER = (("NO", "north"), ("SO", "south"), ("EA", "east"), ("WE", "west"))
_FILE_ORDER = (("NO", "north"), ("SO", "south"), ("WE", "west"), ("EA", "east"))


@dataclass
class Scene:
    """A validated scene: header entries, map rows and the player start."""

    header: Header
    rows: list[str]
    player_row: int
    player_col: int
    player_dir: str


def read_scene_lines(lines: Iterable[str]) -> tuple[Header, list[str]]:
    """Split scene lines into the header and the map rows.

    Header lines and blank lines may come in any order before the map.
    Once the map has started, a blank line may only be followed by
    further blank lines.
    """
    header = Header()
    rows: list[str] = []
    in_map = False
    gap = False
    for raw in lines:
        line = raw.rstrip("\r\n")
        if not in_map:
            if is_blank(line):
                continue
            if header.apply_line(line):
                continue
            if not header.is_complete():
                raise SceneError("invalid or duplicate header line")
            if not check_if_valid(line):
                raise SceneError("invalid character in map")
            in_map = True
            rows.append(line)
            continue
        if is_blank(line):
            gap = True
            continue
        if gap:
            raise SceneError("empty line in middle of map")
        if not check_if_valid(line):
            raise SceneError("invalid character in map line")
        rows.append(line)
    if not header.is_complete():
        raise SceneError("incomplete header (need NO, SO, WE, EA, F, C)")
    if not rows:
        raise SceneError("no map found")
    return header, rows


def parse_scene(path: str | os.PathLike[str]) -> tuple[Header, list[str]]:
    """Read the scene file at ``path`` into its header and map rows."""
    with open(path, encoding="utf-8", errors="replace", newline="\n") as fh:
        return read_scene_lines(fh)


def has_xpm_extension(path: str | None) -> bool:
    """True when ``path`` names a ``.xpm`` file with a non-empty stem."""
    if not path or len(path) < 5:
        return False
    return path.endswith(".xpm")


def _check_texture_file(raw: str, name: str) -> None:
    path = skip_ws(raw)
    if not has_xpm_extension(path):
        raise SceneError(f"{name} texture must be .xpm file")
    try:
        with open(path, "rb"):
            pass
    except OSError as exc:
        raise OSError(exc.errno, f"{name} texture: {exc.strerror}", path) from exc


def validate_textures(header: Header) -> None:
    """Check that every texture is a readable ``.xpm`` file and both colours are set.

    Raises SceneError for missing entries or wrong extensions, and
    OSError when a texture file cannot be opened.
    """
    for key, attr in _PRESENCE_ORDER:
        if getattr(header, attr) is None:
            raise SceneError(f"missing {key} texture")
    for key, attr in _FILE_ORDER:
        _check_texture_file(getattr(header, attr), key)
    if header.floor is None:
        raise SceneError("missing floor color")
    if header.ceiling is None:
        raise SceneError("missing ceiling color")


def load_scene(path: str | os.PathLike[str]) -> Scene:
    """Read and fully validate the scene at ``path``.

    Raises SceneError for a malformed scene and OSError when the scene
    or one of its textures cannot be opened.
    """
    name = os.fspath(path)
    if not has_cub_extension(name):
        raise SceneError("file must have .cub extension")
    header, rows = parse_scene(name)
    if not rows:
        raise SceneError("map is empty")
    validate_textures(header)
    row, col, direction = locate_player(rows)
    return Scene(header=header, rows=rows, player_row=row,
                 player_col=col, player_dir=direction)