"""Scene header parsing: texture paths, floor and ceiling colours, and line helpers."""

from __future__ import annotations

from dataclasses import dataclass

_INLINE_WS = " \t"
_BLANK_CHARS = " \t\n\r"
_MAP_CHARS = frozenset("01NSEW \n\tDPA")
_MAP_SPACING = frozenset(" \n\t")
_DIGITS = frozenset("0123456789")

_TEXTURE_KEYS = {
    "NO": "north",
    "SO": "south",
    "EA": "east",
    "WE": "west",
}
_COLOR_KEYS = {
    "F": ("floor", "floor"),
    "C": ("ceiling", "ceiling"),
}


class SceneError(ValueError):
    """Raised when a scene description is malformed."""


def skip_ws(s: str) -> str:
    """Return ``s`` without its leading spaces and tabs."""
    return s.lstrip(_INLINE_WS)


def is_blank(s: str) -> bool:
    """True when ``s`` holds only spaces, tabs and line endings."""
    return all(ch in _BLANK_CHARS for ch in s)


def check_if_valid(s: str) -> bool:
    """True when ``s`` is a map row: only map characters, at least one non-space."""
    if any(ch not in _MAP_CHARS for ch in s):
        return False
    return any(ch not in _MAP_SPACING for ch in s)


def has_cub_extension(path: str | None) -> bool:
    """True when ``path`` names a ``.cub`` file with a non-empty stem."""
    if not path or len(path) < 5:
        return False
    return path.endswith(".cub")


def is_number(s: str | None) -> bool:
    """True when ``s`` is an optionally signed run of decimal digits."""
    if not s:
        return False
    digits = s[1:] if s[0] in "+-" else s
    return bool(digits) and all(ch in _DIGITS for ch in digits)


def parse_rgb(text: str | None) -> tuple[int, int, int]:
    """Parse ``"R,G,B"`` with each component in 0..255.

    Empty pieces between commas are ignored, as are spaces and tabs
    around each component.
    """
    if not text:
        raise SceneError("invalid color format")
    pieces = [piece for piece in text.split(",") if piece]
    if len(pieces) != 3:
        raise SceneError("invalid color format")
    values = []
    for piece in pieces:
        trimmed = piece.strip(_INLINE_WS)
        if not is_number(trimmed):
            raise SceneError("invalid color format")
        value = int(trimmed)
        if not 0 <= value <= 255:
            raise SceneError("invalid color format")
        values.append(value)
    return values[0], values[1], values[2]


def _trim_path(raw: str) -> str:
    return raw.lstrip(_INLINE_WS).rstrip(" \t\n\r")


@dataclass
class Header:
    """The six header entries of a scene file."""

    north: str | None = None
    south: str | None = None
    east: str | None = None
    west: str | None = None
    floor: tuple[int, int, int] | None = None
    ceiling: tuple[int, int, int] | None = None

    def apply_line(self, line: str) -> bool:
        """Record a header line.

        Returns False when the line is not a header entry, True when it
        was recorded, and raises SceneError for duplicates or bad values.
        """
        p = skip_ws(line)
        for key, attr in _TEXTURE_KEYS.items():
            if p.startswith(key + " "):
                if getattr(self, attr) is not None:
                    raise SceneError(f"duplicate {key} texture")
                setattr(self, attr, _trim_path(p[len(key) + 1:]))
                return True
        for key, (attr, label) in _COLOR_KEYS.items():
            if p.startswith(key + " "):
                if getattr(self, attr) is not None:
                    raise SceneError(f"duplicate {label} color")
                value = skip_ws(p[len(key) + 1:])
                if not value:
                    raise SceneError(f"{label} color has no value")
                try:
                    rgb = parse_rgb(value)
                except SceneError:
                    raise SceneError(f"invalid {label} color format") from None
                setattr(self, attr, rgb)
                return True
        return False

    def count(self) -> int:
        """Number of header entries recorded so far."""
        entries = (self.north, self.south, self.east, self.west,
                   self.floor, self.ceiling)
        return sum(entry is not None for entry in entries)

    def is_complete(self) -> bool:
        """True when all six entries are present."""
        return self.count() == 6