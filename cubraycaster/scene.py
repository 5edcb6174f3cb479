"""Reading ``.cub`` scene descriptions: textures, colours and the map grid."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from os import PathLike

from .player import Player

_TRIM = " \t\n"
_MAP_TRIM = "\t\n"
_MAP_CHARS = frozenset("01NSEW")
_TEXTURE_PREFIXES = ("NO ", "SO ", "WE ", "EA ")
_TEXTURE_NAMES = {"NO": "North", "SO": "South", "WE": "West", "EA": "East"}
_TEXTURE_FIELDS = {
    "NO": "texture_north",
    "SO": "texture_south",
    "WE": "texture_west",
    "EA": "texture_east",
}
_LEADING_INT = re.compile(r"[\t\n\v\f\r ]*([+-]?)([0-9]*)")


class SceneError(ValueError):
    """Raised when a scene description cannot be read."""


@dataclass
class Config:
    """Wall texture paths and the floor and ceiling colours (-1 when unset)."""

    texture_north: str | None = None
    texture_south: str | None = None
    texture_west: str | None = None
    texture_east: str | None = None
    floor_color: int = -1
    ceiling_color: int = -1


def _textures_complete(config: Config) -> bool:
    return all(
        getattr(config, name) is not None for name in _TEXTURE_FIELDS.values()
    )


@dataclass
class Scene:
    """A parsed scene: its configuration, map rows and player."""

    config: Config = field(default_factory=Config)
    map: list[str] = field(default_factory=list)
    map_width: int = 0
    player: Player = field(default_factory=Player)

    @property
    def map_height(self) -> int:
        return len(self.map)

    def add_map_line(self, line: str) -> None:
        """Append a map row, without surrounding tabs and newlines."""
        row = line.strip(_MAP_TRIM)
        self.map.append(row)
        self.map_width = max(self.map_width, len(row))

    def validate_order(self) -> None:
        """Raise SceneError unless every texture and colour came before the map."""
        if not _textures_complete(self.config):
            raise SceneError("Missing textures before map")
        if self.config.floor_color == -1 or self.config.ceiling_color == -1:
            raise SceneError("Missing colors before map")

    def has_wall_at(self, x: int, y: int) -> bool:
        """Tell whether tile (x, y) is a wall; anything off the map counts as one."""
        if x < 0 or y < 0 or y >= self.map_height:
            return True
        row = self.map[y]
        if x >= len(row):
            return True
        return row[x] == "1"

    def clear(self) -> None:
        """Forget the texture paths and the map."""
        for name in _TEXTURE_FIELDS.values():
            setattr(self.config, name, None)
        self.map = []
        self.map_width = 0


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    sign, digits = match.groups()
    if not digits:
        return 0
    value = int(digits)
    return -value if sign == "-" else value


def is_color_line(line: str | None) -> bool:
    """Tell whether ``line`` declares the floor (F) or ceiling (C) colour."""
    if not line:
        return False
    return line.startswith("F ") or line.startswith("C ")


def _channel(text: str) -> int:
    value = _atoi(text.strip(_TRIM))
    if not 0 <= value <= 255:
        raise SceneError(f"Colour component out of range: {text.strip(_TRIM)!r}")
    return value


def parse_rgb(text: str) -> int:
    """Read ``R,G,B`` (each 0-255) into a 0xRRGGBB value."""
    parts = [part for part in text.split(",") if part]
    if len(parts) < 3:
        raise SceneError(f"Colour needs three components: {text!r}")
    red, green, blue = (_channel(part) for part in parts[:3])
    return red * 65536 + green * 256 + blue


def parse_color_line(line: str, config: Config) -> None:
    """Store the colour declared by an ``F`` or ``C`` line in ``config``."""
    _, space, rest = line.partition(" ")
    if not space:
        raise SceneError("Invalid colour line")
    try:
        color = parse_rgb(rest.strip(_TRIM))
    except SceneError as exc:
        raise SceneError(f"Invalid colour: {exc}") from exc
    if line.startswith("F"):
        config.floor_color = color
    elif line.startswith("C"):
        config.ceiling_color = color


def is_texture_line(line: str | None) -> bool:
    """Tell whether ``line`` declares a wall texture (NO, SO, WE or EA)."""
    if not line:
        return False
    return line.strip(_TRIM).startswith(_TEXTURE_PREFIXES)


def parse_texture_line(line: str, config: Config) -> None:
    """Store the texture path declared by ``line`` in ``config``."""
    trimmed = line.strip(_TRIM)
    _, space, rest = trimmed.partition(" ")
    if not space:
        raise SceneError("Invalid texture line")
    path = rest.strip(_TRIM)
    key = trimmed[:2]
    if key not in _TEXTURE_FIELDS:
        raise SceneError(f"Unknown texture direction: {trimmed!r}")
    attr = _TEXTURE_FIELDS[key]
    if getattr(config, attr) is not None:
        raise SceneError(f"Duplicate {_TEXTURE_NAMES[key]} texture")
    setattr(config, attr, path)


def is_map_line(line: str | None) -> bool:
    """Tell whether ``line`` holds any map character before its newline."""
    if not line:
        return False
    content = line.split("\n", 1)[0]
    return any(char in _MAP_CHARS for char in content)


def process_line(line: str, scene: Scene) -> None:
    """Read one non-empty line of a scene description into ``scene``."""
    if is_texture_line(line):
        parse_texture_line(line, scene.config)
    elif is_color_line(line):
        parse_color_line(line, scene.config)
    elif is_map_line(line):
        scene.validate_order()
        scene.add_map_line(line)
    else:
        raise SceneError(f"Ignored line: {line.rstrip(chr(10))!r}")


def parse_lines(lines: Iterable[str]) -> Scene:
    """Build a scene from the lines of a description, newlines kept or not."""
    scene = Scene()
    for line in lines:
        if line and not line.startswith("\n"):
            process_line(line, scene)
    return scene


def _split_lines(text: str) -> Iterator[str]:
    pieces = text.split("\n")
    for piece in pieces[:-1]:
        yield piece + "\n"
    if pieces[-1]:
        yield pieces[-1]


def parse_file(path: str | PathLike[str]) -> Scene:
    """Read a scene description file."""
    try:
        with open(path, encoding="latin-1", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise SceneError(f"Cannot open {path}: {exc}") from exc
    return parse_lines(_split_lines(text))


def check_file_extension(filename: str | None) -> bool:
    """Tell whether ``filename`` ends with ``.cub``."""
    if not filename or len(filename) < 4:
        return False
    return filename.endswith(".cub")