"""Checks that a parsed scene's map is closed, playable and fully configured."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import fields
from os import PathLike

from .scene import Config, Scene

_PLAYER_CHARS = frozenset("NSEW")
_ALLOWED_CHARS = frozenset("10NSEW ")
_WALL_OR_SPACE = frozenset("1 ")
_TEXTURES = (
    ("texture_north", "North"),
    ("texture_south", "South"),
    ("texture_west", "West"),
    ("texture_east", "East"),
)


class MapError(ValueError):
    """Raised when a scene's map or configuration is not valid."""


def find_player(scene: Scene) -> None:
    """Locate the single start position, record it and turn its tile to floor."""
    found = [
        (x, y, char)
        for y, row in enumerate(scene.map)
        for x, char in enumerate(row)
        if char in _PLAYER_CHARS
    ]
    if not found:
        raise MapError("No player found in map (N, S, E, or W required)")
    if len(found) > 1:
        raise MapError(
            f"Multiple players found ({len(found)} players). Only one allowed"
        )
    x, y, direction = found[0]
    scene.player.pos_x = x
    scene.player.pos_y = y
    scene.player.direction = direction
    row = scene.map[y]
    scene.map[y] = row[:x] + "0" + row[x + 1:]


def check_content(scene: Scene) -> None:
    """Raise MapError at the first character that has no meaning in a map."""
    for y, row in enumerate(scene.map):
        for x, char in enumerate(row):
            if char not in _ALLOWED_CHARS:
                raise MapError(
                    f"Invalid character '{char}' at line {y + 1}, column {x + 1}"
                )


def _is_wall_line(row: str) -> bool:
    return len(row) >= 3 and all(char in _WALL_OR_SPACE for char in row)


def _sides_closed(row: str) -> bool:
    content = row.strip(" ")
    return not content or (content[0] == "1" and content[-1] == "1")


def check_walls(scene: Scene) -> None:
    """Require wall-only first and last rows and walls at both ends of the others."""
    if not _is_wall_line(scene.map[0]):
        raise MapError("First line of map must contain only walls (1) and spaces")
    if not _is_wall_line(scene.map[-1]):
        raise MapError("Last line of map must contain only walls (1) and spaces")
    for index in range(1, scene.map_height - 1):
        if not _sides_closed(scene.map[index]):
            raise MapError(
                f"Map not closed: line {index + 1} borders must be walls (1)"
            )


def _cell(scene: Scene, x: int, y: int) -> str | None:
    if y < 0 or y >= scene.map_height:
        return None
    row = scene.map[y]
    if x < 0 or x >= len(row):
        return None
    return row[x]


def _neighbours(x: int, y: int) -> tuple[tuple[int, int], ...]:
    return ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1))


def check_spaces(scene: Scene) -> None:
    """Require every space to touch only walls, spaces or the map's edge."""
    for y, row in enumerate(scene.map):
        for x, char in enumerate(row):
            if char != " ":
                continue
            for nx, ny in _neighbours(x, y):
                neighbour = _cell(scene, nx, ny)
                if neighbour is not None and neighbour not in _WALL_OR_SPACE:
                    raise MapError(
                        f"Invalid space at line {y + 1}, column {x + 1}: spaces "
                        "must be surrounded by walls or other spaces"
                    )


def check_player_not_trapped(scene: Scene) -> None:
    """Require at least one floor tile next to the player's start."""
    x = int(scene.player.pos_x)
    y = int(scene.player.pos_y)
    if not any(_cell(scene, nx, ny) == "0" for nx, ny in _neighbours(x, y)):
        raise MapError(
            "Player is trapped: no accessible spaces around player position"
        )


def check_path(scene: Scene) -> None:
    """Flood the player's area and fail if it reaches the map's outer border."""
    grid = [list(row) for row in scene.map]
    height = len(grid)
    max_width = max((len(row) for row in grid), default=0)
    pending = [(int(scene.player.pos_x), int(scene.player.pos_y))]
    while pending:
        x, y = pending.pop()
        if y < 0 or y >= height or x < 0 or x >= len(grid[y]):
            continue
        if grid[y][x] in ("1", "V", " "):
            continue
        if y in (0, height - 1) or x in (0, max_width - 1):
            raise MapError("Player area reaches the edge of the map")
        grid[y][x] = "V"
        pending.extend(reversed(_neighbours(x, y)))


def _file_exists(path: str | PathLike[str] | None) -> bool:
    if not path:
        return False
    try:
        with open(path, "rb"):
            return True
    except OSError:
        return False


def check_files(config: Config) -> None:
    """Require each wall texture path to name a readable file."""
    for attr, label in _TEXTURES:
        path = getattr(config, attr)
        if not _file_exists(path):
            raise MapError(f"{label} texture file not found: {path}")


def _checked(message: str, check: Callable[[Scene], None], scene: Scene) -> None:
    try:
        check(scene)
    except MapError as exc:
        raise MapError(f"{message}: {exc}") from exc


def check_map(scene: Scene) -> None:
    """Run every check in order, raising MapError at the first that fails."""
    if not scene.map:
        raise MapError("Empty map")
    config = scene.config
    if config.floor_color == -1:
        raise MapError("Missing floor color (F)")
    if config.ceiling_color == -1:
        raise MapError("Missing ceiling color (C)")
    if any(getattr(config, attr) is None for attr, _ in _TEXTURES):
        raise MapError("Missing texture(s)")
    _checked("Invalid characters in map", check_content, scene)
    find_player(scene)
    _checked("Map is not closed by walls", check_walls, scene)
    _checked("Invalid space configuration", check_spaces, scene)
    check_player_not_trapped(scene)
    _checked("Player area is not properly enclosed", check_path, scene)
    try:
        check_files(config)
    except MapError as exc:
        raise MapError(f"Texture files not found: {exc}") from exc


__all_fields = [f.name for f in fields(Config)]