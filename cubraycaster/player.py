"""The player: position, facing, camera plane and movement through the map."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

MOVE_UP = ord("w")
MOVE_DOWN = ord("s")
MOVE_LEFT = ord("a")
MOVE_RIGHT = ord("d")
ARROW_LEFT = 0xFF51
ARROW_UP = 0xFF52
ARROW_RIGHT = 0xFF53
ARROW_DOWN = 0xFF54

_FACINGS: dict[str, tuple[float, float]] = {
    "N": (0.0, -1.0),
    "S": (0.0, 1.0),
    "E": (1.0, 0.0),
    "W": (-1.0, 0.0),
}
_PLANE_SCALE = 0.66
_TURN_STEP = 0.05
_TURN_KEYS = {MOVE_RIGHT: 1, ARROW_RIGHT: 1, MOVE_LEFT: -1, ARROW_LEFT: -1}
_WALK_KEYS = {MOVE_UP: 1, ARROW_UP: 1, MOVE_DOWN: -1, ARROW_DOWN: -1}


class _WallMap(Protocol):
    def has_wall_at(self, x: int, y: int) -> bool: ...


@dataclass
class Player:
    """Where the player stands, where it looks, and how fast it moves.

    Before :meth:`place` the position holds map tile indices; afterwards it
    holds world coordinates at the centre of that tile.
    """

    pos_x: float = 0.0
    pos_y: float = 0.0
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0
    turn_direction: int = 0
    walk_direction: int = 0
    move_speed: float = 4.0
    rotation_speed: float = 0.1
    direction: str = ""

    def place(self, tile_size: int) -> None:
        """Move to the centre of the current tile and face the start direction."""
        self.pos_x = self.pos_x * tile_size + tile_size // 2
        self.pos_y = self.pos_y * tile_size + tile_size // 2
        if self.direction in _FACINGS:
            self.dir_x, self.dir_y = _FACINGS[self.direction]
        self.plane_x = -self.dir_y * _PLANE_SCALE
        self.plane_y = self.dir_x * _PLANE_SCALE
        self.turn_direction = 0
        self.walk_direction = 0
        self.move_speed = 4.0
        self.rotation_speed = 0.1

    def rotate(self, angle: float) -> None:
        """Turn the view direction and the camera plane by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )

    def update(self, key: int, scene: _WallMap, tile_size: int) -> None:
        """Apply one key press: turn, or step forward or back unless a wall is there."""
        self.turn_direction = _TURN_KEYS.get(key, 0)
        self.walk_direction = _WALK_KEYS.get(key, 0)

        if self.turn_direction:
            self.rotate(self.turn_direction * _TURN_STEP)

        if self.walk_direction:
            step = self.walk_direction * self.move_speed
            new_x = self.pos_x + self.dir_x * step
            new_y = self.pos_y + self.dir_y * step
            if not scene.has_wall_at(int(new_x / tile_size), int(new_y / tile_size)):
                self.pos_x = new_x
                self.pos_y = new_y

    def view_point(self, size: float) -> tuple[float, float]:
        """Return the point ``size`` units ahead of the player along its direction."""
        return (self.dir_x * size + self.pos_x, self.dir_y * size + self.pos_y)