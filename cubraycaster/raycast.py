"""Grid ray casting and the column-by-column drawing of the 3D view."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

from .framebuffer import Image, darken_color, draw_line
from .scene import Scene

SKY_COLOR = 0x9EEDFC
WALL_COLOR = 0x3B2B65
FLOOR_COLOR = 0xCFCFCF

_FAR = 1e30
_MIN_SHADE = 0.3
_FADE_TILES = 20
_ROUND_UP = 0.999


class WallSide(IntEnum):
    """The face of a wall tile that a ray struck."""

    NORTH = 0
    SOUTH = 1
    WEST = 2
    EAST = 3


@dataclass(frozen=True)
class RayHit:
    """Where a ray stopped: perpendicular distance, wall face and tile."""

    distance: float
    side: WallSide
    map_x: int
    map_y: int


def _is_solid(scene: Scene, x: int, y: int) -> bool:
    if x < 0 or x >= scene.map_width or y < 0 or y >= scene.map_height:
        return True
    row = scene.map[y]
    return x < len(row) and row[x] == "1"


def _divide(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return math.inf
    return numerator / denominator


def cast_ray(
    scene: Scene, ray_dir_x: float, ray_dir_y: float, tile_size: int
) -> RayHit:
    """Step through the grid from the player until a wall or the map's edge."""
    player = scene.player
    start_x = player.pos_x / tile_size
    start_y = player.pos_y / tile_size
    map_x = int(start_x)
    map_y = int(start_y)

    delta_x = abs(1 / ray_dir_x) if ray_dir_x != 0 else _FAR
    delta_y = abs(1 / ray_dir_y) if ray_dir_y != 0 else _FAR

    if ray_dir_x < 0:
        step_x = -1
        side_dist_x = (start_x - map_x) * delta_x
    else:
        step_x = 1
        side_dist_x = (map_x + 1.0 - start_x) * delta_x
    if ray_dir_y < 0:
        step_y = -1
        side_dist_y = (start_y - map_y) * delta_y
    else:
        step_y = 1
        side_dist_y = (map_y + 1.0 - start_y) * delta_y

    vertical = True
    while True:
        if side_dist_x < side_dist_y:
            side_dist_x += delta_x
            map_x += step_x
            vertical = True
        else:
            side_dist_y += delta_y
            map_y += step_y
            vertical = False
        if _is_solid(scene, map_x, map_y):
            break

    if vertical:
        side = WallSide.WEST if step_x > 0 else WallSide.EAST
        perp = _divide(map_x - start_x + (1 - step_x) // 2, ray_dir_x)
    else:
        side = WallSide.NORTH if step_y > 0 else WallSide.SOUTH
        perp = _divide(map_y - start_y + (1 - step_y) // 2, ray_dir_y)
    return RayHit(perp * tile_size, side, map_x, map_y)


def draw_wall_column(
    image: Image, x: int, distance: float, tile_size: int
) -> tuple[int, int]:
    """Paint sky, wall and floor in column ``x``; return the wall's row span."""
    height = image.height
    if distance > 0:
        line_height = height / distance * tile_size
        exact_start = (height - line_height) / 2.0
        exact_end = exact_start + line_height
        draw_start = max(int(exact_start), 0)
        draw_end = min(int(exact_end + _ROUND_UP), height)
    else:
        draw_start, draw_end = 0, height

    ratio = 1.0 - distance / (tile_size * _FADE_TILES)
    if not ratio >= _MIN_SHADE:
        ratio = _MIN_SHADE
    wall_color = darken_color(WALL_COLOR, ratio)

    draw_line(image, x, 0, x, draw_start, SKY_COLOR)
    draw_line(image, x, draw_start, x, draw_end, wall_color)
    draw_line(image, x, draw_end, x, height, FLOOR_COLOR)
    return draw_start, draw_end


def render(scene: Scene, image: Image, tile_size: int) -> list[RayHit]:
    """Draw the player's view into ``image``; return the hit of every column."""
    player = scene.player
    hits: list[RayHit] = []
    for x in range(image.width):
        camera_x = 2 * x / image.width - 1
        ray_dir_x = player.dir_x + player.plane_x * camera_x
        ray_dir_y = player.dir_y + player.plane_y * camera_x
        hit = cast_ray(scene, ray_dir_x, ray_dir_y, tile_size)
        draw_wall_column(image, x, hit.distance, tile_size)
        hits.append(hit)
    return hits