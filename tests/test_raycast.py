import pytest

from cubraycaster.framebuffer import Image, darken_color
from cubraycaster.player import Player
from cubraycaster.raycast import (
    FLOOR_COLOR,
    SKY_COLOR,
    WALL_COLOR,
    RayHit,
    WallSide,
    cast_ray,
    draw_wall_column,
    render,
)
from cubraycaster.scene import Scene

TILE = 64
ROOM = ["11111", "10001", "10001", "10001", "11111"]


def make_scene(direction="N", rows=ROOM, x=2, y=2):
    player = Player(pos_x=x, pos_y=y, direction=direction)
    player.place(TILE)
    return Scene(map=list(rows), map_width=max(len(r) for r in rows), player=player)


def test_north_ray_hits_top_wall():
    hit = cast_ray(make_scene(), 0.0, -1.0, TILE)
    assert hit.side == WallSide.SOUTH
    assert (hit.map_x, hit.map_y) == (2, 0)
    assert hit.distance == pytest.approx(96.0)


def test_opposite_rays_are_symmetric_in_centred_room():
    scene = make_scene()
    north = cast_ray(scene, 0.0, -1.0, TILE)
    south = cast_ray(scene, 0.0, 1.0, TILE)
    east = cast_ray(scene, 1.0, 0.0, TILE)
    west = cast_ray(scene, -1.0, 0.0, TILE)
    assert north.distance == pytest.approx(south.distance)
    assert east.distance == pytest.approx(west.distance)
    assert north.distance == pytest.approx(east.distance)
    assert south.side == WallSide.NORTH
    assert east.side == WallSide.WEST
    assert west.side == WallSide.EAST


def test_ray_stops_at_map_edge_without_walls():
    scene = make_scene(rows=["000", "000", "000"], x=1, y=1)
    hit = cast_ray(scene, 1.0, 0.0, TILE)
    assert hit.map_x == scene.map_width
    assert isinstance(hit, RayHit)
    assert hit.distance > 0


def test_draw_wall_column_far_wall_layout():
    image = Image(3, 100)
    start, end = draw_wall_column(image, 1, TILE * 100, TILE)
    assert 0 < start < end < image.height
    assert image.get_pixel(1, 0) == SKY_COLOR
    assert image.get_pixel(1, start - 1) == SKY_COLOR
    assert image.get_pixel(1, start) == darken_color(WALL_COLOR, 0.3)
    assert image.get_pixel(1, end - 1) == darken_color(WALL_COLOR, 0.3)
    assert image.get_pixel(1, end) == FLOOR_COLOR
    assert image.get_pixel(1, image.height - 1) == FLOOR_COLOR
    assert image.get_pixel(0, 50) == 0
    assert image.get_pixel(2, 50) == 0


def test_draw_wall_column_close_wall_fills_column():
    image = Image(2, 40)
    start, end = draw_wall_column(image, 0, 1.0, TILE)
    assert (start, end) == (0, image.height)
    column = {image.get_pixel(0, y) for y in range(image.height)}
    assert len(column) == 1
    assert SKY_COLOR not in column and FLOOR_COLOR not in column


def test_render_fills_every_column():
    scene = make_scene()
    image = Image(20, 20)
    hits = render(scene, image, TILE)
    assert len(hits) == image.width
    rows = list(image.pixels())
    assert all(pixel == SKY_COLOR for pixel in rows[0])
    assert all(pixel == FLOOR_COLOR for pixel in rows[-1])
    assert hits[10].side == WallSide.SOUTH


def test_render_is_mirror_symmetric_in_centred_room():
    scene = make_scene()
    image = Image(20, 20)
    hits = render(scene, image, TILE)
    for x in range(1, 10):
        assert hits[x].distance == pytest.approx(hits[20 - x].distance)