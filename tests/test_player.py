import math

import pytest

from cubraycaster.player import (
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    MOVE_DOWN,
    MOVE_LEFT,
    MOVE_RIGHT,
    MOVE_UP,
    Player,
)
from cubraycaster.scene import Scene

TILE = 64


def make_scene(rows):
    scene = Scene()
    for row in rows:
        scene.add_map_line(row + "\n")
    return scene


@pytest.fixture
def room():
    return make_scene(["11111", "10001", "10001", "11111"])


@pytest.mark.parametrize(
    "facing, expected",
    [("N", (0.0, -1.0)), ("S", (0.0, 1.0)), ("E", (1.0, 0.0)), ("W", (-1.0, 0.0))],
)
def test_place_sets_direction(facing, expected):
    player = Player(pos_x=2, pos_y=1, direction=facing)
    player.place(TILE)
    assert (player.dir_x, player.dir_y) == expected
    assert player.plane_x == pytest.approx(-expected[1] * 0.66)
    assert player.plane_y == pytest.approx(expected[0] * 0.66)


def test_place_centres_in_tile():
    player = Player(pos_x=2, pos_y=1, direction="E")
    player.place(TILE)
    assert player.pos_x // TILE == 2
    assert player.pos_y // TILE == 1
    assert player.pos_x % TILE == TILE // 2
    assert player.pos_y % TILE == TILE // 2


def test_place_resets_speeds():
    player = Player(direction="N", move_speed=9.0, rotation_speed=3.0, walk_direction=1)
    player.place(TILE)
    assert player.move_speed == 4.0
    assert player.rotation_speed == 0.1
    assert player.walk_direction == 0


def test_rotate_round_trip():
    player = Player(direction="N")
    player.place(TILE)
    before = (player.dir_x, player.dir_y, player.plane_x, player.plane_y)
    player.rotate(0.7)
    player.rotate(-0.7)
    after = (player.dir_x, player.dir_y, player.plane_x, player.plane_y)
    assert after == pytest.approx(before)


def test_rotate_keeps_lengths():
    player = Player(direction="W")
    player.place(TILE)
    player.rotate(1.234)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    assert math.hypot(player.plane_x, player.plane_y) == pytest.approx(0.66)


def test_rotate_quarter_turn_east_to_south():
    player = Player(direction="E")
    player.place(TILE)
    player.rotate(math.pi / 2)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(1.0)


def test_turn_keys_cancel(room):
    player = Player(pos_x=2, pos_y=1, direction="N")
    player.place(TILE)
    before = (player.dir_x, player.dir_y)
    position = (player.pos_x, player.pos_y)
    player.update(MOVE_RIGHT, room, TILE)
    assert player.turn_direction == 1
    assert (player.dir_x, player.dir_y) != pytest.approx(before)
    player.update(ARROW_LEFT, room, TILE)
    assert player.turn_direction == -1
    assert (player.dir_x, player.dir_y) == pytest.approx(before)
    assert (player.pos_x, player.pos_y) == position


def test_arrow_right_matches_move_right(room):
    first = Player(pos_x=2, pos_y=1, direction="S")
    second = Player(pos_x=2, pos_y=1, direction="S")
    first.place(TILE)
    second.place(TILE)
    first.update(MOVE_RIGHT, room, TILE)
    second.update(ARROW_RIGHT, room, TILE)
    assert (first.dir_x, first.dir_y) == (second.dir_x, second.dir_y)


def test_walk_forward_moves_by_speed(room):
    player = Player(pos_x=2, pos_y=2, direction="N")
    player.place(TILE)
    start = (player.pos_x, player.pos_y)
    player.update(MOVE_UP, room, TILE)
    assert player.walk_direction == 1
    assert math.hypot(player.pos_x - start[0], player.pos_y - start[1]) == pytest.approx(
        player.move_speed
    )
    assert player.pos_y < start[1]


def test_walk_back_then_forward_returns(room):
    player = Player(pos_x=2, pos_y=1, direction="E")
    player.place(TILE)
    start = (player.pos_x, player.pos_y)
    player.update(MOVE_DOWN, room, TILE)
    assert player.walk_direction == -1
    assert player.pos_x < start[0]
    player.update(ARROW_UP, room, TILE)
    assert (player.pos_x, player.pos_y) == pytest.approx(start)


def test_wall_blocks_movement(room):
    player = Player(pos_x=2, pos_y=1, direction="N")
    player.place(TILE)
    player.pos_y = TILE + 2
    start = (player.pos_x, player.pos_y)
    player.update(MOVE_UP, room, TILE)
    assert (player.pos_x, player.pos_y) == start


def test_other_key_does_nothing(room):
    player = Player(pos_x=2, pos_y=1, direction="N")
    player.place(TILE)
    before = (player.pos_x, player.pos_y, player.dir_x, player.dir_y)
    player.update(ord("q"), room, TILE)
    assert (player.pos_x, player.pos_y, player.dir_x, player.dir_y) == before
    assert player.turn_direction == 0
    assert player.walk_direction == 0


def test_view_point_along_direction():
    player = Player(pos_x=1, pos_y=1, direction="S")
    player.place(TILE)
    point = player.view_point(10)
    assert point[0] == player.pos_x
    assert point[1] - player.pos_y == pytest.approx(10)
    assert player.view_point(0) == (player.pos_x, player.pos_y)