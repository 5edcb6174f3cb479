import pytest

from cubraycaster.framebuffer import Image
from cubraycaster.game import (
    TILE_SIZE,
    Game,
    Key,
    _rgb_bytes,
    load_scene,
    load_texture,
    main,
)
from cubraycaster.player import Player
from cubraycaster.raycast import FLOOR_COLOR, SKY_COLOR
from cubraycaster.scene import Scene
from cubraycaster.validate import MapError
from cubraycaster.xpm import XpmError

ROOM = ["11111", "10001", "10001", "10001", "11111"]

XPM_TEXT = """/* XPM */
static char *tex[] = {
"2 1 2 1",
"a c #FF0000",
"b c blue",
"ab"
};
"""


def make_game(direction="N", rows=ROOM):
    player = Player(pos_x=2, pos_y=2, direction=direction)
    player.place(TILE_SIZE)
    scene = Scene(map=list(rows), map_width=0, player=player)
    return Game(scene, width=20, height=20)


def write_scene(tmp_path, rows):
    paths = []
    for name in ("n", "s", "w", "e"):
        tex = tmp_path / f"{name}.xpm"
        tex.write_text(XPM_TEXT)
        paths.append(tex)
    body = (
        f"NO {paths[0]}\nSO {paths[1]}\nWE {paths[2]}\nEA {paths[3]}\n"
        "F 10,20,30\nC 40,50,60\n\n" + "\n".join(rows) + "\n"
    )
    path = tmp_path / "level.cub"
    path.write_text(body)
    return path


def test_game_sets_map_width_from_first_row():
    game = make_game(rows=["1111", "100001", "1N01", "1111"])
    assert game.scene.map_width == 4


def test_forward_key_moves_player():
    game = make_game()
    player = game.scene.player
    before = player.pos_y
    game.handle_input(Key.MOVE_UP)
    assert player.pos_y == pytest.approx(before - player.move_speed)
    game.handle_input(Key.ARROW_DOWN)
    assert player.pos_y == pytest.approx(before)


def test_walls_block_movement():
    game = make_game()
    for _ in range(100):
        game.handle_input(Key.MOVE_UP)
    assert game.scene.player.pos_y >= TILE_SIZE
    assert not game.scene.has_wall_at(
        int(game.scene.player.pos_x / TILE_SIZE),
        int(game.scene.player.pos_y / TILE_SIZE),
    )


def test_turning_right_then_left_restores_direction():
    game = make_game()
    player = game.scene.player
    game.handle_input(Key.MOVE_RIGHT)
    assert player.dir_x > 0
    game.handle_input(Key.ARROW_LEFT)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(-1.0)


def test_escape_stops_game_and_other_keys_do_nothing():
    game = make_game()
    before = (game.scene.player.pos_x, game.scene.player.pos_y)
    game.handle_input(ord("q"))
    assert game.running is True
    assert (game.scene.player.pos_x, game.scene.player.pos_y) == before
    game.handle_input(Key.ESCAPE)
    assert game.running is False


def test_render_frame_draws_sky_and_floor():
    game = make_game()
    image = game.render_frame()
    assert image.get_pixel(0, 0) == SKY_COLOR
    assert image.get_pixel(19, 19) == FLOOR_COLOR


def test_rgb_bytes_orders_channels():
    image = Image(2, 1)
    image.put_pixel(0, 0, 0x102030)
    image.put_pixel(1, 0, 0xA0B0C0)
    assert _rgb_bytes(image) == bytes([0x10, 0x20, 0x30, 0xA0, 0xB0, 0xC0])


def test_load_texture_reads_xpm(tmp_path):
    path = tmp_path / "t.xpm"
    path.write_text(XPM_TEXT)
    image = load_texture(path)
    assert (image.width, image.height) == (2, 1)
    assert image.get_pixel(0, 0) == 0xFF0000
    assert image.get_pixel(1, 0) == 0x0000FF


def test_load_texture_errors(tmp_path):
    with pytest.raises(ValueError):
        load_texture(None)
    with pytest.raises(XpmError):
        load_texture(tmp_path / "missing.xpm")


def test_load_scene_places_player(tmp_path):
    path = write_scene(tmp_path, ["111111", "100001", "10N001", "100001", "111111"])
    scene = load_scene(path)
    assert int(scene.player.pos_x // TILE_SIZE) == 2
    assert int(scene.player.pos_y // TILE_SIZE) == 2
    assert scene.player.dir_y == -1.0
    assert scene.map[2][2] == "0"


def test_load_scene_rejects_map_without_player(tmp_path):
    path = write_scene(tmp_path, ["11111", "10001", "11111"])
    with pytest.raises(MapError):
        load_scene(path)


def test_main_usage_errors(capsys):
    assert main([]) == 1
    assert main(["a.cub", "b.cub"]) == 1
    assert main(["level.txt"]) == 1
    out = capsys.readouterr().out
    assert "usage" in out
    assert ".cub extension" in out


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.cub")]) == 1
    assert "Error" in capsys.readouterr().out


def test_main_reports_invalid_map(tmp_path, capsys):
    path = write_scene(tmp_path, ["11111", "10001", "11111"])
    assert main([str(path)]) == 1
    assert "No player" in capsys.readouterr().out