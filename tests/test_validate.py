import pytest

from cubraycaster.scene import Config, Scene
from cubraycaster.validate import (
    MapError,
    check_content,
    check_files,
    check_map,
    check_path,
    check_player_not_trapped,
    check_spaces,
    check_walls,
    find_player,
)


def make_scene(rows, config=None):
    scene = Scene(config=config or Config())
    for row in rows:
        scene.add_map_line(row)
    return scene


@pytest.fixture
def textured_config(tmp_path):
    paths = {}
    for name in ("north", "south", "west", "east"):
        path = tmp_path / f"{name}.xpm"
        path.write_text("x")
        paths[name] = str(path)
    return Config(
        texture_north=paths["north"],
        texture_south=paths["south"],
        texture_west=paths["west"],
        texture_east=paths["east"],
        floor_color=0x112233,
        ceiling_color=0x445566,
    )


CLOSED = ["11111", "1N001", "11111"]


def test_find_player_records_position_and_clears_tile():
    scene = make_scene(CLOSED)
    find_player(scene)
    assert (scene.player.pos_x, scene.player.pos_y) == (1, 1)
    assert scene.player.direction == "N"
    assert scene.map[1] == "10001"


def test_find_player_without_player():
    scene = make_scene(["111", "101", "111"])
    with pytest.raises(MapError, match="No player"):
        find_player(scene)


def test_find_player_with_two_players():
    scene = make_scene(["1111", "1NS1", "1111"])
    with pytest.raises(MapError, match="2 players"):
        find_player(scene)


def test_check_content_reports_position():
    scene = make_scene(["111", "1X1", "111"])
    with pytest.raises(MapError, match="'X' at line 2, column 2"):
        check_content(scene)


def test_check_walls_rejects_open_first_line():
    scene = make_scene(["101", "1N1", "111"])
    with pytest.raises(MapError, match="First line"):
        check_walls(scene)


def test_check_walls_rejects_short_last_line():
    scene = make_scene(["111", "1N1", "11"])
    with pytest.raises(MapError, match="Last line"):
        check_walls(scene)


def test_check_walls_rejects_open_side():
    scene = make_scene(["1111", "  N0", "1111"])
    with pytest.raises(MapError, match="line 2"):
        check_walls(scene)


def test_check_spaces_rejects_space_next_to_floor():
    scene = make_scene(["11111", "10 01", "11111"])
    with pytest.raises(MapError, match="line 2, column 3"):
        check_spaces(scene)


def test_check_player_not_trapped():
    scene = make_scene(["111", "1N1", "111"])
    find_player(scene)
    with pytest.raises(MapError, match="trapped"):
        check_player_not_trapped(scene)


def test_check_path_detects_leak_to_border():
    scene = make_scene(["1111", "1N00", "1111"])
    find_player(scene)
    with pytest.raises(MapError, match="edge"):
        check_path(scene)


def test_check_path_leaves_map_unchanged():
    scene = make_scene(CLOSED)
    find_player(scene)
    before = list(scene.map)
    check_path(scene)
    assert scene.map == before


def test_check_files_missing_east(textured_config, tmp_path):
    missing = str(tmp_path / "nowhere.xpm")
    textured_config.texture_east = missing
    with pytest.raises(MapError, match="East texture file not found") as info:
        check_files(textured_config)
    assert missing in str(info.value)


def test_check_map_accepts_closed_map(textured_config):
    scene = make_scene(CLOSED, textured_config)
    check_map(scene)
    assert scene.player.direction == "N"
    assert scene.map == ["11111", "10001", "11111"]


def test_check_map_empty():
    with pytest.raises(MapError, match="Empty map"):
        check_map(Scene())


def test_check_map_missing_floor(textured_config):
    textured_config.floor_color = -1
    with pytest.raises(MapError, match=r"Missing floor color \(F\)"):
        check_map(make_scene(CLOSED, textured_config))


def test_check_map_missing_texture(textured_config):
    textured_config.texture_west = None
    with pytest.raises(MapError, match=r"Missing texture\(s\)"):
        check_map(make_scene(CLOSED, textured_config))


def test_check_map_content_checked_before_walls(textured_config):
    scene = make_scene(["10X11", "1N001", "11111"], textured_config)
    with pytest.raises(MapError, match="Invalid characters in map"):
        check_map(scene)


def test_check_map_open_walls(textured_config):
    scene = make_scene(["11111", "1N000", "11111"], textured_config)
    with pytest.raises(MapError, match="Map is not closed by walls"):
        check_map(scene)


def test_check_map_missing_texture_file(textured_config, tmp_path):
    textured_config.texture_north = str(tmp_path / "gone.xpm")
    with pytest.raises(MapError, match="Texture files not found"):
        check_map(make_scene(CLOSED, textured_config))