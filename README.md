# cubraycaster

A small first-person raycaster. It reads a `.cub` scene file, checks that
the map is closed and playable, and opens a window where you walk through
the maze.

## Installing

```
pip install .
```

This pulls in `pygame`, which draws the window.

## Running

```
cubraycaster maps/map.cub
```

The argument must be one file whose name ends in `.cub`; otherwise a usage
line is printed and the command exits with status 1. If the file cannot be
parsed, the map fails validation, or one of the four wall textures cannot
be read as an XPM file, the error is printed as `Error: ...` and the
command exits with status 1. Otherwise it prints `Map is valid!` and opens
a 640x480 window titled `Cub3D`.

Controls:

- `W` / Up arrow: walk forward
- `S` / Down arrow: walk backward
- `A` / Left arrow: turn left
- `D` / Right arrow: turn right
- `Esc` or closing the window: quit

A step forward or back is refused when it would land in a wall tile.

## Scene files

A scene file holds texture lines, colour lines and then the map:

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0

111111
100101
1010N1
111111
```

- `NO`, `SO`, `WE`, `EA` name the wall texture files. Each may appear
  once, and each file must exist.
- `F` and `C` give the floor and ceiling colours as `R,G,B`, each from
  0 to 255.
- Every texture and both colours must come before the first map line.
- Empty lines are skipped; any other line that is not a texture, colour
  or map line is an error.
- The map uses `1` for walls, `0` for floor, spaces for void, and exactly
  one of `N`, `S`, `E`, `W` for the player's start and facing. It must be
  closed by walls, and the player must have room to move.

## What it does not do

The textures and the floor and ceiling colours are read and checked, but
the view does not use them: walls are drawn in one flat colour darkened
with distance, the sky in light blue and the floor in light grey. There
are no sprites, doors, minimap or mouse control.

## Using it as a library

```python
from cubraycaster.scene import parse_file
from cubraycaster.validate import check_map, MapError

scene = parse_file("maps/map.cub")
try:
    check_map(scene)
except MapError as err:
    print(err)
```

Other useful pieces:

- `cubraycaster.game.load_scene` parses and validates a file and places
  the player; `Game` holds a scene and its frame, with `handle_input`,
  `render_frame` and `run`.
- `cubraycaster.raycast.cast_ray` casts a single DDA ray through a scene
  and returns a `RayHit` holding the distance, the `WallSide` that was
  hit and the tile; `render` fills a whole frame.
- `cubraycaster.player.Player` holds position, direction and camera plane,
  with `place`, `rotate`, `update` and `view_point`.
- `cubraycaster.framebuffer.Image` is an in-memory pixel buffer
  (`put_pixel`, `get_pixel`, `pixels`), with `draw_line`, `blend_colors`
  and `darken_color` for simple drawing, and `Visual.color_value` to
  convert colours for visuals shallower than 24 bits.
- `cubraycaster.xpm.read_xpm_file` and `xpm_to_image` load XPM pictures
  into an `Image`, raising `XpmError` on bad data.
- `cubraycaster.colors.lookup_color` resolves X11 colour names such as
  `"lightsteelblue"` to `0xRRGGBB` values, ignoring case; `text_to_rgb`
  also reads `#rrggbb` specs.

## Tests

```
pip install .[test]
pytest
```