"""The playable game: loading a scene, handling keys and the window loop."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from enum import IntEnum
from os import PathLike

from .framebuffer import Image
from .player import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    MOVE_DOWN,
    MOVE_LEFT,
    MOVE_RIGHT,
    MOVE_UP,
)
from .raycast import WallSide, render
from .scene import SceneError, check_file_extension, parse_file
from .validate import MapError, check_map
from .xpm import XpmError, read_xpm_file

WINDOW_WIDTH = 640
WINDOW_HEIGHT = 480
TILE_SIZE = 64
TITLE = "Cub3D"
_FRAME_RATE = 60


class Key(IntEnum):
    """Key codes the game reacts to."""

    ESCAPE = 65307
    MOVE_UP = MOVE_UP
    MOVE_DOWN = MOVE_DOWN
    MOVE_LEFT = MOVE_LEFT
    MOVE_RIGHT = MOVE_RIGHT
    ARROW_LEFT = ARROW_LEFT
    ARROW_UP = ARROW_UP
    ARROW_RIGHT = ARROW_RIGHT
    ARROW_DOWN = ARROW_DOWN


_MOVEMENT_KEYS = frozenset(
    {
        Key.MOVE_UP,
        Key.MOVE_DOWN,
        Key.MOVE_LEFT,
        Key.MOVE_RIGHT,
        Key.ARROW_UP,
        Key.ARROW_DOWN,
        Key.ARROW_LEFT,
        Key.ARROW_RIGHT,
    }
)


def _rgb_bytes(image: Image) -> bytes:
    """Pack a 32-bit image into tightly packed RGB bytes."""
    if image.bpp != 32:
        raise ValueError(f"only 32-bit images can be shown, got {image.bpp}")
    red, green, blue = (2, 1, 0) if image.endian == 0 else (1, 2, 3)
    data = image.data
    out = bytearray(image.width * image.height * 3)
    out[0::3] = data[red::4]
    out[1::3] = data[green::4]
    out[2::3] = data[blue::4]
    return bytes(out)


def load_texture(path: str | PathLike[str] | None) -> Image:
    """Load an XPM texture, raising if the path is missing or unreadable."""
    if path is None:
        raise ValueError("Texture path is missing")
    try:
        return read_xpm_file(path)
    except XpmError as exc:
        raise XpmError(
            f"Failed to load texture: {path} (make sure the file exists "
            f"and is a valid XPM file): {exc}"
        ) from exc


def load_scene(path: str | PathLike[str]):
    """Read and validate a scene, then put the player at its start tile."""
    scene = parse_file(path)
    check_map(scene)
    scene.player.place(TILE_SIZE)
    return scene


class Game:
    """A running game: the scene, its frame image and the input handling."""

    def __init__(
        self,
        scene,
        width: int = WINDOW_WIDTH,
        height: int = WINDOW_HEIGHT,
        tile_size: int = TILE_SIZE,
        textures: dict[str, Image] | None = None,
        title: str = TITLE,
    ) -> None:
        self.scene = scene
        self.scene.map_width = len(scene.map[0]) if scene.map else 0
        self.image = Image(width, height)
        self.tile_size = tile_size
        self.textures = dict(textures or {})
        self.title = title
        self.running = True
        self.last_wall_hit = WallSide.NORTH

    def close(self) -> None:
        """Stop the game loop."""
        self.running = False

    def handle_input(self, key: int) -> None:
        """React to a key press: quit on Escape, otherwise turn or move."""
        if key == Key.ESCAPE:
            self.close()
            return
        if key in _MOVEMENT_KEYS:
            self.scene.player.update(key, self.scene, self.tile_size)

    def render_frame(self) -> Image:
        """Draw the current view into the frame image and return it."""
        hits = render(self.scene, self.image, self.tile_size)
        if hits:
            self.last_wall_hit = hits[-1].side
        return self.image

    def run(self) -> None:
        """Open a window and play until Escape is pressed or it is closed."""
        os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
        import pygame

        keymap = {
            pygame.K_ESCAPE: Key.ESCAPE,
            pygame.K_UP: Key.ARROW_UP,
            pygame.K_DOWN: Key.ARROW_DOWN,
            pygame.K_LEFT: Key.ARROW_LEFT,
            pygame.K_RIGHT: Key.ARROW_RIGHT,
        }
        size = (self.image.width, self.image.height)
        pygame.init()
        try:
            screen = pygame.display.set_mode(size)
            pygame.display.set_caption(self.title)
            pygame.key.set_repeat(150, 15)
            clock = pygame.time.Clock()
            self.running = True
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.close()
                    elif event.type == pygame.KEYDOWN:
                        self.handle_input(keymap.get(event.key, event.key))
                if not self.running:
                    break
                self.render_frame()
                surface = pygame.image.frombuffer(
                    _rgb_bytes(self.image), size, "RGB"
                )
                screen.blit(surface, (0, 0))
                pygame.display.flip()
                clock.tick(_FRAME_RATE)
        finally:
            pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the game on the ``.cub`` file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cub3d"
    if len(args) != 1 or not check_file_extension(args[0]):
        if len(args) == 1 and len(args[0]) >= 4:
            print("Error: Map should be in a .cub extension.")
        print(f"usage: {prog} <map.cub>")
        return 1
    try:
        scene = load_scene(args[0])
    except (SceneError, MapError) as exc:
        print(f"Error: {exc}")
        return 1
    print("Map is valid!")
    config = scene.config
    try:
        textures = {
            "north": load_texture(config.texture_north),
            "south": load_texture(config.texture_south),
            "west": load_texture(config.texture_west),
            "east": load_texture(config.texture_east),
        }
    except ValueError as exc:
        print(f"Error: {exc}")
        return 1
    game = Game(scene, textures=textures)
    try:
        game.run()
    except Exception as exc:  # the display may be unavailable
        print(f"Error: Failed to create window: {exc}")
        return 1
    return 0