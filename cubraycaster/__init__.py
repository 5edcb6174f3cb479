"""A first-person raycasting maze viewer for .cub scene files."""

__version__ = "0.1.0"

__all__ = [
    "colors",
    "framebuffer",
    "xpm",
    "player",
    "scene",
    "validate",
    "raycast",
    "game",
]