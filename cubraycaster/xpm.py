"""Reading XPM pixmaps, from in-memory data or from files, into images."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from os import PathLike

from .colors import text_to_rgb
from .framebuffer import Image

_TRANSPARENT = 0xFF000000
_WORD_SEPARATORS = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")


class XpmError(ValueError):
    """Raised when XPM data cannot be turned into an image."""


def split_words(text: str) -> list[str]:
    """Split ``text`` on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def find_unquoted(text: str, pattern: str) -> int:
    """Return the index of ``pattern`` outside double quotes, or -1."""
    if len(pattern) > len(text):
        return -1
    in_quote = False
    for pos in range(len(text) - len(pattern) + 1):
        if text[pos:pos + 1] == '"':
            in_quote = not in_quote
        if not in_quote and text.startswith(pattern, pos):
            return pos
    return -1


def _blank(text: str, start: int, count: int) -> str:
    stop = min(len(text), start + count)
    return text[:start] + " " * (stop - start) + text[stop:]


def strip_comments(text: str) -> str:
    """Replace C comments outside quoted strings with spaces.

    The length of the text is kept, so positions stay valid.
    """
    while (begin := find_unquoted(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        length = (end - begin - 2) + 4 if end != -1 else 3
        text = _blank(text, begin, length)
    while (begin := find_unquoted(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        length = (end - begin - 2) + 3 if end != -1 else 2
        text = _blank(text, begin, length)
    return text


def quoted_lines(text: str) -> Iterator[str]:
    """Yield the contents of each double-quoted string in ``text``, in order."""
    pos = 0
    while True:
        start = text.find('"', pos)
        if start == -1:
            return
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1:end]
        pos = end + 1


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _read_header(line: str | None) -> tuple[int, int, int, int]:
    if line is None:
        raise XpmError("missing XPM header")
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"XPM header needs four values: {line!r}")
    values = tuple(_atoi(word) for word in words[:4])
    if any(value <= 0 for value in values):
        raise XpmError(f"invalid XPM header: {line!r}")
    width, height, ncolors, cpp = values
    return width, height, ncolors, cpp


def _read_color(line: str, cpp: int) -> tuple[str, int]:
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line has no 'c' entry: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line has no colour after 'c': {line!r}")
    end = words[index + 1] if index + 1 < len(words) else None
    return line[:cpp], text_to_rgb(words[index], end)


def parse_xpm(lines: Iterable[str]) -> Image:
    """Build an image from XPM values: header, colour lines, then pixel rows."""
    source = iter(lines)
    width, height, ncolors, cpp = _read_header(next(source, None))

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = next(source, None)
        if line is None:
            raise XpmError("XPM data ends inside the colour table")
        key, rgb = _read_color(line, cpp)
        if cpp <= 2:
            palette[key] = rgb
        else:
            palette.setdefault(key, rgb)

    image = Image(width, height)
    for y in range(height):
        line = next(source, None)
        if line is None:
            raise XpmError("XPM data ends before the last pixel row")
        for x in range(width):
            key = line[cpp * x:cpp * (x + 1)]
            if len(key) < cpp:
                raise XpmError(f"pixel row {y} is shorter than {width} pixels")
            color = palette.get(key, 0)
            if color == -1:
                color = _TRANSPARENT
            image.put_pixel(x, y, color)
    return image


def xpm_to_image(data: Sequence[str]) -> Image:
    """Build an image from XPM data given as its list of strings."""
    return parse_xpm(data)


def read_xpm_file(path: str | PathLike[str]) -> Image:
    """Read an XPM file and return its image."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc}") from exc
    return parse_xpm(quoted_lines(strip_comments(text)))