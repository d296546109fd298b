"""A clipped RGB565 canvas with line, rectangle and run-length icon drawing."""

from __future__ import annotations

from collections.abc import Sequence

HORIZONTAL_RESOLUTION = 320
VERTICAL_RESOLUTION = 240
MARGIN = 8
MENU_BAR_HEIGHT = 16
TOOLBAR_HEIGHT = 44


def color_from_rgb(r: int, g: int, b: int) -> int:
    """Pack 8-bit RGB components into a 16-bit 5-6-5 colour."""
    return ((31 * r // 255) << 11) + ((63 * g // 255) << 5) + (31 * b // 255)


DISABLED_TOOLBAR = color_from_rgb(200, 200, 200)
WHITE = color_from_rgb(255, 255, 255)
LIGHT_GRAY = color_from_rgb(248, 248, 248)
RED = color_from_rgb(255, 0, 0)
GREEN = color_from_rgb(0, 255, 0)
GREEN2 = color_from_rgb(0, 200, 0)
YELLOW = color_from_rgb(255, 255, 0)
ORANGE = color_from_rgb(255, 140, 60)
BLACK = color_from_rgb(0, 0, 0)
BLUE = color_from_rgb(10, 10, 200)
DARK_GRAY = color_from_rgb(127, 127, 127)
BIT_DARKER_GRAY = color_from_rgb(100, 100, 100)
PINK = color_from_rgb(187, 187, 240)
DARKER_GRAY = color_from_rgb(84, 84, 84)
BACKGROUND = color_from_rgb(232, 236, 240)
TOOLBAR = color_from_rgb(20, 120, 213)
MONITOR = color_from_rgb(20 * 255 // 100, 36 * 255 // 100, 51 * 255 // 100)


class Canvas:
    """A framebuffer with a current colour and a clipping rectangle.

    Lines, rectangles and fills respect the clipping rectangle; single
    pixels (and therefore ``draw_line``) only respect the canvas bounds.
    """

    def __init__(self, width: int = HORIZONTAL_RESOLUTION, height: int = VERTICAL_RESOLUTION) -> None:
        self.width = width
        self.height = height
        self._pixels = [[BLACK] * width for _ in range(height)]
        self.color = BLACK
        self._pushed_color = BLACK
        self.pop_clipping()

    def pixel(self, x: int, y: int) -> int:
        """Colour of the pixel at (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside the canvas")
        return self._pixels[y][x]

    def _fill(self, x: int, y: int, w: int, h: int) -> None:
        x0, x1 = max(x, 0), min(x + w, self.width)
        if x1 <= x0:
            return
        run = [self.color] * (x1 - x0)
        for row in self._pixels[max(y, 0):max(min(y + h, self.height), 0)]:
            row[x0:x1] = run

    def draw_pixel(self, x: int, y: int) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self._pixels[y][x] = self.color

    def draw_horizontal_line(self, x: int, y: int, w: int) -> None:
        if y < self.clip_min_y or y > self.clip_max_y:
            return
        if x < self.clip_min_x:
            w -= self.clip_min_x - x
            x = self.clip_min_x
        if x + w - 1 > self.clip_max_x:
            w = self.clip_max_x - x + 1
        self._fill(x, y, w, 1)

    def draw_vertical_line(self, x: int, y: int, h: int) -> None:
        if x < self.clip_min_x or x > self.clip_max_x:
            return
        if y < self.clip_min_y:
            h -= self.clip_min_y - y
            y = self.clip_min_y
        if y + h - 1 > self.clip_max_y:
            h = self.clip_max_y - y + 1
        self._fill(x, y, 1, h)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """Bresenham line between both end points, inclusive."""
        dx, sx = abs(x1 - x0), (1 if x0 < x1 else -1)
        dy, sy = abs(y1 - y0), (1 if y0 < y1 else -1)
        err = dx // 2 if dx > dy else -(dy // 2)
        while True:
            self.draw_pixel(x0, y0)
            if x0 == x1 and y0 == y1:
                break
            e2 = err
            if e2 > -dx:
                err -= dy
                x0 += sx
            if e2 < dy:
                err += dx
                y0 += sy

    def fill_rect(self, x: int, y: int, w: int, h: int) -> None:
        if x < self.clip_min_x:
            w -= self.clip_min_x - x
            x = self.clip_min_x
        if y < self.clip_min_y:
            h -= self.clip_min_y - y
            y = self.clip_min_y
        if x + w - 1 > self.clip_max_x:
            w = self.clip_max_x - x + 1
        if y + h - 1 > self.clip_max_y:
            h = self.clip_max_y - y + 1
        if h > 0:
            self._fill(x, y, w, h)

    def draw_rect(self, x: int, y: int, w: int, h: int) -> None:
        self.draw_horizontal_line(x, y, w)
        self.draw_horizontal_line(x, y + h - 1, w)
        self.draw_vertical_line(x, y, h)
        self.draw_vertical_line(x + w - 1, y, h)

    def draw_bar(self, y: int, h: int) -> None:
        """A full-width white bar with a pink border line above and below."""
        self.color = PINK
        self.fill_rect(0, y, self.width, h)
        self.color = WHITE
        self.fill_rect(0, y + 1, self.width, h - 2)

    def push_clipping(self, x0: int, y0: int, x1: int, y1: int) -> None:
        """Restrict drawing to the inclusive rectangle (x0, y0)-(x1, y1)."""
        self.clip_min_x, self.clip_min_y = x0, y0
        self.clip_max_x, self.clip_max_y = x1, y1

    def pop_clipping(self) -> None:
        """Allow drawing on the whole canvas again."""
        self.push_clipping(0, 0, self.width - 1, self.height - 1)

    def push_color(self, color: int | None = None) -> None:
        """Remember the current colour and optionally switch to ``color``."""
        self._pushed_color = self.color
        if color is not None:
            self.color = color

    def pop_color(self) -> None:
        """Restore the colour remembered by the last ``push_color``."""
        self.color = self._pushed_color


def icon_size(icon: Sequence[int]) -> tuple[int, int]:
    """Width and height of a run-length encoded icon."""
    return icon[0], icon[1]


def draw_icon(canvas: Canvas, icon: Sequence[int], x: int, y: int) -> None:
    """Draw a run-length encoded icon with its top-left corner at (x, y).

    After the width and height, each entry below 100 is a run length
    followed by its colour (colour 0 is transparent); any other entry is
    the colour of a single pixel.
    """
    width, height = icon_size(icon)
    runs = iter(icon[2:])
    canvas.push_color()
    try:
        for j in range(y, y + height):
            i = 0
            while i < width:
                count = next(runs)
                if count < 100:
                    canvas.color = next(runs)
                    if canvas.color != 0:
                        canvas.draw_horizontal_line(x + i, j, count)
                    i += count
                else:
                    canvas.color = count
                    canvas.draw_pixel(x + i, j)
                    i += 1
    except StopIteration:
        raise ValueError("icon data ends before its last row") from None
    finally:
        canvas.pop_color()