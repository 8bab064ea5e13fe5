import pytest

from pixel_search.models.pixel import Pixel
from pixel_search.models.pixel_buffer import PixelBuffer

RED = Pixel.from_rgba(255, 0, 0)
GREEN = Pixel.from_rgba(0, 255, 0)
BLUE = Pixel.from_rgba(0, 0, 255)
WHITE = Pixel.from_rgba(255, 255, 255)
BLACK = Pixel.from_rgba(0, 0, 0)
CLEAR = Pixel.from_rgba(0, 0, 0, 0)


def solid(width, height, pixel=BLACK):
    return PixelBuffer([pixel] * (width * height), width, height)


def paste(haystack, needle, ox, oy):
    """Return a new buffer: *haystack* with *needle* copied at (ox, oy)."""
    pixels = list(haystack.pixels)
    for y in range(needle.height):
        for x in range(needle.width):
            pixels[(ox + x) + (oy + y) * haystack.width] = needle.pixel_at(x, y)
    return PixelBuffer(pixels, haystack.width, haystack.height)


@pytest.fixture
def pattern():
    # 2x2 needle with four distinct colours
    return PixelBuffer([RED, GREEN, BLUE, WHITE], 2, 2)
