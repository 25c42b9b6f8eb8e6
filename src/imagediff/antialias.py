from __future__ import annotations

from collections.abc import Iterator

from .color import color_delta
from .types import PixelBuffer


def neighbors(x: int, y: int, width: int, height: int) -> Iterator[tuple[int, int]]:
    """Yield the up-to-eight in-bounds neighbors of (x, y) in row-major order."""
    for ny in range(max(y - 1, 0), min(y + 1, height - 1) + 1):
        for nx in range(max(x - 1, 0), min(x + 1, width - 1) + 1):
            if nx != x or ny != y:
                yield nx, ny


def _on_border(x: int, y: int, width: int, height: int) -> bool:
    return x == 0 or y == 0 or x == width - 1 or y == height - 1


def has_many_siblings(buffer: PixelBuffer, x: int, y: int) -> bool:
    # the image border counts as one identical sibling
    zeroes = 1 if _on_border(x, y, buffer.width, buffer.height) else 0
    center = buffer.get(x, y)
    for nx, ny in neighbors(x, y, buffer.width, buffer.height):
        if buffer.get(nx, ny) == center:
            zeroes += 1
            if zeroes > 2:
                return True
    return False


def is_anti_aliased(buffer: PixelBuffer, x: int, y: int, other: PixelBuffer) -> bool:
    """
    Whether the pixel at (x, y) of ``buffer`` looks like an edge-smoothing
    blend rather than new content.

    The pixel must sit between a darker and a brighter neighbor, and at least
    one of those two extremes must be unchanged at the same position in
    ``other`` and sit in a flat fill in both images.
    """
    width, height = buffer.width, buffer.height
    center = buffer.get(x, y)

    zeroes = 1 if _on_border(x, y, width, height) else 0
    darkest = brightest = 0.0
    darkest_at: tuple[int, int] | None = None
    brightest_at: tuple[int, int] | None = None

    for nx, ny in neighbors(x, y, width, height):
        delta = color_delta(center, buffer.get(nx, ny))
        if delta == 0:
            zeroes += 1
            # too many equal siblings, this is a flat region
            if zeroes > 2:
                return False
        elif delta < darkest:
            darkest = delta
            darkest_at = (nx, ny)
        elif delta > brightest:
            brightest = delta
            brightest_at = (nx, ny)

    if darkest_at is None or brightest_at is None:
        return False

    return _is_structural(buffer, other, *darkest_at) or _is_structural(
        buffer, other, *brightest_at
    )


def _is_structural(buffer: PixelBuffer, other: PixelBuffer, x: int, y: int) -> bool:
    return (
        buffer.get(x, y) == other.get(x, y)
        and has_many_siblings(buffer, x, y)
        and has_many_siblings(other, x, y)
    )
