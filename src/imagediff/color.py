"""
Perceptual color distance between RGBA pixels.

Pixels are alpha-blended onto white and converted to YIQ, where the luma
(Y) term dominates the two chroma terms (I, Q). The squared, weighted YIQ
difference is the distance magnitude; its sign says whether the second
pixel is brighter (positive) or darker (negative) than the first.
"""

from __future__ import annotations

from .types import RGBA

# Largest possible distance: black against white on every YIQ axis.
MAX_DELTA = 35215

Y_WEIGHT = 0.5053
I_WEIGHT = 0.299
Q_WEIGHT = 0.1957


def blend(channel: float, alpha: float) -> float:
    """Blend a channel value with a white background at the given opacity (0-1)."""
    return 255 + (channel - 255) * alpha


def rgb_to_y(r: float, g: float, b: float) -> float:
    return r * 0.29889531 + g * 0.58662247 + b * 0.11448223


def rgb_to_i(r: float, g: float, b: float) -> float:
    return r * 0.59597799 - g * 0.27417610 - b * 0.32180189


def rgb_to_q(r: float, g: float, b: float) -> float:
    return r * 0.21147017 - g * 0.52261711 + b * 0.31114694


def _premultiplied(pixel: RGBA) -> tuple[float, float, float]:
    r, g, b, a = pixel
    if a < 255:
        alpha = a / 255
        return blend(r, alpha), blend(g, alpha), blend(b, alpha)
    return r, g, b


def color_delta(p1: RGBA, p2: RGBA) -> float:
    """
    Signed perceptual distance from ``p1`` to ``p2``.

    Returns 0 for visually identical pixels. The magnitude is symmetric in
    its arguments; the sign flips when they are swapped unless the pixels
    share the same luma, in which case the result is non-negative.
    """
    if p1 == p2:
        return 0.0

    r1, g1, b1 = _premultiplied(p1)
    r2, g2, b2 = _premultiplied(p2)

    y = rgb_to_y(r2, g2, b2) - rgb_to_y(r1, g1, b1)
    i = rgb_to_i(r2, g2, b2) - rgb_to_i(r1, g1, b1)
    q = rgb_to_q(r2, g2, b2) - rgb_to_q(r1, g1, b1)

    delta = Y_WEIGHT * y * y + I_WEIGHT * i * i + Q_WEIGHT * q * q
    return -delta if y < 0 else delta


def max_delta(threshold: float) -> float:
    """Map a 0-1 sensitivity threshold onto the largest tolerated distance."""
    return MAX_DELTA * threshold * threshold
