from __future__ import annotations

from .color import rgb_to_y
from .types import RGB, RGBA, CompareOptions, PixelClassification

TRANSPARENT: RGBA = (0, 0, 0, 0)


def _opaque(color: RGB) -> RGBA:
    return color[0], color[1], color[2], 255


def _context_pixel(pixel: RGBA, options: CompareOptions) -> RGBA:
    if options.diff_mask_only:
        return TRANSPARENT
    r, g, b, a = pixel
    # opacity follows the source alpha so transparent regions stay transparent
    gray = round(rgb_to_y(r, g, b))
    return gray, gray, gray, round(options.output_alpha * a)


def render_pixel(
    classification: PixelClassification,
    delta: float,
    pixel_a: RGBA,
    options: CompareOptions,
) -> RGBA:
    if classification is PixelClassification.DIFFERENT:
        if options.diff_color_alt is not None and delta < 0:
            return _opaque(options.diff_color_alt)
        return _opaque(options.diff_color)
    if classification is PixelClassification.ANTI_ALIASED and options.include_anti_aliasing:
        return _opaque(options.anti_alias_color)
    return _context_pixel(pixel_a, options)
