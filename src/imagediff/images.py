from __future__ import annotations

import logging
import os
from collections.abc import Sequence

from .codec import ImageSource, decode_png, encode_png_base64, save_png
from .compare import compare
from .types import CompareOptions, DiffResult

logger = logging.getLogger(__name__)


def compare_images(
    before: ImageSource,
    after: ImageSource,
    options: CompareOptions | None = None,
    output_path: str | os.PathLike[str] | None = None,
) -> DiffResult:
    before_buf = decode_png(before)
    after_buf = decode_png(after)

    diff, stats = compare(before_buf, after_buf, options)

    if output_path is not None:
        save_png(diff, output_path)

    return DiffResult(
        diff_png=encode_png_base64(diff),
        mismatched_pixels=stats.mismatched_pixels,
        total_pixels=stats.total_pixels,
        difference_ratio=stats.difference_ratio,
        width=diff.width,
        height=diff.height,
    )


def compare_images_batch(
    pairs: Sequence[tuple[ImageSource, ImageSource]],
    options: CompareOptions | None = None,
) -> list[DiffResult | None]:
    return [
        _compare_single_pair(idx, before, after, options)
        for idx, (before, after) in enumerate(pairs)
    ]


def _compare_single_pair(
    idx: int,
    before: ImageSource,
    after: ImageSource,
    options: CompareOptions | None,
) -> DiffResult | None:
    try:
        return compare_images(before, after, options)
    except Exception:
        logger.exception("Failed to compare image pair %d", idx, extra={"pair_index": idx})
        return None
