from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from .antialias import is_anti_aliased
from .color import color_delta, max_delta
from .errors import DimensionMismatch, InvalidOption
from .render import render_pixel
from .types import CompareOptions, CompareResult, PixelBuffer, PixelClassification

logger = logging.getLogger(__name__)


class MismatchCounter:
    def __init__(self, total_pixels: int) -> None:
        self.total_pixels = total_pixels
        self.mismatched_pixels = 0

    def add(self, count: int = 1) -> None:
        self.mismatched_pixels += count

    def merge(self, other: MismatchCounter) -> None:
        self.mismatched_pixels += other.mismatched_pixels

    def result(self) -> CompareResult:
        return CompareResult(
            mismatched_pixels=self.mismatched_pixels,
            total_pixels=self.total_pixels,
            difference_ratio=self.mismatched_pixels / self.total_pixels,
        )


def is_mismatch(classification: PixelClassification, options: CompareOptions) -> bool:
    if classification is PixelClassification.DIFFERENT:
        return True
    return classification is PixelClassification.ANTI_ALIASED and options.include_anti_aliasing


def classify(
    a: PixelBuffer, b: PixelBuffer, x: int, y: int, bound: float
) -> tuple[PixelClassification, float]:
    delta = color_delta(a.get(x, y), b.get(x, y))
    if abs(delta) <= bound:
        return PixelClassification.IDENTICAL, delta
    if is_anti_aliased(a, x, y, b) or is_anti_aliased(b, x, y, a):
        return PixelClassification.ANTI_ALIASED, delta
    return PixelClassification.DIFFERENT, delta


def compare_rows(
    a: PixelBuffer,
    b: PixelBuffer,
    output: PixelBuffer,
    options: CompareOptions,
    rows: range,
) -> MismatchCounter:
    """Classify and render the given rows into ``output``, counting only those rows."""
    bound = max_delta(options.threshold)
    counter = MismatchCounter(a.width * len(rows))
    for y in rows:
        for x in range(a.width):
            classification, delta = classify(a, b, x, y, bound)
            output.set(x, y, render_pixel(classification, delta, a.get(x, y), options))
            if is_mismatch(classification, options):
                counter.add()
    return counter


def _row_ranges(height: int, parts: int) -> list[range]:
    step = -(-height // parts)
    return [range(start, min(start + step, height)) for start in range(0, height, step)]


def compare(
    a: PixelBuffer,
    b: PixelBuffer,
    options: CompareOptions | None = None,
    workers: int = 1,
) -> tuple[PixelBuffer, CompareResult]:
    if options is None:
        options = CompareOptions()
    else:
        # model_copy(update=...) skips field validation
        options = CompareOptions(**options.model_dump())
    if a.size != b.size:
        raise DimensionMismatch(a.width, a.height, b.width, b.height)
    if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
        raise InvalidOption("workers", workers)

    output = PixelBuffer(a.width, a.height)
    counter = MismatchCounter(a.width * a.height)

    if workers == 1 or a.height < 2:
        counter.merge(compare_rows(a, b, output, options, range(a.height)))
    else:
        ranges = _row_ranges(a.height, workers)
        with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
            partials = pool.map(lambda rows: compare_rows(a, b, output, options, rows), ranges)
            for partial in partials:
                counter.merge(partial)

    result = counter.result()
    logger.debug(
        "Compared %dx%d images: %d mismatched pixels",
        a.width,
        a.height,
        result.mismatched_pixels,
        extra={"threshold": options.threshold, "workers": workers},
    )
    return output, result
