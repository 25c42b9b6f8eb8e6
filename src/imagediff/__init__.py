from .errors import (
    DecodeError,
    DimensionMismatch,
    EncodeError,
    ImageDiffError,
    InvalidBuffer,
    InvalidOption,
)
from .images import compare_images, compare_images_batch
from .types import CompareOptions, CompareResult, DiffResult, PixelBuffer, PixelClassification

__all__ = [
    "CompareOptions",
    "CompareResult",
    "DecodeError",
    "DiffResult",
    "DimensionMismatch",
    "EncodeError",
    "ImageDiffError",
    "InvalidBuffer",
    "InvalidOption",
    "PixelBuffer",
    "PixelClassification",
    "compare_images",
    "compare_images_batch",
]
