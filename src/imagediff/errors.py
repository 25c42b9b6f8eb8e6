from __future__ import annotations


class ImageDiffError(Exception):
    pass


class DimensionMismatch(ImageDiffError):
    def __init__(self, width_a: int, height_a: int, width_b: int, height_b: int) -> None:
        self.width_a = width_a
        self.height_a = height_a
        self.width_b = width_b
        self.height_b = height_b
        super().__init__(
            f"Image dimensions don't match: "
            f"image 1 ({width_a}x{height_a}) vs image 2 ({width_b}x{height_b})"
        )


class InvalidOption(ImageDiffError):
    def __init__(self, field: str, value: object) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r}")


class InvalidBuffer(ImageDiffError):
    pass


class DecodeError(ImageDiffError):
    pass


class EncodeError(ImageDiffError):
    pass
