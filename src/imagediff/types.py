from __future__ import annotations

from enum import Enum

from PIL import Image
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from .errors import InvalidBuffer, InvalidOption

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


class PixelBuffer:
    __slots__ = ("width", "height", "data")

    def __init__(self, width: int, height: int, data: bytes | bytearray | None = None) -> None:
        if width <= 0 or height <= 0:
            raise InvalidBuffer(f"Image must have positive dimensions, got {width}x{height}")
        expected = width * height * 4
        if data is None:
            data = bytes(expected)
        elif len(data) != expected:
            raise InvalidBuffer(
                f"Expected {expected} bytes for a {width}x{height} RGBA image, got {len(data)}"
            )
        self.width = width
        self.height = height
        self.data = bytearray(data)

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        if img.mode != "RGBA":
            rgba = img.convert("RGBA")
            try:
                return cls(rgba.width, rgba.height, rgba.tobytes())
            finally:
                rgba.close()
        return cls(img.width, img.height, img.tobytes())

    def to_image(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, bytes(self.data))

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} image")
        return (y * self.width + x) * 4

    def get(self, x: int, y: int) -> RGBA:
        i = self.offset(x, y)
        data = self.data
        return data[i], data[i + 1], data[i + 2], data[i + 3]

    def set(self, x: int, y: int, rgba: RGBA) -> None:
        i = self.offset(x, y)
        self.data[i : i + 4] = bytes(rgba)

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, self.data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


class PixelClassification(Enum):
    IDENTICAL = "identical"
    ANTI_ALIASED = "anti_aliased"
    DIFFERENT = "different"


class CompareOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    threshold: float = 0.1
    include_anti_aliasing: bool = False
    output_alpha: float = 1.0
    anti_alias_color: RGB = (255, 255, 0)
    diff_color: RGB = (255, 0, 0)
    diff_color_alt: RGB | None = None
    diff_mask_only: bool = False

    def __init__(self, **data: object) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "options"
            raise InvalidOption(field, error.get("input")) from None

    @field_validator("threshold", "output_alpha", mode="before")
    @classmethod
    def _check_fraction(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("expected a number")
        if not 0 <= value <= 1:
            raise ValueError("expected a value between 0 and 1")
        return value

    @field_validator("include_anti_aliasing", "diff_mask_only", mode="before")
    @classmethod
    def _check_flag(cls, value: object) -> object:
        if not isinstance(value, bool):
            raise ValueError("expected a boolean")
        return value

    @field_validator("anti_alias_color", "diff_color", "diff_color_alt", mode="before")
    @classmethod
    def _check_color(cls, value: object, info: ValidationInfo) -> object:
        if value is None and info.field_name == "diff_color_alt":
            return value
        if not isinstance(value, (tuple, list)) or len(value) != 3:
            raise ValueError("expected three channel values")
        for channel in value:
            if isinstance(channel, bool) or not isinstance(channel, int) or not 0 <= channel <= 255:
                raise ValueError("expected channel values between 0 and 255")
        return tuple(value)


class CompareResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    mismatched_pixels: int
    total_pixels: int
    difference_ratio: float


class DiffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    diff_png: str
    mismatched_pixels: int
    total_pixels: int
    difference_ratio: float
    width: int
    height: int
