from __future__ import annotations

import base64
import io
import os

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, EncodeError
from .types import PixelBuffer

ImageSource = bytes | str | os.PathLike[str] | Image.Image


def _as_image(source: ImageSource) -> Image.Image:
    if isinstance(source, Image.Image):
        return source
    fp = io.BytesIO(source) if isinstance(source, bytes) else source
    try:
        img = Image.open(fp)
    except FileNotFoundError as e:
        raise DecodeError(f"File not found: {source}") from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise DecodeError(f"Failed to parse image: {e}") from e
    if img.format != "PNG":
        img.close()
        raise DecodeError(f"Expected a PNG image, got {img.format or 'unknown format'}")
    try:
        img.load()
    except Exception as e:
        img.close()
        raise DecodeError(f"Failed to parse image: {e}") from e
    return img


def decode_png(source: ImageSource) -> PixelBuffer:
    img = _as_image(source)
    try:
        return PixelBuffer.from_image(img)
    finally:
        if img is not source:
            img.close()


def encode_png(buffer: PixelBuffer) -> bytes:
    buf = io.BytesIO()
    img = buffer.to_image()
    try:
        img.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"Failed to encode PNG: {e}") from e
    finally:
        img.close()
    return buf.getvalue()


def save_png(buffer: PixelBuffer, path: str | os.PathLike[str]) -> None:
    data = encode_png(buffer)
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise EncodeError(f"Failed to save PNG file {path}: {e}") from e


def encode_png_base64(buffer: PixelBuffer) -> str:
    return base64.b64encode(encode_png(buffer)).decode("ascii")
