"""
Image optimization before upload.

Resizes images wider than ``max_width`` (keeping the aspect ratio) and
re-encodes them in the format implied by the file extension. The result is
never larger than the input: when re-encoding does not help, the original
file is returned as is.
"""

import io
import logging
import math
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger("image_optimizer")

DEFAULT_MAX_WIDTH = 1920
DEFAULT_QUALITY = 0.78

# extension -> (Pillow format, mime type); anything else is written as JPEG
OUTPUT_FORMATS = {
    "png": ("PNG", "image/png"),
    "webp": ("WEBP", "image/webp"),
    "avif": ("AVIF", "image/avif"),
}
JPEG_OUTPUT = ("JPEG", "image/jpeg")

SIZE_UNITS = ("Bytes", "KB", "MB")


class ImageOptimizationError(Exception):
    pass


class ImageDecodeError(ImageOptimizationError):
    pass


class ImageRenderError(ImageOptimizationError):
    pass


class ImageEncodeError(ImageOptimizationError):
    pass


@dataclass
class ImageFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def _render(img: Image.Image, width: int, height: int, pil_format: str) -> Image.Image:
    if pil_format == "JPEG":
        mode = "RGB"
    elif img.mode in ("RGBA", "LA", "PA") or (img.mode == "P" and "transparency" in img.info):
        mode = "RGBA"
    else:
        mode = "RGB"
    canvas = img.convert(mode)
    if canvas.size != (width, height):
        canvas = canvas.resize((width, height), Image.Resampling.LANCZOS)
    return canvas


def compress_image(
    file: ImageFile,
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_QUALITY,
) -> ImageFile:
    try:
        img = Image.open(io.BytesIO(file.data))
        img.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageDecodeError("Failed to load image") from e

    width, height = img.size
    if width > max_width:
        height = max(1, int(_round_half_up(height * max_width / width)))
        width = max_width

    pil_format, mime_type = OUTPUT_FORMATS.get(file.extension or "jpg", JPEG_OUTPUT)

    try:
        canvas = _render(img, width, height, pil_format)
    except (OSError, ValueError) as e:
        raise ImageRenderError("Failed to render image") from e

    save_kwargs = {}
    if pil_format == "PNG":
        save_kwargs["optimize"] = True
    else:
        save_kwargs["quality"] = max(1, min(100, int(_round_half_up(quality * 100))))
        if pil_format == "JPEG":
            save_kwargs["optimize"] = True

    buffer = io.BytesIO()
    try:
        canvas.save(buffer, format=pil_format, **save_kwargs)
    except (OSError, ValueError, KeyError) as e:
        raise ImageEncodeError("Failed to encode image") from e

    encoded = buffer.getvalue()
    if len(encoded) < file.size:
        return ImageFile(filename=file.filename, content_type=mime_type, data=encoded)
    # re-encoding did not help
    return file


def compress_multiple_images(
    files: list[ImageFile],
    max_width: int = DEFAULT_MAX_WIDTH,
    quality: float = DEFAULT_QUALITY,
) -> list[ImageFile]:
    return [compress_image(f, max_width, quality) for f in files]


def get_file_size_string(num_bytes: float) -> str:
    """Human readable size: ``0 -> "0 Bytes"``, ``1536 -> "1.5 KB"``."""
    if num_bytes == 0:
        return "0 Bytes"
    sign = "-" if num_bytes < 0 else ""
    value = abs(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{_round_half_up(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{sign}{text} {SIZE_UNITS[unit]}"


def get_compression_stats(original_size: int, compressed_size: int) -> dict:
    saved = original_size - compressed_size
    percent = int(_round_half_up(saved / original_size * 100)) if original_size else 0
    return {
        "original_size": get_file_size_string(original_size),
        "compressed_size": get_file_size_string(compressed_size),
        "saved": get_file_size_string(saved),
        "percent_reduction": percent,
    }
