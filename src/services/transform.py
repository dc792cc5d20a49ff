from dataclasses import dataclass
from io import BytesIO
from typing import Literal

from PIL import Image, UnidentifiedImageError

from src.core.exceptions import CodecError, UnsupportedFormat

# Pillow format name -> canonical format. MPO is how Pillow reports camera JPEGs
# carrying extra embedded frames.
PIL_TO_FORMAT = {
    "JPEG": "jpeg",
    "MPO": "jpeg",
    "PNG": "png",
    "WEBP": "webp",
}

FORMAT_TO_MEDIA_TYPE = {
    "jpeg": "image/jpeg",
    "png": "image/png",
}

DEFAULT_JPEG_QUALITY = 80


@dataclass(frozen=True)
class ResizeOptions:
    width: int | None = None
    height: int | None = None
    fit: Literal["inside"] = "inside"
    allow_enlargement: bool = False

    @classmethod
    def for_bounds(cls, width: int, height: int) -> "ResizeOptions":
        """Treat a 0 dimension as unconstrained."""
        return cls(width=width or None, height=height or None)

    def target_size(self, source: tuple[int, int]) -> tuple[int, int]:
        src_width, src_height = source
        ratios = []
        if self.width:
            ratios.append(self.width / src_width)
        if self.height:
            ratios.append(self.height / src_height)
        if not ratios:
            return source

        scale = min(ratios)
        if scale >= 1 and not self.allow_enlargement:
            return source
        return max(1, round(src_width * scale)), max(1, round(src_height * scale))


@dataclass(frozen=True)
class ImageAsset:
    body: bytes
    content_type: str
    format: str


def detect_format(img: Image.Image) -> str | None:
    return PIL_TO_FORMAT.get(img.format or "")


class TransformEngine:
    def __init__(self, jpeg_quality: int = DEFAULT_JPEG_QUALITY) -> None:
        self.jpeg_quality = jpeg_quality

    def transform(self, image_bytes: bytes, width: int, height: int) -> ImageAsset:
        """Decode, check the format, shrink to fit the bounds and re-encode.

        PNG sources stay PNG. JPEG and WEBP sources are written as JPEG.
        """
        try:
            img: Image.Image = Image.open(BytesIO(image_bytes))
        except UnidentifiedImageError as e:
            raise CodecError(f"Cannot identify image: {e}") from e

        source_format = detect_format(img)
        if source_format is None:
            raise UnsupportedFormat(img.format)

        options = ResizeOptions.for_bounds(width, height)
        try:
            img.load()
            new_size = options.target_size(img.size)
            if new_size != img.size:
                img = img.resize(new_size, Image.Resampling.LANCZOS)
            output_format = "png" if source_format == "png" else "jpeg"
            body = self._encode(img, output_format)
        except (OSError, ValueError) as e:
            raise CodecError(f"Failed to transform image: {e}") from e

        return ImageAsset(body=body, content_type=FORMAT_TO_MEDIA_TYPE[output_format], format=output_format)

    def _encode(self, img: Image.Image, output_format: str) -> bytes:
        buffer = BytesIO()
        if output_format == "png":
            img.save(buffer, format="PNG")
        else:
            if img.mode != "RGB":
                img = img.convert("RGB")
            img.save(buffer, format="JPEG", quality=self.jpeg_quality)
        return buffer.getvalue()
