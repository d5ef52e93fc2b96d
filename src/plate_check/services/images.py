"""Photo intake: decode, downscale and re-encode meal photos."""

import io
import logging

from PIL import Image, ImageOps

from plate_check.domain.images import EncodedImage

MAX_DIMENSION = 1024
JPEG_QUALITY = 85

_logger = logging.getLogger(__name__)


def normalize_image(
    raw: bytes, *, max_dimension: int = MAX_DIMENSION, quality: int = JPEG_QUALITY
) -> EncodedImage:
    """Return a bounded JPEG rendition of a photo.

    Downscaling is best effort: when the bytes cannot be decoded as an image
    the original content is returned unchanged.
    """
    try:
        with Image.open(io.BytesIO(raw)) as source:
            source.load()
            image = _to_rgb(ImageOps.exif_transpose(source))
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        _logger.warning("Image decode failed, passing original bytes: %s", exc)
        return EncodedImage(data=raw, media_type=detect_media_type(raw))

    width, height = target_dimensions(image.width, image.height, max_dimension)
    if (width, height) != image.size:
        image = image.resize((width, height), Image.Resampling.LANCZOS)

    output = io.BytesIO()
    image.save(output, format="JPEG", quality=quality)
    return EncodedImage(
        data=output.getvalue(),
        media_type="image/jpeg",
        width=width,
        height=height,
    )


def target_dimensions(
    width: int, height: int, max_dimension: int = MAX_DIMENSION
) -> tuple[int, int]:
    """Scale the longer side down to ``max_dimension`` keeping aspect ratio."""
    if width > height:
        if width > max_dimension:
            height = max(1, round(height * max_dimension / width))
            width = max_dimension
    elif height > max_dimension:
        width = max(1, round(width * max_dimension / height))
        height = max_dimension
    return width, height


def detect_media_type(data: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if data.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if data.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"


def _to_rgb(image: Image.Image) -> Image.Image:
    """Flatten transparency onto white; JPEG has no alpha channel."""
    if image.mode in ("RGBA", "LA", "P"):
        image = image.convert("RGBA")
        background = Image.new("RGB", image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image
