"""Vehicle photo helpers."""

import base64
import io
from pathlib import Path
from typing import Optional, Union

from PIL import Image

MAX_WIDTH = 800
MAX_HEIGHT = 800
JPEG_QUALITY = 90


def resize_image(
    source: Union[str, Path, bytes], content_type: Optional[str] = None
) -> str:
    """Resize an image to fit an 800x800 box and return it as a data URI.

    The aspect ratio is preserved and images are never enlarged. PNG images
    stay PNG with their alpha channel; everything else is re-encoded as JPEG.

    Args:
        source: Image file path or raw bytes
        content_type: MIME type of the source; detected from the image when None

    Raises:
        ValueError: If the source is not a readable image
    """
    data = source if isinstance(source, bytes) else Path(source).read_bytes()

    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, Image.DecompressionBombError) as e:
        raise ValueError(f"Could not read image: {e}") from e

    if content_type is None:
        content_type = Image.MIME.get(img.format or "", "image/jpeg")

    width, height = fit_within(img.width, img.height)
    if (width, height) != (img.width, img.height):
        img = img.resize((width, height), Image.LANCZOS)

    out = io.BytesIO()
    if content_type == "image/png":
        if img.mode not in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
        img.save(out, format="PNG")
        mime = "image/png"
    else:
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.save(out, format="JPEG", quality=JPEG_QUALITY)
        mime = "image/jpeg"

    encoded = base64.b64encode(out.getvalue()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def fit_within(
    width: int, height: int, max_width: int = MAX_WIDTH, max_height: int = MAX_HEIGHT
) -> tuple[int, int]:
    """Scale (width, height) down to fit the bounding box, keeping the ratio."""
    if width > height:
        if width > max_width:
            height = round(height * max_width / width)
            width = max_width
    elif height > max_height:
        width = round(width * max_height / height)
        height = max_height
    return max(width, 1), max(height, 1)
