"""Image decoding and JPEG encoding helpers backed by Pillow."""

import io

from PIL import Image


class ImageDecodeError(ValueError):
    """Raised when bytes cannot be decoded as an image."""


def decode_image(data: bytes) -> Image.Image:
    """Decode image bytes, failing fast on truncated or unknown formats."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except Exception as exc:
        raise ImageDecodeError("Invalid image format or corrupted file") from exc
    return image


def image_size(data: bytes) -> tuple[int, int]:
    """Return the pixel size of encoded image bytes."""
    return decode_image(data).size


def encode_jpeg(data: bytes, quality: int) -> bytes:
    """Re-encode any supported image as an RGB JPEG."""
    img = decode_image(data)
    rgb_img: Image.Image
    if img.mode in ("RGBA", "LA", "P"):
        # Flatten transparency onto white
        background = Image.new("RGB", img.size, (255, 255, 255))
        if img.mode == "P":
            img = img.convert("RGBA")
        mask = img.split()[-1] if img.mode in ("RGBA", "LA") else None
        background.paste(img, mask=mask)
        rgb_img = background
    elif img.mode != "RGB":
        rgb_img = img.convert("RGB")
    else:
        rgb_img = img

    output = io.BytesIO()
    try:
        rgb_img.save(output, format="JPEG", quality=quality, optimize=True)
    except (OSError, ValueError) as exc:
        raise ImageDecodeError("Image cannot be encoded as JPEG") from exc
    return output.getvalue()
