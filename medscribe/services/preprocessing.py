import base64
import binascii
import io
import logging
import re

from PIL import Image, ImageFilter, ImageOps

from medscribe.exceptions import ImageValidationError
from medscribe.models.handwriting import EnhancedImage, RecognitionInput

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
DATA_URI_RE = re.compile(r"^data:(image/[a-z]+);base64,")

# Formats Pillow can write and Document AI accepts
_WRITABLE_FORMATS = {"JPEG", "PNG", "GIF", "BMP", "TIFF", "WEBP"}


def decode_data_uri(image: str) -> RecognitionInput:
    """Decode a ``data:image/...;base64,`` string into raw bytes.

    Strings without the prefix are treated as bare base64 JPEG data.
    """
    match = DATA_URI_RE.match(image)
    mime_type = match.group(1) if match else DEFAULT_MIME_TYPE
    payload = image[match.end():] if match else image
    # Wrapped base64 may carry line breaks
    payload = "".join(payload.split())
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageValidationError(f"Image is not valid base64: {exc}") from exc
    if not content:
        raise ImageValidationError("Image is empty")
    return RecognitionInput(content=content, mime_type=mime_type)


def enhance_image(image: RecognitionInput) -> EnhancedImage:
    """Normalize contrast, sharpen and convert to grayscale for OCR."""
    with Image.open(io.BytesIO(image.content)) as img:
        source_format = img.format
        if img.mode not in ("L", "RGB"):
            img = img.convert("RGB")
        enhanced = ImageOps.autocontrast(img)
        enhanced = enhanced.filter(ImageFilter.SHARPEN)
        enhanced = ImageOps.grayscale(enhanced)

    out_format = source_format if source_format in _WRITABLE_FORMATS else "PNG"
    buffer = io.BytesIO()
    enhanced.save(buffer, format=out_format)
    logger.info(
        "Image preprocessing completed (%s, %dx%d)",
        out_format,
        enhanced.width,
        enhanced.height,
    )
    return EnhancedImage(
        content=buffer.getvalue(),
        mime_type=Image.MIME.get(out_format, image.mime_type),
    )
