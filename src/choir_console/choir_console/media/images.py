from __future__ import annotations

import base64
import io

from PIL import Image, UnidentifiedImageError

from ..core.constants import IMAGE_JPEG_QUALITY, IMAGE_SIZE, MAX_IMAGE_BYTES
from ..core.exceptions import ValidationError


def compress_image(data: bytes, *, max_bytes: int = MAX_IMAGE_BYTES) -> str:
    """Resize an uploaded photo to a square JPEG and return it as a data URL."""
    if len(data) > max_bytes:
        raise ValidationError("La imagen es muy pesada. Por favor usa una imagen de menos de 1.5MB.")

    try:
        img = Image.open(io.BytesIO(data)).convert("RGB")
    except (UnidentifiedImageError, OSError) as e:
        raise ValidationError("El archivo no es válido.") from e

    img = img.resize(IMAGE_SIZE)
    out = io.BytesIO()
    img.save(out, format="JPEG", quality=IMAGE_JPEG_QUALITY)
    encoded = base64.b64encode(out.getvalue()).decode("ascii")
    return f"data:image/jpeg;base64,{encoded}"
