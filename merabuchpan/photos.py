"""Selected photos and the image byte handling around them.

Loading a picked file, working out its MIME type, turning bytes into the
base64 payloads Flet needs for display, and writing the generated image back
to disk all live here so the UI and the generation client share one notion of
a photo.
"""

import base64
import io
import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Tuple, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS: Tuple[str, ...] = ("png", "jpg", "jpeg", "webp")
"""File extensions the upload picker accepts."""

FALLBACK_MIME_TYPE: str = "application/octet-stream"

FORMAT_MIME_TYPES: Dict[str, str] = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "MPO": "image/jpeg",
    "WEBP": "image/webp",
}
"""MIME types for the Pillow formats of accepted uploads. Multi-picture
JPEGs from phones and cameras open as MPO but are plain JPEG files."""

MIME_EXTENSIONS: Dict[str, str] = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
}


# =============================================================================
# PURE FUNCTIONS - Business Logic Layer
# =============================================================================


@dataclass(frozen=True)
class SelectedPhoto:
    """A user-selected image held in memory.

    Attributes:
        data: Raw file bytes, unmodified.
        mime_type: MIME type of the image, e.g. ``image/jpeg``.
        name: Original filename, for display and logging only.
    """

    data: bytes
    mime_type: str
    name: str = ""


def sniff_mime_type(data: bytes, filename: str = "") -> str:
    """Determine the MIME type of image bytes.

    Pillow identifies the format from the file header; formats the picker
    accepts map onto the types the model takes. When Pillow cannot
    identify the data the filename extension is used instead, and failing that
    the generic binary type.

    Args:
        data: Image file content.
        filename: Optional original filename used as a fallback hint.

    Returns:
        A MIME type string.

    Example:
        >>> sniff_mime_type(png_bytes)
        'image/png'
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format or ""
        mime_type = FORMAT_MIME_TYPES.get(image_format) or Image.MIME.get(image_format)
        if mime_type:
            return mime_type
    except (UnidentifiedImageError, OSError):
        logger.debug("Pillow could not identify %r, falling back to extension", filename)

    guessed, _ = mimetypes.guess_type(filename)
    return guessed or FALLBACK_MIME_TYPE


def encode_payload(data: bytes) -> str:
    """Encode image bytes as a base64 string.

    Flet's ``src_base64`` and data URLs both take this form.
    """
    return base64.b64encode(data).decode("utf-8")


def extension_for(mime_type: str) -> str:
    """File extension (without dot) for an image MIME type, ``png`` if unknown.

    Example:
        >>> extension_for("image/jpeg")
        'jpg'
    """
    if mime_type in MIME_EXTENSIONS:
        return MIME_EXTENSIONS[mime_type]
    guessed = mimetypes.guess_extension(mime_type or "")
    return guessed.lstrip(".") if guessed else "png"


def download_file_name(file_name: str, mime_type: str) -> str:
    """Swap the extension of ``file_name`` for the one matching ``mime_type``.

    Example:
        >>> download_file_name("merabuchpan_reunion.png", "image/jpeg")
        'merabuchpan_reunion.jpg'
    """
    return Path(file_name).with_suffix(f".{extension_for(mime_type)}").name


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Build a ``data:`` URL for image bytes.

    Example:
        >>> to_data_url(b"abc", "image/png")
        'data:image/png;base64,YWJj'
    """
    return f"data:{mime_type};base64,{encode_payload(data)}"


# =============================================================================
# SIDE EFFECTS - I/O Operations Layer
# =============================================================================


def load_photo(path: Union[str, Path]) -> SelectedPhoto:
    """Read an image file from disk into a SelectedPhoto.

    Raises:
        OSError: If the file cannot be read.
    """
    file_path = Path(path)
    data = file_path.read_bytes()
    photo = SelectedPhoto(
        data=data, mime_type=sniff_mime_type(data, file_path.name), name=file_path.name
    )
    logger.info("Loaded %s (%s, %d bytes)", photo.name, photo.mime_type, len(data))
    return photo


class ImageSaver:
    """Handle saving generated images to disk."""

    @staticmethod
    def save_image(data: bytes, filename: Union[str, Path]) -> str:
        """Write image bytes to the filesystem exactly as received.

        Args:
            data: Encoded image file content (PNG, JPEG, ...).
            filename: Target path.

        Returns:
            The path that was written, as a string.

        Raises:
            OSError: If the file cannot be written (permissions, disk space, etc.).
        """
        Path(filename).write_bytes(data)
        return str(filename)
