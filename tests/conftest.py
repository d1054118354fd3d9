import io

import pytest
from PIL import Image

from merabuchpan.photos import SelectedPhoto


def _image_bytes(fmt: str, color: tuple) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return _image_bytes("PNG", (255, 0, 0))


@pytest.fixture
def jpeg_bytes() -> bytes:
    return _image_bytes("JPEG", (0, 0, 255))


@pytest.fixture
def child_photo(png_bytes) -> SelectedPhoto:
    return SelectedPhoto(data=png_bytes, mime_type="image/png", name="child.png")


@pytest.fixture
def adult_photo(jpeg_bytes) -> SelectedPhoto:
    return SelectedPhoto(data=jpeg_bytes, mime_type="image/jpeg", name="adult.jpg")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("API_KEY", "GEMINI_API_KEY", "MERABUCHPAN_MODEL_NAME",
                 "MERABUCHPAN_DOWNLOAD_FILENAME", "MERABUCHPAN_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
