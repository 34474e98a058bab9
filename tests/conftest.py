import io

import pytest
from PIL import Image

from media_pipeline.media.models import MediaFile


def _png_bytes(width: int, height: int, color: tuple[int, int, int]) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def wide_png_bytes() -> bytes:
    """A 1600x900 PNG, larger than the editor box."""
    return _png_bytes(1600, 900, (200, 40, 40))


@pytest.fixture()
def small_png_bytes() -> bytes:
    """A 100x50 PNG that fits the editor box unscaled."""
    return _png_bytes(100, 50, (40, 120, 200))


@pytest.fixture()
def png_file(small_png_bytes: bytes) -> MediaFile:
    return MediaFile.from_bytes("photo.png", small_png_bytes, "image/png")


@pytest.fixture()
def video_file() -> MediaFile:
    return MediaFile.from_bytes("clip.mp4", b"\x00\x00\x00\x18ftypmp42", "video/mp4")


@pytest.fixture()
def text_file() -> MediaFile:
    return MediaFile.from_bytes("notes.txt", b"hello", "text/plain")
