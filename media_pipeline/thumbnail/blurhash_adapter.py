import asyncio
import io

import blurhash
from PIL import Image

from media_pipeline.media.exceptions import ThumbnailError
from media_pipeline.media.models import MediaFile
from media_pipeline.thumbnail.base import BaseThumbnailService

# Images are downsampled to at most this size before encoding.
_SAMPLE_SIZE = (32, 32)


class BlurhashThumbnailService(BaseThumbnailService):
    """Encodes a downsampled copy of an image as a blurhash string."""

    def __init__(self, components_x: int = 4, components_y: int = 3) -> None:
        self._components_x = components_x
        self._components_y = components_y

    async def generate(self, file: MediaFile) -> str | None:
        if not file.is_image:
            return None
        data = await file.read()
        return await asyncio.to_thread(self._encode, data, file.name)

    def _encode(self, data: bytes, name: str) -> str:
        try:
            with Image.open(io.BytesIO(data)) as img:
                sample = img.convert("RGB")
                sample.thumbnail(_SAMPLE_SIZE)
                width, height = sample.size
                pixels = sample.load()
                rows = [[list(pixels[x, y]) for x in range(width)] for y in range(height)]
            return blurhash.encode(
                rows,
                components_x=self._components_x,
                components_y=self._components_y,
            )
        except Exception as exc:
            raise ThumbnailError(f"blurhash encoding failed for '{name}': {exc}") from exc
