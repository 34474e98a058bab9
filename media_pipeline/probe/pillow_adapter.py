import asyncio
import io

from PIL import Image

from media_pipeline.media.dimensions import (
    EDITOR_MAX_HEIGHT,
    EDITOR_MAX_WIDTH,
    calculate_display_size,
)
from media_pipeline.media.exceptions import DimensionProbeError
from media_pipeline.media.models import Dimensions, MediaFile
from media_pipeline.probe.base import BaseDimensionProbe


class PillowDimensionProbe(BaseDimensionProbe):
    """Reads image dimensions with Pillow; videos are unsupported."""

    def __init__(
        self,
        max_width: int = EDITOR_MAX_WIDTH,
        max_height: int = EDITOR_MAX_HEIGHT,
    ) -> None:
        self._max_width = max_width
        self._max_height = max_height

    async def get_dimensions(self, file: MediaFile) -> Dimensions | None:
        if not file.is_image:
            return None
        data = await file.read()
        width, height = await asyncio.to_thread(self._read_size, data, file.name)
        return calculate_display_size(width, height, self._max_width, self._max_height)

    @staticmethod
    def _read_size(data: bytes, name: str) -> tuple[int, int]:
        try:
            with Image.open(io.BytesIO(data)) as img:
                return img.size
        except Exception as exc:
            raise DimensionProbeError(f"Pillow could not read '{name}': {exc}") from exc
