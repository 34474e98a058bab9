from abc import ABC, abstractmethod

from media_pipeline.media.models import MediaFile


class BaseThumbnailService(ABC):
    """Contract for thumbnail (preview hash) generators."""

    @abstractmethod
    async def generate(self, file: MediaFile) -> str | None:
        """Return a compact preview hash for the file, or None if unsupported.

        Raises:
            ThumbnailError: if a supported file cannot be encoded.
        """


class NullThumbnailService(BaseThumbnailService):
    async def generate(self, file: MediaFile) -> str | None:
        _ = file
        return None
