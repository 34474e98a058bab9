from abc import ABC, abstractmethod

from media_pipeline.media.models import Dimensions, MediaFile


class BaseDimensionProbe(ABC):
    """Contract for all media dimension probes."""

    @abstractmethod
    async def get_dimensions(self, file: MediaFile) -> Dimensions | None:
        """Read the natural size of a media file.

        Args:
            file: The media file to inspect.

        Returns:
            Dimensions with the editor display size filled in, or None when
            the probe does not support the file's type.

        Raises:
            DimensionProbeError: if a supported file cannot be decoded.
        """


class NullDimensionProbe(BaseDimensionProbe):
    """Never reports dimensions."""

    async def get_dimensions(self, file: MediaFile) -> Dimensions | None:
        _ = file
        return None
