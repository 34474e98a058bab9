from abc import ABC, abstractmethod
from collections.abc import Sequence

from media_pipeline.media.models import MediaFile, UploadCallbacks, UploadOutcome


class BaseUploadService(ABC):
    """Contract for the external upload transport.

    Retry, batch concurrency and progress aggregation live behind this
    interface. Implementations return exactly one outcome per file.
    """

    @abstractmethod
    async def upload_one(
        self,
        file: MediaFile,
        endpoint: str,
        callbacks: UploadCallbacks | None = None,
        metadata: dict[str, str] | None = None,
    ) -> UploadOutcome:
        raise NotImplementedError

    @abstractmethod
    async def upload_many(
        self,
        files: Sequence[MediaFile],
        endpoint: str,
        callbacks: UploadCallbacks | None = None,
        metadata_list: Sequence[dict[str, str]] | None = None,
    ) -> list[UploadOutcome]:
        raise NotImplementedError
