from collections.abc import Sequence

from media_pipeline.logging.logger import Log
from media_pipeline.media.exceptions import DispatchError
from media_pipeline.media.models import MediaFile, UploadCallbacks, UploadOutcome
from media_pipeline.upload.base import BaseUploadService


class UploadDispatcher:
    """Chooses the single- or multi-file upload form and normalizes failures."""

    def __init__(self, upload_service: BaseUploadService) -> None:
        self._upload_service = upload_service

    async def upload(
        self,
        files: Sequence[MediaFile],
        endpoint: str,
        callbacks: UploadCallbacks | None = None,
        metadata_list: Sequence[dict[str, str]] | None = None,
    ) -> list[UploadOutcome]:
        """Upload files and return one outcome per file, in collaborator order.

        Raises:
            DispatchError: if the collaborator raises; no partial outcomes are kept.
        """
        if not files:
            return []

        Log.info(f"Dispatching {len(files)} file(s) to {endpoint}")
        try:
            if len(files) == 1:
                metadata = metadata_list[0] if metadata_list else None
                outcome = await self._upload_service.upload_one(
                    files[0], endpoint, callbacks, metadata
                )
                return [outcome]
            outcomes = await self._upload_service.upload_many(
                files, endpoint, callbacks, metadata_list
            )
        except Exception as exc:
            raise DispatchError(str(exc)) from exc
        return list(outcomes)
