import asyncio
from collections.abc import Sequence

from media_pipeline.logging.logger import Log
from media_pipeline.media.models import Dimensions, MediaFile, ProcessingResult
from media_pipeline.probe.base import BaseDimensionProbe
from media_pipeline.processing.hashing import HashFn, Sha256HashFn


class FileProcessor:
    """Computes best-effort content hashes and dimensions for a batch of files."""

    def __init__(
        self,
        dimension_probe: BaseDimensionProbe,
        hash_fn: HashFn | None = None,
    ) -> None:
        self._dimension_probe = dimension_probe
        self._hash_fn = hash_fn if hash_fn is not None else Sha256HashFn()

    async def process(self, files: Sequence[MediaFile]) -> list[ProcessingResult]:
        """Process every file concurrently; results keep the input order."""
        results = await asyncio.gather(
            *(self._process_one(file, index) for index, file in enumerate(files))
        )
        Log.debug(f"Processed {len(results)} files")
        return list(results)

    async def _process_one(self, file: MediaFile, index: int) -> ProcessingResult:
        content_hash, dimensions = await asyncio.gather(
            self._content_hash(file),
            self._dimensions(file),
        )
        return ProcessingResult(
            file=file,
            index=index,
            content_hash=content_hash,
            dimensions=dimensions,
        )

    async def _content_hash(self, file: MediaFile) -> str | None:
        try:
            data = await file.read()
            digest = await self._hash_fn.digest(data)
        except Exception as exc:
            Log.debug(f"Content hash skipped for {file.name}: {exc}")
            return None
        return digest.hex()

    async def _dimensions(self, file: MediaFile) -> Dimensions | None:
        try:
            return await self._dimension_probe.get_dimensions(file)
        except Exception as exc:
            Log.debug(f"Dimensions skipped for {file.name}: {exc}")
            return None
