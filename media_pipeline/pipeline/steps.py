import asyncio
from collections.abc import Awaitable, Callable

from media_pipeline.logging.logger import Log
from media_pipeline.media.exceptions import DispatchError
from media_pipeline.media.messages import UPLOAD_FAILED
from media_pipeline.media.models import Dimensions
from media_pipeline.pipeline.context import PipelineContext, PipelineStep
from media_pipeline.placeholders.manager import PlaceholderManager
from media_pipeline.processing.file_processor import FileProcessor
from media_pipeline.reconciliation.engine import HashMaps, ReconciliationEngine
from media_pipeline.stores.map_store import MapStore
from media_pipeline.tags.imeta import (
    build_imeta_tag,
    extract_image_blurhash_map,
    get_mime_type_from_url,
)
from media_pipeline.upload.dispatcher import UploadDispatcher
from media_pipeline.upload.metadata import prepare_metadata_list

Settle = Callable[[], Awaitable[None]]


async def yield_to_loop() -> None:
    await asyncio.sleep(0)


class ProcessFilesStep(PipelineStep):
    def __init__(self, file_processor: FileProcessor) -> None:
        self._file_processor = file_processor

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.processing_results = await self._file_processor.process(context.files)
        return context


class InsertPlaceholdersStep(PipelineStep):
    def __init__(self, placeholder_manager: PlaceholderManager) -> None:
        self._placeholder_manager = placeholder_manager

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.entries = self._placeholder_manager.insert(
            context.files,
            context.processing_results,
            context.document,
            context.report_error,
        )
        return context


class GenerateBlurhashesStep(PipelineStep):
    def __init__(self, placeholder_manager: PlaceholderManager) -> None:
        self._placeholder_manager = placeholder_manager

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._placeholder_manager.generate_blurhashes(context.entries, context.document)
        return context


class DispatchUploadStep(PipelineStep):
    def __init__(self, dispatcher: UploadDispatcher, endpoint: str) -> None:
        self._dispatcher = dispatcher
        self._endpoint = endpoint

    async def run(self, context: PipelineContext) -> PipelineContext:
        files = [entry.file for entry in context.entries]
        try:
            context.outcomes = await self._dispatcher.upload(
                files,
                self._endpoint,
                context.callbacks,
                prepare_metadata_list(context.entries),
            )
        except DispatchError as exc:
            Log.error(f"Upload dispatch failed for {len(files)} file(s): {exc}")
            context.report_error(str(exc) or UPLOAD_FAILED)
            context.outcomes = None
            return context

        succeeded = sum(1 for outcome in context.outcomes if outcome.success)
        Log.info(f"Upload finished: {succeeded} of {len(context.outcomes)} succeeded")
        return context


class SettleStep(PipelineStep):
    """Lets the host apply pending state changes before reconciliation touches the document."""

    def __init__(self, settle: Settle = yield_to_loop) -> None:
        self._settle = settle

    async def run(self, context: PipelineContext) -> PipelineContext:
        await self._settle()
        return context


class ReconcileStep(PipelineStep):
    def __init__(self, engine: ReconciliationEngine, hash_maps: HashMaps) -> None:
        self._engine = engine
        self._hash_maps = hash_maps

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.reconciliation = await self._engine.reconcile(
            context.outcomes or [],
            context.entries,
            context.document,
            self._hash_maps,
        )
        context.reconciled = True
        return context


class LogImetaTagsStep(PipelineStep):
    """Logs the imeta tags a post would carry for this batch's images (dev mode only)."""

    def __init__(self, dimension_map: MapStore[str, Dimensions]) -> None:
        self._dimension_map = dimension_map

    async def run(self, context: PipelineContext) -> PipelineContext:
        reconciliation = context.reconciliation
        if reconciliation is None:
            return context
        try:
            local_blurhashes = extract_image_blurhash_map(context.document)
            dimensions = self._dimension_map.get()
            server_blurhashes = reconciliation.server_blurhash_map
            urls = dict.fromkeys([*local_blurhashes, *server_blurhashes])
            for url in urls:
                dims = dimensions.get(url)
                tag = build_imeta_tag(
                    url,
                    get_mime_type_from_url(url),
                    blurhash=server_blurhashes.get(url) or local_blurhashes.get(url),
                    dim=dims.dim if dims else None,
                    ox=reconciliation.content_hashes.get(url),
                    x=reconciliation.uploaded_hashes.get(url),
                )
                Log.debug(f"imeta for {url}: {tag}")
        except ValueError as exc:
            Log.warning(f"Could not build imeta tags: {exc}")
        return context


class ClearFileInputStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.file_input is not None:
            context.file_input.clear()
        return context


class RemovePendingPlaceholdersStep(PipelineStep):
    """Cleanup after an unexpected failure: no placeholder may outlive the run."""

    def __init__(self, placeholder_manager: PlaceholderManager) -> None:
        self._placeholder_manager = placeholder_manager

    async def run(self, context: PipelineContext) -> PipelineContext:
        removed = 0
        for entry in context.entries:
            if self._placeholder_manager.remove(
                entry.placeholder_id, entry.is_video, context.document
            ):
                removed += 1
        if removed:
            Log.warning(f"Removed {removed} pending placeholder(s) after failure")
        context.reconciled = True
        return context
