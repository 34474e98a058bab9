from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from media_pipeline.config.settings import Settings
from media_pipeline.document.document import Document
from media_pipeline.logging.logger import Log
from media_pipeline.media.messages import UPLOAD_FAILED
from media_pipeline.media.models import Dimensions, MediaFile, UploadCallbacks
from media_pipeline.pipeline.context import (
    FileInput,
    PipelineContext,
    PipelineStep,
    ReportError,
    UpdateUploadState,
)
from media_pipeline.pipeline.models import PipelineResult
from media_pipeline.pipeline.steps import (
    ClearFileInputStep,
    DispatchUploadStep,
    GenerateBlurhashesStep,
    InsertPlaceholdersStep,
    LogImetaTagsStep,
    ProcessFilesStep,
    ReconcileStep,
    RemovePendingPlaceholdersStep,
    Settle,
    SettleStep,
    yield_to_loop,
)
from media_pipeline.placeholders.manager import PlaceholderManager
from media_pipeline.probe.factory import DimensionProbeFactory
from media_pipeline.processing.file_processor import FileProcessor
from media_pipeline.processing.hashing import HashFn
from media_pipeline.reconciliation.engine import HashMaps, ReconciliationEngine
from media_pipeline.reconciliation.uploaded_hash import UploadedHashFetcher
from media_pipeline.stores.map_store import MapStore
from media_pipeline.thumbnail.factory import ThumbnailServiceFactory
from media_pipeline.upload.base import BaseUploadService
from media_pipeline.upload.dispatcher import UploadDispatcher
from media_pipeline.validation.validator import BaseFileValidator, MediaFileValidator


@contextmanager
def upload_busy(update_upload_state: UpdateUploadState) -> Iterator[None]:
    update_upload_state(True, "")
    try:
        yield
    finally:
        update_upload_state(False)


class Orchestrator:
    """Runs one upload batch against a live document.

    Pipeline: process -> insert placeholders -> [busy: blurhash -> upload]
    -> settle -> reconcile -> clear file input. A batch with no accepted
    file stops after insertion and never touches the busy flag.
    """

    def __init__(
        self,
        prepare_steps: Sequence[PipelineStep],
        upload_steps: Sequence[PipelineStep],
        finish_steps: Sequence[PipelineStep],
        cleanup_step: PipelineStep,
    ) -> None:
        self._prepare_steps = list(prepare_steps)
        self._upload_steps = list(upload_steps)
        self._finish_steps = list(finish_steps)
        self._cleanup_step = cleanup_step

    async def run(
        self,
        files: Sequence[MediaFile],
        document: Document,
        report_error: ReportError,
        update_upload_state: UpdateUploadState,
        callbacks: UploadCallbacks | None = None,
        file_input: FileInput | None = None,
    ) -> PipelineResult:
        """Upload files into document; never raises."""
        context = PipelineContext(
            files=list(files),
            document=document,
            report_error=report_error,
            callbacks=callbacks,
            file_input=file_input,
        )
        Log.info(f"Starting upload batch of {len(context.files)} file(s)")

        try:
            context = await self._run_steps(self._prepare_steps, context)
            if not context.entries:
                Log.info("No files accepted, nothing to upload")
                return PipelineResult.from_context(context)

            with upload_busy(update_upload_state):
                context = await self._run_steps(self._upload_steps, context)

            context = await self._run_steps(self._finish_steps, context)
        except Exception as exc:
            Log.exception(f"Upload batch failed: {exc}")
            context.unexpected_error = str(exc) or UPLOAD_FAILED
            report_error(context.unexpected_error)
            context = await self._cleanup(context)

        return PipelineResult.from_context(context)

    @staticmethod
    async def _run_steps(
        steps: Sequence[PipelineStep],
        context: PipelineContext,
    ) -> PipelineContext:
        for step in steps:
            context = await step.run(context)
        return context

    async def _cleanup(self, context: PipelineContext) -> PipelineContext:
        try:
            return await self._cleanup_step.run(context)
        except Exception as exc:
            Log.exception(f"Placeholder cleanup failed: {exc}")
            return context


def build_orchestrator(
    settings: Settings,
    upload_service: BaseUploadService,
    dimension_map: MapStore[str, Dimensions] | None = None,
    hash_maps: HashMaps | None = None,
    validator: BaseFileValidator | None = None,
    hash_fn: HashFn | None = None,
    uploaded_hash_fetcher: UploadedHashFetcher | None = None,
    settle: Settle = yield_to_loop,
) -> Orchestrator:
    """Build an Orchestrator with the default adapters selected by settings."""
    Log.configure(settings.log_level, dev_mode=settings.dev_mode)
    dimension_map = dimension_map if dimension_map is not None else MapStore()
    hash_maps = hash_maps or HashMaps(content=MapStore(), uploaded=MapStore())
    validator = validator or MediaFileValidator(settings.max_file_size_bytes)
    uploaded_hash_fetcher = uploaded_hash_fetcher or UploadedHashFetcher(
        timeout_seconds=settings.uploaded_hash_timeout_seconds
    )

    file_processor = FileProcessor(DimensionProbeFactory.create(settings), hash_fn=hash_fn)
    placeholder_manager = PlaceholderManager(
        validator=validator,
        thumbnail_service=ThumbnailServiceFactory.create(settings),
        dimension_map=dimension_map,
    )
    engine = ReconciliationEngine(placeholder_manager, dimension_map, uploaded_hash_fetcher)

    finish_steps: list[PipelineStep] = [
        SettleStep(settle),
        ReconcileStep(engine, hash_maps),
    ]
    if settings.dev_mode:
        finish_steps.append(LogImetaTagsStep(dimension_map))
    finish_steps.append(ClearFileInputStep())

    return Orchestrator(
        prepare_steps=[
            ProcessFilesStep(file_processor),
            InsertPlaceholdersStep(placeholder_manager),
        ],
        upload_steps=[
            GenerateBlurhashesStep(placeholder_manager),
            DispatchUploadStep(UploadDispatcher(upload_service), settings.upload_endpoint),
        ],
        finish_steps=finish_steps,
        cleanup_step=RemovePendingPlaceholdersStep(placeholder_manager),
    )
