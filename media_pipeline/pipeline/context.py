from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from media_pipeline.document.document import Document
from media_pipeline.media.models import (
    MediaFile,
    PlaceholderEntry,
    ProcessingResult,
    UploadCallbacks,
    UploadOutcome,
)
from media_pipeline.reconciliation.engine import ReconciliationResult

ReportError = Callable[[str], None]
UpdateUploadState = Callable[..., None]


class FileInput(Protocol):
    """Host-side file picker that can be reset after a batch."""

    def clear(self) -> None: ...


@dataclass(slots=True)
class PipelineContext:
    files: list[MediaFile]
    document: Document
    report_error: ReportError
    callbacks: UploadCallbacks | None = None
    file_input: FileInput | None = None
    processing_results: list[ProcessingResult] = field(default_factory=list)
    entries: list[PlaceholderEntry] = field(default_factory=list)
    outcomes: list[UploadOutcome] | None = None
    reconciliation: ReconciliationResult | None = None
    reconciled: bool = False
    unexpected_error: str = ""


class PipelineStep(ABC):
    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
