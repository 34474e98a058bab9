from dataclasses import dataclass, field

from media_pipeline.media.models import PlaceholderEntry, UploadOutcome
from media_pipeline.pipeline.context import PipelineContext


@dataclass
class PipelineResult:
    """What one pipeline run leaves behind for the caller.

    placeholder_map holds entries that were never reconciled; it is empty
    once reconciliation has run. results is None when nothing was dispatched
    or the dispatch failed. error_message summarizes failed_results and is
    empty exactly when they are; an exception that aborted the run is kept
    in unexpected_error instead.
    """

    placeholder_map: list[PlaceholderEntry] = field(default_factory=list)
    results: list[UploadOutcome] | None = None
    content_hashes: dict[str, str] = field(default_factory=dict)
    uploaded_hashes: dict[str, str] = field(default_factory=dict)
    failed_results: list[UploadOutcome] = field(default_factory=list)
    error_message: str = ""
    server_blurhash_map: dict[str, str] = field(default_factory=dict)
    unexpected_error: str = ""

    @classmethod
    def from_context(cls, context: PipelineContext) -> "PipelineResult":
        reconciliation = context.reconciliation
        if reconciliation is None:
            return cls(
                placeholder_map=[] if context.reconciled else list(context.entries),
                results=context.outcomes,
                unexpected_error=context.unexpected_error,
            )
        return cls(
            placeholder_map=[],
            results=context.outcomes,
            content_hashes=dict(reconciliation.content_hashes),
            uploaded_hashes=dict(reconciliation.uploaded_hashes),
            failed_results=list(reconciliation.failed_outcomes),
            error_message=reconciliation.error_message,
            server_blurhash_map=dict(reconciliation.server_blurhash_map),
            unexpected_error=context.unexpected_error,
        )
