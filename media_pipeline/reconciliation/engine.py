import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field, replace

from media_pipeline.document.document import Document
from media_pipeline.document.exceptions import DocumentError
from media_pipeline.logging.logger import Log
from media_pipeline.media.exceptions import UploadedHashError
from media_pipeline.media.messages import (
    INSERT_IMAGE_FAILED,
    INSERT_VIDEO_FAILED,
    MULTIPLE_UPLOADS_FAILED,
    UPLOAD_FAILED,
)
from media_pipeline.media.models import Dimensions, PlaceholderEntry, UploadOutcome
from media_pipeline.placeholders.manager import PlaceholderManager
from media_pipeline.reconciliation.uploaded_hash import UploadedHashFetcher
from media_pipeline.stores.map_store import MapStore, moved


@dataclass(frozen=True)
class HashMaps:
    """Cross-batch url -> hash stores updated after every reconciliation."""

    content: MapStore[str, str]
    uploaded: MapStore[str, str]


@dataclass
class ReconciliationResult:
    failed_outcomes: list[UploadOutcome] = field(default_factory=list)
    error_message: str = ""
    server_blurhash_map: dict[str, str] = field(default_factory=dict)
    content_hashes: dict[str, str] = field(default_factory=dict)
    uploaded_hashes: dict[str, str] = field(default_factory=dict)


def build_error_message(failed_outcomes: Sequence[UploadOutcome]) -> str:
    if not failed_outcomes:
        return ""
    if len(failed_outcomes) == 1:
        return failed_outcomes[0].error or UPLOAD_FAILED
    return MULTIPLE_UPLOADS_FAILED.format(count=len(failed_outcomes))


def match_entry(
    outcome: UploadOutcome,
    remaining: Sequence[PlaceholderEntry],
) -> PlaceholderEntry | None:
    """Pick the entry an outcome belongs to.

    Order: echoed correlation id, then original filename, then the earliest
    remaining entry. None when nothing is left.
    """
    if outcome.correlation_id:
        for entry in remaining:
            if entry.placeholder_id == outcome.correlation_id:
                return entry
    if outcome.original_filename:
        for entry in remaining:
            if entry.file.name == outcome.original_filename:
                return entry
    return remaining[0] if remaining else None


class ReconciliationEngine:
    """Applies upload outcomes to their placeholders, each placeholder at most once."""

    def __init__(
        self,
        placeholder_manager: PlaceholderManager,
        dimension_map: MapStore[str, Dimensions],
        uploaded_hash_fetcher: UploadedHashFetcher | None = None,
    ) -> None:
        self._placeholders = placeholder_manager
        self._dimension_map = dimension_map
        self._uploaded_hash_fetcher = uploaded_hash_fetcher

    async def reconcile(
        self,
        outcomes: Sequence[UploadOutcome],
        entries: Sequence[PlaceholderEntry],
        document: Document,
        hash_maps: HashMaps,
    ) -> ReconciliationResult:
        """Finalize, remove or discard per outcome, then force-remove leftovers.

        Returns:
            The batch's failures, summary message and per-URL hashes.
        """
        result = ReconciliationResult()
        remaining = list(entries)
        urls_to_fetch: list[str] = []

        for outcome in outcomes:
            entry = match_entry(outcome, remaining)
            if entry is None:
                Log.warning(
                    "Discarding upload outcome with no pending placeholder",
                    filename=outcome.original_filename,
                )
                continue
            remaining.remove(entry)

            if outcome.aborted:
                self._placeholders.remove(entry.placeholder_id, entry.is_video, document)
                Log.info(f"Upload of {entry.file.name} aborted")
                continue

            if outcome.success and outcome.url:
                try:
                    self._finalize(entry, outcome.url, document)
                except DocumentError as exc:
                    Log.error(f"Could not finalize placeholder {entry.placeholder_id}: {exc}")
                    failed_message = INSERT_VIDEO_FAILED if entry.is_video else INSERT_IMAGE_FAILED
                    outcome = replace(outcome, success=False, error=failed_message)
                else:
                    self._collect_hashes(entry, outcome, result, urls_to_fetch)
                    continue

            self._placeholders.remove(entry.placeholder_id, entry.is_video, document)
            result.failed_outcomes.append(outcome)
            Log.warning(f"Upload of {entry.file.name} failed: {outcome.error or UPLOAD_FAILED}")

        for entry in remaining:
            Log.debug(f"Force-removing unreconciled placeholder {entry.placeholder_id}")
            self._placeholders.remove(entry.placeholder_id, entry.is_video, document)

        if urls_to_fetch:
            fetched = await asyncio.gather(
                *(self._fetch_uploaded_hash(url) for url in urls_to_fetch)
            )
            for url, digest in zip(urls_to_fetch, fetched):
                if digest is not None:
                    result.uploaded_hashes[url] = digest

        if result.content_hashes:
            hash_maps.content.update(lambda current: {**current, **result.content_hashes})
        if result.uploaded_hashes:
            hash_maps.uploaded.update(lambda current: {**current, **result.uploaded_hashes})

        result.error_message = build_error_message(result.failed_outcomes)
        return result

    def _finalize(self, entry: PlaceholderEntry, url: str, document: Document) -> None:
        """Point the placeholder node at its hosted URL and move its dimension key.

        Raises:
            DocumentError: if the node cannot be rewritten. The node and its
                dimension key are left in place for the caller to remove.
        """
        found = self._placeholders.locate(document, entry.placeholder_id, entry.is_video)
        if found is None:
            Log.debug(f"Placeholder {entry.placeholder_id} was deleted before finalization")
            self._dimension_map.update(moved(entry.placeholder_id, url, entry.dimensions))
            return
        node, pos = found

        attrs: dict[str, object] = {"src": url, "isPlaceholder": False}
        if node.attrs.get("id") == entry.placeholder_id:
            attrs["id"] = url
        if entry.blurhash:
            attrs["blurhash"] = entry.blurhash
        if entry.dimensions is not None:
            attrs["dim"] = entry.dimensions.dim
        tr = document.transaction()
        tr.set_attributes(pos, attrs)
        document.dispatch(tr)
        self._dimension_map.update(moved(entry.placeholder_id, url, entry.dimensions))
        Log.info(f"Finalized {entry.file.name} as {url}")

    @staticmethod
    def _collect_hashes(
        entry: PlaceholderEntry,
        outcome: UploadOutcome,
        result: ReconciliationResult,
        urls_to_fetch: list[str],
    ) -> None:
        url = outcome.url
        content_hash = outcome.server_content_hash or entry.content_hash
        if content_hash:
            result.content_hashes[url] = content_hash
        if outcome.server_uploaded_hash:
            result.uploaded_hashes[url] = outcome.server_uploaded_hash
        else:
            urls_to_fetch.append(url)
        if outcome.server_blurhash:
            result.server_blurhash_map[url] = outcome.server_blurhash

    async def _fetch_uploaded_hash(self, url: str) -> str | None:
        if self._uploaded_hash_fetcher is None:
            return None
        try:
            return await self._uploaded_hash_fetcher.fetch(url)
        except UploadedHashError as exc:
            Log.debug(f"Uploaded hash unavailable for {url}: {exc}")
            return None
