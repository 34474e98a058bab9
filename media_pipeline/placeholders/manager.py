import asyncio
import time
import uuid
from collections.abc import Callable, Sequence

from media_pipeline.document.document import Document, Transaction
from media_pipeline.document.exceptions import DocumentError
from media_pipeline.document.schema import IMAGE, VIDEO, Node, Schema
from media_pipeline.logging.logger import Log
from media_pipeline.media.dimensions import PLACEHOLDER_PREFIX
from media_pipeline.media.exceptions import InsertionError
from media_pipeline.media.messages import INSERT_IMAGE_FAILED, INSERT_VIDEO_FAILED, UPLOAD_FAILED
from media_pipeline.media.models import Dimensions, MediaFile, PlaceholderEntry, ProcessingResult
from media_pipeline.stores.map_store import MapStore, without
from media_pipeline.thumbnail.base import BaseThumbnailService
from media_pipeline.validation.validator import BaseFileValidator

ReportError = Callable[[str], None]


def new_placeholder_id(timestamp_ms: int, index: int) -> str:
    return f"{PLACEHOLDER_PREFIX}{timestamp_ms}-{index}-{uuid.uuid4().hex[:9]}"


class PlaceholderManager:
    """Creates, enriches and removes the transient nodes that stand in for pending uploads."""

    def __init__(
        self,
        validator: BaseFileValidator,
        thumbnail_service: BaseThumbnailService,
        dimension_map: MapStore[str, Dimensions],
    ) -> None:
        self._validator = validator
        self._thumbnail_service = thumbnail_service
        self._dimension_map = dimension_map

    def insert(
        self,
        files: Sequence[MediaFile],
        processing_results: Sequence[ProcessingResult],
        document: Document,
        report_error: ReportError,
    ) -> list[PlaceholderEntry]:
        """Validate files and insert one placeholder per accepted file in a single transaction.

        Placement: after a selected media node; else replacing a lone empty
        paragraph; else at the cursor. Later files follow the earlier ones.

        Returns:
            Entries for the placeholders actually inserted, in input order.
        """
        results_by_index = {result.index: result for result in processing_results}
        selection = document.current_selection()
        after_selected_media = selection.node is not None and selection.node.is_media
        replace_content = not after_selected_media and document.is_only_empty_paragraph()
        cursor = selection.to_pos if after_selected_media else selection.from_pos

        tr = document.transaction()
        timestamp_ms = int(time.time() * 1000)
        entries: list[PlaceholderEntry] = []

        for index, file in enumerate(files):
            validation = self._validator.validate(file)
            if not validation.is_valid:
                Log.warning(f"Rejected {file.name}: {validation.error_message}")
                report_error(validation.error_message or UPLOAD_FAILED)
                continue

            placeholder_id = new_placeholder_id(timestamp_ms, index)
            result = results_by_index.get(index)
            dimensions = result.dimensions if result else None
            try:
                node = self._build_node(document.schema, file, placeholder_id, dimensions)
                cursor = self._place(tr, node, cursor, replace_content and not entries)
            except InsertionError as exc:
                Log.error(f"Placeholder insertion failed for {file.name}: {exc}")
                report_error(INSERT_VIDEO_FAILED if file.is_video else INSERT_IMAGE_FAILED)
                continue

            entries.append(
                PlaceholderEntry(
                    file=file,
                    placeholder_id=placeholder_id,
                    dimensions=dimensions,
                    content_hash=result.content_hash if result else None,
                )
            )

        if entries:
            document.dispatch(tr)
            self._record_dimensions(entries)
            Log.info(f"Inserted {len(entries)} of {len(files)} placeholders")
        return entries

    async def generate_blurhashes(
        self,
        entries: Sequence[PlaceholderEntry],
        document: Document,
    ) -> None:
        """Attach preview hashes to entries and their nodes; failures leave the field unset."""
        await asyncio.gather(*(self._generate_blurhash(entry, document) for entry in entries))

    def remove(self, placeholder_id: str, is_video: bool, document: Document) -> bool:
        """Delete a placeholder node and free its dimension key.

        Returns False when the node is already gone.
        """
        self._dimension_map.update(without(placeholder_id))
        found = self.locate(document, placeholder_id, is_video)
        if found is None:
            return False
        node, pos = found
        tr = document.transaction()
        tr.delete(pos, pos + node.node_size)
        document.dispatch(tr)
        Log.debug(f"Removed placeholder {placeholder_id}")
        return True

    @staticmethod
    def locate(
        document: Document,
        placeholder_id: str,
        is_video: bool,
    ) -> tuple[Node, int] | None:
        node_type = VIDEO if is_video else IMAGE
        return document.find(
            lambda node, _pos: node.type == node_type
            and placeholder_id in (node.attrs.get("src"), node.attrs.get("id"))
        )

    async def _generate_blurhash(self, entry: PlaceholderEntry, document: Document) -> None:
        try:
            blurhash = await self._thumbnail_service.generate(entry.file)
        except Exception as exc:
            Log.debug(f"Blurhash skipped for {entry.file.name}: {exc}")
            return
        if not blurhash:
            return

        found = self.locate(document, entry.placeholder_id, entry.is_video)
        if found is None:
            Log.debug(f"Placeholder {entry.placeholder_id} vanished before blurhash patch")
            return
        _node, pos = found
        try:
            tr = document.transaction()
            tr.set_attributes(pos, {"blurhash": blurhash})
            document.dispatch(tr)
        except DocumentError as exc:
            Log.debug(f"Blurhash patch failed for {entry.placeholder_id}: {exc}")
            return
        entry.blurhash = blurhash

    @staticmethod
    def _build_node(
        schema: Schema,
        file: MediaFile,
        placeholder_id: str,
        dimensions: Dimensions | None,
    ) -> Node:
        attrs: dict[str, object] = {"src": placeholder_id, "isPlaceholder": True}
        if dimensions is not None:
            attrs["dim"] = dimensions.dim
        try:
            return schema.node(VIDEO if file.is_video else IMAGE, attrs)
        except DocumentError as exc:
            raise InsertionError(str(exc)) from exc

    @staticmethod
    def _place(tr: Transaction, node: Node, cursor: int, replace_content: bool) -> int:
        try:
            if replace_content:
                return tr.replace_with(0, tr.content_size, node)
            return tr.insert(cursor, node)
        except DocumentError as exc:
            raise InsertionError(str(exc)) from exc

    def _record_dimensions(self, entries: Sequence[PlaceholderEntry]) -> None:
        known = {
            entry.placeholder_id: entry.dimensions
            for entry in entries
            if entry.dimensions is not None
        }
        if known:
            self._dimension_map.update(lambda current: {**current, **known})
