"""In-memory block document with versioned, copy-on-write transactions.

Positions follow the usual rich-text convention: a text block occupies
``len(text) + 2`` positions (open token, characters, close token) and a media
leaf occupies one. Positions are recomputed from the node list on every
lookup, so nothing positional survives a dispatch.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from typing import Any

from media_pipeline.document.exceptions import PositionError, StaleTransactionError
from media_pipeline.document.schema import DEFAULT_SCHEMA, PARAGRAPH, Node, Schema


@dataclass(frozen=True)
class Selection:
    """Cursor or range; node is set for a node selection."""

    from_pos: int
    to_pos: int
    node: Node | None = None


def _iter_positions(nodes: list[Node] | tuple[Node, ...]) -> Iterator[tuple[int, Node]]:
    pos = 0
    for node in nodes:
        yield pos, node
        pos += node.node_size


def _content_size(nodes: list[Node] | tuple[Node, ...]) -> int:
    return sum(node.node_size for node in nodes)


def _resolve(nodes: list[Node] | tuple[Node, ...], pos: int) -> tuple[int, int]:
    """Return (node index, offset into that node); offset 0 is the boundary before it."""
    if pos < 0:
        raise PositionError(f"Position {pos} is negative")
    for index, (start, node) in enumerate(_iter_positions(nodes)):
        if pos == start:
            return index, 0
        if start < pos < start + node.node_size:
            return index, pos - start
    if pos == _content_size(nodes):
        return len(nodes), 0
    raise PositionError(f"Position {pos} is outside the document (size {_content_size(nodes)})")


class Transaction:
    """A batch of document steps applied to a private copy of the node list."""

    def __init__(self, document: "Document") -> None:
        self._document = document
        self.base_version = document.version
        self._nodes = list(document.nodes)
        self.steps = 0

    @property
    def document(self) -> "Document":
        return self._document

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def content_size(self) -> int:
        return _content_size(self._nodes)

    @property
    def doc_changed(self) -> bool:
        return self.steps > 0

    def insert(self, pos: int, node: Node) -> int:
        """Insert a block at pos and return the position right after it.

        A position inside a text block splits it; the text start and end
        collapse to the boundary before and after the block.
        """
        index, offset = _resolve(self._nodes, pos)
        if offset == 0:
            self._nodes.insert(index, node)
            end = pos + node.node_size
        else:
            target = self._nodes[index]
            start = pos - offset
            text_offset = offset - 1
            if text_offset == 0:
                self._nodes.insert(index, node)
                end = start + node.node_size
            elif text_offset == len(target.text):
                self._nodes.insert(index + 1, node)
                end = start + target.node_size + node.node_size
            else:
                head = replace(target, text=target.text[:text_offset])
                tail = replace(target, text=target.text[text_offset:])
                self._nodes[index : index + 1] = [head, node, tail]
                end = start + head.node_size + node.node_size
        self.steps += 1
        return end

    def replace_with(self, start: int, end: int, node: Node) -> int:
        """Replace the block range [start, end) with node; return the position after it."""
        first, last = self._block_range(start, end)
        self._nodes[first:last] = [node]
        self.steps += 1
        return start + node.node_size

    def set_attributes(self, pos: int, attrs: dict[str, Any]) -> None:
        index, offset = _resolve(self._nodes, pos)
        if offset != 0 or index >= len(self._nodes):
            raise PositionError(f"No node starts at position {pos}")
        node = self._nodes[index]
        self._nodes[index] = self._document.schema.node(
            node.type, {**node.attrs, **attrs}, text=node.text
        )
        self.steps += 1

    def delete(self, start: int, end: int) -> None:
        first, last = self._block_range(start, end)
        del self._nodes[first:last]
        if not self._nodes:
            self._nodes.append(self._document.schema.paragraph())
        self.steps += 1

    def _block_range(self, start: int, end: int) -> tuple[int, int]:
        if end < start:
            raise PositionError(f"Range end {end} precedes start {start}")
        first, start_offset = _resolve(self._nodes, start)
        last, end_offset = _resolve(self._nodes, end)
        if start_offset or end_offset:
            raise PositionError(f"Range {start}..{end} does not align with block boundaries")
        return first, last


class Document:
    """Shared mutable document; every change goes through dispatch(transaction)."""

    def __init__(self, nodes: list[Node] | None = None, schema: Schema = DEFAULT_SCHEMA) -> None:
        self.schema = schema
        self._nodes: tuple[Node, ...] = tuple(nodes) if nodes else (schema.paragraph(),)
        self._version = 0
        self._selection = self._cursor_at(1 if self._nodes[0].is_textblock else 0)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._nodes

    @property
    def version(self) -> int:
        return self._version

    @property
    def content_size(self) -> int:
        return _content_size(self._nodes)

    def current_selection(self) -> Selection:
        return self._selection

    def set_cursor(self, pos: int) -> None:
        _resolve(self._nodes, pos)
        self._selection = self._cursor_at(pos)

    def select_node(self, pos: int) -> None:
        index, offset = _resolve(self._nodes, pos)
        if offset != 0 or index >= len(self._nodes):
            raise PositionError(f"No node starts at position {pos}")
        node = self._nodes[index]
        self._selection = Selection(pos, pos + node.node_size, node)

    def traverse(self, visit: Callable[[Node, int], bool | None]) -> None:
        """Visit top-level nodes in order; a visitor returning False stops the walk."""
        for pos, node in _iter_positions(self._nodes):
            if visit(node, pos) is False:
                return

    def find(self, predicate: Callable[[Node, int], bool]) -> tuple[Node, int] | None:
        for pos, node in _iter_positions(self._nodes):
            if predicate(node, pos):
                return node, pos
        return None

    def is_only_empty_paragraph(self) -> bool:
        return (
            len(self._nodes) == 1
            and self._nodes[0].type == PARAGRAPH
            and self._nodes[0].text == ""
        )

    def transaction(self) -> Transaction:
        return Transaction(self)

    def dispatch(self, tr: Transaction) -> None:
        """Commit a transaction atomically and bump the version.

        Raises:
            StaleTransactionError: if the transaction belongs to another document
                or the document changed since it was created.
        """
        if tr.document is not self:
            raise StaleTransactionError("Transaction was created for a different document")
        if tr.base_version != self._version:
            raise StaleTransactionError(
                f"Transaction built on version {tr.base_version}, document is at {self._version}"
            )
        if not tr.doc_changed:
            return
        self._nodes = tr.nodes
        self._version += 1
        self._selection = self._restore_selection(self._selection)

    def _cursor_at(self, pos: int) -> Selection:
        return Selection(pos, pos)

    def _restore_selection(self, selection: Selection) -> Selection:
        size = self.content_size
        from_pos = min(selection.from_pos, size)
        to_pos = min(selection.to_pos, size)
        if selection.node is None:
            return Selection(from_pos, to_pos)
        found = self.find(lambda node, pos: pos == from_pos and node.type == selection.node.type)
        if found is None:
            return self._cursor_at(from_pos)
        node, pos = found
        return Selection(pos, pos + node.node_size, node)
