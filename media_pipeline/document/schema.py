from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from media_pipeline.document.exceptions import SchemaError

PARAGRAPH = "paragraph"
IMAGE = "image"
VIDEO = "video"
MEDIA_TYPES = frozenset({IMAGE, VIDEO})


@dataclass(frozen=True)
class NodeSpec:
    """Declares a node type: its attribute defaults and whether it holds text."""

    name: str
    attrs: Mapping[str, Any] = field(default_factory=dict)
    text: bool = False


@dataclass(frozen=True)
class Node:
    """Immutable top-level block. Text blocks take len(text) + 2 positions, leaves one."""

    type: str
    attrs: Mapping[str, Any] = field(default_factory=dict)
    text: str = ""
    is_textblock: bool = False

    @property
    def node_size(self) -> int:
        return len(self.text) + 2 if self.is_textblock else 1

    @property
    def is_media(self) -> bool:
        return self.type in MEDIA_TYPES


class Schema:
    """Builds nodes and rejects unknown types, unknown attributes and misplaced text."""

    def __init__(self, specs: Iterable[NodeSpec]) -> None:
        self._specs = {spec.name: spec for spec in specs}

    def node(
        self,
        type_name: str,
        attrs: Mapping[str, Any] | None = None,
        text: str = "",
    ) -> Node:
        spec = self._specs.get(type_name)
        if spec is None:
            raise SchemaError(f"Unknown node type '{type_name}'")
        given = dict(attrs or {})
        unknown = sorted(set(given) - set(spec.attrs))
        if unknown:
            raise SchemaError(f"Node type '{type_name}' has no attributes {unknown}")
        if text and not spec.text:
            raise SchemaError(f"Node type '{type_name}' cannot hold text")
        return Node(
            type=type_name,
            attrs={**spec.attrs, **given},
            text=text,
            is_textblock=spec.text,
        )

    def paragraph(self, text: str = "") -> Node:
        return self.node(PARAGRAPH, text=text)


_MEDIA_ATTRS: dict[str, Any] = {
    "src": None,
    "id": None,
    "alt": None,
    "isPlaceholder": False,
    "blurhash": None,
    "dim": None,
}

DEFAULT_SCHEMA = Schema(
    [
        NodeSpec(PARAGRAPH, text=True),
        NodeSpec(IMAGE, attrs=_MEDIA_ATTRS),
        NodeSpec(VIDEO, attrs=_MEDIA_ATTRS),
    ]
)
