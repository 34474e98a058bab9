"""NIP-92 ``imeta`` tag helpers.

An imeta tag is a flat list: ``["imeta", "url <url>", "m <mime>", ...]``,
one ``"<key> <value>"`` entry per NIP-94 field that has a value.
"""

from media_pipeline.document.document import Document
from media_pipeline.document.schema import IMAGE, Node
from media_pipeline.media.dimensions import is_media_placeholder

DEFAULT_MIME_TYPE = "image/jpeg"

_MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "avif": "image/avif",
    "bmp": "image/bmp",
    "svg": "image/svg+xml",
}

# NIP-94 field order after url and m
_OPTIONAL_FIELDS = (
    "x",
    "ox",
    "size",
    "dim",
    "blurhash",
    "thumb",
    "image",
    "summary",
    "alt",
    "fallback",
)


def get_mime_type_from_url(url: str) -> str:
    extension = url.rsplit(".", 1)[-1].lower() if "." in url else ""
    return _MIME_BY_EXTENSION.get(extension, DEFAULT_MIME_TYPE)


def extract_image_blurhash_map(document: Document) -> dict[str, str]:
    """Map hosted image URLs in the document to their blurhash; placeholders are skipped."""
    blurhashes: dict[str, str] = {}

    def visit(node: Node, _pos: int) -> None:
        if node.type != IMAGE or not node.attrs.get("blurhash"):
            return
        if is_media_placeholder(dict(node.attrs)):
            return
        blurhashes[node.attrs["src"]] = node.attrs["blurhash"]

    document.traverse(visit)
    return blurhashes


def build_imeta_tag(url: str, mime_type: str, **fields: object) -> list[str]:
    """Build an imeta tag for a hosted file.

    Args:
        url: Hosted URL, required.
        mime_type: The ``m`` field, required.
        **fields: Any of x, ox, size, dim, blurhash, thumb, image, summary,
            alt, fallback. Empty values are left out.

    Raises:
        ValueError: if url or mime_type is empty, or a field is not a NIP-94 field.
    """
    if not url:
        raise ValueError("url is required for imeta tag")
    if not mime_type:
        raise ValueError("m (MIME type) is required for imeta tag")
    unknown = sorted(set(fields) - set(_OPTIONAL_FIELDS))
    if unknown:
        raise ValueError(f"Unknown imeta fields: {unknown}")

    tag = ["imeta", f"url {url}", f"m {mime_type}"]
    for key in _OPTIONAL_FIELDS:
        value = fields.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            tag.append(f"{key} {text}")
    return tag
