import pytest

from media_pipeline.document.document import Document
from media_pipeline.document.schema import DEFAULT_SCHEMA, IMAGE, VIDEO
from media_pipeline.tags.imeta import (
    build_imeta_tag,
    extract_image_blurhash_map,
    get_mime_type_from_url,
)


class TestGetMimeTypeFromUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://x/a.png", "image/png"),
            ("https://x/a.JPG", "image/jpeg"),
            ("https://x/a.webp", "image/webp"),
            ("https://x/a.svg", "image/svg+xml"),
        ],
    )
    def test_known_extensions(self, url: str, expected: str) -> None:
        assert get_mime_type_from_url(url) == expected

    def test_unknown_defaults_to_jpeg(self) -> None:
        assert get_mime_type_from_url("https://x/a.heic") == "image/jpeg"

    def test_no_extension_defaults_to_jpeg(self) -> None:
        assert get_mime_type_from_url("noext") == "image/jpeg"


class TestExtractImageBlurhashMap:
    def test_collects_hosted_images_only(self) -> None:
        doc = Document(
            [
                DEFAULT_SCHEMA.node(IMAGE, {"src": "https://x/a.png", "blurhash": "LA"}),
                DEFAULT_SCHEMA.node(IMAGE, {"src": "placeholder-1-0-x", "blurhash": "LB"}),
                DEFAULT_SCHEMA.node(
                    IMAGE, {"src": "https://x/c.png", "blurhash": "LC", "isPlaceholder": True}
                ),
                DEFAULT_SCHEMA.node(IMAGE, {"src": "https://x/d.png"}),
                DEFAULT_SCHEMA.node(VIDEO, {"src": "https://x/e.mp4", "blurhash": "LE"}),
            ]
        )
        assert extract_image_blurhash_map(doc) == {"https://x/a.png": "LA"}


class TestBuildImetaTag:
    def test_basic_tag(self) -> None:
        tag = build_imeta_tag(
            "https://x/photo.jpg",
            "image/jpeg",
            dim="800x600",
            blurhash="LEHV6nWB2yk8pyo0adR*.7kCMdnj",
        )
        assert tag == [
            "imeta",
            "url https://x/photo.jpg",
            "m image/jpeg",
            "dim 800x600",
            "blurhash LEHV6nWB2yk8pyo0adR*.7kCMdnj",
        ]

    def test_hashes_are_included(self) -> None:
        tag = build_imeta_tag("https://x/p.jpg", "image/jpeg", x="abc123", ox="orig123")
        assert "x abc123" in tag
        assert "ox orig123" in tag

    def test_empty_values_are_skipped(self) -> None:
        tag = build_imeta_tag("https://x/p.jpg", "image/jpeg", alt="", dim=None)
        assert tag == ["imeta", "url https://x/p.jpg", "m image/jpeg"]

    def test_url_is_required(self) -> None:
        with pytest.raises(ValueError, match="url is required"):
            build_imeta_tag("", "image/jpeg")

    def test_mime_type_is_required(self) -> None:
        with pytest.raises(ValueError, match="MIME type"):
            build_imeta_tag("https://x/p.jpg", "")

    def test_unknown_field_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown imeta fields"):
            build_imeta_tag("https://x/p.jpg", "image/jpeg", color="red")
