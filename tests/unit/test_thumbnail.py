from unittest.mock import MagicMock, patch

import pytest

from media_pipeline.media.exceptions import ThumbnailError
from media_pipeline.media.models import MediaFile
from media_pipeline.thumbnail.base import NullThumbnailService
from media_pipeline.thumbnail.blurhash_adapter import BlurhashThumbnailService
from media_pipeline.thumbnail.factory import ThumbnailServiceFactory


def _make_settings(thumbnail_engine: str) -> MagicMock:
    return MagicMock(
        thumbnail_engine=thumbnail_engine,
        blurhash_components_x=4,
        blurhash_components_y=3,
    )


class TestBlurhashThumbnailService:
    @pytest.mark.asyncio
    async def test_encodes_image(self, png_file: MediaFile) -> None:
        blurhash = await BlurhashThumbnailService().generate(png_file)
        assert isinstance(blurhash, str)
        # 4x3 components: 1 size char + 1 max-AC char + 4 DC chars + 11 * 2 AC chars
        assert len(blurhash) == 28

    @pytest.mark.asyncio
    async def test_passes_component_counts(self, png_file: MediaFile) -> None:
        with patch("media_pipeline.thumbnail.blurhash_adapter.blurhash.encode") as encode:
            encode.return_value = "LKO2"
            await BlurhashThumbnailService(components_x=5, components_y=2).generate(png_file)
        kwargs = encode.call_args.kwargs
        assert (kwargs["components_x"], kwargs["components_y"]) == (5, 2)

    @pytest.mark.asyncio
    async def test_encodes_rows_of_rgb_pixels(self, png_file: MediaFile) -> None:
        with patch("media_pipeline.thumbnail.blurhash_adapter.blurhash.encode") as encode:
            encode.return_value = "LKO2"
            await BlurhashThumbnailService().generate(png_file)
        rows = encode.call_args.args[0]
        # 100x50 fits in 32x32 as 32x16
        assert len(rows) == 16
        assert all(len(row) == 32 for row in rows)
        assert rows[0][0] == [40, 120, 200]

    @pytest.mark.asyncio
    async def test_video_is_unsupported(self, video_file: MediaFile) -> None:
        assert await BlurhashThumbnailService().generate(video_file) is None

    @pytest.mark.asyncio
    async def test_corrupt_image_raises(self) -> None:
        file = MediaFile.from_bytes("bad.png", b"garbage", "image/png")
        with pytest.raises(ThumbnailError, match="bad.png"):
            await BlurhashThumbnailService().generate(file)


class TestThumbnailServiceFactory:
    def test_creates_blurhash_service(self) -> None:
        service = ThumbnailServiceFactory.create(_make_settings("blurhash"))
        assert isinstance(service, BlurhashThumbnailService)

    def test_creates_null_service(self) -> None:
        service = ThumbnailServiceFactory.create(_make_settings("none"))
        assert isinstance(service, NullThumbnailService)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown thumbnail engine"):
            ThumbnailServiceFactory.create(_make_settings("thumbhash"))

    def test_error_lists_supported_engines(self) -> None:
        with pytest.raises(ValueError) as exc_info:
            ThumbnailServiceFactory.create(_make_settings("thumbhash"))
        assert str(list(ThumbnailServiceFactory.ENGINES)) in str(exc_info.value)
