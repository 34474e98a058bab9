from unittest.mock import MagicMock

import pytest

from media_pipeline.media.exceptions import DimensionProbeError
from media_pipeline.media.models import MediaFile
from media_pipeline.probe.base import NullDimensionProbe
from media_pipeline.probe.factory import DimensionProbeFactory
from media_pipeline.probe.pillow_adapter import PillowDimensionProbe


def _make_settings(dimension_probe: str) -> MagicMock:
    return MagicMock(dimension_probe=dimension_probe, editor_max_width=780, editor_max_height=240)


class TestPillowDimensionProbe:
    @pytest.mark.asyncio
    async def test_reads_natural_and_display_size(self, wide_png_bytes: bytes) -> None:
        file = MediaFile.from_bytes("wide.png", wide_png_bytes, "image/png")
        dims = await PillowDimensionProbe().get_dimensions(file)
        assert dims is not None
        assert (dims.width, dims.height) == (1600, 900)
        assert (dims.display_width, dims.display_height) == (427, 240)

    @pytest.mark.asyncio
    async def test_video_is_unsupported(self, video_file: MediaFile) -> None:
        assert await PillowDimensionProbe().get_dimensions(video_file) is None

    @pytest.mark.asyncio
    async def test_corrupt_image_raises(self) -> None:
        file = MediaFile.from_bytes("bad.png", b"not an image", "image/png")
        with pytest.raises(DimensionProbeError, match="bad.png"):
            await PillowDimensionProbe().get_dimensions(file)


class TestDimensionProbeFactory:
    def test_creates_pillow_probe(self) -> None:
        probe = DimensionProbeFactory.create(_make_settings("pillow"))
        assert isinstance(probe, PillowDimensionProbe)

    def test_creates_null_probe(self) -> None:
        probe = DimensionProbeFactory.create(_make_settings("none"))
        assert isinstance(probe, NullDimensionProbe)

    def test_is_case_insensitive(self) -> None:
        probe = DimensionProbeFactory.create(_make_settings("Pillow"))
        assert isinstance(probe, PillowDimensionProbe)

    def test_raises_for_unknown_probe(self) -> None:
        with pytest.raises(ValueError, match="Unknown dimension probe"):
            DimensionProbeFactory.create(_make_settings("ffprobe"))
