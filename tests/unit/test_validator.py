from media_pipeline.media.messages import FILE_TOO_LARGE, ONLY_MEDIA_ALLOWED
from media_pipeline.media.models import MediaFile
from media_pipeline.validation.validator import MediaFileValidator


def _make_file(mime_type: str, size: int = 10) -> MediaFile:
    return MediaFile(name="f", mime_type=mime_type, size=size)


class TestMediaFileValidator:
    def test_accepts_image(self) -> None:
        assert MediaFileValidator(100).validate(_make_file("image/png")).is_valid

    def test_accepts_video(self) -> None:
        assert MediaFileValidator(100).validate(_make_file("video/mp4")).is_valid

    def test_rejects_other_types(self) -> None:
        result = MediaFileValidator(100).validate(_make_file("application/pdf"))
        assert not result.is_valid
        assert result.error_message == ONLY_MEDIA_ALLOWED

    def test_rejects_oversized(self) -> None:
        result = MediaFileValidator(100).validate(_make_file("image/png", size=101))
        assert result.error_message == FILE_TOO_LARGE

    def test_size_limit_is_inclusive(self) -> None:
        assert MediaFileValidator(100).validate(_make_file("image/png", size=100)).is_valid
