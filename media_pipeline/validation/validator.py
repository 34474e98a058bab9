from abc import ABC, abstractmethod

from media_pipeline.media.messages import FILE_TOO_LARGE, ONLY_MEDIA_ALLOWED
from media_pipeline.media.models import MediaFile, ValidationResult


class BaseFileValidator(ABC):
    """Contract for pre-insertion file checks."""

    @abstractmethod
    def validate(self, file: MediaFile) -> ValidationResult:
        """Accept or reject a file before any placeholder is created."""


class MediaFileValidator(BaseFileValidator):
    """Accepts images and videos up to a size cap."""

    def __init__(self, max_file_size_bytes: int) -> None:
        self._max_file_size_bytes = max_file_size_bytes

    def validate(self, file: MediaFile) -> ValidationResult:
        if not (file.is_image or file.is_video):
            return ValidationResult(is_valid=False, error_message=ONLY_MEDIA_ALLOWED)
        if file.size > self._max_file_size_bytes:
            return ValidationResult(is_valid=False, error_message=FILE_TOO_LARGE)
        return ValidationResult(is_valid=True)
