import asyncio
import mimetypes
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

IMAGE_PREFIX = "image/"
VIDEO_PREFIX = "video/"


@dataclass(frozen=True)
class MediaFile:
    """A locally selected media file: name, byte size, declared MIME type and its bytes."""

    name: str
    mime_type: str
    size: int
    data: bytes | None = field(default=None, repr=False)
    path: Path | None = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes, mime_type: str) -> "MediaFile":
        return cls(name=name, mime_type=mime_type, size=len(data), data=data)

    @classmethod
    def from_path(cls, path: Path, mime_type: str | None = None) -> "MediaFile":
        """Describe a file on disk; bytes are read lazily by read()."""
        declared = mime_type or mimetypes.guess_type(path.name)[0] or ""
        return cls(name=path.name, mime_type=declared, size=path.stat().st_size, path=path)

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith(IMAGE_PREFIX)

    @property
    def is_video(self) -> bool:
        return self.mime_type.startswith(VIDEO_PREFIX)

    async def read(self) -> bytes:
        if self.data is not None:
            return self.data
        if self.path is None:
            raise FileNotFoundError(f"MediaFile '{self.name}' has neither data nor path")
        return await asyncio.to_thread(self.path.read_bytes)


@dataclass(frozen=True)
class Dimensions:
    """Natural size of a media file plus its size as displayed in the editor."""

    width: int
    height: int
    display_width: int
    display_height: int

    @property
    def dim(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class ProcessingResult:
    file: MediaFile
    index: int
    content_hash: str | None = None
    dimensions: Dimensions | None = None


@dataclass
class PlaceholderEntry:
    """Tracks one inserted placeholder until its upload outcome is reconciled."""

    file: MediaFile
    placeholder_id: str
    blurhash: str | None = None
    dimensions: Dimensions | None = None
    content_hash: str | None = None

    @property
    def is_video(self) -> bool:
        return self.file.is_video


@dataclass(frozen=True)
class UploadOutcome:
    """Terminal result of one file's upload, as reported by the upload service."""

    success: bool
    url: str | None = None
    error: str | None = None
    aborted: bool = False
    original_filename: str | None = None
    server_metadata: dict[str, str] = field(default_factory=dict)
    correlation_id: str | None = None

    @property
    def server_blurhash(self) -> str | None:
        return self.server_metadata.get("blurhash") or self.server_metadata.get("b")

    @property
    def server_content_hash(self) -> str | None:
        return self.server_metadata.get("ox") or self.server_metadata.get("o")

    @property
    def server_uploaded_hash(self) -> str | None:
        return self.server_metadata.get("x")


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    error_message: str | None = None


@dataclass(frozen=True)
class UploadProgress:
    total: int
    completed: int = 0
    failed: int = 0
    aborted: int = 0
    in_progress: bool = True


@dataclass(frozen=True)
class UploadCallbacks:
    """Host callbacks handed through to the upload service untouched."""

    on_progress: Callable[[UploadProgress], None] | None = None
