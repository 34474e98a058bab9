class PipelineError(Exception):
    """Base exception for all media pipeline errors."""


class InsertionError(PipelineError):
    """Raised when a placeholder node cannot be built or inserted."""


class HashingError(PipelineError):
    """Raised when a content hash cannot be computed."""


class DimensionProbeError(PipelineError):
    """Raised when media dimensions cannot be read from a supported file."""


class ThumbnailError(PipelineError):
    """Raised when a thumbnail hash cannot be generated."""


class DispatchError(PipelineError):
    """Raised when the upload collaborator fails for the whole batch."""


class UploadedHashError(PipelineError):
    """Raised when the hosted file cannot be fetched for hashing."""
