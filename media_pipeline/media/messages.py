"""User-facing message keys reported through the host's error callback."""

ONLY_MEDIA_ALLOWED = "only_media_allowed"
FILE_TOO_LARGE = "file_too_large"
UPLOAD_FAILED = "Upload failed"
MULTIPLE_UPLOADS_FAILED = "{count} files failed to upload"
INSERT_IMAGE_FAILED = "Failed to insert image"
INSERT_VIDEO_FAILED = "Failed to insert video"
