from collections.abc import Sequence

from media_pipeline.media.models import PlaceholderEntry


def prepare_metadata_list(entries: Sequence[PlaceholderEntry]) -> list[dict[str, str]]:
    """Build per-file upload form fields, one dict per entry in order.

    The placeholder id travels as correlation_id so a service that echoes it
    back lets reconciliation skip filename matching.
    """
    return [
        {
            "caption": entry.file.name,
            "expiration": "",
            "size": str(entry.file.size),
            "alt": entry.file.name,
            "media_type": "",
            "content_type": entry.file.mime_type,
            "no_transform": "true",
            "correlation_id": entry.placeholder_id,
        }
        for entry in entries
    ]
