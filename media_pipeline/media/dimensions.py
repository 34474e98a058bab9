import math
import re

from media_pipeline.media.models import Dimensions

EDITOR_MAX_WIDTH = 780
EDITOR_MAX_HEIGHT = 240
PLACEHOLDER_PREFIX = "placeholder-"

_DIM_PATTERN = re.compile(r"^(\d+)x(\d+)$")


def calculate_display_size(
    width: int,
    height: int,
    max_width: int = EDITOR_MAX_WIDTH,
    max_height: int = EDITOR_MAX_HEIGHT,
) -> Dimensions:
    """Fit the natural size into the editor box, keeping the aspect ratio.

    Sizes already inside the box are displayed as-is.
    """
    if width <= max_width and height <= max_height:
        return Dimensions(width, height, width, height)

    aspect_ratio = width / height
    if width / max_width > height / max_height:
        display_width = max_width
        display_height = _round_half_up(max_width / aspect_ratio)
    else:
        display_height = max_height
        display_width = _round_half_up(max_height * aspect_ratio)
    return Dimensions(width, height, display_width, display_height)


def parse_dim(dim: str | None) -> tuple[int, int] | None:
    """Parse a "1920x1080" dim attribute into (width, height)."""
    if not dim:
        return None
    match = _DIM_PATTERN.match(dim)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def is_media_placeholder(attrs: dict[str, object]) -> bool:
    """True for nodes whose src is not yet a hosted URL."""
    src = attrs.get("src")
    if attrs.get("isPlaceholder") is True or not src:
        return True
    return isinstance(src, str) and src.startswith((PLACEHOLDER_PREFIX, "blob:"))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)
