from media_pipeline.config.settings import Settings
from media_pipeline.thumbnail.base import BaseThumbnailService, NullThumbnailService
from media_pipeline.thumbnail.blurhash_adapter import BlurhashThumbnailService


class ThumbnailServiceFactory:
    """Creates the thumbnail service selected in settings."""

    ENGINES = ("blurhash", "none")

    @classmethod
    def create(cls, settings: Settings) -> BaseThumbnailService:
        engine = settings.thumbnail_engine.lower()
        if engine == "blurhash":
            return BlurhashThumbnailService(
                components_x=settings.blurhash_components_x,
                components_y=settings.blurhash_components_y,
            )
        if engine == "none":
            return NullThumbnailService()
        raise ValueError(
            f"Unknown thumbnail engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
