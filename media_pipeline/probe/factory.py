from media_pipeline.config.settings import Settings
from media_pipeline.probe.base import BaseDimensionProbe, NullDimensionProbe
from media_pipeline.probe.pillow_adapter import PillowDimensionProbe


class DimensionProbeFactory:
    """Creates the dimension probe selected in settings."""

    PROBES = ("pillow", "none")

    @classmethod
    def create(cls, settings: Settings) -> BaseDimensionProbe:
        engine = settings.dimension_probe.lower()
        if engine == "pillow":
            return PillowDimensionProbe(
                max_width=settings.editor_max_width,
                max_height=settings.editor_max_height,
            )
        if engine == "none":
            return NullDimensionProbe()
        raise ValueError(
            f"Unknown dimension probe '{engine}'. Choose from: {list(cls.PROBES)}"
        )
