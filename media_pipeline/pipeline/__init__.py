from media_pipeline.pipeline.models import PipelineResult
from media_pipeline.pipeline.orchestrator import Orchestrator, build_orchestrator

__all__ = [
    "Orchestrator",
    "PipelineResult",
    "build_orchestrator",
]
