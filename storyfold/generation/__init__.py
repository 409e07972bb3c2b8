"""
Content generation stages.

Each stage is a single prompt/response call whose result is written to
the project's content documents:
- requirements -> brief
- brief -> annotated outline
- brief + outline -> sample passage
- brief + outline (+ sample) -> final piece
- final -> review, age check
"""

from .pipeline import STAGES, GenerationPipeline, GenerationStage

__all__ = [
    "GenerationPipeline",
    "GenerationStage",
    "STAGES",
]
