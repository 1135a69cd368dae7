from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from label_finishing.imaging.models import (
    ComposedLabel,
    DimensionVerdict,
    ImageBuffer,
    PhysicalSize,
    TrimResult,
)
from label_finishing.processor.deadline import Deadline
from label_finishing.processor.debug import DebugCollector


@dataclass(slots=True)
class CandidateContext:
    side: str
    index: int
    source: ImageBuffer
    target: PhysicalSize
    deadline: Deadline = field(default_factory=Deadline)
    debug: DebugCollector = field(default_factory=DebugCollector)
    palette_hex: str = ""
    buffer: ImageBuffer | None = None
    trim_result: TrimResult | None = None
    verdict: DimensionVerdict | None = None
    background_hex: str = ""
    composed: ComposedLabel | None = None
    compose_failed: bool = False
    error_message: str = ""

    @property
    def tag(self) -> str:
        return f"{self.side}-{self.index + 1}"


class PipelineStep(ABC):
    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def run(self, context: CandidateContext) -> CandidateContext:
        raise NotImplementedError
