from dataclasses import dataclass, field

from label_finishing.imaging.models import (
    ComposedLabel,
    DebugCapture,
    DimensionVerdict,
    ImageBuffer,
    PhysicalSize,
    TrimResult,
)


@dataclass(frozen=True)
class SideRequest:
    """Candidate images for one label side and the size they must fill."""

    side: str
    candidates: list[ImageBuffer]
    target: PhysicalSize
    palette_hex: str = ""


@dataclass(frozen=True)
class CandidateOutcome:
    """What the pipeline produced for a single candidate."""

    side: str
    index: int
    trim_result: TrimResult | None = None
    verdict: DimensionVerdict | None = None
    background_hex: str = ""
    composed: ComposedLabel | None = None
    compose_failed: bool = False
    rejected: bool = False
    error_message: str = ""
    captures: list[DebugCapture] = field(default_factory=list)

    @property
    def output(self) -> ImageBuffer | None:
        """The composed label, or the trimmed image when composition failed."""
        if self.rejected:
            return None
        if self.composed is not None:
            return self.composed.buffer
        if self.trim_result is not None:
            return self.trim_result.buffer
        return None


@dataclass
class SideResult:
    side: str
    candidates: list[CandidateOutcome] = field(default_factory=list)

    @property
    def composed(self) -> ComposedLabel | None:
        """First successfully composed candidate in submission order."""
        for outcome in self.candidates:
            if outcome.composed is not None and not outcome.rejected:
                return outcome.composed
        return None

    @property
    def output(self) -> ImageBuffer | None:
        for outcome in self.candidates:
            if outcome.output is not None:
                return outcome.output
        return None

    @property
    def debug_captures(self) -> list[DebugCapture]:
        return [capture for outcome in self.candidates for capture in outcome.captures]
