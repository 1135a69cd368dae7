from label_finishing.imaging.models import DimensionVerdict


class ProcessorError(Exception):
    """Base exception for all orchestration errors."""


class CandidateError(ProcessorError):
    """Raised when a candidate image fails in a way that is fatal to the request."""

    def __init__(self, side: str, index: int, cause: Exception) -> None:
        super().__init__(f"{side} candidate {index + 1} failed: {cause}")
        self.side = side
        self.index = index
        self.cause = cause


class DimensionMismatchError(ProcessorError):
    """Raised in strict mode when a candidate's dimensions are outside tolerance."""

    def __init__(self, verdict: DimensionVerdict) -> None:
        super().__init__(
            f"Dimensions outside tolerance ({verdict.policy}): "
            f"ratio {verdict.pixel_ratio:.3f} vs target {verdict.target_ratio:.3f}, "
            f"deviation {verdict.ratio_diff:.3f}"
        )
        self.verdict = verdict


class PageCountError(ProcessorError):
    """Raised when an uploaded print file does not have exactly one page."""


class PipelineTimeoutError(ProcessorError):
    """Raised when a finishing invocation runs past its deadline or is cancelled."""
