from label_finishing.imaging.codec import flatten_onto_white, normalize_to_png, open_image
from label_finishing.imaging.color import WHITE_HEX, detect_first_content_color, normalize_hex
from label_finishing.imaging.composer import DEFAULT_DPI, compose_label
from label_finishing.imaging.exceptions import ComposeError, EmptyBufferError, ImagingError
from label_finishing.imaging.trimmer import DEFAULT_TRIM_THRESHOLD, trim_border
from label_finishing.imaging.validator import BaseDimensionPolicy
from label_finishing.logging.logger import Log
from label_finishing.processor.exceptions import DimensionMismatchError
from label_finishing.processor.pipeline import CandidateContext, PipelineStep


class RecordFailureStep(PipelineStep):
    def run(self, context: CandidateContext) -> CandidateContext:
        Log.error(
            f"Candidate {context.tag} failed: {context.error_message}",
            side=context.side,
            candidate=context.index,
        )
        return context


class DecodeStep(PipelineStep):
    def run(self, context: CandidateContext) -> CandidateContext:
        if not context.source.data:
            raise EmptyBufferError(f"Candidate {context.tag} has an empty image buffer")
        context.buffer = normalize_to_png(context.source)
        context.debug.record(f"{context.tag}-raw", context.buffer)
        Log.debug(
            f"Decoded candidate {context.tag}: {len(context.buffer)} bytes "
            f"({context.source.mime_type})"
        )
        return context


class TrimStep(PipelineStep):
    def __init__(self, threshold: int = DEFAULT_TRIM_THRESHOLD) -> None:
        self._threshold = threshold

    def run(self, context: CandidateContext) -> CandidateContext:
        if context.buffer is None:
            raise ValueError("CandidateContext.buffer must be set before trimming")
        result = trim_border(context.buffer, threshold=self._threshold)
        context.trim_result = result
        context.debug.record(f"{context.tag}-trimmed", result.buffer)
        Log.info(
            f"Trimmed candidate {context.tag}: "
            f"{result.original.width}x{result.original.height} -> "
            f"{result.cropped.width}x{result.cropped.height}"
        )
        return context


class ValidateDimensionsStep(PipelineStep):
    def __init__(
        self,
        policy: BaseDimensionPolicy,
        dpi: int = DEFAULT_DPI,
        strict: bool = False,
    ) -> None:
        self._policy = policy
        self._dpi = dpi
        self._strict = strict

    def run(self, context: CandidateContext) -> CandidateContext:
        if context.trim_result is None:
            raise ValueError("CandidateContext.trim_result must be set before validation")
        verdict = self._policy.evaluate_raster(
            context.trim_result.cropped,
            context.target,
            self._dpi,
        )
        context.verdict = verdict
        if verdict.acceptable:
            Log.info(
                f"Candidate {context.tag} dimensions accepted "
                f"({verdict.policy}, {verdict.orientation})",
                ratio_diff=round(verdict.ratio_diff, 4),
            )
            return context

        Log.warning(
            f"Candidate {context.tag} dimensions outside tolerance ({verdict.policy})",
            pixel_ratio=round(verdict.pixel_ratio, 4),
            target_ratio=round(verdict.target_ratio, 4),
            ratio_diff=round(verdict.ratio_diff, 4),
            orientation=verdict.orientation,
        )
        if self._strict:
            raise DimensionMismatchError(verdict)
        return context


class DetectColorStep(PipelineStep):
    """Pick the canvas fill: the caller's palette colour, else the sampled edge colour."""

    def __init__(self, near_white: int = 245, ring: int = 1) -> None:
        self._near_white = near_white
        self._ring = ring

    def run(self, context: CandidateContext) -> CandidateContext:
        palette = normalize_hex(context.palette_hex)
        if palette:
            context.background_hex = palette.upper()
            Log.debug(f"Candidate {context.tag} uses palette fill {context.background_hex}")
            return context

        if context.trim_result is None:
            raise ValueError("CandidateContext.trim_result must be set before colour detection")
        try:
            with open_image(context.trim_result.buffer) as image:
                context.background_hex = detect_first_content_color(
                    flatten_onto_white(image),
                    near_white=self._near_white,
                    ring=self._ring,
                )
        except ImagingError as exc:
            Log.warning(f"Colour detection failed for candidate {context.tag}, using white: {exc}")
            context.background_hex = WHITE_HEX
        Log.info(f"Candidate {context.tag} fill colour {context.background_hex}")
        return context


class ComposeStep(PipelineStep):
    def __init__(self, dpi: int = DEFAULT_DPI) -> None:
        self._dpi = dpi

    def run(self, context: CandidateContext) -> CandidateContext:
        if context.trim_result is None:
            raise ValueError("CandidateContext.trim_result must be set before composing")
        try:
            context.composed = compose_label(
                context.trim_result.buffer,
                context.target,
                context.background_hex or WHITE_HEX,
                dpi=self._dpi,
            )
        except ComposeError as exc:
            context.compose_failed = True
            Log.warning(
                f"Composition failed for candidate {context.tag}, keeping trimmed image: {exc}"
            )
            return context

        context.debug.record(f"{context.tag}-composed", context.composed.buffer)
        Log.info(
            f"Composed candidate {context.tag} at "
            f"{context.composed.width_px}x{context.composed.height_px}px "
            f"on {context.composed.background_hex}"
        )
        return context
