from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait

from label_finishing.config.settings import Settings
from label_finishing.imaging.exceptions import ImagingError
from label_finishing.imaging.validator import DimensionPolicyFactory
from label_finishing.logging.logger import Log
from label_finishing.processor.deadline import Deadline
from label_finishing.processor.debug import DebugCollector
from label_finishing.processor.exceptions import (
    CandidateError,
    DimensionMismatchError,
    PipelineTimeoutError,
)
from label_finishing.processor.models import CandidateOutcome, SideRequest, SideResult
from label_finishing.processor.pipeline import CandidateContext, PipelineStep
from label_finishing.processor.steps import (
    ComposeStep,
    DecodeStep,
    DetectColorStep,
    RecordFailureStep,
    TrimStep,
    ValidateDimensionsStep,
)


class LabelProcessor:
    """Runs every candidate of every requested side through the finishing steps.

    Pipeline per candidate: decode -> trim -> validate -> fill colour -> compose.
    Candidates run concurrently on a bounded thread pool; one deadline is
    shared by the whole invocation and checked before each step.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        failed_step: PipelineStep,
        max_workers: int = 4,
        timeout_seconds: float | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self._steps = steps
        self._failed_step = failed_step
        self._max_workers = max_workers
        self._timeout_seconds = timeout_seconds

    def process(
        self,
        requests: list[SideRequest],
        debug: bool = False,
        timeout: float | None = None,
    ) -> dict[str, SideResult]:
        """Finish all candidates and return the results keyed by side.

        Raises:
            CandidateError: if a candidate cannot be decoded or trimmed.
            PipelineTimeoutError: if the deadline passes before all work is done.
            ValueError: if two requests name the same side.
        """
        sides = [request.side for request in requests]
        if len(set(sides)) != len(sides):
            raise ValueError(f"Each side may be requested once, got {sides}")

        deadline = Deadline(timeout if timeout is not None else self._timeout_seconds)
        contexts = [
            CandidateContext(
                side=request.side,
                index=index,
                source=candidate,
                target=request.target,
                deadline=deadline,
                debug=DebugCollector(enabled=debug),
                palette_hex=request.palette_hex,
            )
            for request in requests
            for index, candidate in enumerate(request.candidates)
        ]
        Log.info(f"Finishing {len(contexts)} candidates for sides {sides}", debug=debug)

        outcomes = self._run_all(contexts, deadline)

        results = {request.side: SideResult(side=request.side) for request in requests}
        for context in contexts:
            results[context.side].candidates.append(outcomes[(context.side, context.index)])
        for result in results.values():
            if result.composed is None:
                Log.warning(f"No candidate composed for side {result.side}")
        return results

    def _run_all(
        self,
        contexts: list[CandidateContext],
        deadline: Deadline,
    ) -> dict[tuple[str, int], CandidateOutcome]:
        if not contexts:
            return {}

        workers = min(self._max_workers, len(contexts))
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="finishing")
        try:
            futures: dict[Future[CandidateOutcome], CandidateContext] = {
                pool.submit(self._run_candidate, context): context for context in contexts
            }
            done, pending = wait(futures, timeout=deadline.remaining(), return_when=FIRST_EXCEPTION)
            if pending:
                # running candidates stop at their next step boundary
                deadline.cancel()

            outcomes: dict[tuple[str, int], CandidateOutcome] = {}
            for future, context in futures.items():
                if future not in done:
                    continue
                try:
                    outcomes[(context.side, context.index)] = future.result()
                except ImagingError as exc:
                    raise CandidateError(context.side, context.index, exc) from exc
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        if pending:
            raise PipelineTimeoutError(
                f"{len(pending)} of {len(contexts)} candidates unfinished at the deadline"
            )
        return outcomes

    def _run_candidate(self, context: CandidateContext) -> CandidateOutcome:
        rejected = False
        try:
            for step in self._steps:
                context.deadline.check(step.name)
                context = step.run(context)
        except DimensionMismatchError as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            rejected = True
        except Exception as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise

        return CandidateOutcome(
            side=context.side,
            index=context.index,
            trim_result=context.trim_result,
            verdict=context.verdict,
            background_hex=context.background_hex,
            composed=context.composed,
            compose_failed=context.compose_failed,
            rejected=rejected,
            error_message=context.error_message,
            captures=context.debug.captures,
        )


def build_processor(settings: Settings, compose: bool = True) -> LabelProcessor:
    """Build a LabelProcessor from settings.

    With ``compose=False`` the pipeline stops after dimension validation and
    each outcome carries the trimmed image only.
    """
    policy = DimensionPolicyFactory.create(settings, settings.dimension_policy)
    steps: list[PipelineStep] = [
        DecodeStep(),
        TrimStep(threshold=settings.trim_threshold),
        ValidateDimensionsStep(
            policy,
            dpi=settings.label_export_dpi,
            strict=settings.strict_dimensions,
        ),
    ]
    if compose:
        steps.append(
            DetectColorStep(
                near_white=settings.near_white_threshold,
                ring=settings.color_ring_width,
            )
        )
        steps.append(ComposeStep(dpi=settings.label_export_dpi))
    return LabelProcessor(
        steps=steps,
        failed_step=RecordFailureStep(),
        max_workers=settings.max_workers,
        timeout_seconds=settings.pipeline_timeout_seconds,
    )
