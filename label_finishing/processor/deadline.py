import threading
import time

from label_finishing.processor.exceptions import PipelineTimeoutError


class Deadline:
    """Shared expiry and cancellation flag for one finishing invocation."""

    def __init__(self, seconds: float | None = None) -> None:
        if seconds is not None and seconds <= 0:
            raise ValueError(f"Deadline must be positive, got {seconds}")
        self._expires_at = time.monotonic() + seconds if seconds is not None else None
        self._cancelled = threading.Event()

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def check(self, stage: str) -> None:
        """Raise if the invocation was cancelled or ran out of time before ``stage``."""
        if self.cancelled:
            raise PipelineTimeoutError(f"Finishing cancelled before {stage}")
        if self.expired():
            raise PipelineTimeoutError(f"Finishing deadline exceeded before {stage}")
