from label_finishing.imaging.models import DebugCapture, ImageBuffer


class DebugCollector:
    """Collects intermediate images for one candidate of one invocation.

    Disabled collectors drop everything, so steps can record unconditionally.
    """

    def __init__(self, enabled: bool = False) -> None:
        self._enabled = enabled
        self._captures: list[DebugCapture] = []

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def captures(self) -> list[DebugCapture]:
        return list(self._captures)

    def record(self, label: str, buffer: ImageBuffer | None) -> None:
        if not self._enabled or buffer is None:
            return
        self._captures.append(DebugCapture(label=label, buffer=buffer))

    def clear(self) -> None:
        self._captures.clear()
