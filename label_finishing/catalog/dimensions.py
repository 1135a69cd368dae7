from typing import ClassVar

from label_finishing.catalog.exceptions import UnknownLabelError
from label_finishing.imaging.models import PhysicalSize
from label_finishing.imaging.units import convert_to_mm

SIDES = ("front", "back")

# (width, height, unit) per bottle style and side
DEFAULT_LABEL_DIMENSIONS: dict[str, dict[str, tuple[float, float, str]]] = {
    "polo": {"front": (110, 65, "mm"), "back": (110, 65, "mm")},
    "outlaw": {"front": (55, 95, "mm"), "back": (55, 95, "mm")},
    "antica": {"front": (110, 110, "mm"), "back": (80, 100, "mm")},
    "manila": {"front": (135, 50, "mm"), "back": (115, 40, "mm")},
    "origin": {"front": (115, 45, "mm"), "back": (100, 45, "mm")},
}


def normalize_bottle(name: str) -> str:
    return " ".join(name.split()).lower()


def normalize_side(side: str) -> str:
    """Lower-case and validate a label side.

    Raises:
        UnknownLabelError: if the side is not ``front`` or ``back``.
    """
    normalized = side.strip().lower()
    if normalized not in SIDES:
        raise UnknownLabelError(f"Unknown label side '{side}'. Choose from: {list(SIDES)}")
    return normalized


class LabelCatalog:
    """Static lookup of label sizes keyed by bottle style and side."""

    DEFAULT_BLEED_PER_SIDE_MM: ClassVar[float] = 2.0

    def __init__(
        self,
        dimensions: dict[str, dict[str, tuple[float, float, str]]] | None = None,
    ) -> None:
        source = dimensions if dimensions is not None else DEFAULT_LABEL_DIMENSIONS
        self._dimensions = {normalize_bottle(name): sides for name, sides in source.items()}

    @property
    def bottles(self) -> list[str]:
        return sorted(self._dimensions)

    def lookup(
        self,
        bottle: str,
        side: str,
        bleed_per_side_mm: float = DEFAULT_BLEED_PER_SIDE_MM,
    ) -> PhysicalSize:
        """Return the nominal label size for ``bottle``/``side``, carrying its bleed.

        Raises:
            UnknownLabelError: if the bottle or side is not configured.
        """
        side_key = normalize_side(side)
        entry = self._dimensions.get(normalize_bottle(bottle), {}).get(side_key)
        if entry is None:
            raise UnknownLabelError(
                f"No label dimensions configured for bottle='{bottle}' and side='{side_key}'"
            )
        width, height, unit = entry
        return PhysicalSize(
            width_mm=convert_to_mm(width, unit),
            height_mm=convert_to_mm(height, unit),
            bleed_per_side_mm=bleed_per_side_mm,
        )
