import math

MM_PER_INCH = 25.4
PDF_POINTS_PER_INCH = 72

_UNIT_FACTORS_MM: dict[str, float] = {
    "mm": 1.0,
    "millimeter": 1.0,
    "millimeters": 1.0,
    "millimetre": 1.0,
    "millimetres": 1.0,
    "cm": 10.0,
    "centimeter": 10.0,
    "centimeters": 10.0,
    "centimetre": 10.0,
    "centimetres": 10.0,
    "in": MM_PER_INCH,
    "inch": MM_PER_INCH,
    "inches": MM_PER_INCH,
}


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise ValueError(f"{name} must be a positive number, got {value!r}")


def mm_to_pixels(mm: float, dpi: float = 300) -> int:
    """Convert millimetres to whole pixels at ``dpi``, never returning less than 1.

    Halves round up, so 0.5px becomes 1px rather than the even neighbour.
    """
    _require_positive("mm", mm)
    _require_positive("dpi", dpi)
    return max(1, math.floor(mm / MM_PER_INCH * dpi + 0.5))


def pixels_to_mm(pixels: float, dpi: float) -> float:
    _require_positive("pixels", pixels)
    _require_positive("dpi", dpi)
    return pixels / dpi * MM_PER_INCH


def mm_to_points(mm: float) -> float:
    """Convert millimetres to PDF points (1/72 inch) for page placement."""
    _require_positive("mm", mm)
    return mm / MM_PER_INCH * PDF_POINTS_PER_INCH


def points_to_mm(points: float) -> float:
    _require_positive("points", points)
    return points * MM_PER_INCH / PDF_POINTS_PER_INCH


def convert_to_mm(value: float, unit: str = "mm") -> float:
    """Convert a length given in mm, cm or inches to millimetres.

    Raises:
        ValueError: if the unit is unknown or the value is not positive.
    """
    factor = _UNIT_FACTORS_MM.get(unit.strip().lower())
    if factor is None:
        raise ValueError(f"Unknown length unit '{unit}'. Choose from: mm, cm, in")
    numeric = float(value)
    _require_positive("value", numeric)
    return numeric * factor
