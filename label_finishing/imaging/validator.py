from abc import ABC, abstractmethod
from typing import ClassVar

from label_finishing.config.settings import Settings
from label_finishing.imaging.models import (
    DimensionVerdict,
    Orientation,
    PhysicalSize,
    RasterMetadata,
    TrimResult,
)
from label_finishing.imaging.units import pixels_to_mm

DEFAULT_RATIO_TOLERANCE = 0.25
DEFAULT_TOLERANCE_MM = 5.0


class BaseDimensionPolicy(ABC):
    """Contract for all dimension acceptance policies."""

    name: ClassVar[str]

    @abstractmethod
    def evaluate(self, width: float, height: float, target: PhysicalSize) -> DimensionVerdict:
        """Compare a measured width/height against a physical target.

        Args:
            width: Measured width, in the unit the policy works with.
            height: Measured height, in the same unit.
            target: Nominal physical label size.

        Returns:
            DimensionVerdict; a mismatch is reported, never raised.
        """

    def measure(self, metadata: RasterMetadata, dpi: float) -> tuple[float, float]:
        """Express a raster's size in the unit ``evaluate`` expects (pixels by default)."""
        _ = dpi
        return float(metadata.width), float(metadata.height)

    def evaluate_raster(
        self,
        metadata: RasterMetadata,
        target: PhysicalSize,
        dpi: float,
    ) -> DimensionVerdict:
        width, height = self.measure(metadata, dpi)
        return self.evaluate(width, height, target)


class RatioTolerancePolicy(BaseDimensionPolicy):
    """Accepts pixel sizes whose aspect ratio is within a relative tolerance of the target."""

    name = "ratio"

    def __init__(self, tolerance: float = DEFAULT_RATIO_TOLERANCE) -> None:
        if tolerance < 0:
            raise ValueError(f"tolerance must not be negative, got {tolerance}")
        self._tolerance = tolerance

    def evaluate(self, width: float, height: float, target: PhysicalSize) -> DimensionVerdict:
        pixel_ratio = (width or 1) / (height or 1)
        target_ratio = target.ratio
        ratio_diff = abs(pixel_ratio - target_ratio) / target_ratio
        acceptable = ratio_diff <= self._tolerance

        orientation: Orientation = "normal"
        if not acceptable:
            rotated_ratio = 1 / target_ratio
            rotated_diff = abs(pixel_ratio - rotated_ratio) / rotated_ratio
            orientation = "rotated" if rotated_diff <= self._tolerance else "unknown"

        return DimensionVerdict(
            acceptable=acceptable,
            pixel_ratio=pixel_ratio,
            target_ratio=target_ratio,
            ratio_diff=ratio_diff,
            orientation=orientation,
            policy=self.name,
        )


class AbsoluteSizePolicy(BaseDimensionPolicy):
    """Accepts a physical size in millimetres matching the target plus bleed, either way round."""

    name = "absolute"

    def __init__(self, tolerance_mm: float = DEFAULT_TOLERANCE_MM) -> None:
        if tolerance_mm < 0:
            raise ValueError(f"tolerance_mm must not be negative, got {tolerance_mm}")
        self._tolerance_mm = tolerance_mm

    def measure(self, metadata: RasterMetadata, dpi: float) -> tuple[float, float]:
        """Convert pixels to millimetres, preferring the image's own density hint."""
        density = metadata.dpi or dpi
        return pixels_to_mm(metadata.width, density), pixels_to_mm(metadata.height, density)

    def evaluate(self, width: float, height: float, target: PhysicalSize) -> DimensionVerdict:
        expected = target.with_bleed()

        width_diff = abs(width - expected.width_mm)
        height_diff = abs(height - expected.height_mm)
        width_diff_rotated = abs(width - expected.height_mm)
        height_diff_rotated = abs(height - expected.width_mm)

        matches_normal = width_diff <= self._tolerance_mm and height_diff <= self._tolerance_mm
        matches_rotated = (
            width_diff_rotated <= self._tolerance_mm
            and height_diff_rotated <= self._tolerance_mm
        )

        orientation: Orientation
        if matches_normal:
            orientation = "normal"
        elif matches_rotated:
            orientation = "rotated"
            width_diff, height_diff = width_diff_rotated, height_diff_rotated
        else:
            orientation = "unknown"

        pixel_ratio = width / height
        target_ratio = expected.ratio
        compared_ratio = 1 / target_ratio if orientation == "rotated" else target_ratio
        return DimensionVerdict(
            acceptable=orientation != "unknown",
            pixel_ratio=pixel_ratio,
            target_ratio=target_ratio,
            ratio_diff=abs(pixel_ratio - compared_ratio) / compared_ratio,
            orientation=orientation,
            policy=self.name,
            width_diff_mm=width_diff,
            height_diff_mm=height_diff,
            measured_width_mm=width,
            measured_height_mm=height,
        )


class DimensionPolicyFactory:
    """Creates a dimension policy configured from settings."""

    POLICIES: ClassVar[tuple[str, ...]] = (RatioTolerancePolicy.name, AbsoluteSizePolicy.name)

    @classmethod
    def create(cls, settings: Settings, name: str) -> BaseDimensionPolicy:
        policy = name.lower()
        if policy == RatioTolerancePolicy.name:
            return RatioTolerancePolicy(tolerance=settings.ratio_tolerance)
        if policy == AbsoluteSizePolicy.name:
            return AbsoluteSizePolicy(tolerance_mm=settings.label_dimension_tolerance_mm)
        raise ValueError(
            f"Unknown dimension policy '{name}'. Choose from: {list(cls.POLICIES)}"
        )


def validate_dimensions(
    trim_result: TrimResult,
    target: PhysicalSize,
    tolerance: float = DEFAULT_RATIO_TOLERANCE,
) -> DimensionVerdict:
    """Check a trimmed image's aspect ratio against the target label."""
    cropped = trim_result.cropped
    return RatioTolerancePolicy(tolerance).evaluate(cropped.width, cropped.height, target)
