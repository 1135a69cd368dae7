from label_finishing.imaging.color import detect_first_content_color
from label_finishing.imaging.composer import compose_label
from label_finishing.imaging.models import ImageBuffer, PhysicalSize
from label_finishing.imaging.trimmer import trim_border
from label_finishing.imaging.units import mm_to_pixels, mm_to_points
from label_finishing.imaging.validator import (
    AbsoluteSizePolicy,
    DimensionPolicyFactory,
    RatioTolerancePolicy,
    validate_dimensions,
)

__all__ = [
    "AbsoluteSizePolicy",
    "DimensionPolicyFactory",
    "ImageBuffer",
    "PhysicalSize",
    "RatioTolerancePolicy",
    "compose_label",
    "detect_first_content_color",
    "mm_to_pixels",
    "mm_to_points",
    "trim_border",
    "validate_dimensions",
]
