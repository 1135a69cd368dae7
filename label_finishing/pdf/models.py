from dataclasses import dataclass

from label_finishing.imaging.units import points_to_mm


@dataclass(frozen=True)
class PageSize:
    """First-page box of a PDF, in points."""

    width_pt: float
    height_pt: float
    page_count: int

    @property
    def width_mm(self) -> float:
        return points_to_mm(self.width_pt)

    @property
    def height_mm(self) -> float:
        return points_to_mm(self.height_pt)
