from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LABEL_EXPORT_DPI = 300


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    label_export_dpi: int = DEFAULT_LABEL_EXPORT_DPI
    bleed_per_side_mm: float = 2.0
    label_dimension_tolerance_mm: float = 5.0
    ratio_tolerance: float = 0.25

    trim_threshold: int = 12
    near_white_threshold: int = 245
    color_ring_width: int = 1

    dimension_policy: str = "ratio"
    strict_dimensions: bool = False

    max_workers: int = Field(default=4, ge=1)
    pipeline_timeout_seconds: float = Field(default=60.0, gt=0)

    pdf_engine: str = "pymupdf"

    @field_validator("label_export_dpi", mode="before")
    @classmethod
    def _default_dpi_when_invalid(cls, value: object) -> int:
        """Fall back to the default DPI for blank, non-numeric or non-positive values."""
        if value is None or isinstance(value, bool):
            return DEFAULT_LABEL_EXPORT_DPI
        try:
            dpi = int(float(str(value).strip()))
        except ValueError:
            return DEFAULT_LABEL_EXPORT_DPI
        return dpi if dpi > 0 else DEFAULT_LABEL_EXPORT_DPI
