import pytest
from pydantic import ValidationError

from label_finishing.config.settings import Settings


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:  # type: ignore[no-untyped-def]
    monkeypatch.chdir(tmp_path)
    for name in ("LABEL_EXPORT_DPI", "LOG_LEVEL", "DIMENSION_POLICY", "MAX_WORKERS", "PIPELINE_TIMEOUT_SECONDS"):
        monkeypatch.delenv(name, raising=False)


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_log_level(self) -> None:
        s = Settings()
        assert s.log_level == "INFO"

    def test_default_export_dpi(self) -> None:
        s = Settings()
        assert s.label_export_dpi == 300

    def test_default_tolerances(self) -> None:
        s = Settings()
        assert s.label_dimension_tolerance_mm == 5.0
        assert s.ratio_tolerance == 0.25

    def test_default_bleed(self) -> None:
        s = Settings()
        assert s.bleed_per_side_mm == 2.0

    def test_default_pipeline_limits(self) -> None:
        s = Settings()
        assert s.max_workers == 4
        assert s.pipeline_timeout_seconds == 60.0

    def test_default_dimension_policy(self) -> None:
        s = Settings()
        assert s.dimension_policy == "ratio"
        assert s.strict_dimensions is False

    def test_default_pdf_engine(self) -> None:
        s = Settings()
        assert s.pdf_engine == "pymupdf"


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_export_dpi(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LABEL_EXPORT_DPI", "600")
        s = Settings()
        assert s.label_export_dpi == 600

    @pytest.mark.parametrize("value", ["abc", "0", "-72", ""])
    def test_invalid_export_dpi_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, value: str
    ) -> None:
        monkeypatch.setenv("LABEL_EXPORT_DPI", value)
        s = Settings()
        assert s.label_export_dpi == 300

    def test_loads_dimension_tolerance(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LABEL_DIMENSION_TOLERANCE_MM", "2.5")
        s = Settings()
        assert s.label_dimension_tolerance_mm == 2.5

    def test_loads_strict_dimensions(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STRICT_DIMENSIONS", "true")
        s = Settings()
        assert s.strict_dimensions is True

    def test_reads_dotenv_file(self, tmp_path) -> None:  # type: ignore[no-untyped-def]
        (tmp_path / ".env").write_text("DIMENSION_POLICY=absolute\n")
        s = Settings()
        assert s.dimension_policy == "absolute"

    def test_rejects_invalid_workers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_WORKERS", "many")
        with pytest.raises(ValidationError):
            Settings()

    @pytest.mark.parametrize("value", ["0", "-5"])
    def test_rejects_non_positive_timeout(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("PIPELINE_TIMEOUT_SECONDS", value)
        with pytest.raises(ValidationError):
            Settings()

    def test_rejects_zero_workers(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            Settings()
