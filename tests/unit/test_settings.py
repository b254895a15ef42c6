from pathlib import Path

import pytest
from pydantic import ValidationError

from certcard.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        assert Settings().app_env == "dev"

    def test_default_pdf_engine(self) -> None:
        assert Settings().pdf_engine == "pymupdf"

    def test_default_attestation_anchor(self) -> None:
        s = Settings()
        assert s.attestation_anchor_x == 645.51656
        assert s.attestation_anchor_y == 537.021543
        assert s.attestation_proximity == 30.0

    def test_default_removal_parameters(self) -> None:
        s = Settings()
        assert s.background_threshold == 40.0
        assert s.edge_threshold == 10.0
        assert s.background_color == "#ffffff"
        assert s.max_image_dimension == 1024

    def test_default_template_dir(self) -> None:
        assert Settings().template_dir == Path("templates")


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert Settings().log_level == "DEBUG"

    def test_loads_pdf_engine(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PDF_ENGINE", "pdfplumber")
        assert Settings().pdf_engine == "pdfplumber"

    def test_loads_background_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKGROUND_COLOR", "#00ff00")
        assert Settings().background_color == "#00ff00"

    def test_loads_template_dir(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TEMPLATE_DIR", "/srv/templates")
        assert Settings().template_dir == Path("/srv/templates")


class TestSettingsValidation:
    def test_invalid_threshold_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKGROUND_THRESHOLD", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_max_dimension_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MAX_IMAGE_DIMENSION", "abc")
        with pytest.raises(ValidationError):
            Settings()
