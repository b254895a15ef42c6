from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    pdf_engine: str = "pymupdf"
    image_viewport_scale: float = 1.5
    extraction_workers: int = 4

    qr_page_number: int = 2
    attestation_anchor_x: float = 645.51656
    attestation_anchor_y: float = 537.021543
    attestation_proximity: float = 30.0
    bottom_band_y: float = 50.0

    background_threshold: float = 40.0
    edge_threshold: float = 10.0
    background_color: str = "#ffffff"
    max_image_dimension: int = 1024

    template_dir: Path = Path("templates")
    course_mode: str = "normal"
    name_description_tail: int = 16
