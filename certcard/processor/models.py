from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CardJob:
    """One request to turn a source document and a photo into a card."""

    source_pdf: Path
    photo: Path
    output_dir: Path
    course_mode: str = "normal"
    threshold: float = 40.0
    background: str = "#ffffff"
    edge_threshold: float = 10.0
