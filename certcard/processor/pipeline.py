from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from certcard.composer.models import ComposedCard
from certcard.extraction.models import FieldRecord
from certcard.processor.models import CardJob


@dataclass(slots=True)
class PipelineContext:
    job: CardJob
    source_bytes: bytes = b""
    photo_bytes: bytes = b""
    template_bytes: bytes = b""
    fields: FieldRecord | None = None
    photo_png: bytes = b""
    card: ComposedCard | None = None
    output_path: Path | None = None
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
