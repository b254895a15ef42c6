from certcard.composer.card_composer import CardComposer
from certcard.config.settings import Settings
from certcard.extraction.extractor import FieldExtractor
from certcard.imaging.remover import BackgroundRemover
from certcard.logging.logger import Log
from certcard.pdf.factory import PdfReaderFactory
from certcard.processor.file_loader import FileLoader
from certcard.processor.models import CardJob
from certcard.processor.pipeline import PipelineContext, PipelineStep
from certcard.processor.steps import (
    ComposeCardStep,
    ExtractFieldsStep,
    LoadInputsStep,
    RemoveBackgroundStep,
    WriteOutputStep,
)


class CardProcessor:
    """Orchestrates the card pipeline.

    Pipeline: load -> extract fields -> remove background -> compose -> write.
    """

    def __init__(self, steps: list[PipelineStep]) -> None:
        self._steps = steps

    def process(self, job: CardJob) -> PipelineContext:
        """Run every step in order; on failure log, record the message and re-raise."""
        Log.info(f"Processing card for {job.source_pdf.name} ({job.course_mode})")
        context = PipelineContext(job=job)
        for step in self._steps:
            try:
                context = step.run(context)
            except Exception as exc:
                context.error_message = str(exc)
                Log.error(f"{type(step).__name__} failed: {exc}")
                raise
        return context


def build_processor(settings: Settings) -> CardProcessor:
    """Build a CardProcessor with all required adapters."""
    file_loader = FileLoader()
    extractor = FieldExtractor(PdfReaderFactory.create(settings), settings)
    remover = BackgroundRemover.from_settings(settings)
    composer = CardComposer(settings)
    return CardProcessor(
        steps=[
            LoadInputsStep(file_loader=file_loader, composer=composer),
            ExtractFieldsStep(extractor=extractor),
            RemoveBackgroundStep(remover=remover),
            ComposeCardStep(composer=composer),
            WriteOutputStep(file_loader=file_loader),
        ]
    )
