from certcard.composer.card_composer import CardComposer
from certcard.extraction.extractor import FieldExtractor
from certcard.imaging.color_model import BackgroundColor
from certcard.imaging.remover import BackgroundRemover
from certcard.logging.logger import Log
from certcard.processor.file_loader import FileLoader
from certcard.processor.pipeline import PipelineContext, PipelineStep


class LoadInputsStep(PipelineStep):
    def __init__(self, file_loader: FileLoader, composer: CardComposer) -> None:
        self._file_loader = file_loader
        self._composer = composer

    def run(self, context: PipelineContext) -> PipelineContext:
        job = context.job
        context.source_bytes = self._file_loader.load(job.source_pdf)
        context.photo_bytes = self._file_loader.load(job.photo)
        context.template_bytes = self._file_loader.load(
            self._composer.select_template(job.course_mode)
        )
        Log.info(
            f"Loaded {len(context.source_bytes)} bytes from {job.source_pdf.name}, "
            f"{len(context.photo_bytes)} bytes from {job.photo.name}"
        )
        return context


class ExtractFieldsStep(PipelineStep):
    def __init__(self, extractor: FieldExtractor) -> None:
        self._extractor = extractor

    def run(self, context: PipelineContext) -> PipelineContext:
        context.fields = self._extractor.extract(context.source_bytes)
        return context


class RemoveBackgroundStep(PipelineStep):
    def __init__(self, remover: BackgroundRemover) -> None:
        self._remover = remover

    def run(self, context: PipelineContext) -> PipelineContext:
        job = context.job
        # Empty colour means key against the photo's top-left pixel.
        background = BackgroundColor.from_hex(job.background) if job.background else None
        context.photo_png = self._remover.remove_bytes(
            context.photo_bytes,
            threshold=job.threshold,
            background=background,
            edge_threshold=job.edge_threshold,
        )
        Log.info(f"Background removed from {job.photo.name}")
        return context


class ComposeCardStep(PipelineStep):
    def __init__(self, composer: CardComposer) -> None:
        self._composer = composer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.fields is None:
            raise ValueError("PipelineContext.fields must be set before composition")
        context.card = self._composer.compose(
            context.template_bytes, context.fields, context.photo_png
        )
        return context


class WriteOutputStep(PipelineStep):
    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.card is None:
            raise ValueError("PipelineContext.card must be set before writing output")
        context.output_path = self._file_loader.write(
            context.job.output_dir, context.card.filename, context.card.pdf_bytes
        )
        Log.info(f"Card written to {context.output_path}")
        return context
