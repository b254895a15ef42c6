import argparse
from pathlib import Path

from certcard.composer.exceptions import CompositionError
from certcard.config.settings import Settings
from certcard.imaging.exceptions import ImagingError
from certcard.logging.logger import Log
from certcard.pdf.exceptions import PdfReadError
from certcard.processor.exceptions import ProcessorError
from certcard.processor.models import CardJob
from certcard.processor.processor import build_processor


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certcard",
        description="Generate a personalised card from a source PDF and a photo.",
    )
    parser.add_argument("source_pdf", type=Path, help="Source attestation PDF")
    parser.add_argument("photo", type=Path, help="Photo to place on the card")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."))
    parser.add_argument(
        "--mode",
        choices=["normal", "aggiornamenti"],
        default=settings.course_mode,
        help="Course type, selects the card template",
    )
    parser.add_argument("--threshold", type=float, default=settings.background_threshold)
    parser.add_argument(
        "--color",
        default=settings.background_color,
        help="Background colour as #rrggbb; empty string samples the top-left pixel",
    )
    parser.add_argument("--edge-threshold", type=float, default=settings.edge_threshold)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> logging -> parse args -> run the pipeline."""
    settings = Settings()
    Log.configure(settings.log_level)
    args = build_parser(settings).parse_args(argv)

    job = CardJob(
        source_pdf=args.source_pdf,
        photo=args.photo,
        output_dir=args.output_dir,
        course_mode=args.mode,
        threshold=args.threshold,
        background=args.color,
        edge_threshold=args.edge_threshold,
    )
    try:
        context = build_processor(settings).process(job)
    except (ProcessorError, PdfReadError, ImagingError, CompositionError, ValueError) as exc:
        Log.error(f"Card generation failed: {exc}")
        return 1

    print(context.output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
