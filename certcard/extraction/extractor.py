from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from certcard.config.settings import Settings
from certcard.extraction.accumulator import FieldAccumulator
from certcard.extraction.document import DocumentReader
from certcard.extraction.field_locator import locate_page_one, locate_page_two
from certcard.extraction.image_locator import locate_images
from certcard.extraction.models import AnchorPoint, FieldRecord, FieldUpdate
from certcard.logging.logger import Log
from certcard.pdf.base import BasePdfReader

NAME_PAGE_NUMBER = 1
DETAILS_PAGE_NUMBER = 2


class FieldExtractor:
    """Runs the per-page passes over a source document and merges their output."""

    def __init__(self, reader: BasePdfReader, settings: Settings) -> None:
        self._reader = reader
        self._settings = settings
        self._anchor = AnchorPoint(
            x=settings.attestation_anchor_x, y=settings.attestation_anchor_y
        )

    def extract(self, pdf_bytes: bytes) -> FieldRecord:
        """Extract every field from the document.

        Text and image passes run concurrently; their partial updates are
        funnelled through one FieldAccumulator.

        Raises:
            PdfReadError: if the document cannot be read.
        """
        document = DocumentReader(self._reader, pdf_bytes)
        pages = document.pages()
        accumulator = FieldAccumulator(page.number for page in pages)

        with ThreadPoolExecutor(max_workers=self._settings.extraction_workers) as pool:
            futures: dict[Future[FieldUpdate], int] = {}
            for page in pages:
                futures[pool.submit(self.text_pass, document, page.number)] = page.number
                futures[pool.submit(self.image_pass, document, page.number)] = page.number

            remaining = Counter(futures.values())
            for future in as_completed(futures):
                page_number = futures[future]
                accumulator.apply(page_number, future.result())
                remaining[page_number] -= 1
                if remaining[page_number] == 0:
                    accumulator.mark_page_done(page_number)

        record = accumulator.completed.result()
        Log.info(
            f"Extracted fields from {len(pages)} pages: "
            f"name={record.name!r}, attestation={record.attestation_number!r}, "
            f"qr={'yes' if record.qr_image is not None else 'no'}"
        )
        return record

    def extract_page(self, document: DocumentReader, page_number: int) -> FieldUpdate:
        """Run both passes for a single page, for callers feeding pages one by one."""
        return self.text_pass(document, page_number).merged_with(
            self.image_pass(document, page_number)
        )

    def text_pass(self, document: DocumentReader, page_number: int) -> FieldUpdate:
        fragments = document.get_page_fragments(page_number)
        Log.debug(f"Page {page_number}: {len(fragments)} visible fragments")
        if page_number == NAME_PAGE_NUMBER:
            return locate_page_one(fragments)
        if page_number == DETAILS_PAGE_NUMBER:
            return locate_page_two(
                fragments,
                anchor=self._anchor,
                proximity=self._settings.attestation_proximity,
                bottom_band=self._settings.bottom_band_y,
            )
        return FieldUpdate()

    def image_pass(self, document: DocumentReader, page_number: int) -> FieldUpdate:
        scan = locate_images(
            page_number,
            document.get_page_embedded_images(page_number),
            qr_page_number=self._settings.qr_page_number,
        )
        if scan.images:
            Log.debug(f"Page {page_number}: {len(scan.images)} embedded images")
        return FieldUpdate(qr_image=scan.qr_image)
