import re
import time
from pathlib import Path
from typing import Any

import pymupdf

from certcard.composer.exceptions import CompositionError
from certcard.composer.models import ComposedCard
from certcard.config.settings import Settings
from certcard.extraction.models import FieldRecord
from certcard.logging.logger import Log

RENEWAL_MODE = "aggiornamenti"
RENEWAL_TEMPLATE = "outputCard Renewal.pdf"
DEFAULT_TEMPLATE = "outputCard v3.1.pdf"

PHOTO_SLOT = "p1_user_pic"
QR_SLOT = "p2_qr"


def slugify(name: str) -> str:
    """Lowercase the trimmed name and turn whitespace runs into underscores."""
    return re.sub(r"\s+", "_", name.strip().lower())


class CardComposer:
    """Fills the card template's form fields and flattens it."""

    def __init__(self, settings: Settings) -> None:
        self._template_dir = settings.template_dir
        self._name_description_tail = settings.name_description_tail

    def select_template(self, course_mode: str) -> Path:
        filename = RENEWAL_TEMPLATE if course_mode == RENEWAL_MODE else DEFAULT_TEMPLATE
        return self._template_dir / filename

    def text_values(self, record: FieldRecord) -> dict[str, str]:
        """Form field name -> text for every text field on the card."""
        tail = self._name_description_tail
        return {
            "p1_name": record.name,
            "p1_name_description": record.name_description,
            "p1_date_1": record.date_1,
            "p1_date_2": record.date_2,
            "p1_date_bottom_1": record.bottom_date_1,
            "p1_date_bottom_2": record.bottom_date_2,
            "p2_attestation_number": record.attestation_number,
            "p2_name": record.name,
            "p2_name_description": record.name_description[-tail:] if tail else "",
            "p2_date_bottom_1": record.bottom_date_1,
            "p2_date_bottom_2": record.bottom_date_2,
        }

    def compose(
        self,
        template_bytes: bytes,
        record: FieldRecord,
        photo_png: bytes | None,
    ) -> ComposedCard:
        """Fill the template with ``record`` and the processed photo.

        Raises:
            CompositionError: if no photo is given or the template cannot be filled.
        """
        if not photo_png:
            raise CompositionError("Please select an image first")

        images = {PHOTO_SLOT: photo_png}
        if record.qr_image is not None:
            images[QR_SLOT] = record.qr_image.data
        else:
            Log.warning("No QR image extracted, leaving QR slot empty")

        try:
            pdf_bytes, title = self._fill(template_bytes, self.text_values(record), images, record.name)
        except CompositionError:
            raise
        except Exception as exc:
            raise CompositionError(f"Card composition failed: {exc}") from exc

        filename = f"{title}_{time.time_ns() // 1_000_000}_output.pdf"
        Log.info(f"Composed card '{title}' ({len(pdf_bytes)} bytes)")
        return ComposedCard(pdf_bytes=pdf_bytes, title=title, filename=filename)

    def _fill(
        self,
        template_bytes: bytes,
        texts: dict[str, str],
        images: dict[str, bytes],
        name: str,
    ) -> tuple[bytes, str]:
        with pymupdf.open(stream=template_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            filled: set[str] = set()
            for page in doc:
                filled |= self._fill_page(page, texts, images)

            missing = (set(texts) | set(images)) - filled
            if missing:
                Log.warning(f"Template has no form fields named: {sorted(missing)}")

            doc.bake()
            title = slugify(name)
            metadata = dict(doc.metadata or {})
            metadata["title"] = title
            doc.set_metadata(metadata)
            return doc.tobytes(garbage=3, deflate=True), title

    def _fill_page(self, page: Any, texts: dict[str, str], images: dict[str, bytes]) -> set[str]:
        filled: set[str] = set()
        image_slots = []
        for widget in page.widgets():
            field_name = widget.field_name
            if field_name in images:
                image_slots.append(widget)
            elif field_name in texts:
                widget.field_value = texts[field_name]
                widget.update()
                filled.add(field_name)

        for widget in image_slots:
            page.insert_image(widget.rect, stream=images[widget.field_name], keep_proportion=True)
            filled.add(widget.field_name)
            page.delete_widget(widget)
        return filled
