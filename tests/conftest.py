import io

import numpy as np
import pymupdf
import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4, landscape, letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

PAGE_ONE_LINES = [
    "ATTESTATO",
    "DI FREQUENZA",
    "Mario Rossi",
    "Lavoratori rischio basso 0008",
    "DATA E ORARIO SVOLGIMENTO LEZIONE",
    "12/05/2024 09:00-13:00",
    "SEDE DI SVOLGIMENTO DEL CORSO/I",
    "Via Roma 1, Milano",
]

# Image slot -> text fields on the same template page.
CARD_TEXT_FIELDS = {
    "p1_user_pic": [
        "p1_name",
        "p1_name_description",
        "p1_date_1",
        "p1_date_2",
        "p1_date_bottom_1",
        "p1_date_bottom_2",
    ],
    "p2_qr": [
        "p2_attestation_number",
        "p2_name",
        "p2_name_description",
        "p2_date_bottom_1",
        "p2_date_bottom_2",
    ],
}


def _qr_like_image() -> Image.Image:
    rng = np.random.default_rng(7)
    modules = rng.integers(0, 2, size=(21, 21), dtype=np.uint8) * 255
    return Image.fromarray(modules).resize((105, 105), Image.Resampling.NEAREST).convert("RGB")


@pytest.fixture()
def qr_png_bytes() -> bytes:
    buf = io.BytesIO()
    _qr_like_image().save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def source_pdf_bytes() -> bytes:
    """Two-page attestation laid out like the real source document."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=landscape(A4))

    y = 540
    for line in PAGE_ONE_LINES:
        c.drawString(72, y, line)
        y -= 40
    c.showPage()

    c.drawString(450, 560, "ATTESTAZIONE N.")
    c.drawString(640, 535, "AB12345678")
    c.drawImage(ImageReader(_qr_like_image()), 80, 300, width=105, height=105)
    c.drawString(100, 40, "01/06/2024")
    c.drawString(400, 25, "01/06/2029")
    c.drawString(250, 10, "Powered by Formazione Srl")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def blank_two_page_pdf_bytes() -> bytes:
    """Valid two-page PDF with no text and no images."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def portrait_png_bytes() -> bytes:
    """White background with a dark square subject in the middle."""
    data = np.full((60, 40, 4), 255, dtype=np.uint8)
    data[20:40, 10:30, :3] = (40, 30, 20)
    buf = io.BytesIO()
    Image.fromarray(data).save(buf, format="PNG")
    return buf.getvalue()


def _add_text_widget(page: pymupdf.Page, name: str, rect: pymupdf.Rect) -> None:
    widget = pymupdf.Widget()
    widget.field_name = name
    widget.field_type = pymupdf.PDF_WIDGET_TYPE_TEXT
    widget.rect = rect
    widget.field_value = ""
    widget.text_fontsize = 9
    page.add_widget(widget)


@pytest.fixture()
def template_bytes() -> bytes:
    """Two-page card template: text fields plus one image slot per page."""
    doc = pymupdf.open()
    for slot, names in CARD_TEXT_FIELDS.items():
        page = doc.new_page(width=243, height=153)
        for i, name in enumerate(names):
            _add_text_widget(page, name, pymupdf.Rect(10, 10 + i * 20, 150, 26 + i * 20))
        _add_text_widget(page, slot, pymupdf.Rect(160, 10, 230, 100))
    data = doc.tobytes()
    doc.close()
    return data
