from collections.abc import Sequence

from certcard.extraction.models import ImageScan
from certcard.logging.logger import Log
from certcard.pdf.models import EmbeddedImage

QR_PAGE_NUMBER = 2


def locate_images(
    page_number: int,
    embedded: Sequence[EmbeddedImage],
    qr_page_number: int = QR_PAGE_NUMBER,
) -> ImageScan:
    """Record every embedded image; on the QR page the first one is the QR code."""
    images = list(embedded)
    if page_number != qr_page_number:
        return ImageScan(page_number=page_number, images=images)

    if not images:
        Log.warning(f"No embedded image found on QR page {page_number}")
        return ImageScan(page_number=page_number, images=images)

    return ImageScan(page_number=page_number, images=images, qr_image=images[0])
