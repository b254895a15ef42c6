from dataclasses import dataclass, field, fields, replace

from certcard.pdf.models import EmbeddedImage


@dataclass(frozen=True)
class TextFragment:
    """One visible positioned text run in page space (bottom-left origin)."""

    text: str
    x: float
    y: float
    font_size: float


@dataclass(frozen=True)
class AnchorPoint:
    """Fixed page coordinate a field is geometrically matched against."""

    x: float
    y: float


@dataclass
class FieldRecord:
    """Fields recovered from a source document.

    Empty strings mean the heuristics found nothing for that field; the
    operator is expected to fill those in by hand.
    """

    name: str = ""
    name_description: str = ""
    date_1: str = ""
    date_2: str = ""
    bottom_date_1: str = ""
    bottom_date_2: str = ""
    attestation_number: str = ""
    qr_image: EmbeddedImage | None = None


@dataclass(frozen=True)
class FieldUpdate:
    """Partial FieldRecord produced by one page pass. ``None`` means not written."""

    name: str | None = None
    name_description: str | None = None
    date_1: str | None = None
    date_2: str | None = None
    bottom_date_1: str | None = None
    bottom_date_2: str | None = None
    attestation_number: str | None = None
    qr_image: EmbeddedImage | None = None

    def written_fields(self) -> dict[str, object]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def merged_with(self, other: "FieldUpdate") -> "FieldUpdate":
        """Overlay ``other`` on top of this update (last write wins)."""
        return replace(self, **other.written_fields())

    def apply_to(self, record: FieldRecord) -> None:
        for name, value in self.written_fields().items():
            setattr(record, name, value)


@dataclass(frozen=True)
class ImageScan:
    """Embedded images found on one page and the QR payload, if any."""

    page_number: int
    images: list[EmbeddedImage] = field(default_factory=list)
    qr_image: EmbeddedImage | None = None
