from dataclasses import dataclass


@dataclass(frozen=True)
class ComposedCard:
    """A filled, flattened card ready to be written out."""

    pdf_bytes: bytes
    title: str
    filename: str
