from certcard.extraction.extractor import FieldExtractor
from certcard.extraction.models import FieldRecord, FieldUpdate, TextFragment

__all__ = ["FieldExtractor", "FieldRecord", "FieldUpdate", "TextFragment"]
