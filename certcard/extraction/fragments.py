from collections.abc import Iterable

from certcard.extraction.models import TextFragment
from certcard.pdf.models import GlyphRun


def is_visible(run: GlyphRun) -> bool:
    """Line terminators and zero-height runs are layout artifacts, not content."""
    return not run.has_eol and run.height != 0


def classify_runs(runs: Iterable[GlyphRun]) -> list[TextFragment]:
    """Turn a page's raw runs into fragments, keeping the reader's order."""
    return [
        TextFragment(
            text=run.text,
            x=run.transform[4],
            y=run.transform[5],
            font_size=run.transform[0],
        )
        for run in runs
        if is_visible(run)
    ]
