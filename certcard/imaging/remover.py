"""Colour-keyed background removal protected by an edge mask.

Flow for one call:
1. Downscale so neither side exceeds the configured maximum.
2. Compute the edge mask and the colour distance from the same pixels.
3. Clear alpha where the colour is near the background and not on an edge.

The input buffer is never modified. No learned model is involved.
"""

import itertools
import threading

from certcard.config.settings import Settings
from certcard.imaging.color_model import BackgroundColor, color_distance, sample_background
from certcard.imaging.compositor import composite
from certcard.imaging.edges import detect_edges
from certcard.imaging.pixels import PixelBuffer, decode_image, downscale
from certcard.logging.logger import Log

DEFAULT_THRESHOLD = 40.0
DEFAULT_EDGE_THRESHOLD = 10.0
MAX_IMAGE_DIMENSION = 1024


class BackgroundRemover:
    """Makes a photograph's background transparent."""

    def __init__(self, max_dimension: int = MAX_IMAGE_DIMENSION) -> None:
        self._max_dimension = max_dimension

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackgroundRemover":
        return cls(max_dimension=settings.max_image_dimension)

    def remove(
        self,
        buffer: PixelBuffer,
        threshold: float = DEFAULT_THRESHOLD,
        background: BackgroundColor | None = None,
        edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    ) -> PixelBuffer:
        """Return a copy of ``buffer`` with background pixels made transparent.

        Args:
            buffer: Source RGBA pixels.
            threshold: Pixels closer than this to the background colour are cleared.
            background: Colour to key against; pixel (0, 0) when omitted.
            edge_threshold: Gradient strength above which a pixel is protected.
        """
        source = downscale(buffer, self._max_dimension)
        if source is not buffer:
            Log.info(
                f"Downscaled image {buffer.width}x{buffer.height} -> "
                f"{source.width}x{source.height}"
            )
        color = background if background is not None else sample_background(source)

        edges = detect_edges(source, edge_threshold)
        distances = color_distance(source, color)
        result = composite(source, distances, edges, threshold)

        Log.debug(
            f"Removed background {color.to_hex()} (threshold={threshold}, "
            f"edge_threshold={edge_threshold}): "
            f"{int((result.alpha == 0).sum())} transparent pixels, "
            f"{int(edges.sum())} edge pixels"
        )
        return result

    def remove_bytes(
        self,
        image_bytes: bytes,
        threshold: float = DEFAULT_THRESHOLD,
        background: BackgroundColor | None = None,
        edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    ) -> bytes:
        """Decode, remove the background and encode the result as PNG.

        Raises:
            ImageDecodeError: if ``image_bytes`` is not a decodable image.
        """
        buffer = decode_image(image_bytes)
        return self.remove(buffer, threshold, background, edge_threshold).to_png()


class LatestRequestGate:
    """Keeps only the result of the most recent request.

    Every request takes a ticket from a monotonically increasing counter;
    results published with an older ticket are dropped.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._current = 0
        self._latest: bytes | None = None

    def begin(self) -> int:
        with self._lock:
            self._current = next(self._counter)
            return self._current

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._current

    def publish(self, ticket: int, result: bytes) -> bool:
        with self._lock:
            if ticket != self._current:
                return False
            self._latest = result
            return True

    @property
    def latest(self) -> bytes | None:
        with self._lock:
            return self._latest


class RemovalPreview:
    """Live re-rendering of the removal as the operator tweaks parameters."""

    def __init__(self, remover: BackgroundRemover, gate: LatestRequestGate | None = None) -> None:
        self._remover = remover
        self.gate = gate or LatestRequestGate()

    def render(
        self,
        image_bytes: bytes,
        threshold: float = DEFAULT_THRESHOLD,
        background: BackgroundColor | None = None,
        edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    ) -> bytes | None:
        """Render a preview; ``None`` if a newer request superseded this one.

        On failure the previously published preview stays in place and the
        error propagates.
        """
        ticket = self.gate.begin()
        try:
            result = self._remover.remove_bytes(image_bytes, threshold, background, edge_threshold)
        except Exception as exc:
            Log.error(f"Preview {ticket} failed: {exc}")
            raise
        if not self.gate.publish(ticket, result):
            Log.debug(f"Preview {ticket} superseded, result dropped")
            return None
        return result
