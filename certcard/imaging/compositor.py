import numpy as np

from certcard.imaging.pixels import PixelBuffer


def composite(
    buffer: PixelBuffer,
    distances: np.ndarray,
    edges: np.ndarray,
    threshold: float,
) -> PixelBuffer:
    """Clear alpha where the colour is close to the background and not on an edge.

    Returns a new buffer; RGB and all other alpha values are copied unchanged.
    """
    expected = (buffer.height, buffer.width)
    if distances.shape != expected or edges.shape != expected:
        raise ValueError(
            f"Mask shapes {distances.shape}/{edges.shape} do not match image {expected}"
        )
    result = buffer.copy()
    transparent = (distances < threshold) & ~edges
    result.alpha[transparent] = 0
    return result
