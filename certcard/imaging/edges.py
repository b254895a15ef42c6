import numpy as np

from certcard.imaging.pixels import PixelBuffer


def detect_edges(buffer: PixelBuffer, edge_threshold: float) -> np.ndarray:
    """Boolean edge mask from red-channel centred gradients.

    For every interior pixel ``gx`` is the mean of the backward and forward
    differences along the row (``gy`` along the column); the pixel is an
    edge when ``sqrt(gx^2 + gy^2) > edge_threshold``. The 1-pixel border is
    never marked.
    """
    height, width = buffer.height, buffer.width
    edges = np.zeros((height, width), dtype=bool)
    if width < 3 or height < 3:
        return edges

    red = buffer.red.astype(np.float64)
    center = red[1:-1, 1:-1]
    gx = ((center - red[1:-1, :-2]) + (red[1:-1, 2:] - center)) / 2
    gy = ((center - red[:-2, 1:-1]) + (red[2:, 1:-1] - center)) / 2
    edges[1:-1, 1:-1] = np.sqrt(gx * gx + gy * gy) > edge_threshold
    return edges
