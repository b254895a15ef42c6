import numpy as np
import pytest

from certcard.imaging.edges import detect_edges
from certcard.imaging.pixels import PixelBuffer


def _from_red(red: np.ndarray) -> PixelBuffer:
    data = np.zeros((*red.shape, 4), dtype=np.uint8)
    data[:, :, 0] = red
    data[:, :, 3] = 255
    return PixelBuffer(data)


class TestDetectEdges:
    def test_flat_image_has_no_edges(self) -> None:
        edges = detect_edges(_from_red(np.full((5, 5), 128, dtype=np.uint8)), 0)
        assert not edges.any()

    def test_vertical_step_marks_neighbouring_columns(self) -> None:
        red = np.zeros((5, 6), dtype=np.uint8)
        red[:, 3:] = 100
        edges = detect_edges(_from_red(red), 10)
        # gx = (R[x+1] - R[x-1]) / 2 = 50 at columns 2 and 3, 0 elsewhere.
        assert edges[1:-1, 2].all()
        assert edges[1:-1, 3].all()
        assert not edges[:, [1, 4]].any()

    def test_threshold_is_exclusive(self) -> None:
        red = np.zeros((3, 3), dtype=np.uint8)
        red[:, 2] = 20
        # centre pixel: gx = (20 - 0) / 2 = 10, gy = 0
        assert not detect_edges(_from_red(red), 10)[1, 1]
        assert detect_edges(_from_red(red), 9.99)[1, 1]

    def test_combines_both_axes(self) -> None:
        red = np.zeros((3, 3), dtype=np.uint8)
        red[1, 2] = 60
        red[2, 1] = 80
        # centre: gx = 30, gy = 40, strength = 50
        assert detect_edges(_from_red(red), 49)[1, 1]
        assert not detect_edges(_from_red(red), 50)[1, 1]

    def test_uses_red_channel_only(self) -> None:
        data = np.zeros((5, 5, 4), dtype=np.uint8)
        data[:, 3:, 1] = 255
        data[:, 3:, 2] = 255
        assert not detect_edges(PixelBuffer(data), 1).any()

    @pytest.mark.parametrize("threshold", [0, 1, 50, 1000])
    def test_border_is_never_an_edge(self, threshold: float) -> None:
        rng = np.random.default_rng(3)
        red = rng.integers(0, 256, size=(9, 11), dtype=np.uint8)
        edges = detect_edges(_from_red(red), threshold)
        assert not edges[0, :].any()
        assert not edges[-1, :].any()
        assert not edges[:, 0].any()
        assert not edges[:, -1].any()

    def test_negative_gradients_do_not_wrap(self) -> None:
        red = np.full((3, 3), 200, dtype=np.uint8)
        red[:, 2] = 0
        # gx = (0 - 200) / 2 = -100
        assert detect_edges(_from_red(red), 99)[1, 1]

    @pytest.mark.parametrize("shape", [(1, 1), (2, 5), (5, 2)])
    def test_tiny_images_have_no_interior(self, shape: tuple[int, int]) -> None:
        edges = detect_edges(_from_red(np.zeros(shape, dtype=np.uint8)), 0)
        assert edges.shape == shape
        assert not edges.any()
