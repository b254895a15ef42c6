import numpy as np
import pytest

from certcard.imaging.compositor import composite
from certcard.imaging.pixels import PixelBuffer


def _buffer() -> PixelBuffer:
    rng = np.random.default_rng(11)
    data = rng.integers(0, 256, size=(4, 5, 4), dtype=np.uint8)
    return PixelBuffer(data)


class TestComposite:
    def test_clears_alpha_only_for_close_non_edge_pixels(self) -> None:
        buf = _buffer()
        distances = np.full((4, 5), 100.0)
        distances[0, 0] = 5.0
        distances[1, 1] = 5.0
        edges = np.zeros((4, 5), dtype=bool)
        edges[1, 1] = True

        result = composite(buf, distances, edges, threshold=40)

        assert result.alpha[0, 0] == 0
        assert result.alpha[1, 1] == buf.alpha[1, 1]
        untouched = np.ones((4, 5), dtype=bool)
        untouched[0, 0] = False
        assert np.array_equal(result.alpha[untouched], buf.alpha[untouched])

    def test_threshold_is_exclusive(self) -> None:
        buf = _buffer()
        distances = np.full((4, 5), 40.0)
        result = composite(buf, distances, np.zeros((4, 5), dtype=bool), threshold=40)
        assert np.array_equal(result.alpha, buf.alpha)

    def test_rgb_is_preserved_and_input_not_mutated(self) -> None:
        buf = _buffer()
        before = buf.data.copy()
        result = composite(buf, np.zeros((4, 5)), np.zeros((4, 5), dtype=bool), threshold=1)
        assert np.array_equal(result.rgb, before[:, :, :3])
        assert np.array_equal(buf.data, before)
        assert not result.alpha.any()

    def test_mismatched_masks_raise(self) -> None:
        with pytest.raises(ValueError, match="do not match"):
            composite(_buffer(), np.zeros((3, 3)), np.zeros((4, 5), dtype=bool), threshold=1)
