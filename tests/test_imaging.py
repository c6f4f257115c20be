import numpy as np
import pytest
from PIL import Image

from randfields import imaging


def test_block_map_shape_rounds_up_partial_blocks():
    assert imaging.block_map_shape((10, 7), (3, 3)) == (3, 4)


def test_block_map_shape_exact_division():
    assert imaging.block_map_shape((9, 6), (3, 3)) == (6 // 3, 9 // 3)


@pytest.mark.parametrize("block", [(0, 3), (3, -1)])
def test_block_map_shape_rejects_bad_block(block):
    with pytest.raises(ValueError):
        imaging.block_map_shape((10, 10), block)


def test_expand_blocks_fills_each_block():
    rng = np.random.default_rng(1)
    image_size, block_size = (11, 7), (4, 3)
    block_map = rng.integers(0, 5, size=imaging.block_map_shape(image_size, block_size))
    out = imaging.expand_blocks(block_map, image_size, block_size)
    assert out.shape == (7, 11)
    bw, bh = block_size
    for (i, j), value in np.ndenumerate(block_map):
        region = out[i * bh:(i + 1) * bh, j * bw:(j + 1) * bw]
        assert region.size > 0
        assert np.all(region == value)


def test_expand_blocks_rejects_wrong_map():
    with pytest.raises(ValueError):
        imaging.expand_blocks(np.zeros((2, 2)), (10, 10), (3, 3))


def test_random_image_size_from_table():
    rng = np.random.default_rng(5)
    sizes = {imaging.random_image_size(rng) for _ in range(60)}
    assert sizes <= set(imaging.IMAGE_SIZES)
    assert len(sizes) > 1


def test_scale_classes_wraps_like_a_byte():
    assert imaging.scale_classes([[13]], 20)[0, 0] == 4


def test_scale_classes_identity_step():
    labels = np.array([[0, 1, 2], [3, 4, 200]])
    out = imaging.scale_classes(labels, 1)
    assert out.dtype == np.uint8
    assert np.array_equal(out, labels)


def test_normalize_minmax_range_and_order():
    data = np.random.default_rng(2).normal(3.0, 4.0, size=(5, 6))
    out = imaging.normalize_minmax(data)
    assert out.min() == pytest.approx(0.0)
    assert out.max() == pytest.approx(1.0)
    assert np.array_equal(np.argsort(out, axis=None), np.argsort(data, axis=None))


def test_normalize_minmax_flat_image():
    out = imaging.normalize_minmax(np.full((3, 4), 7.5))
    assert np.array_equal(out, np.zeros((3, 4), dtype=np.float32))


def test_save_png_round_trip(tmp_path):
    data = np.random.default_rng(3).integers(0, 256, size=(8, 9), dtype=np.uint8)
    path = imaging.save_png(tmp_path / "img.png", data)
    with Image.open(path) as img:
        assert np.array_equal(np.asarray(img), data)


def test_save_png_saturates_floats(tmp_path):
    data = np.array([[0.4, 254.6, 300.0, -5.0]])
    path = imaging.save_png(tmp_path / "f.png", data)
    with Image.open(path) as img:
        assert np.asarray(img).tolist() == [[0, 255, 255, 0]]


def test_save_png_rejects_color(tmp_path):
    with pytest.raises(ValueError):
        imaging.save_png(tmp_path / "c.png", np.zeros((2, 2, 3), dtype=np.uint8))