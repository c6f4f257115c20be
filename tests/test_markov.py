import numpy as np
import pytest

from randfields.markov import BlockMarkovModel, MarkovField


def _rng(seed=0):
    return np.random.default_rng(seed)


def test_standard_table_peaks_on_diagonal():
    field = MarkovField((4, 4), _rng())
    field.init_conditional_transitions(10)
    table = np.array(field.conditional_transitions)
    assert table.shape == (255, 255)
    assert (np.diag(table) == 255).all()


def test_standard_table_is_symmetric_and_falls_by_step():
    field = MarkovField((4, 4), _rng())
    field.init_conditional_transitions(10)
    table = np.array(field.conditional_transitions)
    assert (table == table.T).all()
    assert table[0, 1] == 255 - 10
    assert table[7, 5] == 255 - 2 * 10
    assert (table >= 0).all()


def test_standard_table_reaches_zero_far_from_diagonal():
    field = MarkovField((4, 4), _rng())
    field.init_conditional_transitions(10)
    table = np.array(field.conditional_transitions)
    assert table[0, 254] == 0
    assert table[254, 0] == 0


def test_flip_table_gives_checkerboard():
    field = MarkovField((7, 5), _rng(3))
    field.set_conditional_transitions([[0, 1], [1, 0]])
    image = field.generate_standard_main_image()
    rows, cols = np.indices(image.shape)
    assert image.shape == (5, 7)
    assert (image == (image[0, 0] + rows + cols) % 2).all()


def test_identity_table_gives_constant_image():
    field = MarkovField((6, 4), _rng(5))
    field.set_conditional_transitions([[1, 0, 0], [0, 1, 0], [0, 0, 1]])
    image = field.generate_standard_main_image()
    assert (image == image[0, 0]).all()
    assert image[0, 0] in (0, 1, 2)


def test_labels_stay_within_classes():
    field = MarkovField((30, 20), _rng(1))
    field.set_conditional_transitions([[3, 2, 1], [3, 2, 1], [3, 2, 1]])
    image = field.generate_standard_main_image()
    assert image.dtype == np.uint8
    assert set(np.unique(image)) <= {0, 1, 2}


def test_same_seed_same_image():
    table = [[3, 2, 1], [1, 3, 2], [2, 1, 3]]
    first = MarkovField((12, 9), _rng(42))
    second = MarkovField((12, 9), _rng(42))
    first.set_conditional_transitions(table)
    second.set_conditional_transitions(table)
    assert np.array_equal(
        first.generate_standard_main_image(), second.generate_standard_main_image()
    )


def test_single_pixel_image():
    field = MarkovField((1, 1), _rng())
    field.set_conditional_transitions([[1, 1], [1, 1]])
    image = field.generate_standard_main_image()
    assert image.shape == (1, 1)
    assert image[0, 0] in (0, 1)


def test_generate_without_table_raises():
    field = MarkovField((3, 3), _rng())
    with pytest.raises(RuntimeError):
        field.generate_standard_main_image()


@pytest.mark.parametrize(
    "table",
    [
        [],
        [[0, 0], [1, 1]],
        [[1, -1], [1, 1]],
        [[1, 1, 1], [1, 1, 1]],
        [[]],
    ],
)
def test_invalid_tables_rejected(table):
    field = MarkovField((3, 3), _rng())
    with pytest.raises(ValueError):
        field.set_conditional_transitions(table)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        MarkovField((0, 3), _rng())


def test_block_model_shape_and_blocks_constant():
    model = BlockMarkovModel((23, 17), (5, 4), _rng(2))
    image = model.generate_standard_main_image([[3, 2, 1], [3, 2, 1], [3, 2, 1]])
    assert image.shape == (17, 23)
    for top in range(0, 17, 4):
        for left in range(0, 23, 5):
            block = image[top:top + 4, left:left + 5]
            assert (block == block[0, 0]).all()


def test_block_model_identity_table_is_constant():
    model = BlockMarkovModel((20, 10), (4, 3), _rng(8))
    image = model.generate_standard_main_image([[1, 0], [0, 1]])
    assert (image == image[0, 0]).all()


def test_block_model_with_step_uses_standard_levels():
    model = BlockMarkovModel((16, 12), (4, 4), _rng(9))
    image = model.generate_standard_main_image(10)
    assert image.shape == (12, 16)
    assert int(image.max()) < 255