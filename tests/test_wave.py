import numpy as np
import pytest

from randfields.wave import WaveModel


def _rng(seed=0):
    return np.random.default_rng(seed)


def test_initial_image_is_flat_100():
    model = WaveModel((6, 4), 10, _rng())
    image = model.main_image
    assert image.shape == (4, 6)
    assert (image == 100).all()


def test_no_waves_no_attenuation_keeps_image():
    model = WaveModel((5, 3), 10, _rng())
    image = model.generate_standard_main_image(
        probability_threshold=0.0, iterations=3, attenuation=0.0
    )
    assert (image == 100).all()
    assert model.wave_count == 0


def test_attenuation_only_decays():
    model = WaveModel((5, 3), 10, _rng())
    image = model.generate_standard_main_image(
        probability_threshold=0.0, iterations=1, attenuation=0.1
    )
    assert (image == 90).all()


def test_bright_waves_saturate():
    model = WaveModel((4, 3), 10, _rng(1))
    image = model.generate_standard_main_image(
        probability_threshold=1.0,
        mean_radius=2.0,
        sigma_radius=0.0,
        mean_brightness=1000.0,
        sigma_brightness=0.0,
        iterations=1,
        attenuation=0.0,
        amplification=1.0,
    )
    assert (image == 255).all()


def test_dark_waves_clip_at_zero():
    model = WaveModel((4, 3), 10, _rng(1))
    image = model.generate_standard_main_image(
        probability_threshold=1.0,
        mean_radius=2.0,
        sigma_radius=0.0,
        mean_brightness=-1000.0,
        sigma_brightness=0.0,
        iterations=1,
        attenuation=0.0,
    )
    assert (image == 0).all()


def test_centres_accumulate_over_updates():
    model = WaveModel((3, 2), 10, _rng(2))
    model.generate_standard_main_image(probability_threshold=1.0, iterations=2.5)
    assert model.wave_count == 3 * 3 * 2


def test_state_carries_over_between_calls():
    model = WaveModel((8, 6), 10, _rng(4))
    first = model.generate_standard_main_image(probability_threshold=0.2, iterations=2)
    second = model.generate_standard_main_image(
        probability_threshold=0.0, iterations=1, attenuation=0.0, amplification=0.0
    )
    assert np.array_equal(first, second)


def test_same_seed_same_image():
    first = WaveModel((10, 8), 10, _rng(7)).generate_standard_main_image(
        probability_threshold=0.05, iterations=3
    )
    second = WaveModel((10, 8), 10, _rng(7)).generate_standard_main_image(
        probability_threshold=0.05, iterations=3
    )
    assert first.dtype == np.uint8
    assert np.array_equal(first, second)


def test_returned_image_is_a_copy():
    model = WaveModel((4, 4), 10, _rng())
    image = model.generate_standard_main_image(probability_threshold=0.0, iterations=1)
    image[:] = 0
    assert (model.main_image != 0).all()


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        WaveModel((0, 5), 10, _rng())


def test_negative_sigma_rejected():
    model = WaveModel((4, 4), 10, _rng())
    with pytest.raises(ValueError):
        model.generate_standard_main_image(sigma_radius=-1.0)