"""Command-line front end that generates batches of model images and analyses them."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
from PIL import Image

from randfields.correlation import correlation_by_neighbor
from randfields.gauss import gaussian_image
from randfields.gibbs import BlockGibbsModel
from randfields.imaging import normalize_minmax, random_image_size, save_png, scale_classes
from randfields.markov import BlockMarkovModel
from randfields.metropolis import metropolis_exchange
from randfields.twice_random import SimpleTwiceRandomModel
from randfields.wave import WaveModel

CLASS_STEP = 20
"""Grey-level step between class labels in saved label images."""

GIBBS_ITERATIONS = 100
MARKOV_TRANSITIONS = ((3, 2, 1), (3, 2, 1), (3, 2, 1))
GIBBS_FREQUENCY = (1, 1, 1, 1)
GIBBS_PROBABILITY_MAP = ((1, 1, 1, 1),) * 4


def _prepare(out_dir, rng):
    directory = Path(out_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory, (np.random.default_rng() if rng is None else rng)


def _check_count(count):
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")


def _block_size(rng) -> tuple[int, int]:
    return int(rng.integers(4, 13)), int(rng.integers(4, 13))


def generate_gauss_batch(out_dir, count=1, start_number=0, rng=None) -> list[Path]:
    """Write ``count`` Gaussian-noise images and return their paths."""
    _check_count(count)
    directory, rng = _prepare(out_dir, rng)
    paths = []
    for number in range(start_number, start_number + count):
        width, height = random_image_size(rng)
        mean = float(rng.integers(50, 171))
        sigma = float(rng.integers(50, 171))
        image = gaussian_image(width, height, mean, sigma, rng)
        paths.append(save_png(directory / f"GausModel_{number}.png", image))
    return paths


def generate_gibbs_batch(out_dir, count=180, start_number=360, rng=None) -> list[Path]:
    """Write ``count`` block Gibbs label images and return their paths."""
    _check_count(count)
    directory, rng = _prepare(out_dir, rng)
    paths = []
    for number in range(start_number, start_number + count):
        image_size = random_image_size(rng)
        model = BlockGibbsModel(image_size, _block_size(rng), rng)
        labels = model.generate_standard_main_image(
            GIBBS_FREQUENCY, GIBBS_PROBABILITY_MAP, GIBBS_ITERATIONS
        )
        image = scale_classes(labels, CLASS_STEP)
        paths.append(save_png(directory / f"blockGibsModel_{number}.png", image))
    return paths


def generate_markov_batch(out_dir, count=5, start_number=159, rng=None) -> list[Path]:
    """Write ``count`` block Markov label images and return their paths."""
    _check_count(count)
    directory, rng = _prepare(out_dir, rng)
    paths = []
    for number in range(start_number, start_number + count):
        image_size = random_image_size(rng)
        model = BlockMarkovModel(image_size, _block_size(rng), rng)
        labels = model.generate_standard_main_image(MARKOV_TRANSITIONS)
        image = scale_classes(labels, CLASS_STEP)
        paths.append(save_png(directory / f"blockMarkovModel_{number}.png", image))
    return paths


def generate_twice_random_batch(out_dir, count=108, start_number=0, rng=None) -> list[Path]:
    """Write ``count`` simple twice-random images and return their paths."""
    _check_count(count)
    directory, rng = _prepare(out_dir, rng)
    paths = []
    for number in range(start_number, start_number + count):
        image_size = random_image_size(rng)
        coefficients = (float(rng.uniform(0.7, 0.84)), float(rng.uniform(0.7, 0.84)))
        sigma_for_correlation = (float(rng.uniform(0.1, 0.13)), float(rng.uniform(0.1, 0.13)))
        sigma_for_mean = float(rng.uniform(0.02, 0.1))
        sigma_for_std = float(rng.uniform(0.02, 0.1))
        mean_for_mean = float(rng.uniform(0.2, 0.9))
        mean_for_std = float(rng.uniform(0.1, 0.8))
        sigma_for_main_image = float(rng.uniform(0.02, 0.3))

        model = SimpleTwiceRandomModel(image_size, coefficients, rng)
        image = model.generate_standard_main_image(
            sigma_for_correlation,
            sigma_for_mean,
            sigma_for_std,
            mean_for_mean,
            mean_for_std,
            sigma_for_main_image,
            True,
        )
        image = normalize_minmax(image) * 255.0
        paths.append(save_png(directory / f"twiceRandomImage_{number}.png", image))
    return paths


_BATCHES = {
    "gauss": (generate_gauss_batch, "GausModel_test", 1, 0),
    "gibbs": (generate_gibbs_batch, "blockGibsModel", 180, 360),
    "markov": (generate_markov_batch, "blockMarkovModel", 5, 159),
    "twice-random": (generate_twice_random_batch, "simpleTwiceRandomImageTest", 108, 0),
}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="randfields", description="Generate and analyse random-field images."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    for name, (_, out_dir, count, start) in _BATCHES.items():
        batch = commands.add_parser(name, help=f"write a batch of {name} images")
        batch.add_argument("--out-dir", default=out_dir)
        batch.add_argument("--count", type=int, default=count)
        batch.add_argument("--start", type=int, default=start)
        batch.add_argument("--seed", type=int, default=None)

    wave = commands.add_parser("wave", help="write one wave-model image")
    wave.add_argument("--output", default="waveImage.png")
    wave.add_argument("--width", type=int, default=600)
    wave.add_argument("--height", type=int, default=400)
    wave.add_argument("--density", type=int, default=10)
    wave.add_argument("--iterations", type=int, default=10)
    wave.add_argument("--seed", type=int, default=None)

    metropolis = commands.add_parser("metropolis", help="write one exchange-model image")
    metropolis.add_argument("--output", default="image_.png")
    metropolis.add_argument("--width", type=int, default=600)
    metropolis.add_argument("--height", type=int, default=400)
    metropolis.add_argument("--iterations", type=int, default=1000)
    metropolis.add_argument("--seed", type=int, default=None)

    correlation = commands.add_parser(
        "correlation", help="print the neighbour correlation of an image"
    )
    correlation.add_argument("image")
    correlation.add_argument("--group", type=int, nargs=2, default=(3, 3),
                             metavar=("WIDTH", "HEIGHT"))
    return parser


def _run(args) -> None:
    if args.command in _BATCHES:
        generate = _BATCHES[args.command][0]
        rng = np.random.default_rng(args.seed)
        for path in generate(args.out_dir, args.count, args.start, rng):
            print(path)
    elif args.command == "wave":
        model = WaveModel((args.width, args.height), args.density,
                          np.random.default_rng(args.seed))
        image = model.generate_standard_main_image(iterations=args.iterations)
        print(save_png(args.output, image))
    elif args.command == "metropolis":
        image = metropolis_exchange(
            (args.width, args.height), args.iterations, rng=np.random.default_rng(args.seed)
        )
        print(save_png(args.output, image * 255.0))
    else:
        with Image.open(args.image) as source:
            image = np.asarray(source.convert("L"))
        print(correlation_by_neighbor(image, tuple(args.group)))


def main(argv=None) -> int:
    """Run the command line; return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        _run(args)
    except (ValueError, OSError) as error:
        print(f"randfields: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())