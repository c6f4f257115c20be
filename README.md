# randfields

Generators of synthetic grey-scale images built from random field models,
and measures of spatial correlation in images.

Images are NumPy arrays indexed `[row, column]`; sizes are given as
`(width, height)`. Every generator takes an optional
`numpy.random.Generator`, so results are reproducible from a seed.

## Models

- `randfields.gauss`: independent Gaussian noise saturated to 0..255
  (`gaussian_image`). `GaussModel` implements the `ImageModel` interface
  with `GaussParameters` (image size, `mean`, `sigma`); it can also derive
  parameters for an object of a given contrast (`compute_object_parameters`)
  and its brightness (`main_object_color`).
- `randfields.gibbs`: Gibbs sampling of a class-label field, where each
  pixel's new label is weighted by a square table of pairwise class weights
  over its 4-neighbours (`GibbsModel`). `BlockGibbsModel` samples a coarse
  map and expands it into constant blocks.
- `randfields.markov`: a label field in which each pixel is drawn from a
  table of conditional transitions given an already drawn neighbour
  (`MarkovField`). `BlockMarkovModel` does the same at block level; an
  integer argument builds the standard 255-level table with that step.
- `randfields.wave`: a byte image that decays each update and gains
  Gaussian-shaped bumps around randomly started wave centres (`WaveModel`).
- `randfields.twice_random`: autoregressive fields whose correlation
  coefficients, mean and deviation are themselves random fields
  (`SimpleTwiceRandomModel`), and a variant that quantises every value to
  multiples of `1 / gamma` to form homogeneous areas
  (`HomogeneousAreasTwiceRandomModel`).
- `randfields.heterogeneous`: the normalised sum of a simple twice-random
  background and the first coefficient field of a homogeneous-areas model
  (`HeterogeneousTwiceRandomModel`).
- `randfields.metropolis`: a Metropolis exchange field normalised onto
  [0, 1] (`metropolis_exchange`, `compute_probability`).

## Analysis

`randfields.correlation` gives the correlation of brightness with position
along a single row or column (`correlation_by_coordinate`) and with the mean
of each pixel's neighbourhood (`correlation_by_neighbor`), together with the
helpers `mean`, `square_of_difference` and `medium_neighbor`.

`randfields.imaging` holds the shared helpers: `block_map_shape`,
`expand_blocks`, `random_image_size`, `scale_classes`, `normalize_minmax`
and `save_png`.

## Installation

```
pip install .
```

## Example

```python
import numpy as np
from randfields.gibbs import BlockGibbsModel
from randfields.imaging import scale_classes, save_png

rng = np.random.default_rng(7)
model = BlockGibbsModel((640, 480), (8, 8), rng)
classes = model.generate_standard_main_image(
    [1, 1, 1, 1],
    [[3, 1, 1, 1], [1, 3, 1, 1], [1, 1, 3, 1], [1, 1, 1, 3]],
    100,
)
save_png("gibbs.png", scale_classes(classes, 20))
```

## Command line

```
randfields --help
```

Subcommands:

- `gauss`, `gibbs`, `markov`, `twice-random`: write a batch of numbered PNG
  images with random sizes picked from a fixed list, printing each path.
  Options: `--out-dir`, `--count`, `--start`, `--seed`.
- `wave`: write one wave-model image. Options: `--output`, `--width`,
  `--height`, `--density`, `--iterations`, `--seed`.
- `metropolis`: write one exchange-model image. Options: `--output`,
  `--width`, `--height`, `--iterations`, `--seed`.
- `correlation IMAGE`: print the neighbour correlation of an image read as
  grey-scale. Option: `--group WIDTH HEIGHT` (odd, default 3 3).

The command exits with status 1 and a message on bad arguments or file
errors.

## What it does not do

There is no graphical interface: images are written to files and never shown
in a window while they are generated, and there is no interactive editor for
model parameters or for placing objects on a background.

## Tests

```
pip install .[test]
pytest
```