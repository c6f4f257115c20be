[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "randfields"
version = "0.1.0"
description = "Synthetic grey-scale images from random field models (Gaussian noise, Gibbs, Markov, wave, Metropolis and twice-random fields), with image correlation measures."
requires-python = ">=3.10"
keywords = [
    "random fields",
    "image synthesis",
    "gibbs sampling",
    "markov random field",
    "autoregressive model",
    "metropolis",
    "texture",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
randfields = "randfields.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["randfields"]

[tool.pytest.ini_options]
addopts = "-ra"
