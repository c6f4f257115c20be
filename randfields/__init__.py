"""Random field models for generating and analysing synthetic grey-scale images."""

__version__ = "0.1.0"

__all__ = [
    "imaging",
    "gauss",
    "correlation",
    "metropolis",
    "gibbs",
    "markov",
    "wave",
    "twice_random",
    "heterogeneous",
    "cli",
]