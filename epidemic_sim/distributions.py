"""
Random draws used by the model. Every run owns a single seeded `numpy.random.Generator`, which is passed around
explicitly, so two runs in the same process never share state.
"""
import math
from typing import Optional

import numpy as np  # type: ignore


def createGenerator(seed: Optional[int] = None) -> np.random.Generator:
    """Create the random number generator for one run

    :param seed: seed for the generator, None picks a fresh one from the OS
    :return: a numpy Generator
    """
    return np.random.default_rng(seed)


def uniform(generator: np.random.Generator) -> float:
    """Uniform draw from [0, 1)"""
    return float(generator.random())


def gaussian(generator: np.random.Generator) -> float:
    """Standard normal draw"""
    return float(generator.standard_normal())


def exponential(generator: np.random.Generator, mean: float) -> float:
    """Exponentially distributed value

    :param generator: Seeded random number generated to use in this simulation
    :param mean: mean of the distribution, a mean of zero always returns zero
    :return: a non-negative sample
    """
    return float(generator.exponential(mean))


def logNormal(generator: np.random.Generator, median: float, sigma: float) -> float:
    """Log-normal draw parameterised by its median rather than by the mean of the underlying normal.

    >>> logNormal(np.random.default_rng(1), 4.0, 0.0)
    4.0

    :param generator: Seeded random number generated to use in this simulation
    :param median: median of the distribution
    :param sigma: shape parameter, zero makes the draw constant
    :return: ``median * exp(sigma * g)`` with ``g`` a standard normal draw
    """
    return math.exp(sigma * gaussian(generator)) * median


def logNormalSigma(median: float, scatter: float) -> float:
    """Shape parameter of a log-normal whose median + scatter sits one sigma above the median

    >>> logNormalSigma(10.0, 0.0)
    0.0

    :param median: a positive median
    :param scatter: a non-negative scatter
    :return: ``ln((scatter + median) / median)``
    """
    return math.log((scatter + median) / median)


def roundHalfUp(value: float) -> int:
    """Round to the nearest integer, halves go up.

    Python's builtin round uses banker's rounding, which would make 2.5 people into 2.

    >>> roundHalfUp(2.5)
    3
    >>> roundHalfUp(2.49)
    2
    """
    return int(math.floor(value + 0.5))
