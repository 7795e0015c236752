"""
Fixed-point encoding of model parameters.

The ledger has no floating point type, so every real-valued parameter is
multiplied by a scale factor (``to_float``) and rounded to an integer.
"""

from typing import List, Sequence

import numpy as np

from .config import DEFAULT_TO_FLOAT


def encode_scalar(value: float, to_float: float = DEFAULT_TO_FLOAT) -> int:
    """Encode a single float as a fixed-point integer."""
    return int(np.rint(np.float64(value) * to_float))


def encode_vector(values: Sequence[float], to_float: float = DEFAULT_TO_FLOAT) -> List[int]:
    """Encode a sequence of floats as fixed-point integers."""
    arr = np.asarray(values, dtype=np.float64)
    # Python ints so the payload stays JSON serializable and unbounded.
    return [int(v) for v in np.rint(arr * to_float)]
