"""
Display decimation

Reduces long channels to roughly one point per screen column while keeping
the peaks visible, so a renderer never has to draw millions of samples.
"""

import numpy as np
from numpy.typing import ArrayLike


def downsample_minmax(signal: ArrayLike, factor: float) -> np.ndarray:
    """
    Peak-preserving downsampling

    Output point i summarises samples [floor(i * factor), floor((i + 1) * factor))
    by their maximum when i is even and their minimum when i is odd, so the
    drawn trace alternates between envelope extremes.

    Args:
        signal: 1-D samples
        factor: Input samples per output point (<= 1 returns a copy)

    Returns:
        np.ndarray: ceil(len(signal) / factor) points
    """
    arr = np.array(signal, dtype=float)
    if factor <= 1:
        return arr

    n = arr.size
    n_out = int(np.ceil(n / factor))
    out = np.empty(n_out)

    for i in range(n_out):
        start = int(np.floor(i * factor))
        end = min(int(np.floor((i + 1) * factor)), n)
        block = arr[start:end]
        out[i] = np.max(block) if i % 2 == 0 else np.min(block)

    return out
