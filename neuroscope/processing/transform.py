"""
Spectral transform primitives

This module provides the radix-2 FFT and the tapering windows that every
spectral estimate in NeuroScope is built on.

The FFT is the iterative Cooley-Tukey algorithm: a bit-reversal permutation
followed by log2(N) butterfly stages. Inputs of any length are zero-padded on
the high end to the next power of two, and the returned FFTResult records both
the padded length and the logical (unpadded) length so callers can compute
frequency resolution as fs / n_fft.
"""

from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from ..core.data_types import FFTResult, WindowType


def next_pow2(n: int) -> int:
    """Smallest power of two >= n (1 for n <= 1)"""
    p = 1
    while p < n:
        p *= 2
    return p


def _bit_reversal_permutation(n_fft: int) -> np.ndarray:
    """Index array that reorders a length-n_fft buffer into bit-reversed order"""
    n_bits = n_fft.bit_length() - 1
    idx = np.arange(n_fft)
    reversed_idx = np.zeros(n_fft, dtype=np.int64)
    for _ in range(n_bits):
        reversed_idx = (reversed_idx << 1) | (idx & 1)
        idx = idx >> 1
    return reversed_idx


def fft(signal: ArrayLike) -> FFTResult:
    """
    Compute the full-length complex spectrum of a real signal

    The butterfly stages operate on whole blocks at once. Twiddle factors for
    a stage are produced by repeated multiplication with the stage's unit
    rotation exp(-2j*pi/len) rather than by evaluating sin/cos per sample.

    Args:
        signal: 1-D array-like of samples

    Returns:
        FFTResult: Full spectrum of length n_fft = next_pow2(len(signal)).
            For real input only bins [0, n_fft/2] carry unique information.
    """
    arr = np.asarray(signal, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"signal must be 1-D, got shape {arr.shape}")

    n = arr.size
    n_fft = next_pow2(n)

    padded = np.zeros(n_fft, dtype=complex)
    padded[:n] = arr
    x = padded[_bit_reversal_permutation(n_fft)]

    length = 2
    while length <= n_fft:
        half = length // 2
        angle = -2 * np.pi / length
        rotation = complex(np.cos(angle), np.sin(angle))

        twiddles = np.full(half, rotation, dtype=complex)
        twiddles[0] = 1.0
        twiddles = np.cumprod(twiddles)

        blocks = x.reshape(-1, length)
        top = blocks[:, :half]
        bottom = blocks[:, half:] * twiddles
        x = np.concatenate((top + bottom, top - bottom), axis=1).ravel()

        length *= 2

    return FFTResult(re=x.real.copy(), im=x.imag.copy(), n_fft=n_fft, logical_length=n)


def get_window(size: int, window_type: Union[WindowType, str] = WindowType.HANNING) -> np.ndarray:
    """
    Build a symmetric tapering window

    Hanning, Hamming and Blackman use the closed forms over (size - 1), which
    are undefined for a single sample; size 1 therefore returns [1.0].

    Args:
        size: Number of coefficients
        window_type: WindowType member or its name ("hanning", "hamming",
            "blackman", "rectangular")

    Returns:
        np.ndarray: Window coefficients of length size
    """
    window_type = WindowType(window_type)

    if size <= 0:
        return np.zeros(0)
    if size == 1 or window_type is WindowType.RECTANGULAR:
        return np.ones(size)

    phase = 2 * np.pi * np.arange(size) / (size - 1)

    if window_type is WindowType.HANNING:
        return 0.5 * (1 - np.cos(phase))
    if window_type is WindowType.HAMMING:
        return 0.54 - 0.46 * np.cos(phase)
    if window_type is WindowType.BLACKMAN:
        return 0.42 - 0.5 * np.cos(phase) + 0.08 * np.cos(2 * phase)

    raise ValueError(f"Unsupported window type: {window_type}")
