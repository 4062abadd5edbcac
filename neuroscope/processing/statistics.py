"""
Descriptive statistics for EEG channels

Moment statistics, zero crossings and Hjorth parameters. Each channel is
reduced independently, so a list of channels can be processed in any order
or in parallel.
"""

from typing import List

import numpy as np
from numpy.typing import ArrayLike

from ..core.data_types import ChannelStatistics, HjorthParameters


def _as_signal(signal: ArrayLike) -> np.ndarray:
    arr = np.asarray(signal, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"signal must be 1-D, got shape {arr.shape}")
    return arr


def count_zero_crossings(signal: ArrayLike) -> int:
    """
    Count sign changes between consecutive samples

    Zero counts as non-negative, so -1 -> 0 is a crossing and 0 -> 1 is not.
    """
    arr = _as_signal(signal)
    non_negative = arr >= 0
    return int(np.count_nonzero(non_negative[1:] != non_negative[:-1]))


def compute_statistics(signal: ArrayLike) -> ChannelStatistics:
    """
    Compute descriptive statistics of one channel

    Mean, variance and RMS come from the running sum and sum of squares
    (variance = E[x^2] - E[x]^2, clamped at 0). A constant signal reports
    zero variance, std, skewness and kurtosis exactly.
    Skewness and excess kurtosis use the biased central moments.

    Args:
        signal: 1-D samples (uV)

    Returns:
        ChannelStatistics: Zeroed record for an empty signal
    """
    arr = _as_signal(signal)
    n = arr.size
    if n == 0:
        return ChannelStatistics()

    total = float(np.sum(arr))
    total_sq = float(np.sum(arr * arr))
    minimum = float(np.min(arr))
    maximum = float(np.max(arr))

    mean = total / n
    rms = float(np.sqrt(total_sq / n))

    # A constant signal has no spread, whatever rounding E[x^2] - E[x]^2 leaves
    if maximum == minimum:
        variance = std = skewness = kurtosis = 0.0
    else:
        variance = max(0.0, total_sq / n - mean * mean)
        std = float(np.sqrt(variance))

        deviations = arr - mean
        m3 = float(np.sum(deviations ** 3))
        m4 = float(np.sum(deviations ** 4))
        skewness = (m3 / n) / std ** 3 if std > 0 else 0.0
        kurtosis = (m4 / n) / std ** 4 - 3 if std > 0 else 0.0

    return ChannelStatistics(
        mean=mean,
        std=std,
        variance=variance,
        rms=rms,
        min=minimum,
        max=maximum,
        peak_to_peak=maximum - minimum,
        skewness=skewness,
        kurtosis=kurtosis,
        zero_crossings=count_zero_crossings(arr),
    )


def compute_channel_statistics(channel_data: ArrayLike) -> List[ChannelStatistics]:
    """compute_statistics for every row of a (channels x samples) array"""
    return [compute_statistics(channel) for channel in channel_data]


def _variance(arr: np.ndarray) -> float:
    mean = float(np.mean(arr))
    return max(0.0, float(np.mean(arr * arr)) - mean * mean)


def hjorth_parameters(signal: ArrayLike) -> HjorthParameters:
    """
    Hjorth activity, mobility and complexity

    activity   = var(x)
    mobility   = sqrt(var(dx) / var(x))
    complexity = sqrt(var(ddx) / var(dx)) / mobility

    Signals shorter than 3 samples, and signals whose first difference has
    no variance, give zeros instead of NaN.
    """
    arr = _as_signal(signal)
    if arr.size < 3:
        return HjorthParameters()

    d1 = np.diff(arr)
    d2 = np.diff(d1)

    var0 = _variance(arr)
    var1 = _variance(d1)
    var2 = _variance(d2)

    mobility = float(np.sqrt(var1 / var0)) if var1 > 0 and var0 > 0 else 0.0
    complexity = float(np.sqrt(var2 / var1)) / mobility if mobility > 0 else 0.0

    return HjorthParameters(activity=var0, mobility=mobility, complexity=complexity)
