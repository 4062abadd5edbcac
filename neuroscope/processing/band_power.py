"""
EEG band power decomposition

Integrates a one-sided PSD over the five canonical EEG bands. Bands are
half-open [low, high) so a bin on a shared edge is counted exactly once.
"""

from typing import List

import numpy as np
from numpy.typing import ArrayLike

from ..core.config import FREQ_BANDS
from ..core.data_types import BandPowers


def compute_band_powers(freqs: ArrayLike, psd: ArrayLike) -> BandPowers:
    """
    Integrate PSD into delta, theta, alpha, beta and gamma power

    Each bin contributes psd[i] * freq_res, where freq_res is the spacing of
    the first two bins (1 Hz when fewer than two bins exist).

    Args:
        freqs: Bin frequencies in Hz, uniformly spaced
        psd: Power spectral density in uV^2/Hz

    Returns:
        BandPowers: Absolute power per band in uV^2
    """
    freqs = np.asarray(freqs, dtype=float)
    psd = np.asarray(psd, dtype=float)

    freq_res = freqs[1] - freqs[0] if freqs.size > 1 else 1.0

    powers = BandPowers()
    for band_name, (low, high) in FREQ_BANDS.items():
        in_band = (freqs >= low) & (freqs < high)
        setattr(powers, band_name, float(np.sum(psd[in_band] * freq_res)))

    return powers


def average_band_powers(channel_powers: List[BandPowers]) -> BandPowers:
    """Per-band arithmetic mean across channels (zeros for no channels)"""
    average = BandPowers()
    if not channel_powers:
        return average

    for band_name in FREQ_BANDS:
        total = sum(getattr(powers, band_name) for powers in channel_powers)
        setattr(average, band_name, total / len(channel_powers))

    return average
