"""
EEG signal processing components

This module contains the spectral transform, spectral estimation, band power,
filtering, statistics and montage functionality of the analysis engine.
"""

from .transform import fft, next_pow2, get_window
from .spectral import welch_psd, direct_psd, compute_spectrogram, coherence
from .band_power import compute_band_powers, average_band_powers
from .filters import (
    butterworth, apply_filter, design_filter, validate_filter_config,
    is_unstable, compute_frequency_response,
)
from .statistics import compute_statistics, compute_channel_statistics, hjorth_parameters
from .montage import average_reference, bipolar_montage
from .decimation import downsample_minmax
from .preprocessor import Preprocessor
from .features import FeatureExtractor

__all__ = [
    'fft', 'next_pow2', 'get_window',
    'welch_psd', 'direct_psd', 'compute_spectrogram', 'coherence',
    'compute_band_powers', 'average_band_powers',
    'butterworth', 'apply_filter', 'design_filter', 'validate_filter_config', 'is_unstable',
    'compute_frequency_response',
    'compute_statistics', 'compute_channel_statistics', 'hjorth_parameters',
    'average_reference', 'bipolar_montage',
    'downsample_minmax',
    'Preprocessor', 'FeatureExtractor',
]
