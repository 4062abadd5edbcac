"""
NeuroScope - Signal analysis engine for multi-channel EEG

A pure numeric library: FFT, power spectral density, spectrograms, band power,
descriptive statistics, zero-phase IIR filtering and montage transforms over
NumPy arrays of microvolt samples.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import (
    FilterConfig, FilterType, WindowType, BandPowers, ChannelStatistics, Spectrum,
)
from .core.config import AnalysisConfig, FREQ_BANDS
from .core.exceptions import NeuroScopeError, FilterValidationError, FilterInstabilityError
from .processing.transform import fft, get_window
from .processing.spectral import welch_psd, direct_psd, compute_spectrogram, coherence
from .processing.band_power import compute_band_powers
from .processing.filters import butterworth, apply_filter, compute_frequency_response
from .processing.statistics import compute_statistics, hjorth_parameters
from .processing.montage import average_reference, bipolar_montage
from .processing.preprocessor import Preprocessor
from .processing.features import FeatureExtractor

__all__ = [
    'FilterConfig', 'FilterType', 'WindowType', 'BandPowers', 'ChannelStatistics',
    'Spectrum', 'AnalysisConfig', 'FREQ_BANDS',
    'NeuroScopeError', 'FilterValidationError', 'FilterInstabilityError',
    'fft', 'get_window',
    'welch_psd', 'direct_psd', 'compute_spectrogram', 'coherence',
    'compute_band_powers',
    'butterworth', 'apply_filter', 'compute_frequency_response',
    'compute_statistics', 'hjorth_parameters',
    'average_reference', 'bipolar_montage',
    'Preprocessor', 'FeatureExtractor',
]
