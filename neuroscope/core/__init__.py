"""
Core data types and configuration for NeuroScope

This module contains the value types, constants and exceptions shared by
every processing module.
"""

from .data_types import (
    WindowType, FilterType, FFTResult, Spectrum, Spectrogram, CoherenceResult,
    FrequencyResponse, BiquadCoefficients, FilterConfig, BandPowers,
    ChannelStatistics, HjorthParameters, MontageResult,
)
from .config import AnalysisConfig, validate_config, FREQ_BANDS, BIPOLAR_CHAINS
from .exceptions import NeuroScopeError, FilterValidationError, FilterInstabilityError

__all__ = [
    'WindowType', 'FilterType', 'FFTResult', 'Spectrum', 'Spectrogram',
    'CoherenceResult', 'FrequencyResponse', 'BiquadCoefficients', 'FilterConfig',
    'BandPowers', 'ChannelStatistics', 'HjorthParameters', 'MontageResult',
    'AnalysisConfig', 'validate_config', 'FREQ_BANDS', 'BIPOLAR_CHAINS',
    'NeuroScopeError', 'FilterValidationError', 'FilterInstabilityError',
]
