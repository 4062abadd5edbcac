"""
Core data types for NeuroScope

This module defines the value types returned by the analysis engine. Every
instance is built fresh by the call that returns it; nothing here is cached
or shared between calls.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Union

import numpy as np

from .config import DEFAULT_FILTER_ORDER, FREQ_BANDS


class WindowType(str, Enum):
    """Tapers available for spectral estimation"""
    HANNING = "hanning"
    HAMMING = "hamming"
    BLACKMAN = "blackman"
    RECTANGULAR = "rectangular"


class FilterType(str, Enum):
    """IIR filter families supported by the filtering module"""
    BANDPASS = "bandpass"
    HIGHPASS = "highpass"
    LOWPASS = "lowpass"
    NOTCH = "notch"


@dataclass
class FFTResult:
    """
    Full-length complex spectrum of a zero-padded signal

    n_fft is always a power of two and may exceed logical_length, the number
    of real samples that went in. Frequency resolution is fs / n_fft.
    """
    re: np.ndarray            # Shape: (n_fft,)
    im: np.ndarray            # Shape: (n_fft,)
    n_fft: int                # Transform length (power of two)
    logical_length: int       # Samples before zero padding

    @property
    def spectrum(self) -> np.ndarray:
        return self.re + 1j * self.im

    @property
    def power(self) -> np.ndarray:
        return self.re * self.re + self.im * self.im

    def freq_resolution(self, fs: float) -> float:
        return fs / self.n_fft


@dataclass
class Spectrum:
    """One-sided power spectral density, freqs strictly increasing from 0 Hz"""
    freqs: np.ndarray         # Hz
    psd: np.ndarray           # uV^2 / Hz


@dataclass
class Spectrogram:
    """Time-frequency log-power matrix"""
    spectrogram: np.ndarray   # Shape: (n_frames, n_freqs), dB
    times: np.ndarray         # Frame start times (s)
    freqs: np.ndarray         # Bin frequencies (Hz)

    @property
    def is_empty(self) -> bool:
        return self.times.size == 0


@dataclass
class CoherenceResult:
    """Magnitude-squared coherence between two channels"""
    freqs: np.ndarray
    coherence: np.ndarray


@dataclass
class FrequencyResponse:
    """Analytic magnitude of a zero-phase filter cascade"""
    freqs: np.ndarray         # Log-spaced, Hz
    magnitude: np.ndarray     # dB, already doubled for forward-backward use


@dataclass(frozen=True)
class BiquadCoefficients:
    """Second-order section with a0 normalized to 1"""
    b0: float
    b1: float
    b2: float
    a1: float
    a2: float

    @property
    def numerator(self) -> np.ndarray:
        return np.array([self.b0, self.b1, self.b2])

    @property
    def denominator(self) -> np.ndarray:
        return np.array([1.0, self.a1, self.a2])


@dataclass
class FilterConfig:
    """
    Filter request as entered by the user

    Highpass uses `low`, lowpass uses `high`, notch uses `low` as its
    centre frequency. Cutoffs are in Hz.
    """
    low: float
    high: float
    order: int = DEFAULT_FILTER_ORDER
    filter_type: FilterType = FilterType.BANDPASS

    def __post_init__(self):
        # Accept plain strings such as "bandpass"
        self.filter_type = FilterType(self.filter_type)

    @classmethod
    def bandpass(cls, low: float, high: float, order: int = DEFAULT_FILTER_ORDER) -> "FilterConfig":
        return cls(low, high, order, FilterType.BANDPASS)

    @classmethod
    def highpass(cls, cutoff: float, order: int = DEFAULT_FILTER_ORDER) -> "FilterConfig":
        return cls(cutoff, cutoff, order, FilterType.HIGHPASS)

    @classmethod
    def lowpass(cls, cutoff: float, order: int = DEFAULT_FILTER_ORDER) -> "FilterConfig":
        return cls(cutoff, cutoff, order, FilterType.LOWPASS)

    @classmethod
    def notch(cls, freq: float) -> "FilterConfig":
        return cls(freq, freq, DEFAULT_FILTER_ORDER, FilterType.NOTCH)

    def describe(self) -> str:
        """Human-readable summary for status displays"""
        if self.filter_type is FilterType.BANDPASS:
            return f"Bandpass {self.low:g} - {self.high:g} Hz, order {self.order}"
        if self.filter_type is FilterType.HIGHPASS:
            return f"Highpass above {self.low:g} Hz, order {self.order}"
        if self.filter_type is FilterType.LOWPASS:
            return f"Lowpass below {self.high:g} Hz, order {self.order}"
        return f"Notch at {self.low:g} Hz"


@dataclass
class BandPowers:
    """Container for frequency band powers (uV^2)"""
    delta: float = 0.0
    theta: float = 0.0
    alpha: float = 0.0
    beta: float = 0.0
    gamma: float = 0.0

    def total(self) -> float:
        return sum(self.as_dict().values())

    def relative(self) -> Dict[str, float]:
        """Share of each band in percent of the five-band total"""
        total = self.total()
        if total <= 0:
            return {name: 0.0 for name in FREQ_BANDS}
        return {name: power / total * 100.0 for name, power in self.as_dict().items()}

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in FREQ_BANDS}


@dataclass
class ChannelStatistics:
    """Descriptive statistics of a single channel"""
    mean: float = 0.0
    std: float = 0.0
    variance: float = 0.0
    rms: float = 0.0
    min: float = 0.0
    max: float = 0.0
    peak_to_peak: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0     # Excess kurtosis (normal = 0)
    zero_crossings: int = 0

    def as_dict(self) -> Dict[str, Union[float, int]]:
        return asdict(self)


@dataclass
class HjorthParameters:
    """Hjorth activity, mobility and complexity"""
    activity: float = 0.0
    mobility: float = 0.0
    complexity: float = 0.0


@dataclass
class MontageResult:
    """Re-referenced channels with the labels that describe them"""
    channel_data: np.ndarray  # Shape: (n_channels, n_samples)
    channel_labels: List[str]
