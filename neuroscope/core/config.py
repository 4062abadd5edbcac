"""
Configuration constants for NeuroScope

This module contains the analysis parameters shared by the spectral, filtering
and montage code, plus the AnalysisConfig dataclass that callers use to tune
the per-recording analysis defaults.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

# ============================================================================
# SPECTRAL ANALYSIS DEFAULTS
# ============================================================================

WELCH_WINDOW_SIZE = 256           # Samples per Welch segment
WELCH_OVERLAP = 0.5               # Segment overlap fraction (0.5 = 50%)
DEFAULT_WINDOW_TYPE = "hanning"   # Taper applied to each segment

SPECTROGRAM_WINDOW_SIZE = 256     # Samples per STFT frame
SPECTROGRAM_OVERLAP = 0.75        # Frame overlap fraction
SPECTROGRAM_MAX_FREQ = 50.0       # Highest frequency kept in the spectrogram (Hz)
SPECTROGRAM_POWER_FLOOR = 1e-20   # Added before log10 so silent bins stay finite

# ============================================================================
# FILTER DESIGN
# ============================================================================

DEFAULT_FILTER_ORDER = 4
NOTCH_BANDWIDTH_HZ = 2.0          # Notch Q = freq / bandwidth
MIN_BANDPASS_LOW_HZ = 0.05        # Lowest usable bandpass low cutoff
MIN_CUTOFF_HZ = 1e-6              # Clamp floor for any cutoff
NYQUIST_CLAMP_FRACTION = 0.999    # Clamp ceiling as a fraction of Nyquist
NON_FINITE_CUTOFF_FRACTION = 0.25 # NaN/inf cutoffs fall back to min(1 Hz, nyquist * this)
MARGINAL_POLE_TOLERANCE = 1e-12   # Sections with |a2| >= 1 - this have poles on the unit circle

FREQ_RESPONSE_POINTS = 512        # Log-spaced evaluation points
FREQ_RESPONSE_MIN_HZ = 0.1        # Lowest evaluated frequency
FREQ_RESPONSE_FLOOR = 1e-10       # Squared-magnitude floor before 20*log10

PREVIEW_SECONDS = 10.0            # Length of the filter preview clip

# ============================================================================
# FREQUENCY BANDS AND MONTAGES
# ============================================================================

# Frequency Bands (Hz), half-open [low, high)
FREQ_BANDS: Mapping[str, Tuple[float, float]] = MappingProxyType({
    "delta": (0.5, 4.0),    # Deep sleep
    "theta": (4.0, 8.0),    # Drowsiness, memory
    "alpha": (8.0, 13.0),   # Relaxed wakefulness, eyes closed
    "beta": (13.0, 30.0),   # Active thinking, focus
    "gamma": (30.0, 100.0), # High-level processing
})

# Standard longitudinal 10-20 bipolar chains ("double banana")
BIPOLAR_CHAINS: Tuple[Tuple[str, str], ...] = (
    # Left parasagittal
    ("Fp1", "F3"), ("F3", "C3"), ("C3", "P3"), ("P3", "O1"),
    # Right parasagittal
    ("Fp2", "F4"), ("F4", "C4"), ("C4", "P4"), ("P4", "O2"),
    # Left temporal
    ("Fp1", "F7"), ("F7", "T3"), ("T3", "T5"), ("T5", "O1"),
    # Right temporal
    ("Fp2", "F8"), ("F8", "T4"), ("T4", "T6"), ("T6", "O2"),
    # Midline
    ("Fz", "Cz"), ("Cz", "Pz"),
)

TOPOGRAPHY_METRICS = ("rms", "power") + tuple(FREQ_BANDS)

WINDOW_TYPES = ("hanning", "hamming", "blackman", "rectangular")


@dataclass
class AnalysisConfig:
    """
    Per-recording analysis settings

    Hardware/Data Parameters:
    - fs: Sampling frequency in Hz shared by every channel of the recording

    Spectrum Parameters:
    - welch_window_size/welch_overlap: Welch segment length and overlap
    - window_type: Taper used for the spectrum ("hanning", "hamming",
      "blackman" or "rectangular")

    Spectrogram Parameters:
    - spectrogram_window_size/spectrogram_overlap: STFT frame length and overlap
    - spectrogram_max_freq: Frequencies above this are dropped (Hz)
    """

    fs: float = 256.0
    welch_window_size: int = WELCH_WINDOW_SIZE
    welch_overlap: float = WELCH_OVERLAP
    window_type: str = DEFAULT_WINDOW_TYPE
    spectrogram_window_size: int = SPECTROGRAM_WINDOW_SIZE
    spectrogram_overlap: float = SPECTROGRAM_OVERLAP
    spectrogram_max_freq: float = SPECTROGRAM_MAX_FREQ

    @property
    def nyquist(self) -> float:
        return self.fs / 2


def validate_config(config: AnalysisConfig) -> None:
    """
    Validate analysis parameters for common mistakes

    Args:
        config: Configuration to validate

    Raises:
        ValueError: If configuration parameters are invalid
    """
    if config.fs <= 0:
        raise ValueError(f"Sampling rate must be positive, got {config.fs}")

    if config.welch_window_size < 2:
        raise ValueError(f"Welch window size must be >= 2, got {config.welch_window_size}")

    if not 0 <= config.welch_overlap < 1:
        raise ValueError(f"Welch overlap must be in [0, 1), got {config.welch_overlap}")

    if config.window_type not in WINDOW_TYPES:
        raise ValueError(f"Window type must be one of {WINDOW_TYPES}, got '{config.window_type}'")

    if config.spectrogram_window_size < 2:
        raise ValueError(
            f"Spectrogram window size must be >= 2, got {config.spectrogram_window_size}"
        )

    if not 0 <= config.spectrogram_overlap < 1:
        raise ValueError(
            f"Spectrogram overlap must be in [0, 1), got {config.spectrogram_overlap}"
        )

    if config.spectrogram_max_freq <= 0:
        raise ValueError(
            f"Spectrogram max frequency must be positive, got {config.spectrogram_max_freq}"
        )

    logging.debug("Analysis configuration validation passed")
