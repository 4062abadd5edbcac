"""
Spectral estimation

This module computes power spectral density (Welch and direct periodogram),
short-time spectrograms and inter-channel coherence on top of the radix-2 FFT.

Normalization conventions:
- PSD is one-sided: bins are doubled, and Welch halves the DC and Nyquist bins
  again because those bins have no mirror image.
- Welch divides by the mean squared window coefficient to undo the energy the
  taper removes.
- Frequency resolution is fs / n_fft where n_fft is the zero-padded length.
"""

import logging
from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from ..core.config import (
    WELCH_WINDOW_SIZE, WELCH_OVERLAP, DEFAULT_WINDOW_TYPE,
    SPECTROGRAM_WINDOW_SIZE, SPECTROGRAM_OVERLAP, SPECTROGRAM_MAX_FREQ,
    SPECTROGRAM_POWER_FLOOR,
)
from ..core.data_types import Spectrum, Spectrogram, CoherenceResult, WindowType
from .transform import fft, get_window, next_pow2


def _as_signal(signal: ArrayLike) -> np.ndarray:
    arr = np.asarray(signal, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"signal must be 1-D, got shape {arr.shape}")
    return arr


def _segment_step(window_size: int, overlap: float) -> int:
    # An overlap that rounds the hop down to 0 would never advance
    return max(1, int(np.floor(window_size * (1 - overlap))))


def _frequency_axis(n_fft: int, fs: float, n_bins: int) -> np.ndarray:
    return np.arange(n_bins) * (fs / n_fft)


def window_power(window: np.ndarray) -> float:
    """Mean squared window coefficient"""
    if window.size == 0:
        return 0.0
    return float(np.mean(window * window))


def welch_psd(
    signal: ArrayLike,
    fs: float,
    window_size: int = WELCH_WINDOW_SIZE,
    overlap: float = WELCH_OVERLAP,
    window_type: Union[WindowType, str] = DEFAULT_WINDOW_TYPE,
) -> Spectrum:
    """
    Estimate power spectral density with Welch's averaged periodogram

    The signal is cut into segments of window_size samples advancing by
    floor(window_size * (1 - overlap)). Each segment is tapered, zero-padded
    to the next power of two and transformed; squared magnitudes are summed
    and normalized once at the end.

    Signals shorter than one window fall back to direct_psd over the whole
    signal.

    Args:
        signal: 1-D samples (uV)
        fs: Sampling frequency in Hz
        window_size: Samples per segment
        overlap: Fraction of overlap between consecutive segments
        window_type: Taper applied to each segment

    Returns:
        Spectrum: freqs from 0 to Nyquist and PSD in uV^2/Hz
    """
    arr = _as_signal(signal)
    n = arr.size

    step = _segment_step(window_size, overlap)
    num_segments = (n - window_size) // step + 1

    if num_segments < 1:
        logging.debug(
            f"Signal of {n} samples shorter than window ({window_size}), using direct periodogram"
        )
        return direct_psd(arr, fs, window_type)

    n_fft = next_pow2(window_size)
    n_bins = n_fft // 2 + 1
    window = get_window(window_size, window_type)
    power_correction = window_power(window)

    # Accumulator: running sum of |X_k|^2 over segments, shape (n_bins,)
    psd_sum = np.zeros(n_bins)
    for seg in range(num_segments):
        start = seg * step
        segment = arr[start:start + window_size] * window
        psd_sum += fft(segment).power[:n_bins]

    psd = 2 * psd_sum / (num_segments * fs * power_correction * window_size)
    psd[0] /= 2
    if n_fft > 1:
        psd[n_fft // 2] /= 2

    return Spectrum(freqs=_frequency_axis(n_fft, fs, n_bins), psd=psd)


def direct_psd(
    signal: ArrayLike,
    fs: float,
    window_type: Union[WindowType, str] = DEFAULT_WINDOW_TYPE,
) -> Spectrum:
    """
    Single-segment periodogram of the whole signal

    The signal is tapered, zero-padded to the next power of two and normalized
    by fs * n. Every bin is doubled for the one-sided convention; unlike
    welch_psd the DC and Nyquist bins are not halved back.

    Args:
        signal: 1-D samples (uV)
        fs: Sampling frequency in Hz
        window_type: Taper applied before the transform

    Returns:
        Spectrum: freqs from 0 to Nyquist and PSD in uV^2/Hz (empty for an
            empty signal)
    """
    arr = _as_signal(signal)
    n = arr.size
    if n == 0:
        return Spectrum(freqs=np.zeros(0), psd=np.zeros(0))

    result = fft(arr * get_window(n, window_type))
    n_bins = result.n_fft // 2 + 1

    psd = 2 * result.power[:n_bins] / (fs * n)
    return Spectrum(freqs=_frequency_axis(result.n_fft, fs, n_bins), psd=psd)


def compute_spectrogram(
    signal: ArrayLike,
    fs: float,
    window_size: int = SPECTROGRAM_WINDOW_SIZE,
    overlap: float = SPECTROGRAM_OVERLAP,
    max_freq: float = SPECTROGRAM_MAX_FREQ,
) -> Spectrogram:
    """
    Compute a short-time Fourier spectrogram in dB

    Each frame is a Hanning-tapered slice of window_size samples, zero-padded
    to the next power of two. Power is 10*log10(|X|^2 / n_fft + 1e-20) for
    bins 0..floor(max_freq / freq_res); a max_freq above Nyquist is clipped
    to Nyquist.

    Args:
        signal: 1-D samples (uV)
        fs: Sampling frequency in Hz
        window_size: Samples per frame
        overlap: Fraction of overlap between frames
        max_freq: Highest frequency to keep (Hz)

    Returns:
        Spectrogram: (n_frames, n_freqs) matrix with frame start times and
            bin frequencies; empty when the signal is shorter than one frame
    """
    arr = _as_signal(signal)
    n = arr.size

    if n == 0 or n < window_size:
        logging.debug(f"Signal of {n} samples shorter than spectrogram window ({window_size})")
        return Spectrogram(spectrogram=np.zeros((0, 0)), times=np.zeros(0), freqs=np.zeros(0))

    step = _segment_step(window_size, overlap)
    num_frames = (n - window_size) // step + 1
    n_fft = next_pow2(window_size)
    window = get_window(window_size, WindowType.HANNING)

    freq_res = fs / n_fft
    max_bin = min(int(np.floor(max_freq / freq_res)), n_fft // 2)
    n_bins = max(max_bin + 1, 0)

    frames = np.empty((num_frames, n_bins))
    times = np.empty(num_frames)
    for frame in range(num_frames):
        start = frame * step
        times[frame] = start / fs
        power = fft(arr[start:start + window_size] * window).power[:n_bins]
        frames[frame] = 10 * np.log10(power / n_fft + SPECTROGRAM_POWER_FLOOR)

    return Spectrogram(
        spectrogram=frames,
        times=times,
        freqs=_frequency_axis(n_fft, fs, n_bins),
    )


def coherence(
    signal1: ArrayLike,
    signal2: ArrayLike,
    fs: float,
    window_size: int = WELCH_WINDOW_SIZE,
) -> CoherenceResult:
    """
    Magnitude-squared coherence between two channels

    The cross-spectrum conj(X1) * X2 is summed over 50%-overlapping Hanning
    segments and compared against the Welch PSDs of both channels:

        coh[f] = |CSD[f]|^2 / (PSD1[f] * PSD2[f] * num_segments^2)

    The CSD is left as a raw segment sum while the PSDs are fully
    normalized; downstream consumers depend on this exact scaling, so it is
    kept as is. Bins where PSD1 * PSD2 is 0 are reported as 0.

    Args:
        signal1: First channel
        signal2: Second channel
        fs: Sampling frequency in Hz
        window_size: Samples per segment

    Returns:
        CoherenceResult: freqs of the Welch PSD of signal1 and coherence values
    """
    x1 = _as_signal(signal1)
    x2 = _as_signal(signal2)

    psd1 = welch_psd(x1, fs, window_size)
    psd2 = welch_psd(x2, fs, window_size)

    n = min(x1.size, x2.size)
    step = _segment_step(window_size, WELCH_OVERLAP)
    num_segments = (n - window_size) // step + 1

    if num_segments < 1:
        logging.debug(f"Signals of {n} samples too short for coherence window ({window_size})")
        return CoherenceResult(freqs=psd1.freqs, coherence=np.zeros(psd1.freqs.size))

    n_fft = next_pow2(window_size)
    n_bins = n_fft // 2 + 1
    window = get_window(window_size, WindowType.HANNING)

    # Accumulator: running complex cross-spectrum sum, shape (n_bins,)
    csd = np.zeros(n_bins, dtype=complex)
    for seg in range(num_segments):
        start = seg * step
        spec1 = fft(x1[start:start + window_size] * window).spectrum[:n_bins]
        spec2 = fft(x2[start:start + window_size] * window).spectrum[:n_bins]
        csd += np.conj(spec1) * spec2

    csd_mag2 = csd.real * csd.real + csd.imag * csd.imag
    denom = psd1.psd[:n_bins] * psd2.psd[:n_bins]

    coh = np.zeros(n_bins)
    valid = denom > 0
    coh[valid] = csd_mag2[valid] / (denom[valid] * num_segments * num_segments)

    return CoherenceResult(freqs=psd1.freqs, coherence=coh)
