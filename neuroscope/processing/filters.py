"""
IIR filter design and zero-phase application

Butterworth highpass/lowpass/bandpass filters are realized as cascades of
second-order sections (biquads) built from the Audio EQ Cookbook formulas.
Section k of an order-n filter uses

    Q_k = 1 / (2 * cos(pi * (2k + 1) / (2n)))

which spreads the poles of the analog Butterworth prototype evenly. A
bandpass is a highpass cascade at the low cutoff followed by a lowpass
cascade at the high cutoff. The notch filter is a single biquad with
Q = freq / 2 Hz.

Every section is run forward, time-reversed, run again and reversed back,
so the output has no phase shift and twice the dB attenuation of a single
pass. The whole signal must be in memory; there is no streaming mode.
"""

import logging
from typing import Callable, Dict, List, Union

import numpy as np
from numpy.typing import ArrayLike
from scipy import signal as sp_signal

from ..core.config import (
    DEFAULT_FILTER_ORDER, NOTCH_BANDWIDTH_HZ, MIN_BANDPASS_LOW_HZ, MIN_CUTOFF_HZ,
    NYQUIST_CLAMP_FRACTION, NON_FINITE_CUTOFF_FRACTION, MARGINAL_POLE_TOLERANCE,
    FREQ_RESPONSE_POINTS, FREQ_RESPONSE_MIN_HZ, FREQ_RESPONSE_FLOOR,
)
from ..core.data_types import BiquadCoefficients, FilterConfig, FilterType, FrequencyResponse
from ..core.exceptions import FilterValidationError, FilterInstabilityError


# ============================================================================
# COEFFICIENT DESIGN
# ============================================================================

def clamp_frequency(freq: float, nyquist: float) -> float:
    """Clamp a cutoff into [1e-6, 0.999 * nyquist]; NaN/inf map to min(1, nyquist / 4)"""
    if not np.isfinite(freq):
        return min(1.0, nyquist * NON_FINITE_CUTOFF_FRACTION)
    return min(max(freq, MIN_CUTOFF_HZ), nyquist * NYQUIST_CLAMP_FRACTION)


def butterworth_q(section: int, order: int) -> float:
    """Q factor of one section of an order-`order` Butterworth cascade"""
    return 1 / (2 * np.cos(np.pi * (2 * section + 1) / (2 * order)))


def lowpass_biquad(fs: float, freq: float, q: float) -> BiquadCoefficients:
    """RBJ cookbook lowpass section"""
    w0 = 2 * np.pi * freq / fs
    alpha = np.sin(w0) / (2 * q)
    cos_w0 = np.cos(w0)
    a0 = 1 + alpha

    return BiquadCoefficients(
        b0=(1 - cos_w0) / 2 / a0,
        b1=(1 - cos_w0) / a0,
        b2=(1 - cos_w0) / 2 / a0,
        a1=-2 * cos_w0 / a0,
        a2=(1 - alpha) / a0,
    )


def highpass_biquad(fs: float, freq: float, q: float) -> BiquadCoefficients:
    """RBJ cookbook highpass section"""
    w0 = 2 * np.pi * freq / fs
    alpha = np.sin(w0) / (2 * q)
    cos_w0 = np.cos(w0)
    a0 = 1 + alpha

    return BiquadCoefficients(
        b0=(1 + cos_w0) / 2 / a0,
        b1=-(1 + cos_w0) / a0,
        b2=(1 + cos_w0) / 2 / a0,
        a1=-2 * cos_w0 / a0,
        a2=(1 - alpha) / a0,
    )


def notch_biquad(fs: float, freq: float, bandwidth: float = NOTCH_BANDWIDTH_HZ) -> BiquadCoefficients:
    """RBJ cookbook notch section with Q = freq / bandwidth"""
    w0 = 2 * np.pi * freq / fs
    q = freq / bandwidth
    alpha = np.sin(w0) / (2 * q)
    cos_w0 = np.cos(w0)
    a0 = 1 + alpha

    return BiquadCoefficients(
        b0=1 / a0,
        b1=-2 * cos_w0 / a0,
        b2=1 / a0,
        a1=-2 * cos_w0 / a0,
        a2=(1 - alpha) / a0,
    )


def butterworth_cascade(
    fs: float,
    freq: float,
    order: int,
    section_design: Callable[[float, float, float], BiquadCoefficients],
) -> List[BiquadCoefficients]:
    """ceil(order / 2) sections of a Butterworth highpass or lowpass"""
    num_sections = int(np.ceil(order / 2))
    return [section_design(fs, freq, butterworth_q(k, order)) for k in range(num_sections)]


def _design_bandpass(fs: float, low: float, high: float, order: int) -> List[BiquadCoefficients]:
    return (butterworth_cascade(fs, low, order, highpass_biquad)
            + butterworth_cascade(fs, high, order, lowpass_biquad))


def _design_highpass(fs: float, low: float, high: float, order: int) -> List[BiquadCoefficients]:
    return butterworth_cascade(fs, low, order, highpass_biquad)


def _design_lowpass(fs: float, low: float, high: float, order: int) -> List[BiquadCoefficients]:
    return butterworth_cascade(fs, high, order, lowpass_biquad)


def _design_notch(fs: float, low: float, high: float, order: int) -> List[BiquadCoefficients]:
    return [notch_biquad(fs, low)]


_DESIGNERS: Dict[FilterType, Callable[[float, float, float, int], List[BiquadCoefficients]]] = {
    FilterType.BANDPASS: _design_bandpass,
    FilterType.HIGHPASS: _design_highpass,
    FilterType.LOWPASS: _design_lowpass,
    FilterType.NOTCH: _design_notch,
}


def design_filter(config: FilterConfig, fs: float) -> List[BiquadCoefficients]:
    """
    Synthesize the biquad cascade for a filter configuration

    Cutoffs are clamped to [1e-6, 0.999 * Nyquist] (non-finite values become
    min(1, Nyquist / 4)) and bandpass edges are swapped when given in
    reverse order. No validation happens here; see validate_filter_config.

    Args:
        config: Filter request
        fs: Sampling frequency in Hz

    Returns:
        List[BiquadCoefficients]: Sections in the order they are applied
    """
    nyquist = fs / 2
    low = clamp_frequency(config.low, nyquist)
    high = clamp_frequency(config.high, nyquist)

    if config.filter_type is FilterType.BANDPASS and low > high:
        low, high = high, low

    return _DESIGNERS[config.filter_type](fs, low, high, config.order)


# ============================================================================
# APPLICATION
# ============================================================================

def apply_biquad(data: np.ndarray, coeffs: BiquadCoefficients) -> np.ndarray:
    """Single causal pass of one section, starting from rest"""
    return sp_signal.lfilter(coeffs.numerator, coeffs.denominator, data)


def apply_zero_phase(data: np.ndarray, coeffs: BiquadCoefficients) -> np.ndarray:
    """Forward pass, reverse, second pass, reverse back"""
    forward = apply_biquad(data, coeffs)
    backward = apply_biquad(forward[::-1], coeffs)
    return backward[::-1].copy()


def apply_cascade(signal: ArrayLike, sections: List[BiquadCoefficients]) -> np.ndarray:
    """Run every section zero-phase, one after another"""
    data = np.array(signal, dtype=float)
    for coeffs in sections:
        data = apply_zero_phase(data, coeffs)
    return data


def butterworth(
    signal: ArrayLike,
    fs: float,
    low_cut: float,
    high_cut: float,
    order: int = DEFAULT_FILTER_ORDER,
    filter_type: Union[FilterType, str] = FilterType.BANDPASS,
) -> np.ndarray:
    """
    Zero-phase IIR filter of one channel without validation

    Args:
        signal: 1-D samples (uV)
        fs: Sampling frequency in Hz
        low_cut: Low cutoff (bandpass/highpass) or notch frequency in Hz
        high_cut: High cutoff (bandpass/lowpass) in Hz
        order: Butterworth order
        filter_type: "bandpass", "highpass", "lowpass" or "notch"

    Returns:
        np.ndarray: Filtered copy of the signal
    """
    config = FilterConfig(low_cut, high_cut, order, filter_type)
    return apply_cascade(signal, design_filter(config, fs))


def has_non_finite(data: ArrayLike) -> bool:
    """True when any value is NaN or infinite"""
    return not np.all(np.isfinite(data))


def is_marginal(coeffs: BiquadCoefficients) -> bool:
    """
    True when a section's poles sit on or outside the unit circle

    The last section of an odd-order cascade has a Q of order 1e16, which
    puts its poles on the unit circle: the output keeps growing but can stay
    finite, so a NaN scan alone never catches it.
    """
    return abs(coeffs.a2) >= 1 - MARGINAL_POLE_TOLERANCE


def is_unstable(filtered: ArrayLike, sections: List[BiquadCoefficients]) -> bool:
    """Stability scan: non-finite output or a marginally stable section"""
    return has_non_finite(filtered) or any(is_marginal(coeffs) for coeffs in sections)


def validate_filter_config(config: FilterConfig, fs: float) -> None:
    """
    Check a filter request against the Nyquist frequency

    Args:
        config: Filter request
        fs: Sampling frequency in Hz

    Raises:
        FilterValidationError: With a message suitable for the user
    """
    nyquist = fs / 2
    nyquist_text = f"{nyquist:.0f}"
    filter_type = config.filter_type

    if filter_type is FilterType.BANDPASS:
        cutoffs = (config.low, config.high)
    elif filter_type is FilterType.LOWPASS:
        cutoffs = (config.high,)
    else:
        cutoffs = (config.low,)

    if not all(np.isfinite(cutoff) for cutoff in cutoffs):
        raise FilterValidationError("Cutoff frequencies must be finite numbers")

    if filter_type is not FilterType.NOTCH and config.order < 1:
        raise FilterValidationError("Filter order must be at least 1")

    if filter_type is FilterType.BANDPASS:
        if config.low >= config.high:
            raise FilterValidationError("Low cutoff must be less than high cutoff")
        if config.high >= nyquist:
            raise FilterValidationError(f"High cutoff must be below Nyquist ({nyquist_text} Hz)")
        if config.low < MIN_BANDPASS_LOW_HZ:
            raise FilterValidationError(f"Low cutoff must be at least {MIN_BANDPASS_LOW_HZ} Hz")
    elif filter_type is FilterType.HIGHPASS:
        if config.low >= nyquist:
            raise FilterValidationError(f"Cutoff must be below Nyquist ({nyquist_text} Hz)")
    elif filter_type is FilterType.LOWPASS:
        if config.high >= nyquist:
            raise FilterValidationError(f"Cutoff must be below Nyquist ({nyquist_text} Hz)")
    elif filter_type is FilterType.NOTCH:
        if config.low >= nyquist:
            raise FilterValidationError(f"Notch frequency must be below Nyquist ({nyquist_text} Hz)")


def apply_filter(signal: ArrayLike, fs: float, config: FilterConfig) -> np.ndarray:
    """
    Validate, filter and stability-check one channel

    Args:
        signal: 1-D samples (uV)
        fs: Sampling frequency in Hz
        config: Filter request

    Returns:
        np.ndarray: Filtered copy of the signal

    Raises:
        FilterValidationError: Parameters rejected, nothing was computed
        FilterInstabilityError: Output contained NaN/inf, or a section was
            marginally stable, and the result was discarded
    """
    validate_filter_config(config, fs)

    sections = design_filter(config, fs)
    filtered = apply_cascade(signal, sections)
    if is_unstable(filtered, sections):
        logging.warning(f"Unstable filter output for {config.describe()} at {fs} Hz")
        raise FilterInstabilityError()

    return filtered


# ============================================================================
# FREQUENCY RESPONSE
# ============================================================================

def section_magnitude(w: np.ndarray, coeffs: BiquadCoefficients) -> np.ndarray:
    """|H(e^jw)| of one section at angular frequencies w (rad/sample)"""
    z1 = np.exp(-1j * w)
    z2 = z1 * z1
    num = np.abs(coeffs.b0 + coeffs.b1 * z1 + coeffs.b2 * z2)
    den = np.abs(1 + coeffs.a1 * z1 + coeffs.a2 * z2)

    magnitude = np.zeros_like(num)
    np.divide(num, den, out=magnitude, where=den > 0)
    return magnitude


def compute_frequency_response(fs: float, config: FilterConfig) -> FrequencyResponse:
    """
    Magnitude response of the zero-phase cascade

    Evaluated at 512 log-spaced frequencies from 0.1 Hz to Nyquist. Each
    section's transfer function is evaluated on the unit circle and the
    magnitudes multiplied; the result is squared before conversion to dB
    because forward-backward filtering applies the cascade twice.

    Args:
        fs: Sampling frequency in Hz
        config: Filter request

    Returns:
        FrequencyResponse: freqs in Hz and magnitude in dB
    """
    nyquist = fs / 2
    frac = np.arange(FREQ_RESPONSE_POINTS) / (FREQ_RESPONSE_POINTS - 1)
    freqs = FREQ_RESPONSE_MIN_HZ * np.power(nyquist / FREQ_RESPONSE_MIN_HZ, frac)
    w = 2 * np.pi * freqs / fs

    total_mag = np.ones(FREQ_RESPONSE_POINTS)
    for coeffs in design_filter(config, fs):
        total_mag *= section_magnitude(w, coeffs)

    magnitude = 20 * np.log10(np.maximum(total_mag * total_mag, FREQ_RESPONSE_FLOOR))
    return FrequencyResponse(freqs=freqs, magnitude=magnitude)
