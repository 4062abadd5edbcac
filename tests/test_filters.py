import numpy as np
import pytest
from scipy import signal as sp_signal

from neuroscope.core.data_types import BiquadCoefficients, FilterConfig, FilterType
from neuroscope.core.exceptions import FilterInstabilityError, FilterValidationError
from neuroscope.processing.filters import (
    _DESIGNERS, apply_biquad, apply_cascade, apply_filter, butterworth, butterworth_q,
    clamp_frequency, compute_frequency_response, design_filter,
    is_marginal, is_unstable, lowpass_biquad, notch_biquad, validate_filter_config,
)


def _direct_form(x, c):
    out = np.zeros_like(x)
    x1 = x2 = y1 = y2 = 0.0
    for i, x0 in enumerate(x):
        out[i] = c.b0 * x0 + c.b1 * x1 + c.b2 * x2 - c.a1 * y1 - c.a2 * y2
        x2, x1 = x1, x0
        y2, y1 = y1, out[i]
    return out


def test_clamp_frequency():
    assert clamp_frequency(float("nan"), 128.0) == 1.0
    assert clamp_frequency(float("inf"), 2.0) == 0.5
    assert clamp_frequency(-5.0, 128.0) == 1e-6
    assert clamp_frequency(500.0, 128.0) == pytest.approx(127.872)
    assert clamp_frequency(40.0, 128.0) == 40.0


def test_butterworth_q_factors():
    assert butterworth_q(0, 2) == pytest.approx(1 / np.sqrt(2))
    assert butterworth_q(0, 4) == pytest.approx(0.5412, abs=1e-4)
    assert butterworth_q(1, 4) == pytest.approx(1.3066, abs=1e-4)


def test_design_section_counts(fs):
    assert len(design_filter(FilterConfig.bandpass(1.0, 40.0, order=4), fs)) == 4
    assert len(design_filter(FilterConfig.highpass(1.0, order=5), fs)) == 3
    assert len(design_filter(FilterConfig.lowpass(40.0, order=2), fs)) == 1
    assert len(design_filter(FilterConfig.notch(50.0), fs)) == 1


def test_bandpass_edges_are_reordered(fs):
    assert design_filter(FilterConfig.bandpass(40.0, 1.0), fs) == design_filter(
        FilterConfig.bandpass(1.0, 40.0), fs
    )


def test_apply_biquad_matches_difference_equation(noise, fs):
    coeffs = lowpass_biquad(fs, 30.0, butterworth_q(0, 2))
    x = noise[:200]

    np.testing.assert_allclose(apply_biquad(x, coeffs), _direct_form(x, coeffs), atol=1e-9)


def test_zero_phase_keeps_impulse_symmetric(fs):
    impulse = np.zeros(1025)
    impulse[512] = 1.0
    sections = design_filter(FilterConfig.lowpass(40.0), fs)

    forward_only = impulse
    for coeffs in sections:
        forward_only = apply_biquad(forward_only, coeffs)
    zero_phase = apply_cascade(impulse, sections)

    assert np.argmax(zero_phase) == 512
    assert np.argmax(forward_only) > 512
    np.testing.assert_allclose(zero_phase, zero_phase[::-1], atol=1e-10)


def test_lowpass_removes_high_frequency(fs, make_sine):
    slow = make_sine(5.0, amplitude=10.0)
    fast = make_sine(60.0, amplitude=10.0)

    filtered = butterworth(slow + fast, fs, 1.0, 20.0, order=4, filter_type="lowpass")

    np.testing.assert_allclose(filtered[512:-512], slow[512:-512], atol=0.2)


def test_highpass_removes_offset(fs, make_sine):
    alpha = make_sine(10.0, amplitude=10.0)

    filtered = butterworth(alpha + 50.0, fs, 2.0, 40.0, order=4, filter_type="highpass")

    np.testing.assert_allclose(filtered[768:-768], alpha[768:-768], atol=0.2)


def test_bandpass_keeps_passband_only(fs, make_sine):
    alpha = make_sine(10.0, amplitude=10.0)
    drift = make_sine(0.1, amplitude=30.0)
    hum = make_sine(60.0, amplitude=10.0)

    filtered = butterworth(alpha + drift + hum, fs, 4.0, 20.0, order=4)

    np.testing.assert_allclose(filtered[768:-768], alpha[768:-768], atol=0.5)


def test_notch_removes_line_noise(fs, make_sine):
    alpha = make_sine(10.0, amplitude=10.0)
    line = make_sine(50.0, amplitude=10.0)

    filtered = butterworth(alpha + line, fs, 50.0, 50.0, filter_type=FilterType.NOTCH)

    np.testing.assert_allclose(filtered[512:-512], alpha[512:-512], atol=0.5)


def test_notch_coefficients_have_zero_at_centre(fs):
    coeffs = notch_biquad(fs, 50.0)
    w = 2 * np.pi * 50.0 / fs
    _, h = sp_signal.freqz(coeffs.numerator, coeffs.denominator, worN=[w])
    assert abs(h[0]) < 1e-9


@pytest.mark.parametrize("config, message", [
    (FilterConfig.bandpass(40.0, 1.0), "Low cutoff must be less than high cutoff"),
    (FilterConfig.bandpass(1.0, 128.0), "High cutoff must be below Nyquist (128 Hz)"),
    (FilterConfig.bandpass(0.01, 40.0), "Low cutoff must be at least 0.05 Hz"),
    (FilterConfig.highpass(200.0), "Cutoff must be below Nyquist (128 Hz)"),
    (FilterConfig.lowpass(130.0), "Cutoff must be below Nyquist (128 Hz)"),
    (FilterConfig.notch(128.0), "Notch frequency must be below Nyquist (128 Hz)"),
    (FilterConfig.lowpass(float("nan")), "Cutoff frequencies must be finite numbers"),
    (FilterConfig.bandpass(1.0, 40.0, order=0), "Filter order must be at least 1"),
])
def test_validation_messages(fs, config, message):
    with pytest.raises(FilterValidationError) as excinfo:
        validate_filter_config(config, fs)
    assert str(excinfo.value) == message
    assert isinstance(excinfo.value, ValueError)


def test_valid_configs_pass(fs):
    for config in (
        FilterConfig.bandpass(0.05, 127.0),
        FilterConfig.highpass(0.5),
        FilterConfig.lowpass(40.0),
        FilterConfig.notch(60.0),
    ):
        validate_filter_config(config, fs)


def test_apply_filter_rejects_before_filtering(noise, fs):
    before = noise.copy()
    with pytest.raises(FilterValidationError):
        apply_filter(noise, fs, FilterConfig.lowpass(200.0))
    np.testing.assert_array_equal(noise, before)


def test_apply_filter_flags_non_finite_output(noise, fs):
    corrupted = noise.copy()
    corrupted[100] = np.nan

    with pytest.raises(FilterInstabilityError) as excinfo:
        apply_filter(corrupted, fs, FilterConfig.bandpass(1.0, 40.0))
    assert "unstable output" in str(excinfo.value)


def test_narrow_band_touching_nyquist_is_rejected(noise, fs):
    before = noise.copy()

    with pytest.raises(FilterValidationError, match=r"High cutoff must be below Nyquist \(128 Hz\)"):
        apply_filter(noise, fs, FilterConfig.bandpass(127.8, 128.5, order=8))
    np.testing.assert_array_equal(noise, before)


@pytest.mark.parametrize("config", [
    FilterConfig.lowpass(40.0, order=3),
    FilterConfig.highpass(1.0, order=1),
    FilterConfig.bandpass(1.0, 40.0, order=5),
])
def test_odd_order_cascade_is_flagged_unstable(noise, fs, config):
    with pytest.raises(FilterInstabilityError, match="unstable output"):
        apply_filter(noise, fs, config)


def test_only_the_odd_order_section_is_marginal(fs):
    odd = design_filter(FilterConfig.lowpass(40.0, order=3), fs)
    even = design_filter(FilterConfig.bandpass(0.05, 127.0, order=8), fs)

    assert [is_marginal(c) for c in odd] == [False, True]
    assert not any(is_marginal(c) for c in even)
    assert not is_unstable(np.zeros(4), even)
    assert is_unstable(np.array([0.0, np.inf]), even)


def test_every_filter_type_has_a_designer():
    assert set(_DESIGNERS) == set(FilterType)


def test_apply_filter_returns_new_array(noise, fs):
    before = noise.copy()

    filtered = apply_filter(noise, fs, FilterConfig.bandpass(1.0, 40.0))

    assert filtered is not noise
    assert filtered.shape == noise.shape
    np.testing.assert_array_equal(noise, before)


def test_frequency_response_axis(fs):
    response = compute_frequency_response(fs, FilterConfig.lowpass(30.0))

    assert response.freqs.size == response.magnitude.size == 512
    assert response.freqs[0] == pytest.approx(0.1)
    assert response.freqs[-1] == pytest.approx(fs / 2)
    assert np.all(np.diff(response.freqs) > 0)


@pytest.mark.parametrize("config", [
    FilterConfig.bandpass(1.0, 40.0),
    FilterConfig.highpass(0.5, order=6),
    FilterConfig.lowpass(30.0),
    FilterConfig.notch(50.0),
])
def test_frequency_response_matches_freqz(fs, config):
    response = compute_frequency_response(fs, config)
    w = 2 * np.pi * response.freqs / fs

    total = np.ones_like(w)
    for coeffs in design_filter(config, fs):
        _, h = sp_signal.freqz(coeffs.numerator, coeffs.denominator, worN=w)
        total *= np.abs(h)
    expected = 20 * np.log10(np.maximum(total ** 2, 1e-10))

    np.testing.assert_allclose(response.magnitude, expected, atol=1e-6)


def test_lowpass_response_shape(fs):
    response = compute_frequency_response(fs, FilterConfig.lowpass(30.0))

    assert abs(response.magnitude[0]) < 0.01
    assert response.magnitude[-1] < -60.0


def test_notch_response_dips_at_centre(fs):
    response = compute_frequency_response(fs, FilterConfig.notch(50.0))
    dip = response.freqs[np.argmin(response.magnitude)]
    assert dip == pytest.approx(50.0, abs=1.0)


def test_biquad_arrays():
    coeffs = BiquadCoefficients(b0=1.0, b1=2.0, b2=3.0, a1=0.5, a2=0.25)
    np.testing.assert_array_equal(coeffs.numerator, [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(coeffs.denominator, [1.0, 0.5, 0.25])
