import numpy as np
import pytest
from scipy import signal as sp_signal

from neuroscope.core.data_types import WindowType
from neuroscope.processing.transform import fft, get_window, next_pow2


@pytest.mark.parametrize("n, expected", [(0, 1), (1, 1), (2, 2), (3, 4), (256, 256), (257, 512)])
def test_next_pow2(n, expected):
    assert next_pow2(n) == expected


@pytest.mark.parametrize("n_fft", [8, 64, 256, 1024])
def test_fft_concentrates_pure_sinusoid_in_its_bin(n_fft):
    k = n_fft // 8
    x = np.cos(2 * np.pi * k * np.arange(n_fft) / n_fft)

    magnitude = np.abs(fft(x).spectrum)

    assert magnitude[k] == pytest.approx(n_fft / 2, rel=1e-9)
    assert magnitude[n_fft - k] == pytest.approx(n_fft / 2, rel=1e-9)
    others = np.delete(magnitude, [k, n_fft - k])
    assert np.all(others < 1e-8)


def test_fft_matches_numpy_with_zero_padding(noise):
    x = noise[:100]

    result = fft(x)

    assert result.n_fft == 128
    assert result.logical_length == 100
    np.testing.assert_allclose(result.spectrum, np.fft.fft(x, 128), atol=1e-9)


def test_fft_parseval_energy(noise):
    x = noise[:300]

    result = fft(x)

    assert np.sum(result.power) == pytest.approx(result.n_fft * np.sum(x * x), rel=1e-10)


def test_fft_trivial_lengths():
    empty = fft([])
    assert empty.n_fft == 1
    np.testing.assert_array_equal(empty.re, [0.0])
    np.testing.assert_array_equal(empty.im, [0.0])

    single = fft([3.5])
    assert single.n_fft == 1
    assert single.logical_length == 1
    np.testing.assert_array_equal(single.re, [3.5])
    np.testing.assert_array_equal(single.im, [0.0])


def test_fft_does_not_touch_input(noise):
    x = noise[:64].copy()
    before = x.copy()

    fft(x)

    np.testing.assert_array_equal(x, before)


def test_fft_rejects_multichannel_input():
    with pytest.raises(ValueError):
        fft(np.zeros((2, 8)))


def test_freq_resolution_uses_padded_length():
    assert fft(np.ones(200)).freq_resolution(256.0) == 1.0


@pytest.mark.parametrize("size", [2, 7, 256])
@pytest.mark.parametrize("window_type, scipy_name", [
    ("hanning", "hann"),
    ("hamming", "hamming"),
    ("blackman", "blackman"),
    ("rectangular", "boxcar"),
])
def test_windows_match_symmetric_scipy_windows(size, window_type, scipy_name):
    expected = sp_signal.get_window(scipy_name, size, fftbins=False)
    np.testing.assert_allclose(get_window(size, window_type), expected, atol=1e-12)


def test_window_degenerate_sizes():
    for window_type in WindowType:
        np.testing.assert_array_equal(get_window(1, window_type), [1.0])
        assert get_window(0, window_type).size == 0


def test_unknown_window_type_is_rejected():
    with pytest.raises(ValueError):
        get_window(16, "kaiser")
