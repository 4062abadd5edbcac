import numpy as np

from neuroscope.processing.decimation import downsample_minmax


def test_alternates_max_and_min():
    result = downsample_minmax([1.0, 5.0, 2.0, 8.0, 3.0, 9.0, 4.0], 2)

    np.testing.assert_array_equal(result, [5.0, 2.0, 9.0, 4.0])


def test_fractional_factor_covers_every_sample():
    signal = np.arange(10, dtype=float)

    result = downsample_minmax(signal, 2.5)

    assert result.size == 4
    np.testing.assert_array_equal(result, [1.0, 2.0, 6.0, 7.0])


def test_factor_at_most_one_returns_copy():
    signal = np.array([1.0, -2.0, 3.0])

    result = downsample_minmax(signal, 1)
    result[0] = 99.0

    np.testing.assert_array_equal(signal, [1.0, -2.0, 3.0])


def test_keeps_spike_visible():
    signal = np.zeros(1000)
    signal[437] = 150.0

    assert downsample_minmax(signal, 100).max() == 150.0
