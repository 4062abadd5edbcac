import numpy as np
import pytest


FS = 256.0


def _sine(freq, fs=FS, seconds=10.0, amplitude=1.0):
    t = np.arange(int(seconds * fs)) / fs
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def fs():
    return FS


@pytest.fixture
def make_sine():
    return _sine


@pytest.fixture
def alpha_sine():
    """10 s of a 10 Hz, 20 uV sine sampled at 256 Hz"""
    return _sine(10.0, amplitude=20.0)


@pytest.fixture
def noise():
    rng = np.random.default_rng(42)
    return rng.normal(0.0, 10.0, 2000)
