"""
Multi-channel filter application

This module applies one validated filter configuration to a whole recording
and checks the result for numerical blow-up before handing it back. The
caller's data is never modified, so on any failure it still holds its
previous (unfiltered or previously filtered) state.
"""

import logging
from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike

from ..core.config import PREVIEW_SECONDS
from ..core.data_types import FilterConfig, FrequencyResponse
from ..core.exceptions import FilterInstabilityError
from .filters import (
    apply_cascade, compute_frequency_response, design_filter, is_unstable,
    validate_filter_config,
)


class Preprocessor:
    """
    Zero-phase filtering of EEG recordings

    Validates the filter against the recording's Nyquist frequency, designs
    the biquad cascade once and runs it over every channel.
    """

    def __init__(self, fs: float, config: FilterConfig):
        if fs <= 0:
            raise ValueError(f"Sampling rate must be positive, got {fs}")

        self.fs = fs
        self.config = config

    def validate(self) -> None:
        """Raise FilterValidationError if the filter cannot run at this rate"""
        validate_filter_config(self.config, self.fs)

    def describe(self) -> str:
        return self.config.describe()

    def filter_data(self, data: ArrayLike) -> np.ndarray:
        """
        Apply the configured filter to every channel

        Args:
            data: Raw EEG data (channels x samples)

        Returns:
            np.ndarray: Filtered EEG data with the same shape

        Raises:
            FilterValidationError: Parameters rejected before filtering
            FilterInstabilityError: Any output value was NaN or infinite, or
                the cascade has a marginally stable section
        """
        self.validate()

        data = np.asarray(data, dtype=float)
        if data.ndim != 2:
            raise ValueError(f"data must be 2-D (channels x samples), got shape {data.shape}")

        sections = design_filter(self.config, self.fs)
        filtered = np.empty_like(data)

        for ch in range(data.shape[0]):
            filtered[ch, :] = apply_cascade(data[ch, :], sections)

        if is_unstable(filtered, sections):
            logging.warning(f"Unstable output from {self.describe()}, result discarded")
            raise FilterInstabilityError()

        logging.info(f"Applied {self.describe()} to {data.shape[0]} channels")
        return filtered

    def preview(self, signal: ArrayLike, seconds: float = PREVIEW_SECONDS) -> Tuple[np.ndarray, np.ndarray]:
        """
        Filter only the opening clip of one channel

        Args:
            signal: 1-D samples of the channel to preview
            seconds: Clip length from the start of the recording

        Returns:
            Tuple[original_clip, filtered_clip]
        """
        self.validate()

        signal = np.asarray(signal, dtype=float)
        preview_len = min(signal.size, int(np.floor(self.fs * seconds)))
        original_clip = signal[:preview_len].copy()

        sections = design_filter(self.config, self.fs)
        filtered_clip = apply_cascade(original_clip, sections)
        if is_unstable(filtered_clip, sections):
            logging.warning(f"Unstable preview from {self.describe()}")
            raise FilterInstabilityError()

        return original_clip, filtered_clip

    def frequency_response(self) -> FrequencyResponse:
        """Magnitude response of the configured cascade"""
        return compute_frequency_response(self.fs, self.config)
