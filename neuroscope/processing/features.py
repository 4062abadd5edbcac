"""
Per-recording EEG feature extraction

This module runs the spectral, band power and statistics primitives over the
channels of a recording and returns the numbers the display and export
layers show: spectra per channel, band powers per channel plus their
average, the statistics table and the per-channel values of a topographic
map.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import ArrayLike

from ..core.config import AnalysisConfig, TOPOGRAPHY_METRICS, validate_config
from ..core.data_types import BandPowers, ChannelStatistics, Spectrogram, Spectrum
from .band_power import average_band_powers, compute_band_powers
from .spectral import compute_spectrogram, direct_psd, welch_psd
from .statistics import compute_statistics


class FeatureExtractor:
    """
    Extract frequency domain and statistical features from a recording

    Channel data is always (channels x samples) at the sampling rate given
    in the AnalysisConfig. Every call recomputes from its inputs; nothing
    is cached between calls.
    """

    def __init__(self, fs: float, config: Optional[AnalysisConfig] = None):
        config = AnalysisConfig(fs=fs) if config is None else replace(config, fs=fs)

        validate_config(config)
        self.fs = fs
        self.config = config

    def _select(self, channel_data: np.ndarray, channels: Optional[Sequence[int]]) -> List[int]:
        if channels is None:
            return list(range(channel_data.shape[0]))
        # An empty selection means "the first channel"
        return list(channels) if len(channels) > 0 else [0]

    def compute_spectra(
        self,
        channel_data: ArrayLike,
        channels: Optional[Sequence[int]] = None,
        method: str = "welch",
        window_type: Optional[str] = None,
    ) -> List[Spectrum]:
        """
        Power spectral density of selected channels

        Args:
            channel_data: EEG data (channels x samples)
            channels: Channel indices, None for all
            method: "welch" (segment-averaged) or "direct" (single periodogram)
            window_type: Taper, defaults to the configured one

        Returns:
            List[Spectrum]: One spectrum per selected channel
        """
        data = np.asarray(channel_data, dtype=float)
        window_type = window_type or self.config.window_type

        if method == "welch":
            return [
                welch_psd(data[ch], self.fs, self.config.welch_window_size,
                          self.config.welch_overlap, window_type)
                for ch in self._select(data, channels)
            ]
        if method == "direct":
            return [direct_psd(data[ch], self.fs, window_type) for ch in self._select(data, channels)]

        raise ValueError(f"Spectrum method must be 'welch' or 'direct', got '{method}'")

    def compute_band_powers(
        self,
        channel_data: ArrayLike,
        channels: Optional[Sequence[int]] = None,
    ) -> Tuple[List[BandPowers], BandPowers]:
        """
        Band powers of selected channels and their channel average

        Uses a Welch PSD with default parameters for every channel.

        Returns:
            Tuple[per_channel, average]
        """
        data = np.asarray(channel_data, dtype=float)
        selected = self._select(data, channels)

        per_channel = []
        for ch in selected:
            spectrum = welch_psd(data[ch], self.fs)
            per_channel.append(compute_band_powers(spectrum.freqs, spectrum.psd))

        average = average_band_powers(per_channel)
        logging.info(f"Band powers computed for {len(selected)} channels")
        return per_channel, average

    def compute_statistics(self, channel_data: ArrayLike) -> List[ChannelStatistics]:
        """Statistics record for every channel"""
        data = np.asarray(channel_data, dtype=float)
        return [compute_statistics(data[ch]) for ch in range(data.shape[0])]

    def topography_values(self, channel_data: ArrayLike, metric: str) -> np.ndarray:
        """
        One value per channel for a scalp map

        Args:
            channel_data: EEG data (channels x samples)
            metric: "rms", "power" (sum of the five bands) or a band name

        Returns:
            np.ndarray: Values in channel order; 0 for unknown metrics
        """
        data = np.asarray(channel_data, dtype=float)
        values = np.zeros(data.shape[0])
        if metric not in TOPOGRAPHY_METRICS:
            logging.debug(f"Unknown topography metric '{metric}', expected one of {TOPOGRAPHY_METRICS}")
            return values

        for ch in range(data.shape[0]):
            if metric == "rms":
                values[ch] = compute_statistics(data[ch]).rms
                continue

            spectrum = welch_psd(data[ch], self.fs)
            powers = compute_band_powers(spectrum.freqs, spectrum.psd)

            values[ch] = powers.total() if metric == "power" else getattr(powers, metric)

        return values

    def compute_spectrogram(self, signal: ArrayLike) -> Spectrogram:
        """Spectrogram of one channel with the configured frame settings"""
        return compute_spectrogram(
            signal,
            self.fs,
            self.config.spectrogram_window_size,
            self.config.spectrogram_overlap,
            self.config.spectrogram_max_freq,
        )
