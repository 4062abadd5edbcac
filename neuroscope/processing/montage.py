"""
Montage transforms

Re-reference multi-channel recordings for display and analysis:
- Average reference: subtract the instantaneous mean of all channels
- Bipolar (longitudinal 10-20): differences along fixed anatomical chains

All channels of a recording are assumed to share the same length.
"""

import logging
from typing import List, Sequence

import numpy as np
from numpy.typing import ArrayLike

from ..core.config import BIPOLAR_CHAINS
from ..core.data_types import MontageResult


def _as_channels(channel_data: ArrayLike) -> np.ndarray:
    data = np.asarray(channel_data, dtype=float)
    if data.size == 0:
        return np.zeros((0, 0))
    if data.ndim != 2:
        raise ValueError(f"channel_data must be 2-D (channels x samples), got shape {data.shape}")
    return data


def average_reference(channel_data: ArrayLike) -> np.ndarray:
    """
    Common average reference

    Args:
        channel_data: EEG data (channels x samples)

    Returns:
        np.ndarray: New array where each sample has the cross-channel mean
            at that instant subtracted
    """
    data = _as_channels(channel_data)
    if data.shape[0] == 0:
        return data.copy()

    channel_average = np.mean(data, axis=0, keepdims=True)
    return data - channel_average


def bipolar_montage(channel_data: ArrayLike, channel_labels: Sequence[str]) -> MontageResult:
    """
    Longitudinal bipolar montage

    Every chain pair (e.g. Fp1-F3) whose two electrodes are both present
    produces one derived channel, first minus second. Label matching ignores
    case; derived labels use the standard spelling from the chain list.
    When no chain pair matches, neighbouring channels are differenced in
    their given order instead (ch[i] - ch[i + 1]).

    Args:
        channel_data: EEG data (channels x samples)
        channel_labels: One label per channel

    Returns:
        MontageResult: Derived channels and their "A-B" labels
    """
    data = _as_channels(channel_data)
    label_index = {label.upper(): idx for idx, label in enumerate(channel_labels)}

    derived: List[np.ndarray] = []
    labels: List[str] = []

    for first, second in BIPOLAR_CHAINS:
        idx1 = label_index.get(first.upper())
        idx2 = label_index.get(second.upper())
        if idx1 is not None and idx2 is not None:
            derived.append(data[idx1] - data[idx2])
            labels.append(f"{first}-{second}")

    if not derived:
        logging.debug("No standard 10-20 bipolar pairs found, using sequential pairs")
        for i in range(data.shape[0] - 1):
            derived.append(data[i] - data[i + 1])
            labels.append(f"{channel_labels[i]}-{channel_labels[i + 1]}")

    montage_data = np.vstack(derived) if derived else np.zeros((0, data.shape[1]))

    return MontageResult(channel_data=montage_data, channel_labels=labels)
