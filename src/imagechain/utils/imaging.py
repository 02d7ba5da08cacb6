"""Image buffer utilities for imagechain.

Shared helpers for inspecting and converting numpy image buffers, used
by the treatments, the chain engine and the capture stabilization
protocol. Buffers follow the OpenCV convention: ``(H, W)`` for single
channel images and ``(H, W, C)`` with BGR(A) channel order otherwise.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

logger = logging.getLogger(__name__)


def is_empty(image: np.ndarray | None) -> bool:
    """Whether ``image`` is missing or holds no pixels."""
    return image is None or image.size == 0


def channel_count(image: np.ndarray) -> int:
    """Number of channels; 2-D arrays count as a single channel."""
    if image.ndim == 2:
        return 1
    return int(image.shape[2])


def channel_means(image: np.ndarray) -> np.ndarray:
    """Mean intensity of each channel, as a 1-D float array."""
    channels = channel_count(image)
    return image.reshape(-1, channels).mean(axis=0, dtype=np.float64)


def max_channel_mean(image: np.ndarray | None) -> float:
    """Largest per-channel mean over the first three channels.

    Alpha is ignored for BGRA buffers. Empty buffers report 0.0 so they
    are always considered black.
    """
    if is_empty(image):
        return 0.0
    return float(channel_means(image)[:3].max())


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a BGR or BGRA buffer to a single channel one.

    Single channel input is copied so the caller never aliases its
    argument.
    """
    channels = channel_count(image)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    if image.ndim == 3:
        return image[:, :, 0].copy()
    return image.copy()
