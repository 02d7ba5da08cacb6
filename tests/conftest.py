"""Shared test fixtures for the imagechain test suite.

Provides sample image buffers and a scripted frame reader that stands in
for a live capture device.
"""

from __future__ import annotations

from collections.abc import Iterable
from unittest.mock import MagicMock

import numpy as np
import pytest


# ---------------------------------------------------------------------------
# Image Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def color_image() -> np.ndarray:
    """A 100x100 BGR gradient with some structure in every channel."""
    ys, xs = np.mgrid[0:100, 0:100]
    image = np.zeros((100, 100, 3), dtype=np.uint8)
    image[:, :, 0] = (xs * 2.55).astype(np.uint8)
    image[:, :, 1] = (ys * 2.55).astype(np.uint8)
    image[30:70, 30:70, 2] = 255
    return image


@pytest.fixture
def gray_image(color_image: np.ndarray) -> np.ndarray:
    """A single channel 100x100 image."""
    return color_image[:, :, 0].copy()


@pytest.fixture
def bgra_image(color_image: np.ndarray) -> np.ndarray:
    """A 4-channel 100x100 image."""
    alpha = np.full((100, 100, 1), 255, dtype=np.uint8)
    return np.concatenate([color_image, alpha], axis=2)


@pytest.fixture
def black_frame() -> np.ndarray:
    return np.zeros((48, 64, 3), dtype=np.uint8)


@pytest.fixture
def bright_frame() -> np.ndarray:
    return np.full((48, 64, 3), 120, dtype=np.uint8)


# ---------------------------------------------------------------------------
# Capture Fixtures
# ---------------------------------------------------------------------------


class ScriptedReader:
    """Callable returning scripted frames in order, then None forever."""

    def __init__(self, frames: Iterable[np.ndarray | None]) -> None:
        self._frames = list(frames)
        self.calls = 0

    def __call__(self) -> np.ndarray | None:
        self.calls += 1
        if self._frames:
            return self._frames.pop(0)
        return None


@pytest.fixture
def scripted_reader() -> type[ScriptedReader]:
    return ScriptedReader


@pytest.fixture
def mock_sleep() -> MagicMock:
    """Records requested delays instead of sleeping."""
    return MagicMock()
