"""File-backed image source."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np

from imagechain.capture.base import ImageSource

logger = logging.getLogger(__name__)


class FileImageSource(ImageSource):
    """Image decoded once from a file at construction.

    Every ``get_image()`` call returns a fresh copy, so callers may
    modify it freely.
    """

    def __init__(self, path: Path | str, flags: int = cv2.IMREAD_COLOR) -> None:
        self._path = Path(path)
        self._image: np.ndarray | None = cv2.imread(str(self._path), flags)
        if self._image is None:
            logger.warning("Could not decode image file %s", self._path)
        else:
            logger.debug("Loaded %s (%dx%d)", self._path, self._image.shape[1], self._image.shape[0])

    @property
    def description(self) -> str:
        return f"File: {self._path}"

    @property
    def path(self) -> Path:
        return self._path

    def is_available(self) -> bool:
        return self._image is not None and self._image.size > 0

    def get_image(self) -> np.ndarray | None:
        if self._image is None:
            return None
        return self._image.copy()
