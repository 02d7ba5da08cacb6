"""Abstract base class for image sources.

All sources conform to this interface, so the chain and the CLI can
take an image from a file or a live camera without caring which one
it is.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

logger = logging.getLogger(__name__)


class ImageSource(ABC):
    """Abstract interface for producing an image on demand.

    Availability is decided when the underlying library opens the file
    or device; check ``is_available()`` before reading, or use the
    source as a context manager, which refuses unavailable sources and
    releases the source on exit.

    Example usage::

        with WebcamImageSource(device_index=0) as source:
            frame = source.get_stable_image()
    """

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description, e.g. ``"File: photo.jpg"``."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing file or device was opened successfully."""
        ...

    @abstractmethod
    def get_image(self) -> np.ndarray | None:
        """Produce one image.

        Returns:
            A buffer owned by the caller, or None if nothing could be
            read.
        """
        ...

    def release(self) -> None:
        """Free any underlying resource. Safe to call more than once."""

    def __enter__(self) -> ImageSource:
        if not self.is_available():
            raise SourceUnavailableError(f"{self.description} is not available")
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description!r}>"


class CaptureError(Exception):
    """Base class for image source failures."""


class SourceUnavailableError(CaptureError):
    """Raised when a source that could not be opened is used."""


class DegenerateFrameError(CaptureError):
    """Raised by strict stabilization when no usable frame was read.

    Carries the last frame read, which may be None or black.
    """

    def __init__(self, message: str, last_frame: np.ndarray | None = None) -> None:
        super().__init__(message)
        self.last_frame = last_frame
