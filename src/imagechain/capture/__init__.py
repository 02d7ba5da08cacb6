"""Image source module for imagechain.

Provides image sources backed by files or live capture devices, and the
stabilization protocol that turns a flaky device read into a usable
frame. The abstract base class lets callers swap sources without
changing the rest of the pipeline.

Public API:
    ImageSource -- Abstract base class
    FileImageSource -- Image decoded from a file
    WebcamImageSource -- OpenCV capture device with hardened reads
    read_stable_frame -- Skip/retry/validate protocol over any raw read
"""

from imagechain.capture.base import (
    CaptureError,
    DegenerateFrameError,
    ImageSource,
    SourceUnavailableError,
)
from imagechain.capture.stabilize import is_black_frame, read_stable_frame

__all__ = [
    "CaptureError",
    "DegenerateFrameError",
    "FileImageSource",
    "ImageSource",
    "SourceUnavailableError",
    "WebcamImageSource",
    "is_black_frame",
    "read_stable_frame",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete sources that open files or devices via OpenCV."""
    if name == "WebcamImageSource":
        from imagechain.capture.webcam import WebcamImageSource
        return WebcamImageSource
    if name == "FileImageSource":
        from imagechain.capture.file import FileImageSource
        return FileImageSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
