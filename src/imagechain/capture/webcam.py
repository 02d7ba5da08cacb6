"""Webcam image source using OpenCV.

Opens a local capture device at construction and reads frames on
demand. Plain reads only retry empty frames a few times; hardened
reads go through the stabilization protocol in
``imagechain.capture.stabilize``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import cv2
import numpy as np

from imagechain.capture.base import ImageSource
from imagechain.capture.stabilize import read_stable_frame
from imagechain.domain.models import StabilizationPolicy
from imagechain.utils.imaging import is_empty

logger = logging.getLogger(__name__)


class WebcamImageSource(ImageSource):
    """Reads frames from a webcam, physical or virtual.

    The device handle is owned exclusively by this source. All reads are
    blocking; concurrent use from several threads must be serialized by
    the caller.
    """

    def __init__(
        self,
        device_index: int = 0,
        resolution: tuple[int, int] | None = None,
        read_retries: int = 3,
        read_delay: float = 0.05,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._device_index = device_index
        self._resolution = resolution
        self._read_retries = read_retries
        self._read_delay = read_delay
        self._sleep = sleep

        self._cap: cv2.VideoCapture | None = cv2.VideoCapture(device_index)
        if not self._cap.isOpened():
            logger.warning("Failed to open webcam device %d", device_index)
            return
        if resolution:
            w, h = resolution
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        actual_w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info("Opened webcam device %d (%dx%d)", device_index, actual_w, actual_h)

    @property
    def description(self) -> str:
        return f"Webcam (device {self._device_index})"

    @property
    def device_index(self) -> int:
        return self._device_index

    def is_available(self) -> bool:
        return self._cap is not None and self._cap.isOpened()

    def get_image(self) -> np.ndarray | None:
        """Plain read for sources already known to be stable.

        Retries only empty frames, at most ``read_retries`` times; no
        warm-up skip and no black-frame validation.
        """
        frame = self._read()
        attempt = 0
        while is_empty(frame) and attempt < self._read_retries and self.is_available():
            attempt += 1
            self._sleep(self._read_delay)
            frame = self._read()
        if is_empty(frame):
            logger.debug("Plain read from device %d returned no frame", self._device_index)
        return frame

    def read_stable(self, policy: StabilizationPolicy | None = None) -> np.ndarray | None:
        """Hardened read through the stabilization protocol.

        Returns None without reading if the device is not open.
        """
        if not self.is_available():
            return None
        return read_stable_frame(self._read, policy, sleep=self._sleep)

    def get_image_with_retry(
        self,
        skip_frames: int = 5,
        retries: int = 15,
        validate_non_black: bool = True,
    ) -> np.ndarray | None:
        """Hardened read: skip warm-up frames, then retry until a valid frame.

        Returns the last frame read (possibly None or black) if no
        acceptable frame turned up within ``retries`` attempts.
        """
        return self.read_stable(
            StabilizationPolicy(
                skip_frames=skip_frames,
                retries=retries,
                validate_non_black=validate_non_black,
            )
        )

    def get_stable_image(self) -> np.ndarray | None:
        """Hardened read with the longer warm-up preset (8 skips, 20 retries)."""
        return self.read_stable(StabilizationPolicy.stable())

    def capture_frame(self) -> np.ndarray | None:
        """Read a single frame and release the device ("capture and freeze")."""
        frame = self.get_image()
        self.release()
        return frame

    def release(self) -> None:
        """Release the device handle. Later calls are no-ops."""
        if self._cap is None:
            return
        cap, self._cap = self._cap, None
        if cap.isOpened():
            cap.release()
            logger.info("Released webcam device %d", self._device_index)

    def _read(self) -> np.ndarray | None:
        """Single raw read; None when the device yields nothing."""
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame
