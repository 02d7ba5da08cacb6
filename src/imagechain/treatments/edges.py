"""Edge detection and thresholding treatments.

Both variants operate on intensity only: three channel input is
converted to grayscale first, and any other layout is refused by
``validate_input()``.
"""

from __future__ import annotations

import cv2
import numpy as np

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments.base import Treatment
from imagechain.utils.imaging import to_grayscale


class CannyEdgeTreatment(Treatment):
    """Canny edge detector producing a binary edge map."""

    name = "Canny Edge Detection"
    description = "Detects edges in images using the Canny algorithm"
    parameters = (
        ParameterSpec(
            name="threshold1", kind=ParameterKind.DOUBLE, default=50.0,
            description="First threshold for hysteresis",
        ),
        ParameterSpec(
            name="threshold2", kind=ParameterKind.DOUBLE, default=150.0,
            description="Second threshold for hysteresis",
        ),
        ParameterSpec(
            name="aperture_size", kind=ParameterKind.INT, default=3, choices=(3, 5, 7),
            description="Sobel aperture size",
        ),
    )
    accepted_channels = (1, 3)

    def __init__(
        self,
        threshold1: float = 50.0,
        threshold2: float = 150.0,
        aperture_size: int = 3,
    ) -> None:
        super().__init__(
            threshold1=threshold1, threshold2=threshold2, aperture_size=aperture_size
        )

    def process(self, image: np.ndarray) -> np.ndarray:
        gray = to_grayscale(image)
        return cv2.Canny(
            gray,
            self._values["threshold1"],
            self._values["threshold2"],
            apertureSize=self._values["aperture_size"],
        )


class ThresholdTreatment(Treatment):
    """Fixed-level thresholding.

    ``threshold_type`` follows OpenCV's numbering:
    0 BINARY, 1 BINARY_INV, 2 TRUNC, 3 TOZERO, 4 TOZERO_INV.
    """

    BINARY = cv2.THRESH_BINARY
    BINARY_INV = cv2.THRESH_BINARY_INV
    TRUNC = cv2.THRESH_TRUNC
    TOZERO = cv2.THRESH_TOZERO
    TOZERO_INV = cv2.THRESH_TOZERO_INV

    name = "Threshold"
    description = "Applies thresholding to create binary images"
    parameters = (
        ParameterSpec(
            name="threshold_value", kind=ParameterKind.DOUBLE, default=127.0,
            description="Threshold value",
        ),
        ParameterSpec(
            name="max_value", kind=ParameterKind.DOUBLE, default=255.0,
            description="Maximum value for binary modes",
        ),
        ParameterSpec(
            name="threshold_type", kind=ParameterKind.INT, default=0, minimum=0, maximum=4,
            description="0:BINARY, 1:BINARY_INV, 2:TRUNC, 3:TOZERO, 4:TOZERO_INV",
        ),
    )
    accepted_channels = (1, 3)

    def __init__(
        self,
        threshold_value: float = 127.0,
        max_value: float = 255.0,
        threshold_type: int = cv2.THRESH_BINARY,
    ) -> None:
        super().__init__(
            threshold_value=threshold_value,
            max_value=max_value,
            threshold_type=threshold_type,
        )

    def process(self, image: np.ndarray) -> np.ndarray:
        gray = to_grayscale(image)
        _, output = cv2.threshold(
            gray,
            self._values["threshold_value"],
            self._values["max_value"],
            self._values["threshold_type"],
        )
        return output
