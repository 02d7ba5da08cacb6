"""Intensity and color-space treatments."""

from __future__ import annotations

import cv2
import numpy as np

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments.base import Treatment
from imagechain.utils.imaging import to_grayscale


class BrightnessTreatment(Treatment):
    """Linear intensity transform: ``output = alpha * input + beta``.

    Results saturate to the input dtype range.
    """

    name = "Brightness/Contrast"
    description = "Adjusts brightness and contrast (output = alpha * input + beta)"
    parameters = (
        ParameterSpec(
            name="alpha", kind=ParameterKind.DOUBLE, default=1.0,
            description="Contrast control (1.0-3.0 typical)",
        ),
        ParameterSpec(
            name="beta", kind=ParameterKind.DOUBLE, default=0.0,
            description="Brightness control (-100 to 100 typical)",
        ),
    )

    def __init__(self, alpha: float = 1.0, beta: float = 0.0) -> None:
        super().__init__(alpha=alpha, beta=beta)

    def process(self, image: np.ndarray) -> np.ndarray:
        return cv2.addWeighted(
            image, self._values["alpha"], np.zeros_like(image), 0.0, self._values["beta"]
        )


class GrayscaleTreatment(Treatment):
    """Converts BGR/BGRA images to a single channel; no parameters."""

    name = "Grayscale"
    description = "Converts color image to grayscale"

    def process(self, image: np.ndarray) -> np.ndarray:
        return to_grayscale(image)
