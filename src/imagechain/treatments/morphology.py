"""Morphological treatments (erosion and dilation).

Both share the same parameters: a square structuring element of
``kernel_size`` with ``kernel_shape`` 0=RECT, 1=CROSS, 2=ELLIPSE,
applied ``iterations`` times.
"""

from __future__ import annotations

import cv2
import numpy as np

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments.base import Treatment

_MORPHOLOGY_PARAMETERS = (
    ParameterSpec(
        name="kernel_size", kind=ParameterKind.INT, default=3, minimum=1, odd=True,
        description="Size of structuring element",
    ),
    ParameterSpec(
        name="kernel_shape", kind=ParameterKind.INT, default=cv2.MORPH_RECT, choices=(0, 1, 2),
        description="Shape: 0=RECT, 1=CROSS, 2=ELLIPSE",
    ),
    ParameterSpec(
        name="iterations", kind=ParameterKind.INT, default=1, minimum=1,
        description="Number of times the operation is applied",
    ),
)


class _MorphologyTreatment(Treatment):
    parameters = _MORPHOLOGY_PARAMETERS

    def __init__(
        self,
        kernel_size: int = 3,
        kernel_shape: int = cv2.MORPH_RECT,
        iterations: int = 1,
    ) -> None:
        super().__init__(
            kernel_size=kernel_size, kernel_shape=kernel_shape, iterations=iterations
        )

    def _structuring_element(self) -> np.ndarray:
        k = self._values["kernel_size"]
        return cv2.getStructuringElement(self._values["kernel_shape"], (k, k))


class ErosionTreatment(_MorphologyTreatment):
    """Erodes away the boundaries of foreground objects."""

    name = "Erosion"
    description = "Erodes boundaries of foreground objects"

    def process(self, image: np.ndarray) -> np.ndarray:
        return cv2.erode(
            image, self._structuring_element(), iterations=self._values["iterations"]
        )


class DilationTreatment(_MorphologyTreatment):
    """Grows the boundaries of foreground objects."""

    name = "Dilation"
    description = "Expands boundaries of foreground objects"

    def process(self, image: np.ndarray) -> np.ndarray:
        return cv2.dilate(
            image, self._structuring_element(), iterations=self._values["iterations"]
        )
