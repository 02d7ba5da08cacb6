"""Pixelation treatment."""

from __future__ import annotations

import cv2
import numpy as np

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments.base import Treatment


class MosaicTreatment(Treatment):
    """Pixelates by downsampling into blocks and upsampling back.

    Output always has the input's size; larger ``block_size`` means
    coarser blocks.
    """

    name = "Mosaic Effect"
    description = "Applies pixelation/mosaic effect to images"
    parameters = (
        ParameterSpec(
            name="block_size", kind=ParameterKind.INT, default=10, minimum=1,
            description="Size of mosaic blocks (larger = more pixelated)",
        ),
    )

    def __init__(self, block_size: int = 10) -> None:
        super().__init__(block_size=block_size)

    def process(self, image: np.ndarray) -> np.ndarray:
        h, w = image.shape[:2]
        block = self._values["block_size"]
        small = cv2.resize(
            image,
            (max(1, w // block), max(1, h // block)),
            interpolation=cv2.INTER_LINEAR,
        )
        return cv2.resize(small, (w, h), interpolation=cv2.INTER_NEAREST)
