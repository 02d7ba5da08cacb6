"""Image treatments for imagechain.

Every treatment implements the ``Treatment`` interface: a pure
image-to-image ``process()`` plus a self-describing parameter contract.
Concrete variants delegate the pixel work to OpenCV.

Public API:
    Treatment -- Abstract base class
    create_treatment / build_chain -- Build treatments from registry keys
    <Name>Treatment -- Concrete variants
"""

from imagechain.treatments.base import Treatment
from imagechain.treatments.blur import GaussianBlurTreatment, MedianBlurTreatment, SharpenTreatment
from imagechain.treatments.color import BrightnessTreatment, GrayscaleTreatment
from imagechain.treatments.edges import CannyEdgeTreatment, ThresholdTreatment
from imagechain.treatments.morphology import DilationTreatment, ErosionTreatment
from imagechain.treatments.mosaic import MosaicTreatment
from imagechain.treatments.registry import (
    TREATMENTS,
    TreatmentConfigError,
    available_treatments,
    build_chain,
    create_treatment,
)

__all__ = [
    "TREATMENTS",
    "BrightnessTreatment",
    "CannyEdgeTreatment",
    "DilationTreatment",
    "ErosionTreatment",
    "GaussianBlurTreatment",
    "GrayscaleTreatment",
    "MedianBlurTreatment",
    "MosaicTreatment",
    "SharpenTreatment",
    "ThresholdTreatment",
    "Treatment",
    "TreatmentConfigError",
    "available_treatments",
    "build_chain",
    "create_treatment",
]
