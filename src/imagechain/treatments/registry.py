"""Registry of concrete treatments.

Maps short, stable keys (used in configuration files and on the command
line) to treatment classes, and builds configured treatments and chains
from declarative ``TreatmentStep`` records through the generic
``set_parameter()`` contract.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from imagechain.chain import TreatmentChain
from imagechain.domain.models import TreatmentStep
from imagechain.treatments.base import Treatment
from imagechain.treatments.blur import GaussianBlurTreatment, MedianBlurTreatment, SharpenTreatment
from imagechain.treatments.color import BrightnessTreatment, GrayscaleTreatment
from imagechain.treatments.edges import CannyEdgeTreatment, ThresholdTreatment
from imagechain.treatments.morphology import DilationTreatment, ErosionTreatment
from imagechain.treatments.mosaic import MosaicTreatment

logger = logging.getLogger(__name__)

TREATMENTS: dict[str, type[Treatment]] = {
    "grayscale": GrayscaleTreatment,
    "gaussian_blur": GaussianBlurTreatment,
    "median_blur": MedianBlurTreatment,
    "canny": CannyEdgeTreatment,
    "threshold": ThresholdTreatment,
    "brightness": BrightnessTreatment,
    "sharpen": SharpenTreatment,
    "erosion": ErosionTreatment,
    "dilation": DilationTreatment,
    "mosaic": MosaicTreatment,
}


class TreatmentConfigError(ValueError):
    """Raised when a treatment cannot be built from a declarative step."""

    def __init__(self, message: str, treatment: str = "") -> None:
        super().__init__(message)
        self.treatment = treatment


def available_treatments() -> list[str]:
    """Registry keys in menu order."""
    return list(TREATMENTS)


def create_treatment(
    key: str,
    params: Mapping[str, object] | None = None,
) -> Treatment:
    """Instantiate a treatment by key and apply parameter overrides.

    Overrides go through ``set_parameter()``, so they are parsed and
    normalized exactly as a user-typed value would be.

    Raises:
        TreatmentConfigError: If the key is unknown or a parameter is
            rejected.
    """
    cls = TREATMENTS.get(key)
    if cls is None:
        raise TreatmentConfigError(
            f"Unknown treatment {key!r} (available: {', '.join(TREATMENTS)})",
            treatment=key,
        )
    treatment = cls()
    for name, value in (params or {}).items():
        if not treatment.set_parameter(name, value):
            info = treatment.get_parameter_info().get(name)
            hint = f" (expected {info})" if info else " (unknown parameter)"
            raise TreatmentConfigError(
                f"{cls.name}: cannot set {name}={value!r}{hint}",
                treatment=key,
            )
    return treatment


def build_chain(steps: Iterable[TreatmentStep]) -> TreatmentChain:
    """Build a chain from declarative steps, in order."""
    chain = TreatmentChain()
    for step in steps:
        chain.add(create_treatment(step.treatment, step.params))
    logger.debug("Built chain: %s", " -> ".join(chain.names()) or "(empty)")
    return chain
