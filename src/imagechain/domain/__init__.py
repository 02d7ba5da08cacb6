"""Domain models for imagechain.

Value objects shared by the treatment, chain, capture and configuration
modules. All models use Pydantic v2 for validation.
"""

from imagechain.domain.models import (
    ParameterKind,
    ParameterSpec,
    StabilizationPolicy,
    TreatmentStep,
)

__all__ = [
    "ParameterKind",
    "ParameterSpec",
    "StabilizationPolicy",
    "TreatmentStep",
]
