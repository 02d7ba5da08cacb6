"""Abstract base class for image treatments.

A treatment is one named, parameterized, pure image-to-image transform.
Besides ``process()``, every treatment exposes a self-describing
parameter contract (get/set by name, static type info) so a generic
caller such as a CLI or UI can configure any variant without knowing
its class.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

import numpy as np

from imagechain.domain.models import ParameterSpec
from imagechain.utils.imaging import channel_count, is_empty

if TYPE_CHECKING:
    from imagechain.chain import TreatmentChain

logger = logging.getLogger(__name__)


class Treatment(ABC):
    """Abstract interface for a single image transform.

    Subclasses declare their identity and parameters as class attributes
    and implement ``process()``. Parameter state lives in a name -> value
    mapping seeded from the constructor keyword arguments, so ``clone()``
    can rebuild an identical, independent instance.

    Example usage::

        blur = GaussianBlurTreatment(kernel_size=5)
        blur.set_parameter("kernel_size", "8")   # stored as 9
        blur.get_parameters()["kernel_size"]      # '9'
        output = blur.process(image)
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    parameters: ClassVar[tuple[ParameterSpec, ...]] = ()
    accepted_channels: ClassVar[tuple[int, ...] | None] = None

    def __init__(self, **values: int | float) -> None:
        """Initialize parameter state.

        Args:
            **values: Initial parameter values by name. Missing names use
                      the declared default; out-of-range values are clamped
                      rather than rejected.

        Raises:
            TypeError: If an unknown parameter name is given.
        """
        specs = self._specs()
        unknown = set(values) - set(specs)
        if unknown:
            raise TypeError(
                f"{type(self).__name__} got unknown parameters: {', '.join(sorted(unknown))}"
            )
        self._values: dict[str, int | float] = {
            name: spec.coerce(values.get(name, spec.default))
            for name, spec in specs.items()
        }
        self._owner: TreatmentChain | None = None

    @classmethod
    def _specs(cls) -> dict[str, ParameterSpec]:
        return {spec.name: spec for spec in cls.parameters}

    @abstractmethod
    def process(self, image: np.ndarray) -> np.ndarray:
        """Transform ``image`` into a newly allocated output buffer.

        Implementations must not modify ``image`` in place and must not
        keep a reference to it after returning.
        """
        ...

    def validate_input(self, image: np.ndarray | None) -> bool:
        """Check whether this treatment can process ``image``.

        The default rule is "non-empty buffer". Variants that declare
        ``accepted_channels`` additionally require one of those channel
        counts. Never raises; the chain treats False as a hard stop.
        """
        if is_empty(image):
            return False
        if self.accepted_channels is not None:
            return channel_count(image) in self.accepted_channels
        return True

    def get_parameters(self) -> dict[str, str]:
        """Current value of every parameter, formatted as a string."""
        specs = self._specs()
        return {name: specs[name].format(value) for name, value in self._values.items()}

    def get_parameter(self, name: str) -> int | float:
        """Current typed value of a single parameter.

        Raises:
            KeyError: If the treatment has no such parameter.
        """
        return self._values[name]

    def set_parameter(self, name: str, value: object) -> bool:
        """Set a parameter from a string (or numeric) value.

        Returns:
            True if the value was parsed, in range and stored (after
            normalization). False for unknown names, unparsable or
            out-of-range values; state is left unchanged in that case.
        """
        spec = self._specs().get(name)
        if spec is None:
            logger.debug("%s has no parameter %r", self.name, name)
            return False
        parsed = spec.parse(value)
        if parsed is None:
            logger.debug("%s rejected %s=%r", self.name, name, value)
            return False
        self._values[name] = parsed
        return True

    def get_parameter_info(self) -> dict[str, str]:
        """Static type/constraint description of every parameter."""
        return {spec.name: spec.info for spec in self.parameters}

    def clone(self) -> Treatment:
        """Independent copy with identical parameter values.

        The copy belongs to no chain.
        """
        return type(self)(**self._values)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{type(self).__name__}({params})"
