"""Core domain models for the imagechain system.

These models describe the self-documenting parameter contract shared by
every treatment, the declarative form of a chain step (as read from
configuration or the command line), and the tuning knobs of the capture
stabilization protocol.
"""

from __future__ import annotations

import enum
import math
import numbers

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ParameterKind(str, enum.Enum):
    """Declared value type of a treatment parameter."""

    INT = "int"
    DOUBLE = "double"


# ---------------------------------------------------------------------------
# Treatment Parameter Models
# ---------------------------------------------------------------------------


class ParameterSpec(BaseModel):
    """Declares one named numeric parameter of a treatment.

    A declaration is static per treatment variant: it knows how to parse a raw
    value (usually a string typed by a user), which values are in range,
    and how accepted values are normalized before being stored.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Parameter name used by get/set calls")
    kind: ParameterKind = Field(description="Declared value type")
    default: int | float = Field(description="Value used when none is given")
    description: str = Field(default="", description="Human-readable meaning")
    minimum: float | None = Field(default=None, description="Inclusive lower bound")
    maximum: float | None = Field(default=None, description="Inclusive upper bound")
    choices: tuple[int, ...] | None = Field(
        default=None, description="Exhaustive set of accepted values"
    )
    odd: bool = Field(default=False, description="Even values are bumped to the next odd")

    def convert(self, raw: object) -> int | float:
        """Convert ``raw`` to the declared kind without range checks.

        Raises:
            TypeError: If ``raw`` is not a string or a number.
            ValueError: If ``raw`` cannot be read as the declared kind.
        """
        if isinstance(raw, bool):
            raise TypeError(f"Parameter {self.name!r} does not accept booleans")

        if self.kind is ParameterKind.INT:
            if isinstance(raw, str):
                return int(raw.strip())
            if isinstance(raw, numbers.Integral):
                return int(raw)
            if isinstance(raw, numbers.Real) and float(raw).is_integer():
                return int(raw)
            raise ValueError(f"Parameter {self.name!r} expects an integer, got {raw!r}")

        if isinstance(raw, str):
            value = float(raw.strip())
        elif isinstance(raw, numbers.Real):
            try:
                value = float(raw)
            except OverflowError:
                raise ValueError(f"Parameter {self.name!r} is out of range, got {raw!r}") from None
        else:
            raise TypeError(f"Parameter {self.name!r} expects a number, got {raw!r}")
        if not math.isfinite(value):
            raise ValueError(f"Parameter {self.name!r} must be finite, got {raw!r}")
        return value

    def accepts(self, value: int | float) -> bool:
        """Whether an already converted value lies in the valid range."""
        if self.choices is not None and value not in self.choices:
            return False
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True

    def normalize(self, value: int | float) -> int | float:
        if self.odd and value % 2 == 0:
            return value + 1
        return value

    def parse(self, raw: object) -> int | float | None:
        """Parse, range-check and normalize ``raw``.

        Returns:
            The value to store, or None if ``raw`` is unparsable or out
            of range.
        """
        try:
            value = self.convert(raw)
        except (TypeError, ValueError):
            return None
        if not self.accepts(value):
            return None
        return self.normalize(value)

    def coerce(self, raw: object) -> int | float:
        """Constructor-time rule: clamp instead of reject.

        Invalid choices fall back to the default, values below ``minimum``
        or above ``maximum`` are clamped, then the value is normalized.
        Type errors still propagate.
        """
        value = self.convert(raw)
        if self.choices is not None and value not in self.choices:
            value = self.convert(self.default)
        if self.minimum is not None and value < self.minimum:
            value = self.convert(self.minimum)
        if self.maximum is not None and value > self.maximum:
            value = self.convert(self.maximum)
        return self.normalize(value)

    def format(self, value: int | float) -> str:
        """Render a stored value the way get_parameters() reports it."""
        if self.kind is ParameterKind.INT:
            return str(int(value))
        return f"{float(value):.6f}"

    @property
    def info(self) -> str:
        """Static type/constraint description, e.g. ``int (odd, >= 1) - ...``."""
        constraints: list[str] = []
        if self.odd:
            constraints.append("odd")
        if self.choices is not None:
            constraints.append(", ".join(str(c) for c in self.choices))
        elif self.minimum is not None and self.maximum is not None:
            constraints.append(f"{self.minimum:g}-{self.maximum:g}")
        elif self.minimum is not None:
            constraints.append(f">= {self.minimum:g}")
        elif self.maximum is not None:
            constraints.append(f"<= {self.maximum:g}")

        head = self.kind.value
        if constraints:
            head += f" ({', '.join(constraints)})"
        return f"{head} - {self.description}" if self.description else head


class TreatmentStep(BaseModel):
    """Declarative description of one chain step.

    Used by configuration files and the CLI to build chains without
    importing treatment classes directly.
    """

    treatment: str = Field(description="Registry key, e.g. 'gaussian_blur'")
    params: dict[str, str | int | float] = Field(
        default_factory=dict,
        description="Parameter overrides applied through set_parameter()",
    )


# ---------------------------------------------------------------------------
# Capture Models
# ---------------------------------------------------------------------------


class StabilizationPolicy(BaseModel):
    """Tuning of the skip/retry/validate protocol for live devices.

    Timeouts are expressed as iteration counts, not wall-clock time.
    """

    model_config = ConfigDict(frozen=True)

    skip_frames: int = Field(default=5, ge=0, description="Warm-up reads discarded unconditionally")
    retries: int = Field(default=15, ge=0, description="Maximum validated read attempts")
    validate_non_black: bool = Field(default=True, description="Reject all-black frames")
    black_threshold: float = Field(
        default=5.0, ge=0, description="Max per-channel mean (0-255) at or below which a frame is black"
    )
    skip_delay: float = Field(default=0.03, ge=0, description="Seconds between warm-up reads")
    retry_delay: float = Field(default=0.05, ge=0, description="Seconds between failed attempts")
    strict: bool = Field(
        default=False,
        description="Raise DegenerateFrameError on exhaustion instead of returning the last frame",
    )

    @classmethod
    def stable(cls, **overrides: object) -> StabilizationPolicy:
        """Preset with a longer warm-up, for slow or virtual cameras."""
        values: dict[str, object] = {"skip_frames": 8, "retries": 20, "validate_non_black": True}
        values.update(overrides)
        return cls(**values)
