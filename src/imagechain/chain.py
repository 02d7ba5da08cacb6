"""Sequential treatment chain engine.

A ``TreatmentChain`` owns an ordered list of treatments and pushes one
image through all of them, front to back, keeping every intermediate
buffer so a caller can inspect or display each stage without re-running
prefixes of the chain.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

import numpy as np

from imagechain.utils.imaging import channel_count, is_empty

if TYPE_CHECKING:
    from imagechain.treatments.base import Treatment

logger = logging.getLogger(__name__)

ORIGINAL_LABEL = "Original"


class ChainError(Exception):
    """Base class for treatment chain failures."""


class EmptyInputError(ChainError):
    """Raised when a chain is run on an empty or missing image."""


class TreatmentRejectedInputError(ChainError):
    """Raised when a stage's ``validate_input()`` refuses its input.

    Results of the stages before ``index`` stay available on the chain.
    """

    def __init__(self, index: int, treatment_name: str = "") -> None:
        super().__init__(
            f"Treatment {index} ({treatment_name}) cannot process the current image"
        )
        self.index = index
        self.treatment_name = treatment_name


class TreatmentFailedError(ChainError):
    """Raised when a stage's ``process()`` itself fails.

    The original exception is chained as ``__cause__``. Results of the
    stages before ``index`` stay available on the chain.
    """

    def __init__(self, index: int, treatment_name: str, error: Exception) -> None:
        super().__init__(f"Treatment {index} ({treatment_name}) failed: {error}")
        self.index = index
        self.treatment_name = treatment_name


class ChainIndexError(ChainError, IndexError):
    """Raised when a chain position or intermediate index is out of range."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Index {index} out of range (size {size})")
        self.index = index
        self.size = size


class TreatmentChain:
    """Ordered, exclusively owned sequence of treatments.

    Insertion order is execution order. A treatment belongs to at most
    one chain at a time; use ``Treatment.clone()`` to put the same
    configuration in several chains.

    After a successful ``run()`` the intermediate list holds
    ``len(chain) + 1`` entries: index 0 is a copy of the input and
    index i is the output of treatment i-1. Structural edits never touch
    retained results; only the next ``run()`` replaces them.

    Example usage::

        chain = TreatmentChain([GrayscaleTreatment(), GaussianBlurTreatment(5)])
        result = chain.run(image)
        for label, stage in chain.stages():
            show(label, stage)
    """

    def __init__(self, treatments: Iterable[Treatment] = ()) -> None:
        self._treatments: list[Treatment] = []
        self._original: np.ndarray | None = None
        self._intermediates: list[np.ndarray] = []

        pending = list(treatments)
        seen: set[int] = set()
        for treatment in pending:
            self._check_claimable(treatment)
            if id(treatment) in seen:
                raise ValueError(f"{treatment.name} appears more than once in the chain")
            seen.add(id(treatment))
        for treatment in pending:
            self.add(treatment)

    # -- structure ---------------------------------------------------------

    def add(self, treatment: Treatment) -> None:
        """Append a treatment to the end of the chain."""
        self._claim(treatment)
        self._treatments.append(treatment)

    def insert(self, index: int, treatment: Treatment) -> None:
        """Insert a treatment before ``index``; ``index == len(self)`` appends.

        Raises:
            ChainIndexError: If ``index`` is negative or greater than the
                current length.
        """
        if not 0 <= index <= len(self._treatments):
            raise ChainIndexError(index, len(self._treatments))
        self._claim(treatment)
        self._treatments.insert(index, treatment)

    def remove(self, index: int) -> Treatment:
        """Remove and return the treatment at ``index``.

        Raises:
            ChainIndexError: If ``index`` does not name an existing position.
        """
        self._check_index(index)
        treatment = self._treatments.pop(index)
        treatment._owner = None
        return treatment

    def get(self, index: int) -> Treatment:
        """Treatment at ``index``, still owned by the chain."""
        self._check_index(index)
        return self._treatments[index]

    def clear(self) -> None:
        """Discard every treatment and any retained results."""
        for treatment in self._treatments:
            treatment._owner = None
        self._treatments.clear()
        self.reset_results()

    def names(self) -> list[str]:
        """Treatment names in execution order."""
        return [treatment.name for treatment in self._treatments]

    def __len__(self) -> int:
        return len(self._treatments)

    def __iter__(self) -> Iterator[Treatment]:
        return iter(self._treatments)

    def __repr__(self) -> str:
        return f"TreatmentChain({self.names()!r})"

    def _check_claimable(self, treatment: Treatment) -> None:
        if treatment._owner is not None:
            raise ValueError(
                f"{treatment.name} already belongs to a chain; add a clone() instead"
            )

    def _claim(self, treatment: Treatment) -> None:
        self._check_claimable(treatment)
        treatment._owner = self

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._treatments):
            raise ChainIndexError(index, len(self._treatments))

    # -- execution ---------------------------------------------------------

    def run(self, image: np.ndarray | None) -> np.ndarray:
        """Process ``image`` through every treatment in order.

        Returns:
            The output of the last treatment (a copy of the input for an
            empty chain). It equals the last intermediate entry.

        Raises:
            EmptyInputError: If ``image`` is None or has no pixels; nothing
                is recorded.
            TreatmentRejectedInputError: If a stage refuses its input; the
                intermediates of the stages before it remain inspectable.
            TreatmentFailedError: If a stage raises while processing; earlier
                intermediates remain inspectable as well.
        """
        if is_empty(image):
            raise EmptyInputError("Input image is empty")

        started = time.perf_counter()
        self._original = image.copy()
        self._intermediates = [self._original]

        current = self._original
        for index, treatment in enumerate(self._treatments):
            if not treatment.validate_input(current):
                logger.warning(
                    "Stage %d (%s) rejected a %d-channel %s input",
                    index, treatment.name, channel_count(current), current.shape[:2],
                )
                raise TreatmentRejectedInputError(index, treatment.name)
            try:
                current = treatment.process(current)
            except Exception as e:
                logger.error("Stage %d (%s) failed: %s", index, treatment.name, e)
                raise TreatmentFailedError(index, treatment.name, e) from e
            self._intermediates.append(current.copy())
            logger.debug(
                "Stage %d (%s) -> %s, %d channel(s)",
                index, treatment.name, current.shape[:2], channel_count(current),
            )

        logger.info(
            "Ran %d treatment(s) in %.1f ms",
            len(self._treatments), (time.perf_counter() - started) * 1000,
        )
        return current

    # -- results -----------------------------------------------------------

    @property
    def original(self) -> np.ndarray | None:
        """Copy of the input of the most recent run, if any."""
        return self._original

    @property
    def intermediates(self) -> tuple[np.ndarray, ...]:
        return tuple(self._intermediates)

    def intermediate(self, index: int) -> np.ndarray:
        """Buffer after stage ``index`` (0 = original input).

        Raises:
            ChainIndexError: If no such result is retained.
        """
        if not 0 <= index < len(self._intermediates):
            raise ChainIndexError(index, len(self._intermediates))
        return self._intermediates[index]

    def reset_results(self) -> None:
        """Forget the retained input and intermediate buffers."""
        self._original = None
        self._intermediates = []

    def stages(self) -> Iterator[tuple[str, np.ndarray]]:
        """Retained results labelled ``"Original"`` or by treatment name.

        Labels come from the current treatment list, so they are only
        meaningful until the chain is edited.
        """
        for index, image in enumerate(self._intermediates):
            if index == 0:
                label = ORIGINAL_LABEL
            elif index - 1 < len(self._treatments):
                label = self._treatments[index - 1].name
            else:
                label = f"Stage {index}"
            yield label, image
