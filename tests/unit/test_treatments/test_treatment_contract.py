"""Contract tests shared by every registered treatment."""

from __future__ import annotations

import numpy as np
import pytest

from imagechain.domain.models import ParameterKind, ParameterSpec
from imagechain.treatments import TREATMENTS, Treatment

ALL_TREATMENTS = list(TREATMENTS.values())
KERNEL_TREATMENTS = [cls for cls in ALL_TREATMENTS if "kernel_size" in cls._specs()]


def _different_value(spec: ParameterSpec, current: int | float) -> str:
    """A valid value distinct from ``current``, as a string."""
    if spec.choices is not None:
        return str(next(c for c in spec.choices if c != current))
    if spec.kind is ParameterKind.INT:
        if spec.maximum is not None and current + 2 > spec.maximum:
            return str(int(current) - 2)
        return str(int(current) + 2)
    return str(current + 1.5)


class TestTreatmentInterface:
    def test_cannot_instantiate_abstract_class(self) -> None:
        with pytest.raises(TypeError):
            Treatment()  # type: ignore[abstract]

    def test_unknown_constructor_argument(self) -> None:
        from imagechain.treatments import MosaicTreatment

        with pytest.raises(TypeError):
            MosaicTreatment(block=4)  # type: ignore[call-arg]


@pytest.mark.parametrize("cls", ALL_TREATMENTS, ids=lambda c: c.__name__)
class TestEveryTreatment:
    def test_identity(self, cls: type[Treatment]) -> None:
        treatment = cls()
        assert treatment.name
        assert treatment.description

    def test_parameters_match_info(self, cls: type[Treatment]) -> None:
        treatment = cls()
        assert set(treatment.get_parameters()) == set(treatment.get_parameter_info())

    def test_clone_copies_parameters(self, cls: type[Treatment]) -> None:
        original = cls()
        for spec in cls.parameters:
            assert original.set_parameter(spec.name, _different_value(spec, original.get_parameter(spec.name)))
        copy = original.clone()
        assert copy is not original
        assert type(copy) is cls
        assert copy.get_parameters() == original.get_parameters()

    def test_clone_is_independent(self, cls: type[Treatment]) -> None:
        original = cls()
        copy = original.clone()
        before = original.get_parameters()
        for spec in cls.parameters:
            assert copy.set_parameter(spec.name, _different_value(spec, copy.get_parameter(spec.name)))
        assert original.get_parameters() == before
        if cls.parameters:
            assert copy.get_parameters() != before

    def test_unknown_parameter_is_rejected(self, cls: type[Treatment]) -> None:
        treatment = cls()
        before = treatment.get_parameters()
        assert treatment.set_parameter("no_such_parameter", "1") is False
        assert treatment.get_parameters() == before

    def test_unparsable_value_is_rejected(self, cls: type[Treatment]) -> None:
        treatment = cls()
        before = treatment.get_parameters()
        for spec in cls.parameters:
            assert treatment.set_parameter(spec.name, "not-a-number") is False
        assert treatment.get_parameters() == before

    def test_process_does_not_mutate_input(self, cls: type[Treatment], color_image: np.ndarray) -> None:
        treatment = cls()
        snapshot = color_image.copy()
        output = treatment.process(color_image)
        assert output is not color_image
        assert not np.shares_memory(output, color_image)
        np.testing.assert_array_equal(color_image, snapshot)

    def test_process_keeps_size(self, cls: type[Treatment], color_image: np.ndarray) -> None:
        output = cls().process(color_image)
        assert output.shape[:2] == color_image.shape[:2]

    def test_rejects_empty_input(self, cls: type[Treatment]) -> None:
        treatment = cls()
        assert treatment.validate_input(None) is False
        assert treatment.validate_input(np.empty((0, 0, 3), dtype=np.uint8)) is False

    def test_accepts_color_input(self, cls: type[Treatment], color_image: np.ndarray) -> None:
        assert cls().validate_input(color_image) is True


@pytest.mark.parametrize("cls", KERNEL_TREATMENTS, ids=lambda c: c.__name__)
class TestKernelSize:
    @pytest.mark.parametrize("even", [2, 4, 8, 10])
    def test_even_kernel_becomes_odd(self, cls: type[Treatment], even: int) -> None:
        treatment = cls()
        assert treatment.set_parameter("kernel_size", str(even)) is True
        assert treatment.get_parameters()["kernel_size"] == str(even + 1)

    @pytest.mark.parametrize("bad", ["0", "-1", "-4"])
    def test_non_positive_kernel_is_rejected(self, cls: type[Treatment], bad: str) -> None:
        treatment = cls()
        before = treatment.get_parameters()["kernel_size"]
        assert treatment.set_parameter("kernel_size", bad) is False
        assert treatment.get_parameters()["kernel_size"] == before

    def test_odd_kernel_is_kept(self, cls: type[Treatment]) -> None:
        treatment = cls()
        assert treatment.set_parameter("kernel_size", "7") is True
        assert treatment.get_parameter("kernel_size") == 7

    def test_constructor_normalizes_kernel(self, cls: type[Treatment]) -> None:
        assert cls(kernel_size=4).get_parameter("kernel_size") == 5
        assert cls(kernel_size=0).get_parameter("kernel_size") == 1
