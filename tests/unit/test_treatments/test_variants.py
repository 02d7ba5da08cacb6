"""Behavior of the individual treatment variants."""

from __future__ import annotations

import cv2
import numpy as np
import pytest

from imagechain.treatments import (
    BrightnessTreatment,
    CannyEdgeTreatment,
    DilationTreatment,
    ErosionTreatment,
    GaussianBlurTreatment,
    GrayscaleTreatment,
    MedianBlurTreatment,
    MosaicTreatment,
    SharpenTreatment,
    ThresholdTreatment,
)


class TestBrightness:
    def test_defaults(self) -> None:
        assert BrightnessTreatment().get_parameters() == {"alpha": "1.000000", "beta": "0.000000"}

    def test_offset_saturates(self) -> None:
        image = np.array([[100, 250]], dtype=np.uint8)
        output = BrightnessTreatment(alpha=1.0, beta=10.0).process(image)
        np.testing.assert_array_equal(output, [[110, 255]])
        assert output.dtype == np.uint8

    def test_contrast(self) -> None:
        image = np.array([[50, 100]], dtype=np.uint8)
        np.testing.assert_array_equal(BrightnessTreatment(alpha=2.0).process(image), [[100, 200]])

    def test_accepts_any_real(self) -> None:
        treatment = BrightnessTreatment()
        assert treatment.set_parameter("alpha", "-3.5") is True
        assert treatment.set_parameter("beta", "1000") is True
        assert treatment.get_parameters() == {"alpha": "-3.500000", "beta": "1000.000000"}

    def test_huge_integer_is_rejected_not_raised(self) -> None:
        treatment = BrightnessTreatment()
        assert treatment.set_parameter("alpha", 10**400) is False
        assert treatment.get_parameter("alpha") == 1.0


class TestGaussianBlur:
    def test_defaults(self) -> None:
        assert GaussianBlurTreatment().get_parameters() == {
            "kernel_size": "5",
            "sigma_x": "0.000000",
            "sigma_y": "0.000000",
        }

    def test_matches_opencv(self, color_image: np.ndarray) -> None:
        output = GaussianBlurTreatment(kernel_size=7, sigma_x=1.5, sigma_y=2.0).process(color_image)
        np.testing.assert_array_equal(output, cv2.GaussianBlur(color_image, (7, 7), 1.5, sigmaY=2.0))

    def test_kernel_one_is_identity(self, color_image: np.ndarray) -> None:
        output = GaussianBlurTreatment(kernel_size=1).process(color_image)
        np.testing.assert_array_equal(output, color_image)


class TestMedianBlur:
    def test_removes_isolated_pixel(self) -> None:
        image = np.zeros((9, 9), dtype=np.uint8)
        image[4, 4] = 255
        output = MedianBlurTreatment(kernel_size=3).process(image)
        assert output.max() == 0


class TestGrayscale:
    def test_color_to_single_channel(self, color_image: np.ndarray) -> None:
        output = GrayscaleTreatment().process(color_image)
        assert output.shape == (100, 100)

    def test_bgra_to_single_channel(self, bgra_image: np.ndarray) -> None:
        assert GrayscaleTreatment().process(bgra_image).shape == (100, 100)

    def test_gray_input_is_copied(self, gray_image: np.ndarray) -> None:
        output = GrayscaleTreatment().process(gray_image)
        assert output is not gray_image
        np.testing.assert_array_equal(output, gray_image)

    def test_has_no_parameters(self) -> None:
        treatment = GrayscaleTreatment()
        assert treatment.get_parameters() == {}
        assert treatment.get_parameter_info() == {}
        assert treatment.set_parameter("anything", "1") is False


class TestCannyEdge:
    def test_aperture_restricted(self) -> None:
        treatment = CannyEdgeTreatment()
        assert treatment.set_parameter("aperture_size", "4") is False
        assert treatment.set_parameter("aperture_size", "9") is False
        assert treatment.set_parameter("aperture_size", "5") is True
        assert treatment.get_parameters()["aperture_size"] == "5"

    def test_invalid_constructor_aperture_falls_back(self) -> None:
        assert CannyEdgeTreatment(aperture_size=4).get_parameter("aperture_size") == 3

    def test_channel_validation(
        self, color_image: np.ndarray, gray_image: np.ndarray, bgra_image: np.ndarray
    ) -> None:
        treatment = CannyEdgeTreatment()
        assert treatment.validate_input(color_image) is True
        assert treatment.validate_input(gray_image) is True
        assert treatment.validate_input(bgra_image) is False

    def test_produces_binary_edge_map(self, color_image: np.ndarray) -> None:
        output = CannyEdgeTreatment().process(color_image)
        assert output.shape == (100, 100)
        assert set(np.unique(output)) <= {0, 255}
        assert output.max() == 255


class TestThreshold:
    def test_type_range(self) -> None:
        treatment = ThresholdTreatment()
        assert treatment.set_parameter("threshold_type", "5") is False
        assert treatment.set_parameter("threshold_type", "-1") is False
        assert treatment.set_parameter("threshold_type", "4") is True
        assert treatment.get_parameter("threshold_type") == ThresholdTreatment.TOZERO_INV

    def test_binary(self) -> None:
        image = np.array([[10, 127, 128, 250]], dtype=np.uint8)
        output = ThresholdTreatment(127, 255, ThresholdTreatment.BINARY).process(image)
        np.testing.assert_array_equal(output, [[0, 0, 255, 255]])

    def test_color_input_is_converted(self, color_image: np.ndarray) -> None:
        assert ThresholdTreatment().process(color_image).ndim == 2

    def test_rejects_four_channels(self, bgra_image: np.ndarray) -> None:
        assert ThresholdTreatment().validate_input(bgra_image) is False


class TestSharpen:
    def test_negative_strength_rejected(self) -> None:
        treatment = SharpenTreatment()
        assert treatment.set_parameter("strength", "-0.1") is False
        assert treatment.set_parameter("strength", "0") is True

    def test_zero_strength_is_identity(self, color_image: np.ndarray) -> None:
        output = SharpenTreatment(strength=0.0).process(color_image)
        np.testing.assert_array_equal(output, color_image)

    def test_increases_local_contrast(self) -> None:
        image = np.full((9, 9), 100, dtype=np.uint8)
        image[4, 4] = 150
        output = SharpenTreatment(strength=1.0).process(image)
        assert output[4, 4] > 150
        assert output[4, 3] < 100


class TestMorphology:
    def test_dilation_grows_single_pixel(self) -> None:
        image = np.zeros((11, 11), dtype=np.uint8)
        image[5, 5] = 255
        output = DilationTreatment(kernel_size=3).process(image)
        assert np.count_nonzero(output) == 9

    def test_erosion_grows_hole(self) -> None:
        image = np.full((11, 11), 255, dtype=np.uint8)
        image[5, 5] = 0
        output = ErosionTreatment(kernel_size=3).process(image)
        assert np.count_nonzero(output == 0) == 9

    def test_iterations(self) -> None:
        image = np.zeros((11, 11), dtype=np.uint8)
        image[5, 5] = 255
        output = DilationTreatment(kernel_size=3, iterations=2).process(image)
        assert np.count_nonzero(output) == 25

    @pytest.mark.parametrize("cls", [ErosionTreatment, DilationTreatment])
    def test_parameter_constraints(self, cls: type) -> None:
        treatment = cls()
        assert treatment.set_parameter("kernel_shape", "3") is False
        assert treatment.set_parameter("kernel_shape", "2") is True
        assert treatment.set_parameter("iterations", "0") is False
        assert treatment.set_parameter("iterations", "4") is True
        assert treatment.get_parameters() == {
            "kernel_size": "3",
            "kernel_shape": "2",
            "iterations": "4",
        }

    def test_constructor_clamps(self) -> None:
        treatment = ErosionTreatment(kernel_size=0, iterations=0)
        assert treatment.get_parameter("kernel_size") == 1
        assert treatment.get_parameter("iterations") == 1


class TestMosaic:
    def test_block_size_must_be_positive(self) -> None:
        treatment = MosaicTreatment()
        assert treatment.set_parameter("block_size", "0") is False
        assert treatment.set_parameter("block_size", "1") is True
        assert MosaicTreatment(block_size=-5).get_parameter("block_size") == 1

    def test_blocks_are_uniform(self, color_image: np.ndarray) -> None:
        output = MosaicTreatment(block_size=10).process(color_image)
        assert output.shape == color_image.shape
        block = output[10:20, 30:40]
        assert np.all(block == block[0, 0])

    def test_block_larger_than_image(self) -> None:
        image = np.arange(16, dtype=np.uint8).reshape(4, 4)
        output = MosaicTreatment(block_size=50).process(image)
        assert output.shape == (4, 4)
        assert np.all(output == output[0, 0])
