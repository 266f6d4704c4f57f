"""
Tests for tap-count estimation, normalization, inversion and sinc synthesis.
"""

import logging

import numpy as np
import pytest

from firsynth.exceptions import InvalidSpecification
from firsynth.sinc_gen import (
    format_taps,
    get_sinc,
    get_sine,
    get_tap_count,
    get_unity_response_array,
    invert,
    normalize,
    round_half_up,
    synthesize_taps,
)
from firsynth.transform import NumpyInverseTransform, ScipyInverseTransform
from firsynth.window import WindowType


class TestTapCount:
    """Tests for Lyons' tap-count estimate."""

    def test_reference_value(self):
        """60 dB over 4-8 kHz at 48 kHz needs 33 taps."""
        assert get_tap_count(48000, 4000, 8000, 60) == 33

    def test_narrower_transition_needs_more_taps(self):
        assert get_tap_count(48000, 4000, 5000, 60) > get_tap_count(48000, 4000, 8000, 60)

    def test_rounds_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2

    @pytest.mark.parametrize("pass_frequency, stop_frequency", [(8000, 4000), (4000, 4000)])
    def test_rejects_inverted_band(self, pass_frequency, stop_frequency):
        with pytest.raises(InvalidSpecification):
            get_tap_count(48000, pass_frequency, stop_frequency, 60)


class TestNormalize:
    """Tests for unity-gain normalization."""

    def test_sum_of_magnitudes_is_one(self):
        result = normalize(np.array([1.0, -1.0, 2.0]))
        np.testing.assert_allclose(result, [0.25, -0.25, 0.5])

    def test_input_not_modified(self):
        taps = np.array([1.0, 3.0])
        normalize(taps)
        np.testing.assert_array_equal(taps, [1.0, 3.0])

    def test_all_zero_taps_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = normalize(np.zeros(4))
        np.testing.assert_array_equal(result, np.zeros(4))
        assert "zero" in caplog.text


class TestInvert:
    """Tests for spectral inversion."""

    def test_only_odd_indices_change_sign(self):
        taps = np.array([0.1, 0.2, 0.3, 0.4, 0.5])
        result = invert(taps)

        np.testing.assert_array_equal(result[0::2], taps[0::2])
        np.testing.assert_array_equal(result[1::2], -taps[1::2])

    def test_input_not_modified(self):
        taps = np.array([1.0, 2.0])
        invert(taps)
        np.testing.assert_array_equal(taps, [1.0, 2.0])


class TestUnityResponse:
    """Tests for the brick-wall response layout."""

    def test_odd_length_layout(self):
        response = get_unity_response_array(48000, 4000, 35)

        assert len(response) == 70
        expected = np.zeros(70)
        expected[0:4] = 1.0
        expected[32:35] = 1.0
        np.testing.assert_array_equal(response, expected)

    def test_even_length_layout(self):
        response = get_unity_response_array(48000, 4000, 34)

        expected = np.zeros(68)
        expected[0:3] = 1.0
        expected[31:34] = 1.0
        np.testing.assert_array_equal(response, expected)

    def test_odd_length_always_has_dc(self):
        response = get_unity_response_array(48000, 0, 35)
        assert response[0] == 1.0
        assert np.sum(response) == 1.0


class TestSynthesize:
    """Tests for the inverse-DFT fold."""

    def test_dc_only_spectrum_gives_flat_taps(self):
        response = np.zeros(10)
        response[0] = 1.0

        taps = synthesize_taps(response, 5, 5, 2)

        np.testing.assert_allclose(taps, np.ones(5))

    def test_unreached_positions_stay_zero(self):
        response = np.zeros(10)
        response[0] = 1.0

        taps = synthesize_taps(response, 5, 4, 1)

        np.testing.assert_allclose(taps, [0.0, 1.0, 1.0, 1.0])

    def test_backends_agree(self):
        scipy_taps = get_sinc(48000, 6000, 32, WindowType.HAMMING,
                              transform=ScipyInverseTransform())
        numpy_taps = get_sinc(48000, 6000, 32, WindowType.HAMMING,
                              transform=NumpyInverseTransform())
        np.testing.assert_allclose(scipy_taps, numpy_taps, atol=1e-12)


class TestSinc:
    """Tests for the windowed sinc prototype."""

    def test_first_sample_is_zero(self):
        taps = get_sinc(48000, 6000, 32)
        assert len(taps) == 32
        assert taps[0] == 0.0

    def test_populated_span_is_symmetric(self):
        taps = get_sinc(48000, 6000, 32, WindowType.BLACKMAN)
        np.testing.assert_array_equal(taps[1:], taps[1:][::-1])

    def test_unity_gain(self):
        taps = get_sinc(48000, 6000, 32)
        assert np.sum(np.abs(taps)) == pytest.approx(1.0, abs=1e-9)

    def test_odd_length_rejected(self):
        with pytest.raises(InvalidSpecification):
            get_sinc(48000, 6000, 33)


class TestSineAndFormatting:
    """Tests for the sine helper and tap formatting."""

    def test_sine_is_odd_symmetric(self):
        values = get_sine(48000, 1000, 16)
        middle = 8

        assert values[middle] == 0.0
        for x in range(1, middle):
            assert values[middle + x] == -values[middle - x]
        assert values[middle + 1] == pytest.approx(np.sin(2 * np.pi * 1000 / 48000))

    def test_format_with_breaks(self):
        assert format_taps([0.5, 0.25], breaks=True) == "0: 0.5\n1: 0.25\n"

    def test_format_eight_per_line(self):
        text = format_taps(np.arange(10, dtype=float))
        lines = text.split("\n")

        assert lines[0].count("\t") == 7
        assert lines[1].startswith("8: 8.0")
