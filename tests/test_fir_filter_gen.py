"""
Tests for the low-pass / high-pass designers, FilterSpec and the CLI.
"""

import logging

import numpy as np
import pytest

from firsynth.exceptions import InvalidSpecification
from firsynth.fir_filter_gen import (
    FilterSpec,
    design_filter,
    get_high_pass,
    get_high_pass_for_band,
    get_low_pass,
    get_low_pass_for_band,
    main,
)
from firsynth.transform import NumpyInverseTransform
from firsynth.verification import check_symmetry, verify_filter_response
from firsynth.window import WindowType, apply_window


class RecordingWindower:
    """Windower that remembers what it was asked to do."""

    def __init__(self):
        self.calls = []

    def apply(self, window_type, coefficients):
        self.calls.append((window_type, len(coefficients)))
        return apply_window(window_type, coefficients)


class TestLowPass:
    """Tests for fixed-length low-pass design."""

    @pytest.mark.parametrize("length", [1, 8, 32, 33, 65])
    def test_exact_length(self, length):
        assert len(get_low_pass(48000, 4000, length)) == length

    @pytest.mark.parametrize("length", [8, 32, 33, 65])
    def test_unity_gain(self, length):
        taps = get_low_pass(48000, 4000, length, WindowType.BLACKMAN)
        assert np.sum(np.abs(taps)) == pytest.approx(1.0, abs=1e-9)

    @pytest.mark.parametrize("window", list(WindowType))
    def test_odd_length_mirror_symmetric(self, window):
        taps = get_low_pass(48000, 4000, 33, window)
        np.testing.assert_array_equal(taps, taps[::-1])

    def test_even_length_symmetric_after_first_sample(self):
        # The 34-tap sinc loses its zero first sample and its last sample;
        # the remaining 32 taps mirror about index 16 once taps[0] is dropped.
        taps = get_low_pass(48000, 4000, 32)
        np.testing.assert_array_equal(taps[1:], taps[1:][::-1])

    def test_even_length_not_symmetric_after_trimming_both_ends(self):
        taps = get_low_pass(48000, 4000, 32)
        assert not np.array_equal(taps[1:-1], taps[1:-1][::-1])

    def test_attenuates_stopband(self):
        taps = get_low_pass(48000, 4000, 33, WindowType.HAMMING)
        results = verify_filter_response(taps, 48000, stop_frequency=12000)

        assert results['stopband_atten_db'] > 40
        assert results['symmetry_error'] == 0.0

    def test_alternate_transform_backend(self):
        default = get_low_pass(48000, 4000, 33)
        alternate = get_low_pass(48000, 4000, 33, transform=NumpyInverseTransform())
        np.testing.assert_allclose(default, alternate, atol=1e-12)

    def test_windower_is_injected(self):
        windower = RecordingWindower()
        get_low_pass(48000, 4000, 33, WindowType.HANNING, windower=windower)

        assert windower.calls == [(WindowType.HANNING, 33)]

    def test_trace_logger(self, caplog):
        caplog.set_level(logging.INFO)
        get_low_pass(48000, 4000, 33, log=logging.getLogger("trace"))

        assert any(r.name == "trace" and "Low-pass" in r.getMessage() for r in caplog.records)

    @pytest.mark.parametrize("cutoff", [-1, 24001])
    def test_cutoff_out_of_range(self, cutoff):
        with pytest.raises(InvalidSpecification):
            get_low_pass(48000, cutoff, 33)

    def test_non_positive_length(self):
        with pytest.raises(InvalidSpecification):
            get_low_pass(48000, 4000, 0)


class TestLowPassForBand:
    """Tests for bandwidth-driven low-pass design."""

    def test_uses_estimated_tap_count(self):
        assert len(get_low_pass_for_band(48000, 4000, 8000, 60)) == 33

    def test_force_odd(self):
        # 66 dB estimates 36 taps
        assert len(get_low_pass_for_band(48000, 4000, 8000, 66)) == 36
        assert len(get_low_pass_for_band(48000, 4000, 8000, 66, force_odd=True)) == 35

    def test_unity_gain_and_symmetry(self):
        taps = get_low_pass_for_band(48000, 4000, 8000, 60, "blackman", force_odd=True)

        assert np.sum(np.abs(taps)) == pytest.approx(1.0, abs=1e-9)
        assert check_symmetry(taps) == 0.0

    def test_stop_above_nyquist(self):
        with pytest.raises(InvalidSpecification):
            get_low_pass_for_band(48000, 20000, 25000, 60)

    def test_pass_above_stop(self):
        with pytest.raises(InvalidSpecification):
            get_low_pass_for_band(48000, 8000, 4000, 60)

    def test_non_positive_attenuation(self):
        with pytest.raises(InvalidSpecification):
            get_low_pass_for_band(48000, 4000, 8000, 0)


class TestHighPass:
    """Tests for high-pass design by spectral inversion."""

    def test_fixed_length(self):
        taps = get_high_pass(48000, 12000, 33)

        assert len(taps) == 33
        assert np.sum(np.abs(taps)) == pytest.approx(1.0, abs=1e-9)
        np.testing.assert_array_equal(taps, taps[::-1])

    def test_passes_high_frequencies(self):
        taps = get_high_pass(48000, 12000, 33)
        results = verify_filter_response(taps, 48000)

        assert results['nyquist_gain_db'] - results['dc_gain_db'] > 40

    def test_is_inverted_low_pass(self):
        low = get_low_pass(48000, 12000, 33)
        high = get_high_pass(48000, 12000, 33)

        np.testing.assert_array_equal(high[0::2], low[0::2])
        np.testing.assert_array_equal(high[1::2], -low[1::2])

    def test_for_band(self):
        taps = get_high_pass_for_band(48000, 8000, 12000, 60)
        results = verify_filter_response(taps, 48000)

        assert len(taps) == 33
        assert results['nyquist_gain_db'] > results['dc_gain_db']

    def test_for_band_rejects_inverted_band(self):
        with pytest.raises(InvalidSpecification):
            get_high_pass_for_band(48000, 12000, 8000, 60)

    def test_for_band_rejects_pass_above_nyquist(self):
        with pytest.raises(InvalidSpecification):
            get_high_pass_for_band(48000, 8000, 25000, 60)


class TestFilterSpec:
    """Tests for spec-driven design."""

    def test_dict_round_trip(self):
        spec = FilterSpec(kind='lowpass', sample_rate=48000, cutoff=4000, length=33)
        assert FilterSpec.from_dict(spec.to_dict()) == spec

    def test_fixed_length_low_pass(self):
        spec = FilterSpec(kind='lowpass', sample_rate=48000, cutoff=4000, length=33)
        np.testing.assert_array_equal(design_filter(spec), get_low_pass(48000, 4000, 33))

    def test_band_high_pass(self):
        spec = FilterSpec(kind='highpass', sample_rate=48000, stop_frequency=8000,
                          pass_frequency=12000, attenuation_db=60, window='blackman')
        np.testing.assert_array_equal(
            design_filter(spec),
            get_high_pass_for_band(48000, 8000, 12000, 60, WindowType.BLACKMAN))

    def test_rrc(self):
        spec = FilterSpec(kind='rrc', samples_per_symbol=4, symbols=8, alpha=0.35)
        assert len(design_filter(spec)) == 33

    def test_cic(self):
        spec = FilterSpec(kind='cic', sample_rate=48000, pass_frequency=5000, attenuation_db=40)
        assert len(design_filter(spec)) == 59

    def test_unknown_kind(self):
        with pytest.raises(InvalidSpecification):
            design_filter(FilterSpec(kind='bandpass', sample_rate=48000))

    def test_incomplete_rrc(self):
        with pytest.raises(InvalidSpecification):
            design_filter(FilterSpec(kind='rrc', samples_per_symbol=4))


class TestCommandLine:
    """Tests for the firsynth command."""

    def test_low_pass(self, capsys):
        assert main(["--kind", "lowpass", "--rate", "48000", "--cutoff", "4000",
                     "--length", "9", "--breaks"]) == 0

        lines = capsys.readouterr().out.strip().split("\n")
        assert len(lines) == 9
        assert lines[0].startswith("0: ")

    def test_plan(self, capsys):
        assert main(["--kind", "plan", "--rate", "2400000", "--decimated-rate", "48000",
                     "--pass", "20000", "--stop", "24000"]) == 0

        assert capsys.readouterr().out.strip() == "10 x 5"

    def test_invalid_design_returns_error(self):
        assert main(["--kind", "lowpass", "--rate", "48000", "--pass", "20000",
                     "--stop", "25000"]) == 1
