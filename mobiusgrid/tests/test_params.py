"""Tests for parameter snapshots, flat records and presets."""
import dataclasses
import json
import logging

import pytest

from mobiusgrid._params import (
    MobiusCoefficients,
    RotationModulation,
    RotationPattern,
    TransformParameters,
    load_parameters,
    preset,
    save_parameters,
)


class TestTransformParameters:
    def test_defaults(self):
        params = TransformParameters()
        assert params.a == (1.0, 0.0)
        assert params.b == (0.0, 0.0)
        assert params.c == (0.0, 0.0)
        assert params.d == (1.0, 0.0)
        assert params.use_classical_mobius
        assert params.rotation_modulation.pattern == "kaprekar"

    def test_frozen(self):
        params = TransformParameters()
        with pytest.raises(dataclasses.FrozenInstanceError):
            params.amplitude = 3.0

    def test_replace_returns_new_snapshot(self):
        params = TransformParameters()
        changed = params.replace(amplitude=2.0, c=(0.5, -0.5))
        assert params.amplitude == 1.0
        assert params.c == (0.0, 0.0)
        assert changed.amplitude == 2.0
        assert changed.c == (0.5, -0.5)
        assert changed.d == params.d

    def test_coefficients_are_coerced_to_float_pairs(self):
        coeffs = MobiusCoefficients(a=[1, 2])
        assert coeffs.a == (1.0, 2.0)

    @pytest.mark.parametrize("bad", [(1.0,), 3.0, (1.0, 2.0, 3.0)])
    def test_coefficient_must_be_pair(self, bad):
        with pytest.raises(ValueError):
            MobiusCoefficients(b=bad)

    def test_negative_amplitude_rejected(self):
        with pytest.raises(ValueError):
            TransformParameters(amplitude=-1.0)

    def test_negative_noise_scale_rejected(self):
        with pytest.raises(ValueError):
            TransformParameters(noise_scale=-0.1)

    def test_degenerate_denominator_is_accepted(self):
        params = TransformParameters().replace(c=(0.0, 0.0), d=(0.0, 0.0))
        assert params.coefficients.degenerate

    def test_with_factor_sign(self):
        params = TransformParameters(factor=0.3)
        assert params.with_factor_sign(-1).factor == -0.3
        assert params.with_factor_sign(-1).with_factor_sign(1).factor == 0.3


class TestRecords:
    def test_round_trip(self):
        params = TransformParameters(
            amplitude=0.7, frequency_x=1.5, frequency_y=0.25,
            use_classical_mobius=False, factor=-0.2, noise_scale=0.1,
            animation_speed=0.05,
            coefficients=MobiusCoefficients(a=(1.0, 0.5), c=(0.1, 0.0)),
            rotation_modulation=RotationModulation(
                enabled=False, interval=8.0, pattern="sine",
                pattern_threshold=2),
        )
        assert TransformParameters.from_record(params.to_record()) == params

    def test_record_field_names(self):
        record = TransformParameters().to_record()
        for name in ("chladniAmplitude", "chladniFrequencyX",
                     "chladniFrequencyY", "mobiusFactor",
                     "useClassicalMobius", "noiseScale",
                     "mobiusAnimationSpeed", "a_real", "d_imag"):
            assert name in record
        assert record["rotationModulation"] == {
            "enabled": True, "interval": 5.0, "pattern": "kaprekar",
            "patternThreshold": 3}

    def test_missing_fields_take_defaults(self):
        params = TransformParameters.from_record({"chladniAmplitude": 2.0})
        assert params.amplitude == 2.0
        assert params.factor == TransformParameters().factor
        assert params.rotation_modulation == RotationModulation()

    def test_unknown_fields_are_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            params = TransformParameters.from_record(
                {"noiseScale": 0.2, "timeScaleChladni": 1.0})
        assert params.noise_scale == 0.2
        assert "timeScaleChladni" in caplog.text

    def test_malformed_value(self):
        with pytest.raises(ValueError):
            TransformParameters.from_record({"chladniAmplitude": "loud"})

    @pytest.mark.parametrize("record", [
        {"useClassicalMobius": "false"},
        {"useClassicalMobius": 0},
        {"rotationModulation": {"enabled": "no"}},
    ])
    def test_flags_must_be_booleans(self, record):
        with pytest.raises(ValueError):
            TransformParameters.from_record(record)

    def test_pattern_must_be_string(self):
        with pytest.raises(ValueError):
            TransformParameters.from_record(
                {"rotationModulation": {"pattern": 3}})

    def test_null_rotation_modulation(self):
        params = TransformParameters.from_record({"rotationModulation": None})
        assert params.rotation_modulation == RotationModulation()

    def test_pattern_record_is_plain_string(self):
        record = RotationModulation(pattern=RotationPattern.RANDOM).to_record()
        assert type(record["pattern"]) is str
        assert record["pattern"] == "random"
        assert RotationModulation.from_record(record).pattern is \
            RotationPattern.RANDOM

    def test_json_file(self, tmp_path):
        fn = str(tmp_path / "params.json")
        params = preset("classic_mobius")
        save_parameters(params, fn)
        with open(fn) as f:
            assert json.load(f)["a_imag"] == 0.5
        assert load_parameters(fn) == params


class TestPresets:
    @pytest.mark.parametrize("name", ["default", "no_rotation",
                                      "strong_waves", "classic_mobius",
                                      "organic_motion"])
    def test_presets_load(self, name):
        assert isinstance(preset(name), TransformParameters)

    def test_organic_motion(self):
        params = preset("organic_motion")
        assert not params.use_classical_mobius
        assert params.rotation_modulation.pattern == "sine"
        assert params.rotation_modulation.interval == 8.0

    def test_no_rotation(self):
        params = preset("no_rotation")
        assert params.factor == 0.0
        assert not params.rotation_modulation.enabled
        assert params.animation_speed == 0.0

    def test_preset_on_base(self):
        base = TransformParameters(frequency_x=1.75)
        assert preset("classic_mobius", base=base).frequency_x == 1.75

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            preset("psychedelic")
