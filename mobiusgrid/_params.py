"""
Transform parameter snapshots.

A TransformParameters instance is an immutable snapshot of every coefficient
the deformation pipeline reads in one frame. Settings panels or scripts keep
their own store and hand the pipeline a fresh snapshot with ``replace``.

Snapshots convert to and from a flat record whose field names follow the
settings store of the interactive viewer::

    {"chladniAmplitude": 1.0, "chladniFrequencyX": 0.5, ...,
     "a_real": 1.0, "a_imag": 0.0, ...,
     "rotationModulation": {"enabled": true, "interval": 5.0,
                            "pattern": "kaprekar", "patternThreshold": 3}}
"""
from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Tuple, Union

Complex2 = Tuple[float, float]


class RotationPattern(str, Enum):
    """Rules deciding the next rotation direction when the interval elapses."""

    KAPREKAR = "kaprekar"
    HEAVISIDE = "heaviside"
    SINE = "sine"
    RANDOM = "random"


def _as_pair(value: Any, name: str) -> Complex2:
    try:
        re, im = value
    except (TypeError, ValueError):
        raise ValueError(f"Coefficient {name!r} must be a (real, imag) pair, "
                         f"got {value!r}")
    return (float(re), float(im))


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"Field {name!r} must be true or false, "
                         f"got {value!r}")
    return value


def _as_pattern(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"Field 'pattern' must be a string, got {value!r}")
    return value


@dataclass(frozen=True)
class RotationModulation:
    """
    Settings of the rotation-direction modulator.

    ``pattern`` accepts a RotationPattern or its string value. Any other
    string is kept as given and makes the modulator flip on every trigger.
    """

    enabled: bool = True
    interval: float = 5.0
    pattern: Union[RotationPattern, str] = RotationPattern.KAPREKAR
    pattern_threshold: int = 3

    def __post_init__(self):
        if not self.interval > 0:
            raise ValueError(f"interval must be > 0, got {self.interval!r}")
        try:
            object.__setattr__(self, 'pattern', RotationPattern(self.pattern))
        except ValueError:
            logging.warning(f"Unknown rotation pattern {self.pattern!r}, "
                            f"direction will flip on every trigger")

    def to_record(self) -> dict:
        pattern = self.pattern
        if isinstance(pattern, RotationPattern):
            pattern = pattern.value
        return {
            "enabled": self.enabled,
            "interval": self.interval,
            "pattern": pattern,
            "patternThreshold": self.pattern_threshold,
        }

    @classmethod
    def from_record(cls, record: dict) -> "RotationModulation":
        defaults = cls()
        return cls(
            enabled=_as_bool(record.get("enabled", defaults.enabled),
                             "enabled"),
            interval=float(record.get("interval", defaults.interval)),
            pattern=_as_pattern(record.get("pattern", defaults.pattern)),
            pattern_threshold=int(record.get("patternThreshold",
                                             defaults.pattern_threshold)),
        )


@dataclass(frozen=True)
class MobiusCoefficients:
    """Complex coefficients of f(z) = (a z + b) / (c z + d)."""

    a: Complex2 = (1.0, 0.0)
    b: Complex2 = (0.0, 0.0)
    c: Complex2 = (0.0, 0.0)
    d: Complex2 = (1.0, 0.0)

    def __post_init__(self):
        for name in ("a", "b", "c", "d"):
            object.__setattr__(self, name, _as_pair(getattr(self, name), name))

    @property
    def degenerate(self) -> bool:
        """True when c z + d vanishes identically (c = d = 0)."""
        return self.c == (0.0, 0.0) and self.d == (0.0, 0.0)


@dataclass(frozen=True)
class TransformParameters:
    """
    Live coefficient set of the deformation pipeline.

    :param amplitude: Chladni wave amplitude (>= 0)
    :param frequency_x: Chladni frequency along x
    :param frequency_y: Chladni frequency along y
    :param use_classical_mobius: select the classical complex Möbius map
                                 (True) or the enhanced twist (False)
    :param coefficients: MobiusCoefficients of the classical map
    :param animation_speed: phase rate of coefficient a in classical mode
    :param factor: twist factor of the enhanced mode, sign set by the
                   rotation modulator
    :param noise_scale: weight of every noise term (>= 0)
    :param rotation_modulation: RotationModulation settings
    """

    amplitude: float = 1.0
    frequency_x: float = 0.5
    frequency_y: float = 0.5
    use_classical_mobius: bool = True
    coefficients: MobiusCoefficients = field(
        default_factory=MobiusCoefficients)
    animation_speed: float = 0.1
    factor: float = 0.3
    noise_scale: float = 0.5
    rotation_modulation: RotationModulation = field(
        default_factory=RotationModulation)

    def __post_init__(self):
        if self.amplitude < 0:
            raise ValueError(f"amplitude must be >= 0, got {self.amplitude!r}")
        if self.noise_scale < 0:
            raise ValueError(
                f"noise_scale must be >= 0, got {self.noise_scale!r}")
        if self.use_classical_mobius and self.coefficients.degenerate:
            logging.debug("Degenerate Möbius denominator (c = d = 0), "
                          "every point will be regularized")

    # Shortcuts for the complex coefficients
    @property
    def a(self) -> Complex2:
        return self.coefficients.a

    @property
    def b(self) -> Complex2:
        return self.coefficients.b

    @property
    def c(self) -> Complex2:
        return self.coefficients.c

    @property
    def d(self) -> Complex2:
        return self.coefficients.d

    def replace(self, **changes) -> "TransformParameters":
        """
        New snapshot with some fields changed. The complex coefficients may
        be given directly as ``a=(re, im)`` etc.
        """
        coeffs = {k: changes.pop(k) for k in ("a", "b", "c", "d")
                  if k in changes}
        if coeffs:
            changes["coefficients"] = dataclasses.replace(
                changes.get("coefficients", self.coefficients), **coeffs)
        return dataclasses.replace(self, **changes)

    def with_factor_sign(self, direction: int) -> "TransformParameters":
        """Snapshot whose factor is abs(factor) * direction."""
        return dataclasses.replace(self, factor=abs(self.factor) * direction)

    # %% Flat records
    def to_record(self) -> dict:
        record = {
            "chladniAmplitude": self.amplitude,
            "chladniFrequencyX": self.frequency_x,
            "chladniFrequencyY": self.frequency_y,
            "useClassicalMobius": self.use_classical_mobius,
            "mobiusFactor": self.factor,
            "noiseScale": self.noise_scale,
            "mobiusAnimationSpeed": self.animation_speed,
            "rotationModulation": self.rotation_modulation.to_record(),
        }
        for name in ("a", "b", "c", "d"):
            re, im = getattr(self, name)
            record[f"{name}_real"] = re
            record[f"{name}_imag"] = im
        return record

    @classmethod
    def from_record(cls, record: dict) -> "TransformParameters":
        """
        Snapshot from a flat record. Missing fields take their defaults,
        unknown fields are logged and ignored.
        """
        unknown = set(record) - _RECORD_FIELDS
        if unknown:
            logging.warning(f"Ignoring unknown parameter fields "
                            f"{sorted(unknown)}")

        defaults = cls()
        coeffs = {}
        for name in ("a", "b", "c", "d"):
            re, im = getattr(defaults, name)
            coeffs[name] = (float(record.get(f"{name}_real", re)),
                            float(record.get(f"{name}_imag", im)))

        return cls(
            amplitude=float(record.get("chladniAmplitude",
                                       defaults.amplitude)),
            frequency_x=float(record.get("chladniFrequencyX",
                                         defaults.frequency_x)),
            frequency_y=float(record.get("chladniFrequencyY",
                                         defaults.frequency_y)),
            use_classical_mobius=_as_bool(record.get(
                "useClassicalMobius", defaults.use_classical_mobius),
                "useClassicalMobius"),
            coefficients=MobiusCoefficients(**coeffs),
            animation_speed=float(record.get("mobiusAnimationSpeed",
                                             defaults.animation_speed)),
            factor=float(record.get("mobiusFactor", defaults.factor)),
            noise_scale=float(record.get("noiseScale",
                                         defaults.noise_scale)),
            rotation_modulation=RotationModulation.from_record(
                record.get("rotationModulation") or {}),
        )


_RECORD_FIELDS = set(TransformParameters().to_record())


def save_parameters(params: TransformParameters, fn: str) -> None:
    """Write a snapshot to a JSON file as a flat record."""
    with open(fn, 'w') as f:
        json.dump(params.to_record(), f, indent=2)


def load_parameters(fn: str) -> TransformParameters:
    """Read a snapshot from a JSON flat record."""
    with open(fn, 'r') as f:
        record = json.load(f)
    return TransformParameters.from_record(record)


# %% Presets of the settings panel
_PRESETS = {
    "default": dict(
        amplitude=1.0, frequency_x=0.5, frequency_y=0.5, factor=0.3,
        use_classical_mobius=True, noise_scale=0.5,
        rotation_modulation=RotationModulation(
            enabled=True, interval=5.0, pattern=RotationPattern.KAPREKAR,
            pattern_threshold=3),
        coefficients=MobiusCoefficients(), animation_speed=0.1,
    ),
    "no_rotation": dict(
        factor=0.0,
        rotation_modulation=RotationModulation(enabled=False),
        animation_speed=0.0, use_classical_mobius=True,
        coefficients=MobiusCoefficients(),
    ),
    "strong_waves": dict(
        amplitude=2.0, frequency_x=1.0, frequency_y=1.0, factor=0.1,
        noise_scale=0.8,
    ),
    "classic_mobius": dict(
        use_classical_mobius=True,
        coefficients=MobiusCoefficients(a=(1.0, 0.5)),
        animation_speed=0.05, amplitude=0.5, noise_scale=0.3,
    ),
    "organic_motion": dict(
        use_classical_mobius=False, factor=0.2, noise_scale=1.0,
        amplitude=0.8,
        rotation_modulation=RotationModulation(
            enabled=True, interval=8.0, pattern=RotationPattern.SINE,
            pattern_threshold=3),
    ),
}


def preset(name: str, base: TransformParameters = None) -> TransformParameters:
    """
    Named parameter preset applied on top of ``base`` (defaults when None).

    Available presets: default, no_rotation, strong_waves, classic_mobius,
    organic_motion.
    """
    if name not in _PRESETS:
        raise ValueError(
            f"Unknown preset {name!r}. Available: {list(_PRESETS.keys())}")
    if base is None:
        base = TransformParameters()
    return dataclasses.replace(base, **_PRESETS[name])
