"""
Rotation-direction modulation.

A two-state machine (direction +1 or -1) advanced once per frame. When
modulation is enabled and more than ``interval`` seconds have passed since the
last switch, the selected pattern decides the next direction:

- ``kaprekar``: k = floor(10 t) mod 7, -1 when k < threshold else +1
- ``heaviside``: flip the current direction
- ``sine``: sign of sin(t), zero counted as -1
- ``random``: uniform +1 / -1
- anything else: flip
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from mobiusgrid._params import RotationModulation, RotationPattern


@dataclass
class RotationRuntimeState:
    """Mutable per-session modulator state."""

    direction: int = 1
    last_switch_time: float = 0.0
    elapsed_timer: float = 0.0


def _kaprekar(state, elapsed, threshold, rng):
    k = math.floor(elapsed * 10) % 7
    return -1 if k < threshold else 1


def _heaviside(state, elapsed, threshold, rng):
    return -state.direction


def _sine(state, elapsed, threshold, rng):
    return 1 if math.sin(elapsed) > 0 else -1


def _random(state, elapsed, threshold, rng):
    return 1 if rng.random() < 0.5 else -1


_PATTERNS = {
    RotationPattern.KAPREKAR: _kaprekar,
    RotationPattern.HEAVISIDE: _heaviside,
    RotationPattern.SINE: _sine,
    RotationPattern.RANDOM: _random,
}


class RotationModulator:
    def __init__(self, state=None, seed=None):
        """
        Drives the sign of the Möbius twist factor over time.

        :param state: RotationRuntimeState, optional, a fresh state starting
                      at direction +1 when None
        :param seed: seed for the ``random`` pattern generator
        """
        self.state = state if state is not None else RotationRuntimeState()
        self.rng = np.random.default_rng(seed)

    @property
    def direction(self) -> int:
        return self.state.direction

    def reset(self):
        """Start a new session."""
        self.state = RotationRuntimeState()

    def update(self, elapsed_timer: float,
               modulation: RotationModulation) -> int:
        """
        Advance the state machine to ``elapsed_timer``.

        :param elapsed_timer: float, seconds since the session started
        :param modulation: RotationModulation settings of this frame
        :return: int, the current direction (+1 or -1)
        """
        state = self.state
        state.elapsed_timer = elapsed_timer
        if not modulation.enabled:
            return state.direction
        if not elapsed_timer - state.last_switch_time > modulation.interval:
            return state.direction

        rule = _PATTERNS.get(modulation.pattern, _heaviside)
        new_direction = rule(state, elapsed_timer,
                             modulation.pattern_threshold, self.rng)
        if new_direction != state.direction:
            pattern = getattr(modulation.pattern, 'value', modulation.pattern)
            logging.debug(f"Rotation direction {state.direction:+d} -> "
                          f"{new_direction:+d} at t = {elapsed_timer:.3f} "
                          f"({pattern})")
        state.direction = new_direction
        state.last_switch_time = elapsed_timer
        return state.direction

    def signed_factor(self, stored_factor: float) -> float:
        """Externally visible factor abs(stored_factor) * direction."""
        return abs(stored_factor) * self.state.direction
