"""
Position analysis for the inline slider-crank mechanism.

This module contains:
- Mechanism configuration and state records
- Closed-form position solver with an infeasibility fallback
- Full-cycle displacement sampling and dead-center summary
- Crank angle stepping for the animation loop
"""

import math
from dataclasses import dataclass, replace
from typing import NamedTuple

import numpy as np

# cycle sweep (deg)
CYCLE_STEP_DEG = 2
CYCLE_END_DEG = 360


@dataclass(frozen=True)
class MechanismConfiguration:
    """Link lengths (in), crank speed (rad/s) and crank angle (deg)."""
    crank_length: float
    rod_length: float
    angular_velocity: float = 0.0
    crank_angle: float = 0.0

    def with_angle(self, crank_angle):
        return replace(self, crank_angle=float(crank_angle))

    def with_lengths(self, crank_length, rod_length):
        return replace(self, crank_length=float(crank_length), rod_length=float(rod_length))

    @property
    def lengths(self):
        return (self.crank_length, self.rod_length)


# Example 7.4
DEFAULT_CONFIGURATION = MechanismConfiguration(
    crank_length=5.0, rod_length=8.0, angular_velocity=10.0, crank_angle=45.0,
)


@dataclass(frozen=True)
class KinematicState:
    crank_angle: float      # deg, echoed from the input
    rod_angle: float        # deg, CCW from the slider axis
    slider_position: float  # in, measured from the crank pivot
    feasible: bool = True


class CycleSample(NamedTuple):
    angle: float
    position: float


@dataclass(frozen=True)
class CycleSummary:
    """Position extrema over a sampled revolution (nan when nothing assembles)."""
    max_position: float
    max_angle: float
    min_position: float
    min_angle: float

    @property
    def stroke(self):
        return self.max_position - self.min_position


def solve(config):
    """
    Solve the inline slider-crank at config.crank_angle.

    Vector loop with the crank pivot at the origin and the slider on +X:
        r2*sin(t2) + r3*sin(t3) = 0
        x = r2*cos(t2) + r3*cos(t3)
    The principal asin branch is taken, so the rod angle stays in [-90, 90].
    When |r2*sin(t2)| > r3 the rod cannot reach the slider axis and the
    fallback state (rod angle 0, slider at 0, feasible=False) is returned.
    """
    r2 = config.crank_length
    r3 = config.rod_length
    theta2 = config.crank_angle
    th2 = math.radians(theta2)

    h = r2 * math.sin(th2)
    if abs(h) > r3:
        return KinematicState(theta2, 0.0, 0.0, feasible=False)

    # clip for round-off at |h| == r3
    sin_th3 = min(1.0, max(-1.0, -h / r3))
    th3 = math.asin(sin_th3)

    slider = r2 * math.cos(th2) + r3 * math.cos(th3)
    return KinematicState(theta2, math.degrees(th3), slider)


def sample_cycle(crank_length, rod_length, angular_velocity=0.0):
    """
    Slider position over one revolution, 0..360 deg in 2 deg steps (181 samples).
    angular_velocity does not change the geometry; it is accepted so callers
    can pass their live configuration fields straight through.
    """
    base = MechanismConfiguration(crank_length, rod_length, angular_velocity, 0.0)
    samples = []
    for angle in range(0, CYCLE_END_DEG + 1, CYCLE_STEP_DEG):
        state = solve(base.with_angle(angle))
        samples.append(CycleSample(float(angle), state.slider_position))
    return samples


def cycle_arrays(samples):
    """Split samples into (angles, positions) arrays for plotting."""
    arr = np.asarray(samples, dtype=float).reshape(-1, 2)
    return arr[:, 0], arr[:, 1]


def summarize_cycle(samples, crank_length=None, rod_length=None):
    """
    Max/min slider position and where they occur. When the link lengths are
    given, infeasible angles (the solver fallback) are left out.
    """
    angles, positions = cycle_arrays(samples)
    valid = np.ones_like(angles, dtype=bool)
    if crank_length is not None and rod_length is not None:
        h = np.abs(crank_length * np.sin(np.deg2rad(angles)))
        valid = h <= rod_length

    if not np.any(valid):
        nan = float("nan")
        return CycleSummary(nan, nan, nan, nan)

    a = angles[valid]
    p = positions[valid]
    i_max = int(np.argmax(p))
    i_min = int(np.argmin(p))
    return CycleSummary(float(p[i_max]), float(a[i_max]), float(p[i_min]), float(a[i_min]))


def step_angle(angle, angular_velocity, dt):
    """Advance the crank angle by omega*dt (rad/s * s) and wrap into [0, 360)."""
    new_angle = angle + angular_velocity * dt * (180.0 / math.pi)
    new_angle = math.fmod(new_angle, 360.0)
    if new_angle < 0:
        new_angle += 360.0
    # fmod of a tiny negative can round back up to exactly 360
    if new_angle >= 360.0:
        new_angle -= 360.0
    return new_angle


class KinematicsAnalyzer:
    """
    Owns the live configuration and the values derived from it.

    The instantaneous state is re-solved on every update. The cycle curve
    depends only on the link lengths, so it is resampled only when those
    change.
    """

    def __init__(self, config=DEFAULT_CONFIGURATION):
        self.config = config
        self.state = solve(config)
        self.cycle = sample_cycle(config.crank_length, config.rod_length, config.angular_velocity)
        self.summary = summarize_cycle(self.cycle, config.crank_length, config.rod_length)
        self._cycle_lengths = config.lengths

    def update(self, config):
        """
        Replace the configuration and refresh derived values.
        Returns True if the cycle curve was resampled.
        """
        self.config = config
        self.state = solve(config)

        if config.lengths == self._cycle_lengths:
            return False

        self.cycle = sample_cycle(config.crank_length, config.rod_length, config.angular_velocity)
        self.summary = summarize_cycle(self.cycle, config.crank_length, config.rod_length)
        self._cycle_lengths = config.lengths
        return True

    def update_parameters(self, **fields):
        """Update selected configuration fields by name."""
        return self.update(replace(self.config, **{k: float(v) for k, v in fields.items()}))

    def set_angle(self, crank_angle):
        return self.update(self.config.with_angle(crank_angle))
