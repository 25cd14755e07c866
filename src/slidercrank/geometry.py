"""
Geometric constants and mesh builders for the slider-crank explorer.

This module contains:
- Control ranges for the UI
- Joint coordinates for a solved pose
- PyVista mesh generation functions
"""

import numpy as np
import pyvista as pv

# --------------------------- Scene Constants (in) ---------------------------
pivot = np.array([0.0, 0.0, 0.0])

# ranges for UI
CRANK_RANGE = (1.0, 20.0)
ROD_RANGE = (1.0, 30.0)
OMEGA_RANGE = (-20.0, 20.0)
ANGLE_RANGE = (0.0, 360.0)
ROD_MARGIN = 1.0  # rod slider minimum sits this far above the crank length

# angle slider resolution (ticks per degree)
ANGLE_SCALE = 10.0

# animation timer period (ms)
FRAME_INTERVAL_MS = 16

LINK_RADIUS = 0.18
JOINT_RADIUS = 0.3


# --------------------------- Math / Builders ---------------------------
def crank_pin(crank_length, crank_angle_deg):
    """Crank pin (A) position; the slider axis is +X, the crank turns CCW about +Z."""
    th = np.deg2rad(crank_angle_deg)
    return np.array([crank_length*np.cos(th), crank_length*np.sin(th), 0.0])


def wrist_pin(slider_position):
    """Wrist pin (B) position on the slider axis."""
    return np.array([float(slider_position), 0.0, 0.0])


def joint_points(crank_length, state):
    """Return (O2, A, B) for a solved KinematicState."""
    return pivot.copy(), crank_pin(crank_length, state.crank_angle), wrist_pin(state.slider_position)


def view_bounds(crank_length, rod_length):
    """
    X/Y extents covering every pose: the slider travels at most to r2 + r3
    and the crank pin sweeps a circle of radius r2 around the pivot.
    """
    pad = 0.5 * max(crank_length, rod_length)
    x_lo = -crank_length - pad
    x_hi = crank_length + rod_length + pad
    y_hi = crank_length + pad
    return x_lo, x_hi, -y_hi, y_hi


def make_link(p0, p1, radius=LINK_RADIUS):
    """Create a link mesh (requires PyVista)."""
    return pv.Line(p0, p1).tube(radius=radius, n_sides=24)


def make_joint(center, radius=JOINT_RADIUS):
    """Create a pin joint mesh."""
    return pv.Sphere(radius=radius, center=center, theta_resolution=24, phi_resolution=24)


def make_slider(slider_position, bbox_width):
    """Slider block centred on the wrist pin, sized from the mechanism width."""
    half_x = 0.04 * bbox_width
    half_y = 0.025 * bbox_width
    x = float(slider_position)
    return pv.Box(bounds=(x - half_x, x + half_x, -half_y, half_y, -half_y, half_y))


def make_ground(x_lo, x_hi):
    """Slider axis line."""
    return pv.Line(pointa=(x_lo, 0.0, 0.0), pointb=(x_hi, 0.0, 0.0))
