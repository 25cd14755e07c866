"""
3D mechanism view for the slider-crank explorer.

This module contains functions for:
- Building the crank, rod, slider and joint meshes
- Updating them in place for a new pose
- Tinting the linkage when it cannot assemble
"""

import numpy as np
import pyvista as pv

from .geometry import (
    pivot, joint_points, view_bounds, make_link, make_joint, make_slider, make_ground
)

CRANK_COLOR = "deepskyblue"
ROD_COLOR = "yellowgreen"
SLIDER_COLOR = "whitesmoke"
JOINT_COLOR = "gold"
INVALID_COLOR = "crimson"


def pose_overlay_text(state):
    lines = [
        f"θ2 = {state.crank_angle % 360.0:.1f}°",
        f"θ3 = {state.rod_angle:.1f}°",
        f"x  = {state.slider_position:.3f} in",
    ]
    if not state.feasible:
        lines.append("CANNOT ASSEMBLE")
    return "\n".join(lines)


class VisualizationManager:
    """Manages 3D visualization operations for the UI."""

    def __init__(self, ui_widget):
        """Initialize with reference to the UI widget."""
        self.ui = ui_widget
        self.colors_ok = True
        self._lengths = None
        self.last_valid = None

    def build_scene(self, crank_length, rod_length, state):
        """Create persistent meshes and actors for the first pose."""
        plotter = self.ui.plotter
        o2, a, b = joint_points(crank_length, state)
        bbox_width = self._bbox_width(crank_length, rod_length)

        self.ground_poly = make_ground(*view_bounds(crank_length, rod_length)[:2])
        self.crank_poly = make_link(o2, a)
        self.rod_poly = make_link(a, b)
        self.slider_poly = make_slider(b[0], bbox_width)
        self.pts_poly = pv.PolyData(np.vstack([a, b]))

        plotter.add_mesh(self.ground_poly, color="slategray", line_width=2, name="slider_axis")
        self.crank_actor = plotter.add_mesh(self.crank_poly, color=CRANK_COLOR, smooth_shading=True)
        self.rod_actor = plotter.add_mesh(self.rod_poly, color=ROD_COLOR, smooth_shading=True)
        self.slider_actor = plotter.add_mesh(self.slider_poly, color=SLIDER_COLOR, show_edges=True)
        plotter.add_mesh(make_joint(pivot, radius=0.45), color="dodgerblue", name="ground_pivot")
        self.pts_actor = plotter.add_mesh(self.pts_poly, color=JOINT_COLOR, point_size=14,
                                          render_points_as_spheres=True)

        plotter.add_point_labels(np.vstack([pivot]), ["O2"], font_size=12, name="pivot_label",
                                 shape_opacity=0.0, always_visible=True)

        self.last_valid = (a, b)
        self._update_labels(b, state)
        self._lengths = (crank_length, rod_length)
        self.reset_camera()

    def update_pose(self, crank_length, rod_length, state):
        """Move the linkage to a solved pose."""
        if (crank_length, rod_length) != self._lengths:
            x_lo, x_hi, _, _ = view_bounds(crank_length, rod_length)
            self.ground_poly.shallow_copy(make_ground(x_lo, x_hi))
            self._lengths = (crank_length, rod_length)
            self.reset_camera()

        o2, a, b = joint_points(crank_length, state)

        if state.feasible:
            if not self.colors_ok:
                self.rod_actor.prop.color = ROD_COLOR
                self.slider_actor.prop.color = SLIDER_COLOR
                self.colors_ok = True

            self.crank_poly.shallow_copy(make_link(o2, a))
            self.rod_poly.shallow_copy(make_link(a, b))
            self.slider_poly.shallow_copy(make_slider(b[0], self._bbox_width(crank_length, rod_length)))
            self.pts_poly.points = np.vstack([a, b])
            self.last_valid = (a, b)
        else:
            # Cannot assemble: keep the last valid linkage, only the crank follows the angle
            if self.colors_ok:
                self.rod_actor.prop.color = INVALID_COLOR
                self.slider_actor.prop.color = INVALID_COLOR
                self.colors_ok = False
            self.crank_poly.shallow_copy(make_link(o2, a))
            self.pts_poly.points = np.vstack([a, self.last_valid[1]])

        self._update_labels(self.last_valid[1], state)

        self.ui.plotter.render()

    def _update_labels(self, b, state):
        """Slider pin label and the pose readout in the corner of the view."""
        self.ui.plotter.add_point_labels(np.vstack([b]), ["B4"], font_size=12, name="slider_label",
                                         shape_opacity=0.0, always_visible=True)
        self.ui.plotter.add_text(pose_overlay_text(state), position="upper_left", font_size=10,
                                 color="white", name="pose_overlay")

    def reset_camera(self):
        """Look straight down +Z at the plane of motion."""
        crank_length, rod_length = self._lengths
        x_lo, x_hi, y_lo, y_hi = view_bounds(crank_length, rod_length)
        cx = 0.5 * (x_lo + x_hi)
        span = max(x_hi - x_lo, y_hi - y_lo)
        self.ui.plotter.camera.position = (cx, 0.0, 2.2 * span)
        self.ui.plotter.camera.focal_point = (cx, 0.0, 0.0)
        self.ui.plotter.camera.up = (0, 1, 0)

    @staticmethod
    def _bbox_width(crank_length, rod_length):
        # crank at 180 deg to slider at outer dead center
        return 2.0 * crank_length + rod_length
