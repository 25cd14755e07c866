"""
Displacement chart for the slider-crank explorer.

This module contains functions for:
- Plotting the full-cycle slider displacement curve
- Moving the live crank angle marker
- Collecting cycle and setup information text
"""

import numpy as np

from .kinematics import cycle_arrays

CURVE_COLOR = "#38bdf8"
MARKER_COLOR = "#ef4444"


class AnalysisManager:
    """Manages the displacement plot for the UI."""

    def __init__(self, ui_widget):
        """Initialize with reference to the UI widget."""
        self.ui = ui_widget
        self.curve_line = None
        self.angle_marker = None
        self.info_text = None

    def update_cycle_plot(self):
        """Redraw the displacement curve for the current link lengths."""
        analyzer = self.ui.analyzer
        angles, positions = cycle_arrays(analyzer.cycle)

        self.ui.cycle_fig.clf()
        ax = self.ui.cycle_fig.add_subplot(111)
        self.ui.cycle_ax = ax

        ax.set_title("Displacement Curve", fontsize=10)
        ax.set_xlabel("Crank Angle (°)", fontsize=9)
        ax.set_ylabel("Slider Position (in)", fontsize=9)
        ax.set_xlim(0, 360)
        ax.set_xticks(np.arange(0, 361, 60))
        ax.grid(True, linestyle="--", alpha=0.4)

        (self.curve_line,) = ax.plot(angles, positions, color=CURVE_COLOR, linewidth=2.5, label="Position")
        self.angle_marker = ax.axvline(self.marker_angle(), color=MARKER_COLOR,
                                       linestyle="--", linewidth=1.2)

        summary = analyzer.summary
        if np.isfinite(summary.max_position):
            ax.plot([summary.max_angle], [summary.max_position], "ko", markersize=4)
            ax.plot([summary.min_angle], [summary.min_position], "ko", markersize=4)

        ax.legend(loc="upper right", fontsize=8, frameon=False)

        self.info_text = ax.text(0.02, 0.04, self.collect_cycle_info_text(),
                                 transform=ax.transAxes, ha="left", va="bottom",
                                 fontsize=8, family="monospace",
                                 bbox=dict(boxstyle="round,pad=0.4", facecolor="white", alpha=0.85))

        self.ui.cycle_canvas.draw_idle()
        self.ui.cycle_info_label.setText(self.collect_setup_info_text())

    def update_angle_marker(self):
        """Move the vertical marker to the live crank angle."""
        if self.angle_marker is None:
            self.update_cycle_plot()
            return
        theta2 = self.marker_angle()
        self.angle_marker.set_xdata([theta2, theta2])
        self.ui.cycle_canvas.draw_idle()

    def marker_angle(self):
        # chart axis spans one revolution
        return self.ui.analyzer.config.crank_angle % 360.0

    def collect_cycle_info_text(self):
        """Dead-center positions over the sampled cycle."""
        s = self.ui.analyzer.summary
        if not np.isfinite(s.max_position):
            return "No feasible pose in cycle."

        lines = [
            f"Max x  {s.max_position:7.3f} in @ {s.max_angle:5.1f}°",
            f"Min x  {s.min_position:7.3f} in @ {s.min_angle:5.1f}°",
            f"Stroke {s.stroke:7.3f} in",
        ]
        return "\n".join(lines)

    def collect_setup_info_text(self):
        """Collect setup information for display."""
        cfg = self.ui.analyzer.config
        vals = {
            "Crank length r2": f"{cfg.crank_length:.3f} in",
            "Rod length r3":   f"{cfg.rod_length:.3f} in",
            "Angular vel. ω2": f"{cfg.angular_velocity:.2f} rad/s",
            "Ratio r3/r2":     f"{cfg.rod_length / cfg.crank_length:.3f}",
        }
        lines = [f"{k:<16} {v:>14}" for k, v in vals.items()]
        return "\n".join(lines)

    def save_plot(self, path):
        self.ui.cycle_canvas.figure.savefig(path, dpi=300, bbox_inches="tight")
