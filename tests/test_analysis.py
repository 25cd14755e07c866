import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from matplotlib.figure import Figure

from slidercrank.analysis import AnalysisManager
from slidercrank.kinematics import CycleSummary, KinematicsAnalyzer, MechanismConfiguration


class FakeCanvas:
    def __init__(self, figure):
        self.figure = figure
        self.draws = 0

    def draw_idle(self):
        self.draws += 1


class FakeLabel:
    def __init__(self):
        self.text = ""

    def setText(self, text):
        self.text = text


class FakeWindow:
    def __init__(self, config):
        self.analyzer = KinematicsAnalyzer(config)
        self.cycle_fig = Figure()
        self.cycle_canvas = FakeCanvas(self.cycle_fig)
        self.cycle_info_label = FakeLabel()
        self.cycle_ax = None


def marker_x(manager):
    return list(manager.angle_marker.get_xdata())


class TestAngleMarker:
    def test_marker_follows_angle(self) -> None:
        window = FakeWindow(MechanismConfiguration(5.0, 8.0, 10.0, 45.0))
        manager = AnalysisManager(window)
        manager.update_cycle_plot()
        assert marker_x(manager) == pytest.approx([45.0, 45.0])

        window.analyzer.set_angle(120.0)
        manager.update_angle_marker()
        assert marker_x(manager) == pytest.approx([120.0, 120.0])

    @pytest.mark.parametrize("angle, expected", [(450.0, 90.0), (-30.0, 330.0), (720.0, 0.0)])
    def test_marker_wrapped_into_chart(self, angle, expected) -> None:
        window = FakeWindow(MechanismConfiguration(5.0, 8.0, 10.0, angle))
        manager = AnalysisManager(window)
        manager.update_cycle_plot()
        assert marker_x(manager) == pytest.approx([expected, expected])

        window.analyzer.set_angle(angle + 360.0)
        manager.update_angle_marker()
        assert marker_x(manager) == pytest.approx([expected, expected])
        lo, hi = window.cycle_ax.get_xlim()
        assert lo <= marker_x(manager)[0] <= hi

    def test_info_text(self) -> None:
        window = FakeWindow(MechanismConfiguration(5.0, 8.0, 10.0, 45.0))
        manager = AnalysisManager(window)
        manager.update_cycle_plot()
        assert "Stroke  10.000 in" in manager.collect_cycle_info_text()
        assert "Rod length r3" in window.cycle_info_label.text

    def test_no_feasible_pose(self) -> None:
        window = FakeWindow(MechanismConfiguration(20.0, 0.5, 0.0, 0.0))
        manager = AnalysisManager(window)
        # only 0/180/360 assemble on the grid
        assert manager.collect_cycle_info_text().startswith("Max x")
        nan = float("nan")
        window.analyzer.summary = CycleSummary(nan, nan, nan, nan)
        assert manager.collect_cycle_info_text() == "No feasible pose in cycle."
