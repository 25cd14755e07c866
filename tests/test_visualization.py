import pytest

pytest.importorskip("pyvista")

from slidercrank.kinematics import MechanismConfiguration, solve
from slidercrank.visualization import (
    VisualizationManager, pose_overlay_text, INVALID_COLOR, ROD_COLOR, SLIDER_COLOR
)


class FakeProp:
    def __init__(self, color):
        self.color = color


class FakeActor:
    def __init__(self, color):
        self.prop = FakeProp(color)


class FakeCamera:
    position = focal_point = up = None


class RecordingPlotter:
    """Stands in for the BackgroundPlotter; keeps the last call per actor name."""

    def __init__(self):
        self.camera = FakeCamera()
        self.labels = {}
        self.texts = {}
        self.renders = 0

    def add_mesh(self, mesh, color=None, **kwargs):
        return FakeActor(color)

    def add_point_labels(self, points, labels, name=None, **kwargs):
        self.labels[name] = (points.copy(), list(labels))

    def add_text(self, text, name=None, **kwargs):
        self.texts[name] = text

    def render(self):
        self.renders += 1


class FakeWindow:
    def __init__(self):
        self.plotter = RecordingPlotter()


def pose(r2, r3, theta2):
    return solve(MechanismConfiguration(r2, r3, 0.0, theta2))


@pytest.fixture()
def manager() -> VisualizationManager:
    vm = VisualizationManager(FakeWindow())
    vm.build_scene(5.0, 8.0, pose(5.0, 8.0, 45.0))
    return vm


class TestLabels:
    def test_pivot_and_slider_labels(self, manager) -> None:
        labels = manager.ui.plotter.labels
        assert labels["pivot_label"][1] == ["O2"]
        points, names = labels["slider_label"]
        assert names == ["B4"]
        assert points[0][0] == pytest.approx(pose(5.0, 8.0, 45.0).slider_position)

    def test_slider_label_follows_slider(self, manager) -> None:
        state = pose(5.0, 8.0, 120.0)
        manager.update_pose(5.0, 8.0, state)
        points, _ = manager.ui.plotter.labels["slider_label"]
        assert points[0][0] == pytest.approx(state.slider_position)
        assert points[0][1] == 0.0

    def test_overlay_text(self, manager) -> None:
        text = manager.ui.plotter.texts["pose_overlay"]
        assert "θ2 = 45.0°" in text
        assert "θ3 = -26.2°" in text
        assert "x  = 10.712 in" in text


class TestInfeasiblePose:
    def test_tint_and_keep_last_valid_slider(self, manager) -> None:
        good = pose(10.0, 8.0, 30.0)
        manager.update_pose(10.0, 8.0, good)
        manager.update_pose(10.0, 8.0, pose(10.0, 8.0, 90.0))

        assert manager.rod_actor.prop.color == INVALID_COLOR
        assert manager.slider_actor.prop.color == INVALID_COLOR
        points, _ = manager.ui.plotter.labels["slider_label"]
        assert points[0][0] == pytest.approx(good.slider_position)
        assert "CANNOT ASSEMBLE" in manager.ui.plotter.texts["pose_overlay"]

        manager.update_pose(10.0, 8.0, pose(10.0, 8.0, 0.0))
        assert manager.rod_actor.prop.color == ROD_COLOR
        assert manager.slider_actor.prop.color == SLIDER_COLOR
        assert "CANNOT ASSEMBLE" not in manager.ui.plotter.texts["pose_overlay"]


def test_overlay_wraps_angle() -> None:
    assert pose_overlay_text(pose(5.0, 8.0, 405.0)).startswith("θ2 = 45.0°")
