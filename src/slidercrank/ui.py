"""
User interface components for the slider-crank explorer.

This module contains:
- PyQt5 GUI widgets and layouts
- User interaction handlers
- 3D mechanism view and displacement plot setup
- Animation timer and AI explanation wiring
"""

import math
import logging

from PyQt5.QtCore import Qt, QThreadPool, QTimer
from PyQt5.QtWidgets import (
    QWidget, QHBoxLayout, QVBoxLayout, QFormLayout,
    QLabel, QDoubleSpinBox, QFrame, QSlider, QPushButton, QFileDialog, QComboBox,
    QMessageBox, QSplitter, QScrollArea, QTabWidget
)
from pyvistaqt import BackgroundPlotter
from matplotlib.backends.backend_qt5agg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure

from .geometry import (
    ANGLE_SCALE, CRANK_RANGE, ROD_RANGE, OMEGA_RANGE, ANGLE_RANGE, ROD_MARGIN, FRAME_INTERVAL_MS
)
from .kinematics import KinematicsAnalyzer, DEFAULT_CONFIGURATION
from .animation import CrankAnimator
from .config import ConfigManager, DEFAULT_SETUPS_PATH
from .analysis import AnalysisManager
from .visualization import VisualizationManager
from .setup_manager import SetupManager
from .explain_worker import ExplanationWorker

logger = logging.getLogger(__name__)

LENGTH_SCALE = 10.0  # slider ticks per inch
OMEGA_SCALE = 2.0    # slider ticks per rad/s


class SliderCrankApp(QWidget):
    """Main application window for the slider-crank explorer."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Slider-Crank Kinematics")
        self.resize(1250, 800)

        # Initialize managers
        self.config_manager = ConfigManager()
        self.analyzer = KinematicsAnalyzer(DEFAULT_CONFIGURATION)
        self.analysis_manager = AnalysisManager(self)
        self.visualization_manager = VisualizationManager(self)
        self.setup_manager = SetupManager(self)

        # animation
        self.animator = CrankAnimator(
            get_velocity=lambda: self.analyzer.config.angular_velocity,
            get_angle=lambda: self.analyzer.config.crank_angle,
            set_angle=self.analyzer.set_angle,
        )
        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(FRAME_INTERVAL_MS)

        # explanation threads
        self.thread_pool = QThreadPool()
        self._explain_seq = 0

        # Setup UI
        self._setup_layouts()
        self._setup_controls()
        self._setup_scene()
        self._connect_signals()

        # Initial refresh
        self.analysis_manager.update_cycle_plot()
        self._apply_pose_update()

        self.setup_manager.load_default_setups(DEFAULT_SETUPS_PATH)

    def _setup_layouts(self):
        """Setup the main layout structure."""
        main = QHBoxLayout(self)

        # --- Plotter / left side ---
        self.plotter = BackgroundPlotter(show=False, auto_update=True)
        self.plotter.set_background("#0f172a")
        self.plotter.enable_parallel_projection()

        interactor = self.plotter.interactor
        interactor.setMinimumWidth(700)

        # --- Right side: tabs ---
        self.tabs = QTabWidget()

        mech_page = self.build_mechanism_page()
        self.tabs.addTab(mech_page, "Mechanism")

        ai_page = self.build_ai_page()
        self.tabs.addTab(ai_page, "AI Analysis")

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.setSizes([700, 450])
        self.splitter.setStretchFactor(0, 3)
        self.splitter.setStretchFactor(1, 2)

        self.splitter.addWidget(interactor)
        self.splitter.addWidget(self.tabs)

        main.addWidget(self.splitter)

    def build_mechanism_page(self):
        """
        Build the 'Mechanism' tab contents and return the tab QWidget.
        Exposes:
            self.form            - QFormLayout with the parameter controls
            self.status          - QLabel for status line
            self.load_btn, self.save_btn, self.setup_combo
            self.play_btn, self.reset_btn
        """
        page = QWidget()
        page_layout = QVBoxLayout(page)
        page_layout.setContentsMargins(0, 0, 0, 0)
        page_layout.setSpacing(0)

        self.panel_scroll = QScrollArea()
        self.panel_scroll.setWidgetResizable(True)

        self._panel_content = QWidget()
        self._panel_content.setMinimumWidth(200)

        self._panel_layout = QVBoxLayout(self._panel_content)
        self._panel_layout.setContentsMargins(12, 12, 12, 12)
        self._panel_layout.setSpacing(5)

        self.panel_scroll.setWidget(self._panel_content)
        page_layout.addWidget(self.panel_scroll)

        # --- Header row: load/save/combo ---
        load_row = QHBoxLayout()
        self.load_btn = QPushButton("Load setups…")
        self.save_btn = QPushButton("Save setup…")
        self.setup_combo = QComboBox()
        self.setup_combo.setEnabled(False)

        load_row.addWidget(self.load_btn, stretch=0)
        load_row.addWidget(self.save_btn, stretch=0)
        load_row.addWidget(self.setup_combo, stretch=1)
        self._panel_layout.addLayout(load_row)

        self.status = QLabel("")
        self.status.setWordWrap(False)
        self._panel_layout.addWidget(self.status)

        line = QFrame()
        line.setFrameShape(QFrame.HLine)
        line.setFrameShadow(QFrame.Sunken)
        self._panel_layout.addWidget(line)

        form = QFormLayout()
        form.setLabelAlignment(Qt.AlignLeft)
        form.setFormAlignment(Qt.AlignTop)
        form.setVerticalSpacing(10)
        self.form = form
        self._panel_layout.addLayout(form)

        # --- Play / reset ---
        btn_row = QHBoxLayout()
        self.play_btn = QPushButton("Start Animation")
        self.reset_btn = QPushButton("Reset to Example 7.4")
        btn_row.addWidget(self.play_btn, stretch=1)
        btn_row.addWidget(self.reset_btn, stretch=0)
        self._panel_layout.addLayout(btn_row)

        # --- Live readout ---
        readout = QHBoxLayout()
        self.slider_pos_label = QLabel("")
        self.rod_angle_label = QLabel("")
        for lbl in (self.slider_pos_label, self.rod_angle_label):
            lbl.setStyleSheet("font-family: monospace; font-size: 16px; font-weight: 600;")
        readout.addWidget(self.slider_pos_label)
        readout.addStretch(1)
        readout.addWidget(self.rod_angle_label)
        self._panel_layout.addLayout(readout)

        self._setup_analysis_section(self._panel_layout)

        self._panel_layout.addStretch(1)
        return page

    def build_ai_page(self):
        """Build the 'AI Analysis' tab and return the tab QWidget."""
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(10)

        self.explain_btn = QPushButton("Explain with AI")
        layout.addWidget(self.explain_btn)

        self.ai_label = QLabel("Press \"Explain with AI\" to describe the current pose.")
        self.ai_label.setWordWrap(True)
        self.ai_label.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        self.ai_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        layout.addWidget(self.ai_label)

        layout.addStretch(1)
        return page

    def _setup_controls(self):
        """Setup all the control widgets."""
        cfg = self.analyzer.config

        self.crank_box = self._spin(CRANK_RANGE[0], CRANK_RANGE[1], 0.1, cfg.crank_length, "in")
        self.rod_box = self._spin(ROD_RANGE[0], ROD_RANGE[1], 0.1, cfg.rod_length, "in")
        self.omega_box = self._spin(OMEGA_RANGE[0], OMEGA_RANGE[1], 0.5, cfg.angular_velocity, "rad/s")
        self.angle_box = self._spin(ANGLE_RANGE[0], ANGLE_RANGE[1], 1.0, cfg.crank_angle, "deg")

        self.crank_slider = self._slider(CRANK_RANGE, LENGTH_SCALE, cfg.crank_length)
        self.rod_slider = self._slider((cfg.crank_length + ROD_MARGIN, ROD_RANGE[1]), LENGTH_SCALE, cfg.rod_length)
        self.omega_slider = self._slider(OMEGA_RANGE, OMEGA_SCALE, cfg.angular_velocity)
        self.angle_slider = self._slider(ANGLE_RANGE, ANGLE_SCALE, cfg.crank_angle)

        self.form.addRow("Crank length r2", self.crank_box)
        self.form.addRow("", self.crank_slider)
        self.form.addRow("Conn. rod length r3", self.rod_box)
        self.form.addRow("", self.rod_slider)
        self.form.addRow("Angular velocity ω2", self.omega_box)
        self.form.addRow("", self.omega_slider)
        self.form.addRow("Crank angle θ2", self.angle_box)
        self.form.addRow("", self.angle_slider)

    def _setup_analysis_section(self, panel_layout):
        """Setup the displacement plot and its buttons."""
        row = QHBoxLayout()
        self.save_plot_btn = QPushButton("Save Plot")
        row.addStretch(1)
        row.addWidget(self.save_plot_btn)

        self.cycle_fig = Figure(figsize=(4.2, 3.2), constrained_layout=True)
        self.cycle_ax = self.cycle_fig.add_subplot(111)
        self.cycle_canvas = FigureCanvas(self.cycle_fig)
        self.cycle_canvas.setMinimumHeight(360)

        self.cycle_info_label = QLabel("")
        self.cycle_info_label.setStyleSheet("font-family: monospace;")
        self.cycle_info_label.setWordWrap(True)

        panel_layout.addLayout(row)
        panel_layout.addWidget(self.cycle_canvas)
        panel_layout.addWidget(self.cycle_info_label)

    def _setup_scene(self):
        """Setup the 3D scene and initial geometry."""
        cfg = self.analyzer.config
        self.visualization_manager.build_scene(cfg.crank_length, cfg.rod_length, self.analyzer.state)
        self.plotter.show()

    def _connect_signals(self):
        """Connect all the signal handlers."""
        # Config buttons
        self.load_btn.clicked.connect(self.setup_manager.on_load_setups)
        self.save_btn.clicked.connect(self.setup_manager.on_save_setup)
        self.setup_combo.currentTextChanged.connect(self.setup_manager.on_select_setup)

        # Parameter controls
        self.crank_box.valueChanged.connect(self._on_lengths)
        self.rod_box.valueChanged.connect(self._on_lengths)
        self.omega_box.valueChanged.connect(self._on_omega)
        self.angle_box.valueChanged.connect(self._on_angle)

        self.crank_slider.valueChanged.connect(lambda v: self._slider_to_box(self.crank_box, v / LENGTH_SCALE))
        self.rod_slider.valueChanged.connect(lambda v: self._slider_to_box(self.rod_box, v / LENGTH_SCALE))
        self.omega_slider.valueChanged.connect(lambda v: self._slider_to_box(self.omega_box, v / OMEGA_SCALE))
        self.angle_slider.valueChanged.connect(lambda v: self._slider_to_box(self.angle_box, v / ANGLE_SCALE))

        # Animation
        self.play_btn.clicked.connect(self.toggle_play)
        self.reset_btn.clicked.connect(self._on_reset)
        self.frame_timer.timeout.connect(self._on_frame)

        # Plot / AI
        self.save_plot_btn.clicked.connect(self._on_save_plot_click)
        self.explain_btn.clicked.connect(self._on_explain_click)

    # ---------- UI helpers ----------
    def _spin(self, lo, hi, step, val, suffix=None):
        """Create a spin box widget."""
        sb = QDoubleSpinBox()
        sb.setRange(lo, hi)
        sb.setDecimals(3)
        sb.setSingleStep(step)
        sb.setValue(float(val))
        if suffix:
            sb.setSuffix(" " + suffix)
        sb.setAlignment(Qt.AlignRight)
        sb.setKeyboardTracking(True)
        return sb

    def _slider(self, value_range, scale, val):
        s = QSlider(Qt.Horizontal)
        s.setRange(int(round(value_range[0]*scale)), int(round(value_range[1]*scale)))
        s.setSingleStep(1)
        s.setPageStep(int(scale))
        s.setTracking(True)
        s.setValue(int(round(val*scale)))
        return s

    @staticmethod
    def _set_quiet(widget, value):
        widget.blockSignals(True)
        widget.setValue(value)
        widget.blockSignals(False)

    def _slider_to_box(self, box, value):
        # the box's valueChanged drives the update
        box.setValue(value)

    def _sync_sliders(self):
        cfg = self.analyzer.config
        self.rod_slider.blockSignals(True)
        self.rod_slider.setMinimum(int(round((cfg.crank_length + ROD_MARGIN) * LENGTH_SCALE)))
        self.rod_slider.blockSignals(False)

        self._set_quiet(self.crank_slider, int(round(cfg.crank_length * LENGTH_SCALE)))
        self._set_quiet(self.rod_slider, int(round(cfg.rod_length * LENGTH_SCALE)))
        self._set_quiet(self.omega_slider, int(round(cfg.angular_velocity * OMEGA_SCALE)))
        self._set_quiet(self.angle_slider, int(round(cfg.crank_angle * ANGLE_SCALE)))

    # ---------- Callbacks ----------
    def _on_lengths(self, *_):
        """Handle crank/rod length changes."""
        resampled = self.analyzer.update(
            self.analyzer.config.with_lengths(self.crank_box.value(), self.rod_box.value())
        )
        self._sync_sliders()
        if resampled:
            self.analysis_manager.update_cycle_plot()
        self._apply_pose_update()

    def _on_omega(self, *_):
        """Handle angular velocity changes."""
        self.analyzer.update_parameters(angular_velocity=self.omega_box.value())
        self.animator.reset_baseline()
        self._sync_sliders()
        self.cycle_info_label.setText(self.analysis_manager.collect_setup_info_text())

    def _on_angle(self, *_):
        """Handle crank angle changes."""
        self.analyzer.set_angle(self.angle_box.value())
        self._sync_sliders()
        self._apply_pose_update()

    def _on_reset(self):
        self.apply_configuration(DEFAULT_CONFIGURATION)
        self.status.setText("Reset to Example 7.4")

    def apply_configuration(self, config):
        """Push a whole configuration into the analyzer and the controls."""
        resampled = self.analyzer.update(config)

        self._set_quiet(self.crank_box, config.crank_length)
        self._set_quiet(self.rod_box, config.rod_length)
        self._set_quiet(self.omega_box, config.angular_velocity)
        self._set_quiet(self.angle_box, config.crank_angle % 360.0)
        self._sync_sliders()
        self.animator.reset_baseline()

        if resampled:
            self.analysis_manager.update_cycle_plot()
        else:
            self.cycle_info_label.setText(self.analysis_manager.collect_setup_info_text())
        self._apply_pose_update()

    def toggle_play(self):
        if self.animator.running:
            self.stop_animation()
        else:
            self.start_animation()

    def start_animation(self):
        self.animator.start()
        self.frame_timer.start()
        self.play_btn.setText("Pause Animation")
        self.angle_box.setEnabled(False)
        self.angle_slider.setEnabled(False)

    def stop_animation(self):
        self.frame_timer.stop()
        self.animator.stop()
        self.play_btn.setText("Start Animation")
        self.angle_box.setEnabled(True)
        self.angle_slider.setEnabled(True)

    def _on_frame(self):
        """Timer callback: advance the crank one frame."""
        new_angle = self.animator.tick()
        if new_angle is None:
            return
        self._set_quiet(self.angle_box, new_angle)
        self._set_quiet(self.angle_slider, int(round(new_angle * ANGLE_SCALE)))
        self._apply_pose_update()

    def _on_save_plot_click(self):
        """Export the current displacement plot as an image file."""
        path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Plot As Image",
            "displacement_plot.png",
            "PNG Image (*.png);;JPEG Image (*.jpg);;SVG Vector Image (*.svg);;All Files (*)"
        )

        if not path:
            return  # user canceled

        try:
            self.analysis_manager.save_plot(path)
            self.status.setText(f"Plot saved to {path}")
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "Save Failed", f"Could not save plot:\n{e}")

    def _on_explain_click(self):
        """Start an explanation request for the current pose."""
        self._explain_seq += 1
        worker = ExplanationWorker(self._explain_seq, self.analyzer.config, self.analyzer.state)
        worker.signals.result.connect(self._on_explain_result)
        worker.signals.failed.connect(self._on_explain_result)
        worker.signals.finished.connect(self._on_explain_finished)

        self.explain_btn.setEnabled(False)
        self.explain_btn.setText("Thinking...")
        self.ai_label.setText("")
        logger.debug("explanation request %d started", self._explain_seq)
        self.thread_pool.start(worker)

    def _on_explain_result(self, request_id, text):
        self.ai_label.setText(text)

    def _on_explain_finished(self, request_id):
        if request_id == self._explain_seq:
            self.explain_btn.setEnabled(True)
            self.explain_btn.setText("Explain with AI")

    # ---------- Core update ----------
    def _apply_pose_update(self):
        """Refresh the 3D view, readouts and angle marker for the current state."""
        cfg = self.analyzer.config
        state = self.analyzer.state

        self.visualization_manager.update_pose(cfg.crank_length, cfg.rod_length, state)
        self.analysis_manager.update_angle_marker()
        self._update_status(cfg, state)

    def _update_status(self, cfg, state):
        """Update the status display."""
        self.slider_pos_label.setText(f"x = {state.slider_position:.3f} in")
        self.rod_angle_label.setText(f"θ3 = {state.rod_angle:.1f}°")

        if state.feasible:
            msg = f"θ2={state.crank_angle:.1f}°, θ3={state.rod_angle:.1f}°  |  x={state.slider_position:.3f} in"
        else:
            h = abs(cfg.crank_length * math.sin(math.radians(state.crank_angle)))
            msg = f"⚠ CANNOT ASSEMBLE  |  r2·sin θ2={h:.2f} in > r3={cfg.rod_length:.2f} in"
        self.status.setText(msg)

    def closeEvent(self, event):
        self.stop_animation()
        self.plotter.close()
        super().closeEvent(event)
