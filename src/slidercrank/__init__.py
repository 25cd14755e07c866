"""
Slider-crank kinematics explorer.

This package provides:
- Closed-form position analysis of the inline slider-crank
- Full-cycle displacement sampling
- Crank animation stepping
- Configuration management (INI setups)
- PyQt5-based user interface (slidercrank.ui, slidercrank.main)

The GUI modules are not imported here so the numeric core can be used
without a display.
"""

from .kinematics import (
    MechanismConfiguration,
    KinematicState,
    CycleSample,
    CycleSummary,
    KinematicsAnalyzer,
    DEFAULT_CONFIGURATION,
    solve,
    sample_cycle,
    summarize_cycle,
    step_angle,
)
from .animation import CrankAnimator, AnimationHandle
from .config import ConfigManager

__version__ = "1.0.0"
__all__ = [
    "MechanismConfiguration",
    "KinematicState",
    "CycleSample",
    "CycleSummary",
    "KinematicsAnalyzer",
    "DEFAULT_CONFIGURATION",
    "solve",
    "sample_cycle",
    "summarize_cycle",
    "step_angle",
    "CrankAnimator",
    "AnimationHandle",
    "ConfigManager",
]
