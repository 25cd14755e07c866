"""
Main entry point for the slider-crank explorer.

This module handles:
- Logging setup
- Application initialization
- Main event loop
- PyVista theme setup
"""

import logging
import os
import sys

import pyvista as pv
from PyQt5.QtWidgets import QApplication

from .ui import SliderCrankApp


def main():
    """Main entry point for the application."""

    logging.basicConfig(
        level=os.environ.get("SLIDERCRANK_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Set up PyVista theme
    pv.global_theme.smooth_shading = True

    # Create Qt application
    app = QApplication(sys.argv)

    # Create and show main window
    window = SliderCrankApp()
    window.show()

    # Start event loop
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
