"""
Setup management functionality for the slider-crank explorer.

This module contains functions for:
- Loading setups from files
- Selecting and applying setups
- Saving current configurations
- Collecting current setup data
"""

from PyQt5.QtWidgets import QFileDialog, QInputDialog, QMessageBox

from .config import DEFAULT_SETUPS_PATH, configuration_to_setup, setup_to_configuration


class SetupManager:
    """Manages setup operations for the UI."""

    def __init__(self, ui_widget):
        """Initialize with reference to the UI widget."""
        self.ui = ui_widget

    def load_default_setups(self, path):
        """Load the bundled setups file at startup."""
        self._load(path, "Failed to load default setups")

    def on_load_setups(self):
        path, _ = QFileDialog.getOpenFileName(self.ui, "Open setups file", "", "INI files (*.ini);;All files (*)")
        if path:
            self._load(path, "Failed to load setups")

    def _load(self, path, error_prefix):
        try:
            setups = self.ui.config_manager.load_setups(path)
        except (RuntimeError, ValueError) as e:
            self.ui.status.setText(f"{error_prefix}: {e}")
            return

        # "Default" wins, otherwise the first name in the combo
        name = "Default" if "Default" in setups else sorted(setups)[0]
        self._fill_combo(setups, current=name)
        self.apply_setup(setups[name])
        self.ui.status.setText(f"Loaded setup [{name}] from {path}")

    def on_select_setup(self, name):
        """Handle setup selection from combo box."""
        if not name or name not in self.ui.config_manager.setups:
            return
        self.apply_setup(self.ui.config_manager.setups[name])

    def apply_setup(self, d):
        """Apply a setup dictionary to the UI."""
        if not self.ui.config_manager.validate_setup(d):
            self.ui.status.setText("Setup has invalid values; not applied.")
            return
        config = setup_to_configuration(d, base=self.ui.analyzer.config)
        self.ui.apply_configuration(config)

    def on_save_setup(self):
        """Store the live configuration under a name and write the setups file."""
        name, ok = QInputDialog.getText(self.ui, "Save setup", "Setup name:")
        name = name.strip()
        if not ok or not name:
            return

        cm = self.ui.config_manager
        cm.add_setup(name, self.collect_current_setup())
        self._fill_combo(cm.setups, current=name)

        path = self._choose_save_path(cm.current_setups_path)
        if not path:
            return

        try:
            cm.save_setups(path)
        except OSError as e:
            self.ui.status.setText(f"Failed to save: {e}")
            return
        self.ui.status.setText(f"Saved setup [{name}] to {path}")

    def _choose_save_path(self, current_path):
        """Overwrite the open setups file, or ask for a new one."""
        if current_path and current_path != DEFAULT_SETUPS_PATH:
            answer = QMessageBox.question(
                self.ui, "Save setups",
                f"Write setups to {current_path}?\n\nChoose No to pick another file.",
                QMessageBox.Yes | QMessageBox.No | QMessageBox.Cancel, QMessageBox.Yes,
            )
            if answer == QMessageBox.Yes:
                return current_path
            if answer == QMessageBox.Cancel:
                return None
        path, _ = QFileDialog.getSaveFileName(self.ui, "Save setups", "mechanism_setups.ini",
                                              "INI files (*.ini);;All files (*)")
        return path

    def collect_current_setup(self):
        """Collect current UI state as a setup dictionary."""
        return configuration_to_setup(self.ui.analyzer.config)

    def _fill_combo(self, setups, current=None):
        combo = self.ui.setup_combo
        combo.blockSignals(True)
        combo.clear()
        combo.addItems(sorted(setups))
        combo.setEnabled(True)
        if current:
            combo.setCurrentText(current)
        combo.blockSignals(False)
