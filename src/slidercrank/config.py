"""
Configuration management for the slider-crank explorer.

This module handles:
- Loading and saving named mechanism setups (INI)
- Converting setups to and from MechanismConfiguration
- Environment settings for the AI explanation client
"""

import configparser
import os

from .kinematics import MechanismConfiguration, DEFAULT_CONFIGURATION

# list of params to save
SETUP_KEYS = [
    "crank_length",
    "rod_length",
    "angular_velocity",
    "crank_angle",
]

DEFAULT_SETUPS_PATH = os.path.join(os.path.dirname(__file__), "mechanism_setups", "default_setups.ini")

API_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")
MODEL_VAR = "SLIDERCRANK_MODEL"
DEFAULT_MODEL = "gemini-2.5-flash"


def setup_to_configuration(setup, base=DEFAULT_CONFIGURATION):
    """Build a configuration from a setup dict; missing keys come from base."""
    return MechanismConfiguration(
        crank_length=float(setup.get("crank_length", base.crank_length)),
        rod_length=float(setup.get("rod_length", base.rod_length)),
        angular_velocity=float(setup.get("angular_velocity", base.angular_velocity)),
        crank_angle=float(setup.get("crank_angle", base.crank_angle)),
    )


def configuration_to_setup(config):
    return {k: float(getattr(config, k)) for k in SETUP_KEYS}


def get_api_key(environ=None):
    """First non-empty API key from the environment, or None."""
    environ = os.environ if environ is None else environ
    for var in API_KEY_VARS:
        value = environ.get(var, "").strip()
        if value:
            return value
    return None


def get_model_name(environ=None):
    environ = os.environ if environ is None else environ
    return environ.get(MODEL_VAR, "").strip() or DEFAULT_MODEL


def _parser():
    cp = configparser.ConfigParser(inline_comment_prefixes=("#", ";"))
    cp.optionxform = str  # keys are case sensitive
    return cp


class ConfigManager:
    """Manages configuration loading, saving, and validation."""

    def __init__(self):
        self.setups = {}
        self.current_setups_path = None

    def read_setups_ini(self, path):
        """
        Parse a setups file into {name: {key: float}}.
        Only SETUP_KEYS are read; sections without any of them are skipped.
        """
        cp = _parser()
        if not cp.read(path, encoding="utf-8"):
            raise RuntimeError(f"Cannot read setups file {path}")

        setups = {}
        for section in cp.sections():
            values = {}
            for key in SETUP_KEYS:
                raw = cp.get(section, key, fallback=None)
                if raw is None:
                    continue
                try:
                    values[key] = float(raw)
                except ValueError:
                    raise ValueError(f"[{section}] {key} = {raw!r} is not a number")
            if values:
                setups[section] = values

        if not setups:
            raise RuntimeError(f"No mechanism setups found in {path}")
        return setups

    def write_setups_ini(self, path, setups_dict):
        """Write setups into path; sections already in the file are kept."""
        cp = _parser()
        if os.path.exists(path):
            try:
                cp.read(path, encoding="utf-8")
            except configparser.Error:
                cp = _parser()

        for section, values in setups_dict.items():
            cp[section] = {
                key: str(float(values[key])) for key in SETUP_KEYS if values.get(key) is not None
            }

        with open(path, "w", encoding="utf-8") as f:
            cp.write(f)

    def load_setups(self, path):
        """Load setups from a file and update internal state."""
        setups = self.read_setups_ini(path)
        self.setups = setups
        self.current_setups_path = path
        return setups

    def save_setups(self, path, setups_dict=None):
        if setups_dict is None:
            setups_dict = self.setups

        self.write_setups_ini(path, setups_dict)
        self.current_setups_path = path

    def add_setup(self, name, setup_dict):
        self.setups[name] = setup_dict

    def get_setup(self, name):
        return self.setups.get(name)

    def get_setup_names(self):
        return sorted(self.setups.keys())

    def validate_setup(self, setup_dict):
        """Numeric values, and positive link lengths where given."""
        if not isinstance(setup_dict, dict):
            return False
        try:
            values = {k: float(setup_dict[k]) for k in SETUP_KEYS if k in setup_dict}
        except (ValueError, TypeError):
            return False
        return all(values.get(k, 1.0) > 0 for k in ("crank_length", "rod_length"))
