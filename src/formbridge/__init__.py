"""formbridge: form configuration -> backend wire request translation layer."""

__version__ = "0.1.0"
