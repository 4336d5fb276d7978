"""Homebrew tap setup.

Provisions a Homebrew tap repository through a resumable, step-by-step
workflow:
- each step checks whether its goal already holds before acting
- progress is persisted after every transition
- a failed or interrupted run is resumed by its run id
"""

__version__ = "0.1.0"

from homebrew_tap_setup.config import TapSetupSettings

__all__ = ["__version__", "TapSetupSettings"]
