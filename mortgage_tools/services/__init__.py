"""
Application services.
"""

from mortgage_tools.services.presets import PresetRepository

__all__ = ["PresetRepository"]
