"""
Utility modules for oclkit.

- color: Terminal color utilities
- log: Logging configuration with colored output
"""

from .log import config, CustomFormatter
from .color import red, green, bold, colorize, set_color_enabled

__all__ = [
    # log module
    "config",
    "CustomFormatter",
    # color module
    "red", "green", "bold",
    "colorize", "set_color_enabled",
]
