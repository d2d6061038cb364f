# File: utils/__init__.py
"""Pure Python utilities for Brawldle.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Fixed-offset game dates and reset countdowns

Usage:
    from .utils import dt_utils
"""

from . import dt_utils

__all__ = ["dt_utils"]
