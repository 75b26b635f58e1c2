"""Chappe - static documentation builder CLI"""

from chappecli._version import __version__

__all__ = ["__version__"]
