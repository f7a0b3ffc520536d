"""
Command-line interface for objcexport.
"""

from .main import main_cli

__all__ = ["main_cli"]
