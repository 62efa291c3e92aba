"""
Resources module - data files loaded at startup.
"""

from engine.resources.database import Database

__all__ = ["Database"]
