"""Core module for the tourneyhub application."""

from .types import FixtureDict, StoreValue

__all__ = ["FixtureDict", "StoreValue"]
