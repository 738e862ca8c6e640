"""Utility functions."""

from .math import ceil_div

__all__ = ["ceil_div"]
