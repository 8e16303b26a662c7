"""Utility helpers for the submission portal."""

from .logging import setup_logging

__all__ = ["setup_logging"]
