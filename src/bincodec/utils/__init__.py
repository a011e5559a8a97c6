"""Utility functions for bincodec.

This module provides static size calculation for encodable types.
"""

from __future__ import annotations

from .sizing import encoded_size, field_sizes, min_encoded_size

__all__ = [
    "encoded_size",
    "min_encoded_size",
    "field_sizes",
]
