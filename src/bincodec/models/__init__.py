"""Pydantic message modeling for bincodec.

This module provides the BinaryMessage and BinaryEnum base classes and the
field helpers that give Python values a fixed binary width.
"""

from __future__ import annotations

from .base import BinaryEnum, BinaryMessage
from .fields import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    Char,
    FixedArray,
    FixedBytes,
    FixedFloat,
    FixedInt,
    check_binary32,
)

__all__ = [
    "BinaryMessage",
    "BinaryEnum",
    "FixedInt",
    "FixedFloat",
    "FixedBytes",
    "FixedArray",
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "F32",
    "F64",
    "Char",
    "check_binary32",
]
