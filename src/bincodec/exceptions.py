"""Exception hierarchy for bincodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BincodecError for easy catching of any bincodec-specific error.
"""

from __future__ import annotations


class BincodecError(Exception):
    """Base exception for all bincodec errors."""

    pass


class SchemaError(BincodecError):
    """Raised when a type cannot be given a binary codec.

    Examples:
        - Integer annotation without a fixed width
        - Unsupported annotation (Optional, Union, arbitrary classes)
        - Enum with more than 256 variants
        - Variant declared below another variant
    """

    pass


class EncodeError(BincodecError):
    """Raised when a value does not fit its declared wire type.

    Encoding a validated value never fails; this only happens when validation
    was bypassed (``model_construct``) or ``as_type`` disagrees with the value.

    Examples:
        - Integer out of range for its width
        - Fixed-length array or bytes with the wrong length
        - Message exceeds bincodec_max_bytes
    """

    pass


class DecodeError(BincodecError):
    """Raised when binary data cannot be decoded.

    This is the single decode failure kind. Causes are not distinguished:
        - Truncated data
        - Enum tag out of range
        - Boolean byte other than 0/1, invalid code point, invalid UTF-8
        - Declared collection length larger than the remaining input allows
        - Unconsumed trailing bytes (when trailing bytes are rejected)
    """

    pass
