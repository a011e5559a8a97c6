"""Field type helpers and utilities.

This module provides convenience functions and type aliases for declaring
fields with a binary wire type. Widths and fixed lengths are stored in the
field's ``json_schema_extra`` where the schema introspection picks them up;
the accompanying ``ge``/``le``/``min_length``/``max_length`` constraints let
Pydantic reject values that would not fit.
"""

from __future__ import annotations

import struct
from typing import Annotated, Any, cast

from pydantic import AfterValidator, Field
from pydantic.fields import FieldInfo


def FixedInt(*, bits: int, signed: bool = False, **kwargs: Any) -> FieldInfo:
    """Create a fixed-width integer field.

    Args:
        bits: Number of bits (8, 16, 32, 64 or 128)
        signed: Whether the integer is two's complement (default False)
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Message(BinaryMessage):
        ...     temperature: Annotated[int, FixedInt(bits=16, signed=True)]
    """
    if bits not in (8, 16, 32, 64, 128):
        raise ValueError(f"bits must be 8, 16, 32, 64 or 128, got {bits}")

    if signed:
        ge, le = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        ge, le = 0, (1 << bits) - 1

    return cast(
        FieldInfo,
        Field(ge=ge, le=le, json_schema_extra={"bits": bits, "signed": signed}, **kwargs),
    )


def FixedFloat(*, bits: int = 64, **kwargs: Any) -> FieldInfo:
    """Create an IEEE 754 float field of the given width.

    Args:
        bits: 32 (single precision) or 64 (double precision, the default for ``float``)
        **kwargs: Additional Field() arguments

    Note:
        Python floats are doubles. A 32-bit field rounds on encode, so values
        only survive a round trip exactly when they are representable in binary32.
        The ``F32`` alias also rejects finite values too large for binary32;
        pair ``FixedFloat(bits=32)`` with ``AfterValidator(check_binary32)``
        to get the same check on a custom field.
    """
    if bits not in (32, 64):
        raise ValueError(f"bits must be 32 or 64, got {bits}")

    return cast(FieldInfo, Field(json_schema_extra={"bits": bits}, **kwargs))


def FixedBytes(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length bytes field (written without a length prefix).

    Args:
        length: Exact length in bytes
        **kwargs: Additional Field() arguments

    Example:
        >>> class Message(BinaryMessage):
        ...     digest: Annotated[bytes, FixedBytes(length=32)]
    """
    return cast(
        FieldInfo,
        Field(
            min_length=length,
            max_length=length,
            json_schema_extra={"fixed_length": length},
            **kwargs,
        ),
    )


def FixedArray(*, length: int, **kwargs: Any) -> FieldInfo:
    """Create a fixed-length list/tuple field (written without a length prefix).

    Example:
        >>> class Message(BinaryMessage):
        ...     matrix: Annotated[list[F32], FixedArray(length=9)]
    """
    return cast(
        FieldInfo,
        Field(
            min_length=length,
            max_length=length,
            json_schema_extra={"fixed_length": length},
            **kwargs,
        ),
    )


def check_binary32(value: float) -> float:
    """Reject finite floats that overflow IEEE 754 single precision.

    Infinities and NaN are kept; they have binary32 encodings.
    """
    try:
        struct.pack("<f", value)
    except OverflowError as e:
        raise ValueError(f"{value} does not fit in a 32-bit float") from e
    return value


def check_scalar_value(value: str) -> str:
    """Reject surrogate code points, which are not Unicode scalar values."""
    if 0xD800 <= ord(value) <= 0xDFFF:
        raise ValueError(f"{value!r} is a surrogate, not a Unicode scalar value")
    return value


U8 = Annotated[int, FixedInt(bits=8)]
U16 = Annotated[int, FixedInt(bits=16)]
U32 = Annotated[int, FixedInt(bits=32)]
U64 = Annotated[int, FixedInt(bits=64)]
U128 = Annotated[int, FixedInt(bits=128)]
I8 = Annotated[int, FixedInt(bits=8, signed=True)]
I16 = Annotated[int, FixedInt(bits=16, signed=True)]
I32 = Annotated[int, FixedInt(bits=32, signed=True)]
I64 = Annotated[int, FixedInt(bits=64, signed=True)]
I128 = Annotated[int, FixedInt(bits=128, signed=True)]
F32 = Annotated[float, FixedFloat(bits=32), AfterValidator(check_binary32)]
F64 = Annotated[float, FixedFloat(bits=64)]

# A single Unicode scalar value, written as its u32 code point
Char = Annotated[
    str,
    Field(min_length=1, max_length=1, json_schema_extra={"char": True}),
    AfterValidator(check_scalar_value),
]
