"""Encoded size calculation utilities.

This module provides functions to calculate the encoded size of a type
without actually encoding a value.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from ..codec.schema import MessageSchema, resolve_type


def _type_of(value_or_type: Any) -> Any:
    # Get the class if we were passed an instance
    if isinstance(value_or_type, BaseModel):
        return type(value_or_type)
    if isinstance(value_or_type, tuple) and hasattr(type(value_or_type), "_fields"):
        return type(value_or_type)
    return value_or_type


def encoded_size(value_or_type: Any) -> Optional[int]:
    """Return the encoded size in bytes shared by every value of a type.

    This can take either a model instance or a type annotation. Types whose
    encoding varies with the value (strings, collections, enums whose variants
    differ in size) have no fixed size.

    Args:
        value_or_type: Model instance, model class or type annotation

    Returns:
        Size in bytes, or None if the size depends on the value

    Raises:
        SchemaError: If the type is unsupported

    Example:
        >>> class Sample(BinaryMessage):
        ...     count: U32
        ...     ratio: F64
        >>> encoded_size(Sample)
        12
        >>> encoded_size(list[U8]) is None
        True
    """
    return resolve_type(_type_of(value_or_type)).fixed_size


def min_encoded_size(value_or_type: Any) -> int:
    """Return the smallest number of bytes any value of a type encodes to.

    Raises:
        SchemaError: If the type is unsupported
    """
    return resolve_type(_type_of(value_or_type)).min_size


def field_sizes(value_or_type: Any) -> dict[str, Optional[int]]:
    """Get the fixed encoded size in bytes of each field of a model.

    Args:
        value_or_type: Model or NamedTuple instance or class

    Returns:
        Dictionary mapping field names to their size in bytes (None if variable)

    Example:
        >>> field_sizes(Sample)
        {'count': 4, 'ratio': 8}
    """
    schema = MessageSchema.from_model(_type_of(value_or_type))
    return {field.name: field.schema.fixed_size for field in schema.fields}
