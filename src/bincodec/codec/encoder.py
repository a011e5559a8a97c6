"""Binary encoder.

This module provides encode() and encode_into(), which walk a value depth
first and append its wire representation to a byte buffer. Struct fields are
written in declaration order, enum variants as a one-byte tag followed by the
variant's fields, and collections as a u64 length followed by the elements.
"""

from __future__ import annotations

import enum
import struct
from typing import Any

from pydantic import BaseModel

from ..exceptions import EncodeError, SchemaError
from .bytepack import BytePacker
from .schema import Kind, TypeSchema, resolve_type


def encode(value: Any, as_type: Any = None) -> bytes:
    """Encode a value to a fresh byte string.

    Args:
        value: Value to encode
        as_type: Wire type annotation; required when it cannot be inferred from
            the value (ints, collections, type aliases such as ``U16``)

    Returns:
        Binary representation

    Raises:
        SchemaError: If the type is unsupported or cannot be inferred
        EncodeError: If the value does not fit its declared type

    Examples:
        ```python
        from bincodec import BinaryMessage, F64, U32, encode

        class Sample(BinaryMessage):
            count: U32
            ratio: F64

        data = encode(Sample(count=10, ratio=0.5))  # 12 bytes
        data = encode([1, 2, 3], as_type=list[U32])  # 8 + 3 * 4 bytes
        ```
    """
    buffer = bytearray()
    encode_into(value, buffer, as_type)
    return bytes(buffer)


to_bytes = encode


def encode_into(value: Any, buffer: bytearray, as_type: Any = None) -> None:
    """Append the encoding of value to buffer.

    On error the buffer is left as it was before the call.

    Raises:
        SchemaError: If the type is unsupported or cannot be inferred
        EncodeError: If the value does not fit its declared type
    """
    schema = infer_schema(value) if as_type is None else resolve_type(as_type)
    packer = BytePacker(buffer)
    start = packer.byte_length()

    try:
        _encode_value(packer, schema, value)

        # Check max_bytes constraint if present
        max_bytes = getattr(type(value), "bincodec_max_bytes", None)
        size = packer.byte_length() - start
        if max_bytes is not None and size > max_bytes:
            raise EncodeError(
                f"Encoded message size ({size} bytes) exceeds bincodec_max_bytes={max_bytes}"
            )
    except Exception:
        del buffer[start:]
        raise


def infer_schema(value: Any) -> TypeSchema:
    """Work out the wire type of a value that carries its own type.

    Raises:
        SchemaError: If the value's type is ambiguous (int, list, dict, ...)
    """
    if value is None:
        return resolve_type(None)
    if isinstance(value, (BaseModel, enum.Enum)):
        return resolve_type(type(value))
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return resolve_type(type(value))
    if isinstance(value, bool):
        return resolve_type(bool)
    if isinstance(value, float):
        return resolve_type(float)
    if isinstance(value, str):
        return resolve_type(str)
    if isinstance(value, (bytes, bytearray)):
        return resolve_type(bytes)
    raise SchemaError(
        f"cannot infer the wire type of {type(value).__name__}; pass as_type "
        f"(e.g. as_type=U32 or as_type=list[I16])"
    )


def _encode_value(packer: BytePacker, schema: TypeSchema, value: Any) -> None:
    """Encode a single value according to its schema.

    Raises:
        EncodeError: If value is invalid for the schema
    """
    kind = schema.kind

    # Scalars, including unit
    if kind is Kind.SCALAR:
        schema.scalar.encode(packer, value)  # type: ignore[union-attr]
        return

    # Length-prefixed UTF-8
    if kind is Kind.STRING:
        if not isinstance(value, str):
            raise EncodeError(f"expected str, got {type(value).__name__}")
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodeError(f"string is not valid UTF-8: {e}") from e
        packer.write_length(len(data))
        packer.write_bytes(data)
        return

    # Byte strings, prefixed unless fixed
    if kind is Kind.BYTES:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"expected bytes, got {type(value).__name__}")
        data = bytes(value)
        if schema.fixed_length is not None:
            if len(data) != schema.fixed_length:
                raise EncodeError(
                    f"expected {schema.fixed_length} bytes, got {len(data)} bytes"
                )
        else:
            packer.write_length(len(data))
        packer.write_bytes(data)
        return

    if kind is Kind.SEQUENCE:
        item_schema = schema.items[0]
        items = list(value)
        packer.write_length(len(items))
        for item in items:
            _encode_value(packer, item_schema, item)
        return

    if kind is Kind.ARRAY:
        item_schema = schema.items[0]
        items = list(value)
        if len(items) != schema.fixed_length:
            raise EncodeError(
                f"expected {schema.fixed_length} elements, got {len(items)} elements"
            )
        for item in items:
            _encode_value(packer, item_schema, item)
        return

    if kind is Kind.MAPPING:
        key_schema, value_schema = schema.items
        packer.write_length(len(value))
        for key, item in value.items():
            _encode_value(packer, key_schema, key)
            _encode_value(packer, value_schema, item)
        return

    if kind is Kind.TUPLE:
        if not isinstance(value, tuple) or len(value) != len(schema.items):
            raise EncodeError(f"expected a {len(schema.items)}-tuple, got {value!r}")
        for item_schema, item in zip(schema.items, value):
            _encode_value(packer, item_schema, item)
        return

    # Field-less enum: ordinal (0-indexed position in declaration order)
    if kind is Kind.ENUM:
        if not isinstance(value, schema.model):  # type: ignore[arg-type]
            raise EncodeError(
                f"expected {schema.model.__name__}, got {type(value).__name__}"  # type: ignore[union-attr]
            )
        ordinal = list(schema.model).index(value)  # type: ignore[arg-type]
        packer.write_bytes(bytes((ordinal,)))
        return

    # Tagged union: variant tag, then the variant's fields
    if kind is Kind.VARIANT:
        root = schema.model
        if not isinstance(value, schema.python_type) or type(value) is root:
            raise EncodeError(
                f"expected a variant of {root.__name__}, got {type(value).__name__}"  # type: ignore[union-attr]
            )
        tag = type(value).variant_tag()
        packer.write_bytes(bytes((tag,)))
        variant = type(value)
        _encode_fields(packer, TypeSchema(Kind.STRUCT, variant, model=variant), value)
        return

    if kind in (Kind.STRUCT, Kind.NAMED_TUPLE):
        if not isinstance(value, schema.model):  # type: ignore[arg-type]
            raise EncodeError(
                f"expected {schema.model.__name__}, got {type(value).__name__}"  # type: ignore[union-attr]
            )
        _encode_fields(packer, schema, value)
        return

    raise EncodeError(f"unsupported schema kind {kind}")


def _encode_fields(packer: BytePacker, schema: TypeSchema, value: Any) -> None:
    """Encode each field of a struct in declaration order."""
    for field_schema in schema.fields():
        field_value = getattr(value, field_schema.name)
        try:
            _encode_value(packer, field_schema.schema, field_value)
        except (struct.error, OverflowError) as e:
            raise EncodeError(f"Field {field_schema.name}: {e}") from e
        except EncodeError as e:
            raise EncodeError(f"Field {field_schema.name}: {e}") from e
