"""Binary decoder.

This module provides the decoding side of the codec: decode_prefix() reads a
value from the front of a byte string and returns what is left, decode()
reads a whole value, and parse()/from_bytes() are their option-returning
forms, which return None instead of raising.

Decoding is all-or-nothing: a failure at any depth aborts the whole decode
with DecodeError and no partial value is produced.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from ..config import DEFAULT_CONFIG, CodecConfig
from ..exceptions import DecodeError
from .bytepack import ByteUnpacker
from .schema import Kind, TypeSchema, resolve_type

log = logging.getLogger(__name__)

Buffer = bytes | bytearray | memoryview


def decode_prefix(type_: Any, data: Buffer, *, config: Optional[CodecConfig] = None) -> tuple[Any, bytes]:
    """Decode one value from the front of data.

    Args:
        type_: Type annotation to decode (model class, ``U32``, ``list[Char]``, ...)
        data: Binary data to decode
        config: Decode policy (collection length limits)

    Returns:
        Tuple of (decoded value, unconsumed bytes)

    Raises:
        SchemaError: If the type is unsupported
        DecodeError: If data is truncated, corrupted, or doesn't match the type
    """
    schema = resolve_type(type_)
    unpacker = ByteUnpacker(data)
    value = decode_from(unpacker, schema, config)
    return value, unpacker.remainder()


def decode(type_: Any, data: Buffer, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode a whole value from data.

    Unconsumed trailing bytes are an error unless ``config.allow_trailing_bytes``
    is set, in which case they are ignored.

    Args:
        type_: Type annotation to decode
        data: Binary data to decode
        config: Decode policy

    Returns:
        Decoded value

    Raises:
        SchemaError: If the type is unsupported
        DecodeError: If decoding fails or trailing bytes are rejected

    Examples:
        ```python
        from bincodec import decode, encode

        data = encode(Sample(count=10, ratio=0.5))
        sample = decode(Sample, data)

        decode(Sample, data + b"\\x00")  # DecodeError: 1 trailing byte
        ```
    """
    config = config or DEFAULT_CONFIG
    schema = resolve_type(type_)
    unpacker = ByteUnpacker(data)
    value = decode_from(unpacker, schema, config)

    remaining = unpacker.bytes_remaining()
    if remaining and not config.allow_trailing_bytes:
        raise DecodeError(f"{remaining} trailing bytes after decoded value")
    return value


def parse(type_: Any, data: Buffer, *, config: Optional[CodecConfig] = None) -> Optional[tuple[Any, bytes]]:
    """Decode one value from the front of data.

    Returns:
        ``(value, remaining_bytes)``, or None if decoding failed
    """
    try:
        return decode_prefix(type_, data, config=config)
    except DecodeError as e:
        log.debug("parse of %r failed: %s", type_, e)
        return None


def from_bytes(type_: Any, data: Buffer, *, config: Optional[CodecConfig] = None) -> Any:
    """Decode a whole value from data.

    Returns:
        Decoded value, or None if decoding failed (including rejected trailing bytes)

    Note:
        For types whose values can themselves be None (the unit type ``None``)
        success and failure look the same; use ``parse`` or ``decode`` there.
    """
    try:
        return decode(type_, data, config=config)
    except DecodeError as e:
        log.debug("from_bytes of %r failed: %s", type_, e)
        return None


def decode_from(unpacker: ByteUnpacker, schema: TypeSchema, config: Optional[CodecConfig] = None) -> Any:
    """Decode one value from an unpacker, advancing it past the value.

    This is the building block for hand-written codecs that thread a single
    cursor through several values.

    Raises:
        DecodeError: If data is truncated or invalid
    """
    try:
        return _decode_value(unpacker, schema, config or DEFAULT_CONFIG)
    except IndexError as e:
        raise DecodeError(f"Truncated data: {e}") from e


def _decode_value(unpacker: ByteUnpacker, schema: TypeSchema, config: CodecConfig) -> Any:
    """Decode a single value.

    Raises:
        DecodeError: If data is invalid
        IndexError: If data is truncated
    """
    kind = schema.kind

    if kind is Kind.SCALAR:
        return schema.scalar.decode(unpacker)  # type: ignore[union-attr]

    if kind is Kind.STRING:
        raw = unpacker.read(_read_length(unpacker, 1, config))
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"invalid UTF-8 encoding: {e}") from e

    if kind is Kind.BYTES:
        if schema.fixed_length is not None:
            raw = unpacker.read(schema.fixed_length)
        else:
            raw = unpacker.read(_read_length(unpacker, 1, config))
        return bytearray(raw) if schema.python_type is bytearray else raw

    if kind is Kind.SEQUENCE:
        item_schema = schema.items[0]
        length = _read_length(unpacker, item_schema.min_size, config)
        items = [_decode_value(unpacker, item_schema, config) for _ in range(length)]
        return items if schema.container is list else schema.container(items)  # type: ignore[misc]

    if kind is Kind.ARRAY:
        item_schema = schema.items[0]
        items = [_decode_value(unpacker, item_schema, config) for _ in range(schema.fixed_length)]  # type: ignore[arg-type]
        return items if schema.container is list else schema.container(items)  # type: ignore[misc]

    if kind is Kind.MAPPING:
        key_schema, value_schema = schema.items
        length = _read_length(unpacker, key_schema.min_size + value_schema.min_size, config)
        result = {}
        for _ in range(length):
            key = _decode_value(unpacker, key_schema, config)
            result[key] = _decode_value(unpacker, value_schema, config)
        return result

    if kind is Kind.TUPLE:
        return tuple(_decode_value(unpacker, item, config) for item in schema.items)

    # Field-less enum: convert ordinal back to member
    if kind is Kind.ENUM:
        ordinal = unpacker.read(1)[0]
        members = list(schema.model)  # type: ignore[arg-type]
        if ordinal >= len(members):
            raise DecodeError(f"invalid enum tag {ordinal} (only {len(members)} values)")
        return members[ordinal]

    if kind is Kind.VARIANT:
        tag = unpacker.read(1)[0]
        variants = schema.model.bincodec_variants  # type: ignore[union-attr]
        if tag >= len(variants):
            raise DecodeError(f"invalid variant tag {tag} (only {len(variants)} variants)")
        variant = variants[tag]
        value = _decode_fields(unpacker, TypeSchema(Kind.STRUCT, variant, model=variant), config)
        if not isinstance(value, schema.python_type):
            raise DecodeError(f"expected {schema.python_type.__name__}, got {variant.__name__}")
        return value

    if kind in (Kind.STRUCT, Kind.NAMED_TUPLE):
        return _decode_fields(unpacker, schema, config)

    raise DecodeError(f"unsupported schema kind {kind}")


def _decode_fields(unpacker: ByteUnpacker, schema: TypeSchema, config: CodecConfig) -> Any:
    """Decode each field in declaration order, then build the instance."""
    model_class = schema.model
    field_values: dict[str, Any] = {}
    for field_schema in schema.fields():
        field_values[field_schema.name] = _decode_value(unpacker, field_schema.schema, config)

    try:
        return model_class(**field_values)  # type: ignore[misc]
    except (ValidationError, TypeError, ValueError) as e:
        raise DecodeError(f"Failed to construct {model_class.__name__}: {e}") from e  # type: ignore[union-attr]


def _read_length(unpacker: ByteUnpacker, item_min_size: int, config: CodecConfig) -> int:
    """Read a collection length and check it against the remaining input.

    The declared length is untrusted: it is rejected before any element is read
    when even the smallest possible elements could not fit in what is left.
    """
    length = unpacker.read_length()

    if config.max_collection_length is not None and length > config.max_collection_length:
        raise DecodeError(
            f"collection length {length} exceeds max_collection_length="
            f"{config.max_collection_length}"
        )

    if item_min_size > 0:
        if length * item_min_size > unpacker.bytes_remaining():
            raise DecodeError(
                f"collection length {length} needs at least {length * item_min_size} bytes, "
                f"have {unpacker.bytes_remaining()}"
            )
    elif length > config.max_zero_size_length:
        raise DecodeError(
            f"collection length {length} exceeds max_zero_size_length={config.max_zero_size_length}"
        )

    return length
