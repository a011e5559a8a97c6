"""bincodec: Minimal Binary Codec

A Python library for compact, non-self-describing binary encoding. Scalars
are written at fixed width in little-endian order, collections carry a u64
length prefix, and struct and enum layouts are derived from the type's
declaration: fields are concatenated in order, enum variants get a one-byte
positional tag.

Key Features:
- Pydantic-based struct (BinaryMessage) and tagged union (BinaryEnum) modeling
- Fixed-width integers up to 128 bits, f32/f64, bool, char, unit
- Strings, bytes, lists, tuples, sets, dicts, fixed-length arrays
- Pure Python implementation, stateless and thread-safe

Quick Start:
    >>> from bincodec import BinaryMessage, F64, U32, decode, encode
    >>>
    >>> class Sample(BinaryMessage):
    ...     count: U32
    ...     ratio: F64
    >>>
    >>> data = encode(Sample(count=10, ratio=0.5))
    >>> decoded = decode(Sample, data)
"""

from __future__ import annotations

from .codec import (
    decode,
    decode_from,
    decode_prefix,
    encode,
    encode_into,
    from_bytes,
    parse,
    to_bytes,
)
from .config import DEFAULT_CONFIG, CodecConfig
from .exceptions import BincodecError, DecodeError, EncodeError, SchemaError
from .models import (
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
    BinaryEnum,
    BinaryMessage,
    Char,
    FixedArray,
    FixedBytes,
    FixedFloat,
    FixedInt,
    check_binary32,
)
from .utils import encoded_size, field_sizes, min_encoded_size

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BinaryMessage",
    "BinaryEnum",
    "encode",
    "encode_into",
    "to_bytes",
    "decode",
    "decode_prefix",
    "decode_from",
    "parse",
    "from_bytes",
    # Field helpers
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
    # Configuration
    "CodecConfig",
    "DEFAULT_CONFIG",
    # Exceptions
    "BincodecError",
    "SchemaError",
    "EncodeError",
    "DecodeError",
    # Sizing
    "encoded_size",
    "min_encoded_size",
    "field_sizes",
    # Version
    "__version__",
]
