"""Binary codec for bincodec.

This module provides encoding and decoding of primitive values, collections
and model types, with struct and enum layouts derived from type declarations.
"""

from __future__ import annotations

from .decoder import decode, decode_from, decode_prefix, from_bytes, parse
from .encoder import encode, encode_into, to_bytes
from .schema import FieldSchema, MessageSchema, TypeSchema, resolve_type

__all__ = [
    "encode",
    "encode_into",
    "to_bytes",
    "decode",
    "decode_prefix",
    "decode_from",
    "parse",
    "from_bytes",
    "MessageSchema",
    "FieldSchema",
    "TypeSchema",
    "resolve_type",
]
