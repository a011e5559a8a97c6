"""Fixed-width scalar codecs.

Every scalar is written little-endian at its natural width. Integers wider
than 64 bits go through ``int.to_bytes``; everything else uses ``struct``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from ..exceptions import DecodeError, EncodeError
from .bytepack import BytePacker, ByteUnpacker

MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE = range(0xD800, 0xE000)

_INT_FORMATS = {
    (1, False): "<B",
    (1, True): "<b",
    (2, False): "<H",
    (2, True): "<h",
    (4, False): "<I",
    (4, True): "<i",
    (8, False): "<Q",
    (8, True): "<q",
}

_FLOAT_FORMATS = {4: "<f", 8: "<d"}


@dataclass(frozen=True)
class IntCodec:
    """Two's complement or unsigned integer of a fixed byte width."""

    size: int
    signed: bool

    @property
    def min_value(self) -> int:
        return -(1 << (self.size * 8 - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        bits = self.size * 8 - 1 if self.signed else self.size * 8
        return (1 << bits) - 1

    def encode(self, packer: BytePacker, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise EncodeError(f"expected int, got {type(value).__name__}")
        if value < self.min_value or value > self.max_value:
            raise EncodeError(
                f"value {value} out of bounds [{self.min_value}, {self.max_value}]"
            )
        fmt = _INT_FORMATS.get((self.size, self.signed))
        if fmt is None:
            packer.write_int(value, self.size, self.signed)
        else:
            packer.write_struct(fmt, value)

    def decode(self, unpacker: ByteUnpacker) -> int:
        fmt = _INT_FORMATS.get((self.size, self.signed))
        if fmt is None:
            return unpacker.read_int(self.size, self.signed)
        return int(unpacker.read_struct(fmt, self.size))


@dataclass(frozen=True)
class FloatCodec:
    """IEEE 754 binary32 or binary64."""

    size: int

    def encode(self, packer: BytePacker, value: float) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise EncodeError(f"expected float, got {type(value).__name__}")
        try:
            packer.write_struct(_FLOAT_FORMATS[self.size], value)
        except (struct.error, OverflowError) as e:
            raise EncodeError(f"value {value} does not fit in {self.size * 8} bits") from e

    def decode(self, unpacker: ByteUnpacker) -> float:
        return float(unpacker.read_struct(_FLOAT_FORMATS[self.size], self.size))


@dataclass(frozen=True)
class BoolCodec:
    """One byte, 0 or 1. Any other byte is rejected on decode."""

    size: int = 1

    def encode(self, packer: BytePacker, value: bool) -> None:
        if not isinstance(value, bool):
            raise EncodeError(f"expected bool, got {type(value).__name__}")
        packer.write_bytes(b"\x01" if value else b"\x00")

    def decode(self, unpacker: ByteUnpacker) -> bool:
        byte = unpacker.read(1)[0]
        if byte == 1:
            return True
        if byte == 0:
            return False
        raise DecodeError(f"invalid bool byte {byte:#04x}")


@dataclass(frozen=True)
class CharCodec:
    """A single Unicode scalar value stored as a u32 code point."""

    size: int = 4

    def encode(self, packer: BytePacker, value: str) -> None:
        if not isinstance(value, str) or len(value) != 1:
            raise EncodeError(f"expected a single character, got {value!r}")
        if ord(value) in SURROGATE_RANGE:
            raise EncodeError(f"invalid code point {ord(value):#x}")
        packer.write_struct("<I", ord(value))

    def decode(self, unpacker: ByteUnpacker) -> str:
        code_point = int(unpacker.read_struct("<I", 4))
        if code_point > MAX_CODE_POINT or code_point in SURROGATE_RANGE:
            raise DecodeError(f"invalid code point {code_point:#x}")
        return chr(code_point)


@dataclass(frozen=True)
class UnitCodec:
    """The unit value None: zero bytes, always decodes to None.

    ``tuple[()]`` is also zero bytes but resolves as an empty tuple, so it
    decodes to ``()``.
    """

    size: int = 0

    def encode(self, packer: BytePacker, value: None) -> None:
        if value is not None and value != ():
            raise EncodeError(f"expected unit value, got {value!r}")

    def decode(self, unpacker: ByteUnpacker) -> None:
        return None


ScalarCodec = IntCodec | FloatCodec | BoolCodec | CharCodec | UnitCodec

U8 = IntCodec(1, signed=False)
U16 = IntCodec(2, signed=False)
U32 = IntCodec(4, signed=False)
U64 = IntCodec(8, signed=False)
U128 = IntCodec(16, signed=False)
I8 = IntCodec(1, signed=True)
I16 = IntCodec(2, signed=True)
I32 = IntCodec(4, signed=True)
I64 = IntCodec(8, signed=True)
I128 = IntCodec(16, signed=True)
F32 = FloatCodec(4)
F64 = FloatCodec(8)
BOOL = BoolCodec()
CHAR = CharCodec()
UNIT = UnitCodec()


def int_codec(bits: int, signed: bool) -> IntCodec:
    """Return the integer codec for a bit width (8, 16, 32, 64 or 128).

    Raises:
        ValueError: If bits is not a supported width
    """
    if bits not in (8, 16, 32, 64, 128):
        raise ValueError(f"integer width must be 8, 16, 32, 64 or 128 bits, got {bits}")
    return IntCodec(bits // 8, signed=signed)


def float_codec(bits: int) -> FloatCodec:
    """Return the float codec for a bit width (32 or 64)."""
    if bits not in (32, 64):
        raise ValueError(f"float width must be 32 or 64 bits, got {bits}")
    return FloatCodec(bits // 8)
