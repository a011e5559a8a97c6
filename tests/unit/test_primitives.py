"""Unit tests for fixed-width primitive encoding."""

from __future__ import annotations

import struct
from typing import Annotated

import pytest
from pydantic import ValidationError

from bincodec import (
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
    BinaryMessage,
    Char,
    DecodeError,
    EncodeError,
    FixedFloat,
    FixedInt,
    SchemaError,
    decode,
    decode_prefix,
    encode,
    from_bytes,
    parse,
)

INT_TYPES = [
    (U8, 1, 0xAB),
    (U16, 2, 0xABCD),
    (U32, 4, 0xDEADBEEF),
    (U64, 8, 2**64 - 1),
    (U128, 16, 2**128 - 1),
    (I8, 1, -128),
    (I16, 2, -3),
    (I32, 4, -(2**31)),
    (I64, 8, 2**63 - 1),
    (I128, 16, -(2**127)),
]


class TestIntegers:
    """Test fixed-width integer encoding."""

    @pytest.mark.parametrize("int_type,width,value", INT_TYPES)
    def test_width_and_roundtrip(self, int_type: object, width: int, value: int) -> None:
        """Test each width encodes to its natural size and decodes back."""
        data = encode(value, as_type=int_type)

        assert len(data) == width
        assert decode(int_type, data) == value

    def test_little_endian(self) -> None:
        """Test byte order is little-endian."""
        assert encode(0x0102, as_type=U16) == b"\x02\x01"
        assert encode(0x01020304, as_type=U32) == b"\x04\x03\x02\x01"
        assert encode(1, as_type=U128) == b"\x01" + b"\x00" * 15

    def test_twos_complement(self) -> None:
        """Test signed integers use two's complement."""
        assert encode(-1, as_type=I8) == b"\xff"
        assert encode(-3, as_type=I16) == b"\xfd\xff"
        assert encode(-1, as_type=I128) == b"\xff" * 16

    @pytest.mark.parametrize(
        "int_type,value",
        [(U8, 256), (U8, -1), (I8, 128), (U16, 65536), (I64, 2**63), (U128, 2**128)],
    )
    def test_out_of_bounds(self, int_type: object, value: int) -> None:
        """Test values outside the width are rejected on encode."""
        with pytest.raises(EncodeError, match="out of bounds"):
            encode(value, as_type=int_type)

    def test_wrong_python_type(self) -> None:
        """Test non-integers are rejected for integer types."""
        with pytest.raises(EncodeError, match="expected int"):
            encode(1.5, as_type=U32)

    def test_custom_width(self) -> None:
        """Test FixedInt builds the same codec as the aliases."""
        Temperature = Annotated[int, FixedInt(bits=16, signed=True)]

        assert encode(-3, as_type=Temperature) == encode(-3, as_type=I16)

    def test_invalid_width(self) -> None:
        """Test unsupported widths are rejected."""
        with pytest.raises(ValueError, match="bits"):
            FixedInt(bits=12)

    def test_plain_int_has_no_width(self) -> None:
        """Test a bare int annotation is not encodable."""
        with pytest.raises(SchemaError, match="fixed width"):
            decode(int, b"\x00")

        with pytest.raises(SchemaError, match="as_type"):
            encode(5)


class TestFloats:
    """Test IEEE 754 encoding."""

    def test_f64(self) -> None:
        """Test doubles are 8 bytes little-endian."""
        assert encode(0.5, as_type=F64) == struct.pack("<d", 0.5)
        assert decode(F64, struct.pack("<d", -2.25)) == -2.25

    def test_plain_float_is_f64(self) -> None:
        """Test a Python float defaults to double precision."""
        assert encode(0.1) == struct.pack("<d", 0.1)
        assert decode(float, encode(0.1)) == 0.1

    def test_f32(self) -> None:
        """Test singles are 4 bytes little-endian."""
        data = encode(1.5, as_type=F32)

        assert data == struct.pack("<f", 1.5)
        assert decode(F32, data) == 1.5

    def test_f32_overflow(self) -> None:
        """Test doubles too large for binary32 are rejected."""
        with pytest.raises(EncodeError, match="does not fit"):
            encode(1e300, as_type=F32)

    def test_f32_field_validates_range(self) -> None:
        """Test F32 fields reject doubles that would overflow on encode."""

        class Narrow(BinaryMessage):
            x: F32
            xs: list[F32] = []

        with pytest.raises(ValidationError):
            Narrow(x=1e300)

        with pytest.raises(ValidationError):
            Narrow(x=0.0, xs=[1.0, -1e300])

    def test_f32_field_keeps_infinity(self) -> None:
        """Test infinities are valid binary32 values."""

        class Narrow(BinaryMessage):
            x: F32

        msg = Narrow(x=float("inf"))

        assert Narrow.decode(msg.to_bytes()) == msg

    def test_invalid_float_width(self) -> None:
        """Test unsupported float widths are rejected."""
        with pytest.raises(ValueError, match="bits"):
            FixedFloat(bits=16)


class TestBool:
    """Test boolean encoding."""

    def test_encoding(self) -> None:
        """Test bools are one byte, 0 or 1."""
        assert encode(True) == b"\x01"
        assert encode(False) == b"\x00"

    def test_decode(self) -> None:
        """Test 0 and 1 decode to False and True."""
        assert decode(bool, b"\x01") is True
        assert decode(bool, b"\x00") is False

    @pytest.mark.parametrize("byte", [b"\x02", b"\x7f", b"\xff"])
    def test_invalid_byte_rejected(self, byte: bytes) -> None:
        """Test bytes other than 0/1 are a decode failure, not coerced."""
        with pytest.raises(DecodeError, match="invalid bool"):
            decode(bool, byte)

        assert from_bytes(bool, byte) is None


class TestChar:
    """Test character encoding."""

    def test_ascii(self) -> None:
        """Test characters are written as u32 code points."""
        assert encode("a", as_type=Char) == b"a\x00\x00\x00"

    def test_non_bmp(self) -> None:
        """Test characters outside the BMP round-trip."""
        data = encode("\U0001f600", as_type=Char)

        assert data == struct.pack("<I", 0x1F600)
        assert decode(Char, data) == "\U0001f600"

    @pytest.mark.parametrize("code_point", [0xD800, 0xDFFF, 0x110000, 0xFFFFFFFF])
    def test_invalid_code_point_rejected(self, code_point: int) -> None:
        """Test surrogates and values past U+10FFFF are a decode failure."""
        data = struct.pack("<I", code_point)

        with pytest.raises(DecodeError, match="invalid code point"):
            decode(Char, data)

        assert from_bytes(Char, data) is None

    def test_max_code_point(self) -> None:
        """Test U+10FFFF is accepted."""
        assert decode(Char, struct.pack("<I", 0x10FFFF)) == "\U0010ffff"

    def test_multiple_characters_rejected(self) -> None:
        """Test encoding more than one character as Char fails."""
        with pytest.raises(EncodeError, match="single character"):
            encode("ab", as_type=Char)

    def test_surrogate_rejected(self) -> None:
        """Test lone surrogates fail validation and encoding."""

        class Initial(BinaryMessage):
            letter: Char

        with pytest.raises(ValidationError):
            Initial(letter="\ud800")

        with pytest.raises(EncodeError, match="invalid code point"):
            encode("\udfff", as_type=Char)


class TestUnit:
    """Test the unit value."""

    def test_encodes_to_nothing(self) -> None:
        """Test None encodes to zero bytes."""
        assert encode(None) == b""
        assert encode((), as_type=tuple[()]) == b""

    def test_decodes_from_nothing(self) -> None:
        """Test unit decodes from an empty slice."""
        assert decode(None, b"") is None
        assert decode_prefix(None, b"rest") == (None, b"rest")

    def test_empty_tuple_decodes_to_empty_tuple(self) -> None:
        """Test tuple[()] rebuilds () rather than None."""
        assert decode(tuple[()], b"") == ()
        assert decode_prefix(tuple[()], b"rest") == ((), b"rest")

    def test_empty_tuple_field_roundtrip(self) -> None:
        """Test a struct with a tuple[()] field round-trips."""

        class WithUnit(BinaryMessage):
            a: U32
            u: tuple[()]

        msg = WithUnit(a=1, u=())
        data = encode(msg)

        assert data == b"\x01\x00\x00\x00"
        assert decode(WithUnit, data) == msg
        assert WithUnit.from_bytes(data) == msg

    def test_parse_tells_unit_success_from_failure(self) -> None:
        """Test parse distinguishes a decoded None from a failed decode."""
        assert parse(None, b"") == (None, b"")
        assert from_bytes(None, b"") is None

        with pytest.raises(DecodeError, match="trailing"):
            decode(None, b"\x00")


class TestTruncation:
    """Test truncated primitives fail instead of decoding wrong data."""

    @pytest.mark.parametrize("int_type,width,value", INT_TYPES)
    def test_integers(self, int_type: object, width: int, value: int) -> None:
        """Test every integer width rejects each truncated prefix."""
        data = encode(value, as_type=int_type)

        for cut in range(width):
            with pytest.raises(DecodeError, match="[Tt]runcated"):
                decode(int_type, data[:cut])

    @pytest.mark.parametrize("scalar_type,value", [(F32, 1.0), (F64, 1.0), (Char, "x"), (bool, True)])
    def test_other_scalars(self, scalar_type: object, value: object) -> None:
        """Test floats, chars and bools reject truncated input."""
        data = encode(value, as_type=scalar_type)

        for cut in range(len(data)):
            assert from_bytes(scalar_type, data[:cut]) is None
