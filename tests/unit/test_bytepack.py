"""Unit tests for byte packing utilities."""

from __future__ import annotations

import struct

import pytest

from bincodec.codec.bytepack import BytePacker, ByteUnpacker


class TestBytePacker:
    """Test BytePacker functionality."""

    def test_write_struct(self) -> None:
        """Test writing values through struct formats."""
        packer = BytePacker()
        packer.write_struct("<H", 0x0102)
        packer.write_struct("<b", -1)

        assert packer.byte_length() == 3
        assert packer.to_bytes() == b"\x02\x01\xff"

    def test_write_struct_out_of_range(self) -> None:
        """Test struct range errors propagate."""
        packer = BytePacker()

        with pytest.raises(struct.error):
            packer.write_struct("<B", 256)

    def test_write_wide_int(self) -> None:
        """Test writing 128-bit integers little-endian."""
        packer = BytePacker()
        packer.write_int(1, 16, signed=False)
        packer.write_int(-2, 16, signed=True)

        data = packer.to_bytes()
        assert data[:16] == b"\x01" + b"\x00" * 15
        assert data[16:] == b"\xfe" + b"\xff" * 15

    def test_write_length(self) -> None:
        """Test lengths are 8-byte little-endian."""
        packer = BytePacker()
        packer.write_length(3)

        assert packer.to_bytes() == b"\x03\x00\x00\x00\x00\x00\x00\x00"

    def test_appends_to_existing_buffer(self) -> None:
        """Test packer appends to a caller-owned buffer."""
        buffer = bytearray(b"ab")
        packer = BytePacker(buffer)
        packer.write_bytes(b"cd")

        assert buffer == bytearray(b"abcd")
        assert packer.buffer is buffer

    def test_empty(self) -> None:
        """Test empty packer produces no bytes."""
        assert BytePacker().to_bytes() == b""


class TestByteUnpacker:
    """Test ByteUnpacker functionality."""

    def test_read(self) -> None:
        """Test reading raw bytes consumes a prefix."""
        unpacker = ByteUnpacker(b"hello")

        assert unpacker.read(2) == b"he"
        assert unpacker.position() == 2
        assert unpacker.bytes_remaining() == 3
        assert unpacker.remainder() == b"llo"

    def test_read_past_end(self) -> None:
        """Test reading past the end raises IndexError without consuming."""
        unpacker = ByteUnpacker(b"\x01\x02")

        with pytest.raises(IndexError):
            unpacker.read(3)

        assert unpacker.position() == 0

    def test_read_struct(self) -> None:
        """Test reading struct values."""
        unpacker = ByteUnpacker(b"\x02\x01\xff")

        assert unpacker.read_struct("<H", 2) == 0x0102
        assert unpacker.read_struct("<b", 1) == -1
        assert unpacker.bytes_remaining() == 0

    def test_read_struct_truncated(self) -> None:
        """Test struct reads check available bytes."""
        unpacker = ByteUnpacker(b"\x00\x00\x00")

        with pytest.raises(IndexError):
            unpacker.read_struct("<I", 4)

    def test_read_wide_int(self) -> None:
        """Test reading 128-bit integers."""
        unpacker = ByteUnpacker(b"\xfe" + b"\xff" * 15)

        assert unpacker.read_int(16, signed=True) == -2

    def test_read_length(self) -> None:
        """Test reading a u64 length."""
        unpacker = ByteUnpacker(b"\x05" + b"\x00" * 7 + b"x")

        assert unpacker.read_length() == 5
        assert unpacker.remainder() == b"x"

    def test_accepts_memoryview(self) -> None:
        """Test unpacker works over a memoryview slice."""
        view = memoryview(b"xxab")[2:]
        unpacker = ByteUnpacker(view)

        assert unpacker.read(2) == b"ab"

    def test_roundtrip(self) -> None:
        """Test packing then unpacking mixed values."""
        packer = BytePacker()
        packer.write_struct("<d", 0.5)
        packer.write_length(2)
        packer.write_bytes(b"ok")

        unpacker = ByteUnpacker(packer.to_bytes())
        assert unpacker.read_struct("<d", 8) == 0.5
        assert unpacker.read(unpacker.read_length()) == b"ok"
        assert unpacker.bytes_remaining() == 0
