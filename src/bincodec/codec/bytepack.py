"""Byte-level packing and unpacking utilities.

This module provides the append-only output buffer and the read cursor that
every codec works against. All multi-byte values are little-endian.
"""

from __future__ import annotations

import struct


class BytePacker:
    """Appends encoded values to a growable byte buffer.

    The packer either owns a fresh ``bytearray`` or appends to one supplied by
    the caller, so several values can be encoded back to back.

    Example:
        >>> packer = BytePacker()
        >>> packer.write_struct("<H", 513)
        >>> packer.write_bytes(b"ok")
        >>> packer.to_bytes()
        b'\\x01\\x02ok'
    """

    def __init__(self, buffer: bytearray | None = None) -> None:
        """Initialize a packer.

        Args:
            buffer: Existing buffer to append to (a new one is created if omitted)
        """
        self._buffer = bytearray() if buffer is None else buffer

    @property
    def buffer(self) -> bytearray:
        return self._buffer

    def write_struct(self, fmt: str, value: int | float) -> None:
        """Write a single value using a ``struct`` format string.

        Raises:
            struct.error: If the value does not fit the format
        """
        self._buffer += struct.pack(fmt, value)

    def write_int(self, value: int, num_bytes: int, signed: bool) -> None:
        """Write an integer of arbitrary byte width (little-endian).

        Raises:
            OverflowError: If the value does not fit in num_bytes
        """
        self._buffer += value.to_bytes(num_bytes, "little", signed=signed)

    def write_length(self, length: int) -> None:
        """Write a collection length as an 8-byte unsigned integer."""
        self._buffer += struct.pack("<Q", length)

    def write_bytes(self, data: bytes) -> None:
        """Write raw bytes."""
        self._buffer += data

    def byte_length(self) -> int:
        """Return the current number of bytes in the buffer."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return an immutable copy of the buffer."""
        return bytes(self._buffer)


class ByteUnpacker:
    """Reads values from the front of a byte slice.

    The unpacker holds a ``memoryview`` of the input and a position; every read
    consumes a prefix of what remains. Nothing is copied until a value is
    materialized.

    Example:
        >>> unpacker = ByteUnpacker(b"\\x01\\x02ok")
        >>> unpacker.read_struct("<H", 2)
        513
        >>> unpacker.read(2)
        b'ok'
    """

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        """Initialize an unpacker over the given data.

        Args:
            data: Byte buffer to unpack
        """
        self._view = memoryview(data).cast("B")
        self._position = 0

    def read(self, num_bytes: int) -> bytes:
        """Read exactly num_bytes bytes.

        Returns:
            Bytes read from buffer

        Raises:
            IndexError: If not enough bytes are available
        """
        end = self._position + num_bytes
        if end > len(self._view):
            raise IndexError(
                f"Not enough bytes: need {num_bytes}, have {self.bytes_remaining()}"
            )
        chunk = self._view[self._position:end].tobytes()
        self._position = end
        return chunk

    def read_struct(self, fmt: str, size: int) -> int | float:
        """Read a single value using a ``struct`` format string of the given size.

        Raises:
            IndexError: If not enough bytes are available
        """
        if self._position + size > len(self._view):
            raise IndexError(f"Not enough bytes: need {size}, have {self.bytes_remaining()}")
        (value,) = struct.unpack_from(fmt, self._view, self._position)
        self._position += size
        return value

    def read_int(self, num_bytes: int, signed: bool) -> int:
        """Read an integer of arbitrary byte width (little-endian)."""
        return int.from_bytes(self.read(num_bytes), "little", signed=signed)

    def read_length(self) -> int:
        """Read an 8-byte unsigned collection length."""
        return int(self.read_struct("<Q", 8))

    def bytes_remaining(self) -> int:
        """Return the number of unread bytes."""
        return len(self._view) - self._position

    def position(self) -> int:
        """Return the current read position in bytes."""
        return self._position

    def remainder(self) -> bytes:
        """Return a copy of the unread suffix without consuming it."""
        return self._view[self._position:].tobytes()
