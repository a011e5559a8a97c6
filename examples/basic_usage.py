#!/usr/bin/env python3
"""Basic usage example for bincodec.

This example demonstrates:
1. Defining a struct and a tagged union
2. Encoding to binary
3. Decoding back to the model
4. Calculating static sizes
"""

from __future__ import annotations

from bincodec import (
    F64,
    I16,
    U32,
    BinaryEnum,
    BinaryMessage,
    Char,
    decode,
    encode,
    encoded_size,
    field_sizes,
    from_bytes,
)


class Sample(BinaryMessage):
    """A measurement: a counter and a ratio."""

    count: U32
    ratio: F64


class Token(BinaryEnum):
    """Lexer token."""


class End(Token):
    pass


class Glyph(Token):
    ch: Char
    offset: I16


class Batch(BinaryMessage):
    """A batch of samples and tokens."""

    samples: list[Sample]
    tokens: list[Token]


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bincodec Basic Usage Example")
    print("=" * 60)
    print()

    # Analyze field sizes
    print("1. Analyzing field sizes...")
    for field_name, size in field_sizes(Sample).items():
        print(f"   {field_name}: {size} bytes")
    print(f"   Total: {encoded_size(Sample)} bytes")
    print()

    # Encode a batch
    print("2. Encoding a batch...")
    batch = Batch(
        samples=[Sample(count=10, ratio=0.5), Sample(count=11, ratio=0.25)],
        tokens=[Glyph(ch="a", offset=-3), End()],
    )
    encoded_data = encode(batch)

    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex(' ')}")
    print()

    # Decode the batch
    print("3. Decoding from binary...")
    decoded = decode(Batch, encoded_data)

    for token in decoded.tokens:
        print(f"   {type(token).__name__} (tag {token.variant_tag()}): {token}")
    print()

    # Verify round-trip
    print("4. Verifying round-trip...")
    if decoded == batch:
        print("   Round-trip successful! Messages match.")
    else:
        print("   Round-trip failed! Messages don't match.")
    print()

    # Corrupted input is rejected
    print("5. Decoding truncated data...")
    print(f"   Result: {from_bytes(Batch, encoded_data[:-1])}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
