"""Decode policy configuration.

Codecs themselves are stateless; the few policy decisions that depend on how
much the input is trusted are collected here and passed per call.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecConfig:
    """Policy knobs for decoding.

    Attributes:
        allow_trailing_bytes: Accept unconsumed bytes after a whole-value decode
            (default False: ``decode``/``from_bytes`` require exact consumption).
            ``parse``/``decode_prefix`` always return the remainder instead.

        max_collection_length: Upper bound on any declared collection length
            (default None: bounded only by the remaining input).

        max_zero_size_length: Upper bound on the declared length of a collection
            whose elements can encode to zero bytes (e.g. ``list[None]`` or a list
            of field-less messages). Such lengths cannot be checked against the
            remaining input, so they get a fixed ceiling instead (default 65536).
            The ceiling applies to each collection separately: nested types such
            as ``list[list[None]]`` can still yield up to this many elements per
            8 input bytes. Lower it (or set ``max_collection_length``) when
            decoding such types from untrusted input.

    Examples:
        ```python
        from bincodec import CodecConfig, decode

        # Ignore anything after the first complete value
        value = decode(Header, data, config=CodecConfig(allow_trailing_bytes=True))

        # Untrusted peer: no collection longer than 1024 elements
        value = decode(Batch, data, config=CodecConfig(max_collection_length=1024))
        ```
    """

    allow_trailing_bytes: bool = False
    max_collection_length: int | None = None
    max_zero_size_length: int = 1 << 16

    def __post_init__(self) -> None:
        if self.max_collection_length is not None and self.max_collection_length < 0:
            raise ValueError(
                f"max_collection_length must be non-negative, got {self.max_collection_length}"
            )
        if self.max_zero_size_length < 0:
            raise ValueError(
                f"max_zero_size_length must be non-negative, got {self.max_zero_size_length}"
            )


DEFAULT_CONFIG = CodecConfig()
