"""Base classes for binary-encodable models.

This module provides BinaryMessage (struct derivation: fields in declaration
order) and BinaryEnum (enum derivation: a one-byte positional tag followed by
the variant's fields).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ..exceptions import SchemaError

if TYPE_CHECKING:
    from typing_extensions import Self

    from ..config import CodecConfig

MAX_VARIANTS = 256


class BinaryMessage(BaseModel):
    """Base class for struct-like binary messages.

    Fields are encoded back to back in declaration order; a message without
    fields encodes to zero bytes. Fields may be passed positionally, in
    declaration order, which gives tuple-struct style construction.

    Example:
        >>> from bincodec import F64, U32
        >>> class Sample(BinaryMessage):
        ...     count: U32
        ...     ratio: F64
        >>> data = Sample(10, 0.5).to_bytes()
        >>> Sample.from_bytes(data)
        Sample(count=10, ratio=0.5)

    Attributes:
        bincodec_max_bytes: Maximum encoded size in bytes (optional, checked on encode)
    """

    model_config = ConfigDict(
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
    )

    bincodec_max_bytes: ClassVar[int | None] = None

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        if args:
            names = list(type(self).model_fields)
            if len(args) > len(names):
                raise TypeError(
                    f"{type(self).__name__} takes {len(names)} positional fields, "
                    f"got {len(args)}"
                )
            for name, value in zip(names, args):
                if name in kwargs:
                    raise TypeError(f"{type(self).__name__} got multiple values for {name!r}")
                kwargs[name] = value
        super().__init__(**kwargs)

    def to_bytes(self) -> bytes:
        """Encode this message to a fresh byte string."""
        from ..codec.encoder import encode

        return encode(self)

    def unparse(self, buffer: bytearray) -> None:
        """Append the encoding of this message to buffer."""
        from ..codec.encoder import encode_into

        encode_into(self, buffer)

    @classmethod
    def parse(cls, data: bytes, config: CodecConfig | None = None) -> tuple[Self, bytes] | None:
        """Decode a message from the front of data.

        Returns:
            ``(message, remaining_bytes)``, or None if decoding failed
        """
        from ..codec.decoder import parse

        return parse(cls, data, config=config)

    @classmethod
    def from_bytes(cls, data: bytes, config: CodecConfig | None = None) -> Self | None:
        """Decode a whole message, or return None if decoding failed.

        Trailing bytes are a failure unless ``config.allow_trailing_bytes`` is set.
        """
        from ..codec.decoder import from_bytes

        return from_bytes(cls, data, config=config)

    @classmethod
    def decode(cls, data: bytes, config: CodecConfig | None = None) -> Self:
        """Decode a whole message, raising DecodeError on failure."""
        from ..codec.decoder import decode

        return decode(cls, data, config=config)


class BinaryEnum(BinaryMessage):
    """Base class for tagged unions.

    A direct subclass of BinaryEnum declares an enum; each direct subclass of
    that class is one of its variants. Variants are tagged 0, 1, 2, ... in the
    order they are defined, and are ordinary messages, so a variant may carry
    no fields, one field or many.

    Example:
        >>> class Shape(BinaryEnum):
        ...     pass
        >>> class Empty(Shape):
        ...     pass
        >>> class Circle(Shape):
        ...     radius: F64
        >>> Circle(radius=1.0).to_bytes()[0]
        1
        >>> Shape.from_bytes(b"\\x00")
        Empty()

    Attributes:
        bincodec_enum_root: The enum a variant belongs to (the enum itself on the root)
        bincodec_variants: Variants of the enum in tag order (set on the root)
    """

    bincodec_enum_root: ClassVar[type[BinaryEnum] | None] = None
    bincodec_variants: ClassVar[tuple[type[BinaryEnum], ...]] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Register the class as an enum root or as the next variant of its root."""
        super().__init_subclass__(**kwargs)

        if BinaryEnum in cls.__bases__:
            cls.bincodec_enum_root = cls
            cls.bincodec_variants = ()
            return

        root = cls.bincodec_enum_root
        if root is None or root not in cls.__bases__:
            raise SchemaError(
                f"{cls.__name__}: variants must subclass their enum directly "
                f"(enum is {root.__name__ if root else None})"
            )

        if len(root.bincodec_variants) >= MAX_VARIANTS:
            raise SchemaError(f"{root.__name__}: more than {MAX_VARIANTS} variants")

        root.bincodec_variants = root.bincodec_variants + (cls,)

    @classmethod
    def variant_tag(cls) -> int:
        """Return the wire tag of this variant.

        Raises:
            SchemaError: If called on an enum root rather than a variant
        """
        root = cls.bincodec_enum_root
        if root is None or cls is root:
            raise SchemaError(f"{cls.__name__} is an enum, not a variant")
        return root.bincodec_variants.index(cls)
