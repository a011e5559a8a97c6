"""Schema introspection for binary-encodable types.

This module turns a Python type annotation into a TypeSchema describing its
wire layout: which scalar codec to use, which element types a collection
holds, which fields a struct has. Struct and enum schemas reference their
model class and resolve its fields lazily through MessageSchema, so
self-referencing types resolve without infinite recursion.
"""

from __future__ import annotations

import collections
import enum
import functools
import logging
from dataclasses import dataclass, field
from typing import Annotated, Any, List, Optional, Type, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError
from ..models.base import MAX_VARIANTS, BinaryEnum
from . import primitives
from .primitives import ScalarCodec

log = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, collections.deque)


class Kind(enum.Enum):
    """Wire layout families."""

    SCALAR = "scalar"  # fixed-width primitive, including unit
    STRING = "string"  # u64 byte count + UTF-8
    BYTES = "bytes"  # u64 byte count + raw bytes, or raw bytes when fixed
    SEQUENCE = "sequence"  # u64 count + elements
    ARRAY = "array"  # exactly fixed_length elements, no prefix
    MAPPING = "mapping"  # u64 count + key/value pairs
    TUPLE = "tuple"  # heterogeneous elements, concatenated
    STRUCT = "struct"  # pydantic model fields, concatenated
    NAMED_TUPLE = "named_tuple"  # NamedTuple fields, concatenated
    VARIANT = "variant"  # BinaryEnum: u8 tag + variant fields
    ENUM = "enum"  # enum.Enum: u8 tag, no payload


@dataclass(frozen=True, eq=False)
class TypeSchema:
    """Wire layout of one type.

    Attributes:
        kind: Layout family
        python_type: Annotation the schema was resolved from (Annotated wrappers removed)
        scalar: Scalar codec (SCALAR only)
        items: Element schemas: one for SEQUENCE/ARRAY, key and value for MAPPING,
            one per position for TUPLE
        container: Concrete collection type to build on decode (SEQUENCE/ARRAY)
        fixed_length: Element or byte count for ARRAY and fixed BYTES
        model: Model class for STRUCT/NAMED_TUPLE/ENUM, enum root for VARIANT
    """

    kind: Kind
    python_type: Any
    scalar: Optional[ScalarCodec] = None
    items: tuple[TypeSchema, ...] = ()
    container: Optional[type] = None
    fixed_length: Optional[int] = None
    model: Optional[type] = None

    @functools.cached_property
    def min_size(self) -> int:
        """Smallest number of bytes any value of this type encodes to."""
        return min_encoded_size(self)

    @functools.cached_property
    def fixed_size(self) -> Optional[int]:
        """Encoded size shared by every value of this type, or None if it varies."""
        return fixed_encoded_size(self)

    def fields(self) -> List[FieldSchema]:
        """Fields of a STRUCT/NAMED_TUPLE schema, in wire order."""
        return message_schema(self.model).fields  # type: ignore[arg-type]


@dataclass(frozen=True)
class FieldSchema:
    """Schema information for a single struct field.

    Attributes:
        name: Field name
        schema: Wire layout of the field's type
    """

    name: str
    schema: TypeSchema


@dataclass
class MessageSchema:
    """Ordered field list of a struct-like type.

    Works for Pydantic models (fields in ``model_fields`` order, inherited
    fields first) and NamedTuple classes (fields in ``_fields`` order).

    Example:
        >>> schema = MessageSchema.from_model(Sample)
        >>> [(f.name, f.schema.fixed_size) for f in schema.fields]
        [('count', 4), ('ratio', 8)]
    """

    model_class: Type[Any]
    fields: List[FieldSchema] = field(default_factory=list)

    @classmethod
    def from_model(cls, model_class: Type[Any]) -> MessageSchema:
        """Return the (cached) schema of a model or NamedTuple class."""
        return message_schema(model_class)

    def total_min_bytes(self) -> int:
        """Sum of the fields' minimum encoded sizes."""
        return sum(f.schema.min_size for f in self.fields)


@functools.lru_cache(maxsize=None)
def message_schema(model_class: Type[Any]) -> MessageSchema:
    """Introspect a model or NamedTuple class and resolve each field's schema.

    Raises:
        SchemaError: If any field type is unsupported
    """
    schema = MessageSchema(model_class)

    if isinstance(model_class, type) and issubclass(model_class, BaseModel):
        # Pydantic v2 strips the outer Annotated and merges its FieldInfo here
        for name, field_info in model_class.model_fields.items():
            if field_info.annotation is None:
                raise SchemaError(f"Field {name} has no type annotation")
            extra = field_info.json_schema_extra if isinstance(field_info.json_schema_extra, dict) else None
            try:
                field_schema = resolve_type(field_info.annotation, extra)
            except SchemaError as e:
                raise SchemaError(f"{model_class.__name__}.{name}: {e}") from e
            schema.fields.append(FieldSchema(name, field_schema))
    elif _is_named_tuple(model_class):
        hints = get_type_hints(model_class, include_extras=True)
        for name in model_class._fields:
            if name not in hints:
                raise SchemaError(f"Field {name} has no type annotation")
            try:
                field_schema = resolve_type(hints[name])
            except SchemaError as e:
                raise SchemaError(f"{model_class.__name__}.{name}: {e}") from e
            schema.fields.append(FieldSchema(name, field_schema))
    else:
        raise SchemaError(f"{model_class!r} is not a model or NamedTuple class")

    log.debug("Resolved schema for %s with %d fields", model_class.__name__, len(schema.fields))
    return schema


def resolve_type(annotation: Any, extra: Optional[dict[str, Any]] = None) -> TypeSchema:
    """Resolve a type annotation to its wire layout.

    Args:
        annotation: Type annotation (``U32``, ``list[Char]``, a model class, ...)
        extra: Codec metadata already collected from an enclosing FieldInfo

    Returns:
        TypeSchema for the annotation

    Raises:
        SchemaError: If the annotation has no binary representation
    """
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        merged = dict(extra or {})
        for item in args[1:]:
            if isinstance(item, FieldInfo) and isinstance(item.json_schema_extra, dict):
                merged.update(item.json_schema_extra)
        return resolve_type(args[0], merged)

    extra = extra or {}

    # Unit
    if annotation is None or annotation is type(None):
        return TypeSchema(Kind.SCALAR, type(None), scalar=primitives.UNIT)

    # Boolean
    if annotation is bool:
        return TypeSchema(Kind.SCALAR, bool, scalar=primitives.BOOL)

    # Fixed-width integer
    if annotation is int:
        if "bits" not in extra:
            raise SchemaError(
                "integer fields require a fixed width (U8..U128, I8..I128 or FixedInt)"
            )
        try:
            codec = primitives.int_codec(int(extra["bits"]), bool(extra.get("signed", False)))
        except ValueError as e:
            raise SchemaError(str(e)) from e
        return TypeSchema(Kind.SCALAR, int, scalar=codec)

    # Float: double precision unless narrowed
    if annotation is float:
        try:
            codec = primitives.float_codec(int(extra.get("bits", 64)))
        except ValueError as e:
            raise SchemaError(str(e)) from e
        return TypeSchema(Kind.SCALAR, float, scalar=codec)

    # Character or length-prefixed string
    if annotation is str:
        if extra.get("char"):
            return TypeSchema(Kind.SCALAR, str, scalar=primitives.CHAR)
        return TypeSchema(Kind.STRING, str)

    # Byte string
    if annotation is bytes or annotation is bytearray:
        return TypeSchema(Kind.BYTES, annotation, fixed_length=extra.get("fixed_length"))

    # Parametrized generics pass isinstance(..., type) on some versions; rule them out
    if origin is None and isinstance(annotation, type):
        if issubclass(annotation, enum.Flag):
            # Combined flag values have no declaration position to tag them with
            raise SchemaError(
                f"{annotation.__name__}: flag enums are not supported; "
                f"encode the value as a fixed-width integer instead"
            )
        if issubclass(annotation, enum.Enum):
            if len(annotation) > MAX_VARIANTS:
                raise SchemaError(f"{annotation.__name__}: more than {MAX_VARIANTS} members")
            return TypeSchema(Kind.ENUM, annotation, model=annotation)

        if issubclass(annotation, BinaryEnum):
            root = annotation.bincodec_enum_root
            if root is None:
                raise SchemaError("BinaryEnum itself is not an enum; subclass it")
            return TypeSchema(Kind.VARIANT, annotation, model=root)

        if issubclass(annotation, BaseModel):
            return TypeSchema(Kind.STRUCT, annotation, model=annotation)

        if _is_named_tuple(annotation):
            return TypeSchema(Kind.NAMED_TUPLE, annotation, model=annotation)

    if origin is tuple:
        # tuple[()] is a zero-byte unit that decodes to (); Python 3.10 spells its args as ((),)
        if not args or args == ((),):
            return TypeSchema(Kind.TUPLE, tuple, items=())
        if len(args) == 2 and args[1] is Ellipsis:
            return _resolve_sequence(tuple, args[0], extra)
        return TypeSchema(Kind.TUPLE, annotation, items=tuple(resolve_type(a) for a in args))

    if origin in _SEQUENCE_ORIGINS:
        if not args:
            raise SchemaError(f"{annotation!r}: element type required")
        return _resolve_sequence(origin, args[0], extra)

    if origin is dict:
        if len(args) != 2:
            raise SchemaError(f"{annotation!r}: key and value types required")
        return TypeSchema(
            Kind.MAPPING, dict, items=(resolve_type(args[0]), resolve_type(args[1]))
        )

    raise SchemaError(
        f"unsupported type {annotation!r}. Supported: bool, sized int/float, Char, str, "
        f"bytes, None, enums, models, NamedTuples, tuple/list/set/frozenset/deque/dict."
    )


def _resolve_sequence(container: type, item: Any, extra: dict[str, Any]) -> TypeSchema:
    item_schema = resolve_type(item)
    fixed_length = extra.get("fixed_length")
    if fixed_length is not None:
        if container not in (list, tuple):
            raise SchemaError(f"fixed-length arrays must be list or tuple, got {container.__name__}")
        return TypeSchema(
            Kind.ARRAY,
            container,
            items=(item_schema,),
            container=container,
            fixed_length=int(fixed_length),
        )
    return TypeSchema(Kind.SEQUENCE, container, items=(item_schema,), container=container)


def _is_named_tuple(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, tuple) and hasattr(tp, "_fields")


def _model_payloads(schema: TypeSchema) -> List[TypeSchema]:
    """Variant payload schemas of a VARIANT schema, in tag order."""
    root: Type[BinaryEnum] = schema.model  # type: ignore[assignment]
    return [TypeSchema(Kind.STRUCT, v, model=v) for v in root.bincodec_variants]


def min_encoded_size(schema: TypeSchema, _seen: frozenset[type] = frozenset()) -> int:
    """Lower bound on the encoded size of any value of the schema's type.

    Recursive references contribute zero, which keeps the bound valid.
    """
    kind = schema.kind
    if kind is Kind.SCALAR:
        return schema.scalar.size  # type: ignore[union-attr]
    if kind in (Kind.STRING, Kind.SEQUENCE, Kind.MAPPING):
        return 8
    if kind is Kind.BYTES:
        return schema.fixed_length if schema.fixed_length is not None else 8
    if kind is Kind.ARRAY:
        return schema.fixed_length * min_encoded_size(schema.items[0], _seen)  # type: ignore[operator]
    if kind is Kind.TUPLE:
        return sum(min_encoded_size(item, _seen) for item in schema.items)
    if kind is Kind.ENUM:
        return 1

    if schema.model in _seen:
        return 0
    seen = _seen | {schema.model}  # type: ignore[operator]

    if kind is Kind.VARIANT:
        payloads = _model_payloads(schema)
        if not payloads:
            return 1
        return 1 + min(min_encoded_size(p, seen) for p in payloads)

    # STRUCT / NAMED_TUPLE
    return sum(min_encoded_size(f.schema, seen) for f in schema.fields())


def fixed_encoded_size(schema: TypeSchema, _seen: frozenset[type] = frozenset()) -> Optional[int]:
    """Encoded size shared by every value of the schema's type, or None."""
    kind = schema.kind
    if kind is Kind.SCALAR:
        return schema.scalar.size  # type: ignore[union-attr]
    if kind in (Kind.STRING, Kind.SEQUENCE, Kind.MAPPING):
        return None
    if kind is Kind.BYTES:
        return schema.fixed_length
    if kind is Kind.ENUM:
        return 1
    if kind is Kind.ARRAY:
        item_size = fixed_encoded_size(schema.items[0], _seen)
        return None if item_size is None else schema.fixed_length * item_size  # type: ignore[operator]
    if kind is Kind.TUPLE:
        return _sum_fixed(fixed_encoded_size(item, _seen) for item in schema.items)

    if schema.model in _seen:
        return None
    seen = _seen | {schema.model}  # type: ignore[operator]

    if kind is Kind.VARIANT:
        sizes = {fixed_encoded_size(p, seen) for p in _model_payloads(schema)}
        if len(sizes) != 1 or None in sizes:
            return None
        return 1 + sizes.pop()  # type: ignore[operator]

    return _sum_fixed(fixed_encoded_size(f.schema, seen) for f in schema.fields())


def _sum_fixed(sizes: Any) -> Optional[int]:
    total = 0
    for size in sizes:
        if size is None:
            return None
        total += size
    return total
