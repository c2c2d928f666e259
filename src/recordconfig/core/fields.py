"""Field discovery for record types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Optional, Tuple, Union, get_args, get_origin, get_type_hints
import dataclasses
import inspect

from .errors import RecordTypeError

SEMANTIC_TYPE_KEY = "semantic_type"
_BUILTIN_NAMES = {"str": str, "int": int, "float": float, "bool": bool}


class SemanticType(Enum):
    """Value kinds the codec knows how to persist."""

    STRING = "string"
    INT32 = "int32"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOLEAN = "boolean"
    ENUM = "enum"


@dataclass(frozen=True)
class FieldDescriptor:
    """One persistable field of a record type."""

    name: str
    python_type: Any
    semantic_type: Optional[SemanticType]
    default: Any = None

    def get(self, instance: Any) -> Any:
        return getattr(instance, self.name)

    def set(self, instance: Any, value: Any) -> None:
        setattr(instance, self.name, value)

    @property
    def type_name(self) -> str:
        return getattr(self.python_type, "__name__", repr(self.python_type))


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) is Union:
        non_none = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(non_none) == 1:
            return non_none[0]
    return annotation


def _explicit_semantic_type(field: dataclasses.Field) -> Optional[SemanticType]:
    declared = field.metadata.get(SEMANTIC_TYPE_KEY)
    if declared is None:
        return None
    if isinstance(declared, SemanticType):
        return declared
    try:
        return SemanticType(str(declared).lower())
    except ValueError:
        return None


def semantic_type_for(annotation: Any) -> Optional[SemanticType]:
    """Map a Python annotation to its semantic type, or None if unsupported."""
    annotation = _unwrap_optional(annotation)
    if not isinstance(annotation, type):
        return None
    if issubclass(annotation, Enum):
        return SemanticType.ENUM
    if annotation is bool:
        return SemanticType.BOOLEAN
    if annotation is int:
        return SemanticType.INT32
    if annotation is float:
        return SemanticType.FLOAT64
    if annotation is str:
        return SemanticType.STRING
    return None


def _field_default(field: dataclasses.Field) -> Any:
    if field.default is not dataclasses.MISSING:
        return field.default
    if field.default_factory is not dataclasses.MISSING:
        return field.default_factory()
    return None


def build_descriptors(record_type: type) -> Tuple[FieldDescriptor, ...]:
    """
    Build the ordered descriptor list for ``record_type``.

    Only public ``init`` fields annotated directly on the class are kept,
    unless the class pins its own list through ``__config_fields__``.
    """
    if not dataclasses.is_dataclass(record_type) or not isinstance(record_type, type):
        raise RecordTypeError(record_type, "record types must be dataclasses")

    try:
        hints = get_type_hints(record_type)
    except NameError:
        # Locally defined annotation targets; fall back to builtin names.
        hints = {}

    by_name = {f.name: f for f in dataclasses.fields(record_type)}
    pinned = getattr(record_type, "__config_fields__", None)
    if pinned is not None:
        unknown = [name for name in pinned if name not in by_name]
        if unknown:
            raise RecordTypeError(
                record_type, f"__config_fields__ names unknown fields {unknown}"
            )
        selected = [by_name[name] for name in pinned]
    else:
        own = inspect.get_annotations(record_type)
        selected = [
            f
            for f in by_name.values()
            if f.init and not f.name.startswith("_") and f.name in own
        ]

    descriptors = []
    for f in selected:
        annotation = hints.get(f.name, f.type)
        if isinstance(annotation, str):
            annotation = _BUILTIN_NAMES.get(annotation, annotation)
        semantic = _explicit_semantic_type(f) or semantic_type_for(annotation)
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                python_type=_unwrap_optional(annotation),
                semantic_type=semantic,
                default=_field_default(f),
            )
        )
    return tuple(descriptors)


@lru_cache(maxsize=None)
def discover_fields(record_type: type) -> Tuple[FieldDescriptor, ...]:
    """Cached ``build_descriptors``; descriptors never change for a type."""
    return build_descriptors(record_type)


def find_field(
    descriptors: Tuple[FieldDescriptor, ...], name: Optional[str]
) -> Optional[FieldDescriptor]:
    for descriptor in descriptors:
        if descriptor.name == name:
            return descriptor
    return None
