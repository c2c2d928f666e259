"""Text codec for persisted field values."""

from __future__ import annotations

from enum import Enum
from typing import Any
import math
import struct

from .errors import UnsupportedTypeError, ValueFormatError
from .fields import FieldDescriptor, SemanticType

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_TRUE_TEXT = "true"
_FALSE_TEXT = "false"


def _to_float32(value: float, descriptor: FieldDescriptor, raw: str) -> float:
    """Round to single precision; finite values that overflow are rejected."""
    try:
        rounded = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ValueFormatError(descriptor.name, "float32", raw) from None
    if math.isinf(rounded) and not math.isinf(value):
        raise ValueFormatError(descriptor.name, "float32", raw)
    return rounded


def _enum_default(enum_type: type) -> Enum:
    return next(iter(enum_type))


def default_value(descriptor: FieldDescriptor) -> Any:
    """Value an empty stored text decodes to."""
    semantic = descriptor.semantic_type
    if semantic is SemanticType.STRING:
        return ""
    if semantic is SemanticType.INT32:
        return 0
    if semantic in (SemanticType.FLOAT32, SemanticType.FLOAT64):
        return 0.0
    if semantic is SemanticType.BOOLEAN:
        return False
    if semantic is SemanticType.ENUM:
        return _enum_default(descriptor.python_type)
    raise UnsupportedTypeError(descriptor.name, descriptor.python_type)


def encode(value: Any, descriptor: FieldDescriptor) -> str:
    """
    Render an in-memory value as stored text.

    Values that could not be decoded again (an int outside the 32-bit range,
    a float too large for single precision) raise ``ValueFormatError`` so
    they never reach storage.
    """
    semantic = descriptor.semantic_type
    if semantic is None:
        raise UnsupportedTypeError(descriptor.name, descriptor.python_type)
    if value is None:
        return ""
    if semantic is SemanticType.BOOLEAN:
        return _TRUE_TEXT if value else _FALSE_TEXT
    if semantic is SemanticType.ENUM:
        return value.name if isinstance(value, Enum) else str(value)
    if semantic is SemanticType.INT32:
        if not INT32_MIN <= int(value) <= INT32_MAX:
            raise ValueFormatError(descriptor.name, "int32", str(value))
        return str(int(value))
    if semantic is SemanticType.FLOAT32:
        return repr(_to_float32(float(value), descriptor, repr(value)))
    if semantic is SemanticType.FLOAT64:
        return repr(float(value))
    return str(value)


def _decode_int(text: str, descriptor: FieldDescriptor) -> int:
    # int() also takes "1_000"; stored text is plain decimal only.
    if "_" in text:
        raise ValueFormatError(descriptor.name, "int32", text)
    try:
        value = int(text.strip(), 10)
    except ValueError:
        raise ValueFormatError(descriptor.name, "int32", text) from None
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueFormatError(descriptor.name, "int32", text)
    return value


def _decode_float(text: str, descriptor: FieldDescriptor) -> float:
    expected = descriptor.semantic_type.value
    if "_" in text:
        raise ValueFormatError(descriptor.name, expected, text)
    try:
        value = float(text.strip())
    except ValueError:
        raise ValueFormatError(descriptor.name, expected, text) from None
    if descriptor.semantic_type is SemanticType.FLOAT32:
        return _to_float32(value, descriptor, text)
    return value


def _decode_bool(text: str, descriptor: FieldDescriptor) -> bool:
    lowered = text.strip().lower()
    if lowered == _TRUE_TEXT:
        return True
    if lowered == _FALSE_TEXT:
        return False
    raise ValueFormatError(descriptor.name, "boolean", text)


def _decode_enum(text: str, descriptor: FieldDescriptor) -> Enum:
    enum_type = descriptor.python_type
    name = text.strip()
    if name in enum_type.__members__:
        return enum_type[name]
    # Numeric member values are accepted as well as names.
    try:
        if "_" in name:
            raise ValueError(name)
        return enum_type(int(name, 10))
    except ValueError:
        raise ValueFormatError(
            descriptor.name, f"one of {', '.join(enum_type.__members__)}", text
        ) from None


def decode(text: str, descriptor: FieldDescriptor) -> Any:
    """Parse stored text into the field's in-memory value."""
    semantic = descriptor.semantic_type
    if semantic is None:
        raise UnsupportedTypeError(descriptor.name, descriptor.python_type)
    if text is None or text == "":
        return default_value(descriptor)
    if semantic is SemanticType.STRING:
        return text
    if semantic is SemanticType.INT32:
        return _decode_int(text, descriptor)
    if semantic in (SemanticType.FLOAT32, SemanticType.FLOAT64):
        return _decode_float(text, descriptor)
    if semantic is SemanticType.BOOLEAN:
        return _decode_bool(text, descriptor)
    return _decode_enum(text, descriptor)
