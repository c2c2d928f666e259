"""
Error taxonomy for recordconfig.

Every failure raised by the registry, codec and storage layers derives from
``RecordConfigError`` so callers can catch the whole family at once. Each
error keeps the offending field, type or raw text as attributes and in a
``context`` dict for logging.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RecordConfigError(Exception):
    """Base exception for record persistence errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class RecordTypeError(RecordConfigError):
    """Raised when a class cannot be used as a record type."""

    def __init__(self, record_type: Any, reason: str):
        name = getattr(record_type, "__name__", repr(record_type))
        super().__init__(
            f"{name} cannot be used as a record type: {reason}",
            {"record_type": name},
        )
        self.record_type = record_type


class UnsupportedTypeError(RecordConfigError):
    """Raised when a field's declared type has no codec support."""

    def __init__(self, field_name: str, declared_type: Any):
        type_name = getattr(declared_type, "__name__", repr(declared_type))
        super().__init__(
            f"Field '{field_name}' has unsupported type {type_name}",
            {"field": field_name, "type": type_name},
        )
        self.field_name = field_name
        self.declared_type = declared_type


class ValueFormatError(RecordConfigError):
    """Raised when stored text does not parse for its declared type."""

    def __init__(self, field_name: str, expected: str, raw: str):
        super().__init__(
            f"Field '{field_name}' expects {expected}, got {raw!r}",
            {"field": field_name, "expected": expected, "raw": raw},
        )
        self.field_name = field_name
        self.expected = expected
        self.raw = raw


class SchemaMismatchError(RecordConfigError):
    """Raised when a stored section no longer matches its record type."""

    def __init__(
        self,
        section: str,
        stored_keys: list[str],
        expected_keys: list[str],
    ):
        super().__init__(
            f"Section '{section}' holds {len(stored_keys)} entries but "
            f"the record type declares {len(expected_keys)} fields",
            {
                "section": section,
                "unexpected": sorted(set(stored_keys) - set(expected_keys)),
                "missing": sorted(set(expected_keys) - set(stored_keys)),
            },
        )
        self.section = section
        self.stored_keys = stored_keys
        self.expected_keys = expected_keys


class FieldNotFoundError(RecordConfigError, KeyError):
    """Raised when a property name does not match any persisted field."""

    def __init__(self, record_type: str, field_name: Optional[str]):
        RecordConfigError.__init__(
            self,
            f"{record_type} has no field named {field_name!r}",
            {"record_type": record_type, "field": field_name},
        )
        self.field_name = field_name

    def __str__(self) -> str:
        return self.message


class StorageUnavailableError(RecordConfigError):
    """Raised when the storage medium is missing, unwritable or corrupt."""

    def __init__(self, location: str, reason: str):
        super().__init__(
            f"Storage at {location} is unavailable: {reason}",
            {"location": location, "reason": reason},
        )
        self.location = location
        self.reason = reason
