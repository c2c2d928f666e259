"""
Config registry: one persisted singleton per record type.

A ``ConfigRegistry`` owns the in-memory instance of a record type and keeps
it in step with a named section of a storage document:

- the first ``get()``/``create()`` reconciles the instance with storage,
  loading stored values or writing the defaults on first run;
- records that support change notification are written through field by
  field as they are assigned;
- other records are written on ``save()`` or, if they still hold unsaved
  changes, when the process exits normally.

Registries are not thread-safe. Callers sharing one across threads must
serialize access themselves.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, Tuple, Type, TypeVar
import dataclasses

from rich.console import Console

from . import codec
from .display import print_entries
from .errors import (
    FieldNotFoundError,
    RecordTypeError,
    SchemaMismatchError,
    UnsupportedTypeError,
    ValueFormatError,
)
from .fields import FieldDescriptor, discover_fields, find_field
from .logger import log_configuration_change, log_debug, log_error, log_info, log_warning
from .observable import SupportsChangeNotification
from .settings import get_settings
from .shutdown import ShutdownHooks, get_shutdown_hooks
from .storage import Document, StorageAdapter, open_store

R = TypeVar("R")

MODULE = "registry"


def _check_default_constructible(record_type: type) -> None:
    if not dataclasses.is_dataclass(record_type) or not isinstance(record_type, type):
        raise RecordTypeError(record_type, "record types must be dataclasses")
    required = [
        f.name
        for f in dataclasses.fields(record_type)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
    ]
    if required:
        raise RecordTypeError(
            record_type, f"fields {required} have no default value"
        )


class ConfigRegistry(Generic[R]):
    """Loads, saves and write-through persists the singleton of ``record_type``."""

    def __init__(
        self,
        record_type: Type[R],
        store: StorageAdapter,
        *,
        section: Optional[str] = None,
        fields: Optional[Sequence[FieldDescriptor]] = None,
        shutdown: Optional[ShutdownHooks] = None,
    ):
        _check_default_constructible(record_type)
        self._record_type = record_type
        self._store = store
        self._section = section or record_type.__name__
        self._fields: Tuple[FieldDescriptor, ...] = (
            tuple(fields) if fields is not None else discover_fields(record_type)
        )
        self._instance: Optional[R] = None
        self._initialized = False
        self._dirty = False
        self._muted = False
        self._saved: Dict[str, str] = {}
        self._exit_flushed = False

        # Capability is decided once per registry and never re-checked.
        self._autosave = issubclass(record_type, SupportsChangeNotification)
        if not self._autosave:
            log_warning(
                MODULE,
                f"<{record_type.__name__}> does not support change notification, "
                f"call save() to persist changes",
            )

        self._shutdown = shutdown if shutdown is not None else get_shutdown_hooks()
        self._shutdown.register(self._flush_on_exit)

    # -- properties -------------------------------------------------------

    @property
    def record_type(self) -> Type[R]:
        return self._record_type

    @property
    def section_name(self) -> str:
        return self._section

    @property
    def fields(self) -> Tuple[FieldDescriptor, ...]:
        return self._fields

    @property
    def store(self) -> StorageAdapter:
        return self._store

    @property
    def instance(self) -> Optional[R]:
        """Current in-memory instance without triggering reconciliation."""
        return self._instance

    @property
    def is_autosave_enabled(self) -> bool:
        return self._autosave

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_dirty(self) -> bool:
        """True when the instance holds changes not yet written to storage."""
        if self._dirty:
            return True
        if not self._initialized or self._instance is None:
            return False
        try:
            return self._encode_all() != self._saved
        except ValueFormatError:
            # A value that cannot be stored differs from anything saved.
            return True

    # -- public operations ------------------------------------------------

    def create(self) -> R:
        """Create the stored section with defaults, or load the existing one."""
        return self.get()

    def get(self) -> R:
        """Return the instance, reconciling it with storage on first access."""
        if self._initialized and self._instance is not None:
            return self._instance
        if self._instance is None:
            self._attach(self._record_type())
        self._reconcile()
        return self._instance

    def reload(self) -> R:
        """Discard the initialized state and reconcile against storage again."""
        self._initialized = False
        return self.get()

    def save(self, instance: Optional[R] = None) -> R:
        """
        Write every field of the instance to storage.

        Passing ``instance`` replaces the in-memory instance first. Without it
        an unreconciled registry loads storage before writing, so values
        already on disk are never clobbered by defaults.
        """
        if instance is not None:
            if not isinstance(instance, self._record_type):
                raise RecordTypeError(
                    type(instance),
                    f"save() expects a {self._record_type.__name__} instance",
                )
            self._attach(instance)
        elif not self._initialized:
            self.get()

        self._write_all(self._store.open_document())
        self._dirty = False
        self._initialized = True
        log_info(MODULE, f"The <{self._record_type.__name__}> configuration is saved.")
        return self._instance

    def set_property(self, name: str, value: Optional[str]) -> R:
        """
        Assign one field from its text form and persist it immediately.

        The write happens whether or not the record type supports change
        notification. Unknown names raise ``FieldNotFoundError`` and change
        nothing.
        """
        descriptor = find_field(self._fields, name) if name else None
        if descriptor is None:
            log_warning(
                MODULE,
                f"{self._record_type.__name__}.set_property() key {name!r} not found",
            )
            raise FieldNotFoundError(self._record_type.__name__, name)

        instance = self.get()
        decoded = codec.decode("" if value is None else value, descriptor)
        previous = descriptor.get(instance)
        with self._muting():
            descriptor.set(instance, decoded)
        self._write_field(descriptor)
        log_configuration_change(
            f"{self._record_type.__name__}.{descriptor.name}", previous, decoded
        )
        return instance

    def print(self, console: Optional[Console] = None) -> None:
        """Print the in-memory field values (diagnostics only)."""
        if self._instance is None:
            log_warning(MODULE, "No configuration to print.")
            return
        print_entries(self._record_type.__name__, self.current_entries(), console)

    def current_entries(self) -> List[Tuple[str, str]]:
        """``(name, text)`` pairs for the in-memory instance."""
        if self._instance is None:
            return []
        entries = []
        for descriptor in self._fields:
            value = descriptor.get(self._instance)
            try:
                text = codec.encode(value, descriptor)
            except (UnsupportedTypeError, ValueFormatError):
                text = "" if value is None else str(value)
            entries.append((descriptor.name, text))
        return entries

    # -- reconciliation ---------------------------------------------------

    def _reconcile(self) -> None:
        document = self._store.open_document()
        section = document.get_section(self._section)

        if section is None or len(section) == 0:
            log_info(
                MODULE,
                f"No configuration found for <{self._record_type.__name__}>, "
                f"configuration created with default property values.",
            )
            self._write_all(document)
        else:
            expected = [d.name for d in self._fields]
            stored = section.keys()
            if len(stored) != len(expected) or set(stored) != set(expected):
                raise SchemaMismatchError(self._section, stored, expected)

            # Decode everything before assigning so a bad value leaves the
            # instance untouched.
            decoded: List[Tuple[FieldDescriptor, Any]] = []
            for key, text in section.entries():
                descriptor = find_field(self._fields, key)
                decoded.append((descriptor, codec.decode(text, descriptor)))
            with self._muting():
                for descriptor, value in decoded:
                    descriptor.set(self._instance, value)
            self._saved = self._encode_all()
            log_debug(MODULE, f"Loaded <{self._record_type.__name__}> from storage")

        self._initialized = True

    # -- writing ----------------------------------------------------------

    def _encode_all(self) -> Dict[str, str]:
        return {
            descriptor.name: codec.encode(descriptor.get(self._instance), descriptor)
            for descriptor in self._fields
        }

    def _write_all(self, document: Document) -> None:
        encoded = self._encode_all()
        section = document.get_or_create_section(self._section)
        for name, text in encoded.items():
            section.set_entry(name, text)
        document.commit()
        self._saved = encoded

    def _write_field(self, descriptor: FieldDescriptor) -> None:
        text = codec.encode(descriptor.get(self._instance), descriptor)
        self._dirty = True
        document = self._store.open_document()
        document.get_or_create_section(self._section).set_entry(descriptor.name, text)
        document.commit()
        self._saved[descriptor.name] = text
        self._dirty = False
        log_debug(
            MODULE,
            f"Persisted {self._record_type.__name__}.{descriptor.name}",
            context=text,
        )

    # -- notification plumbing --------------------------------------------

    def _attach(self, instance: R) -> None:
        if self._instance is instance:
            return
        if self._autosave and self._instance is not None:
            self._instance.unsubscribe(self._on_field_changed)
        self._instance = instance
        if self._autosave:
            instance.subscribe(self._on_field_changed)

    @contextmanager
    def _muting(self) -> Iterator[None]:
        previous = self._muted
        self._muted = True
        try:
            yield
        finally:
            self._muted = previous

    def _on_field_changed(self, instance: Any, name: str) -> None:
        if self._muted or not self._initialized or instance is not self._instance:
            return
        descriptor = find_field(self._fields, name)
        if descriptor is None:
            return
        self._write_field(descriptor)

    def _flush_on_exit(self) -> None:
        if self._exit_flushed:
            return
        self._exit_flushed = True
        if self._autosave:
            return
        try:
            if self.is_dirty:
                self.save()
        except Exception as exc:
            log_error(
                MODULE,
                f"Could not save <{self._record_type.__name__}> on exit",
                context=getattr(self._store, "location", ""),
                exception=exc,
            )


class RegistryCatalog:
    """
    Hands out exactly one ``ConfigRegistry`` per record type.

    The first request for a type decides its store and section; later
    requests return the same registry.
    """

    def __init__(
        self,
        store: Optional[StorageAdapter] = None,
        shutdown: Optional[ShutdownHooks] = None,
    ):
        self._store = store
        self._shutdown = shutdown
        self._registries: Dict[type, ConfigRegistry] = {}

    def registry_for(
        self,
        record_type: Type[R],
        store: Optional[StorageAdapter] = None,
        *,
        section: Optional[str] = None,
    ) -> ConfigRegistry[R]:
        registry = self._registries.get(record_type)
        if registry is None:
            registry = ConfigRegistry(
                record_type,
                store or self._default_store(),
                section=section,
                shutdown=self._shutdown,
            )
            self._registries[record_type] = registry
        return registry

    def _default_store(self) -> StorageAdapter:
        if self._store is None:
            self._store = open_store(get_settings().config_file)
        return self._store

    def __contains__(self, record_type: object) -> bool:
        return record_type in self._registries

    def __len__(self) -> int:
        return len(self._registries)

    def registries(self) -> List[ConfigRegistry]:
        return list(self._registries.values())


_default_catalog: Optional[RegistryCatalog] = None


def get_catalog() -> RegistryCatalog:
    """Process-wide catalog backed by the configured storage file."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = RegistryCatalog()
    return _default_catalog


def set_catalog(catalog: Optional[RegistryCatalog]) -> None:
    global _default_catalog
    _default_catalog = catalog


def registry_for(
    record_type: Type[R], store: Optional[StorageAdapter] = None
) -> ConfigRegistry[R]:
    """Shortcut for ``get_catalog().registry_for(record_type, store)``."""
    return get_catalog().registry_for(record_type, store)
