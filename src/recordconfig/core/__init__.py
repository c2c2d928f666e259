"""Field discovery, value codec, storage and the config registry."""

from .codec import decode, default_value, encode
from .errors import (
    FieldNotFoundError,
    RecordConfigError,
    RecordTypeError,
    SchemaMismatchError,
    StorageUnavailableError,
    UnsupportedTypeError,
    ValueFormatError,
)
from .fields import FieldDescriptor, SemanticType, build_descriptors, discover_fields
from .observable import ObservableRecord, SupportsChangeNotification
from .registry import ConfigRegistry, RegistryCatalog, get_catalog, registry_for, set_catalog
from .shutdown import ShutdownHooks, get_shutdown_hooks
from .storage import (
    Document,
    IniFileStore,
    JsonFileStore,
    MemoryStore,
    Section,
    StorageAdapter,
    open_store,
)

__all__ = [
    "ConfigRegistry",
    "Document",
    "FieldDescriptor",
    "FieldNotFoundError",
    "IniFileStore",
    "JsonFileStore",
    "MemoryStore",
    "ObservableRecord",
    "RecordConfigError",
    "RecordTypeError",
    "RegistryCatalog",
    "SchemaMismatchError",
    "Section",
    "SemanticType",
    "ShutdownHooks",
    "StorageAdapter",
    "StorageUnavailableError",
    "SupportsChangeNotification",
    "UnsupportedTypeError",
    "ValueFormatError",
    "build_descriptors",
    "decode",
    "default_value",
    "discover_fields",
    "encode",
    "get_catalog",
    "get_shutdown_hooks",
    "open_store",
    "registry_for",
    "set_catalog",
]
