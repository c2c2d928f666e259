"""
Storage adapters for record sections.

A store hands out a ``Document``: a snapshot of named sections, each holding
ordered ``(key, text)`` entries. Changes stay in the document until
``commit()`` writes the whole document back to its medium. Every
``open_document()`` re-reads the medium.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, runtime_checkable
import configparser
import io
import json

from .errors import StorageUnavailableError
from .logger import log_file_operation

STORE_SCHEMA_VERSION = 1
INI_SUFFIXES = {".ini", ".cfg"}


class Section:
    """Named, ordered collection of ``(key, text)`` entries."""

    def __init__(self, name: str, entries: Optional[Dict[str, str]] = None):
        self.name = name
        self._entries: Dict[str, str] = dict(entries or {})

    def entries(self) -> List[Tuple[str, str]]:
        return list(self._entries.items())

    def keys(self) -> List[str]:
        return list(self._entries)

    def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    def set_entry(self, key: str, value: str) -> None:
        self._entries[key] = "" if value is None else str(value)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.entries())

    def __repr__(self) -> str:
        return f"Section({self.name!r}, {self._entries!r})"


class Document:
    """In-memory view of a storage medium, written back by ``commit()``."""

    def __init__(self, store: "StorageAdapter", sections: Optional[Dict[str, Dict[str, str]]] = None):
        self._store = store
        self._sections: Dict[str, Section] = {
            name: Section(name, entries) for name, entries in (sections or {}).items()
        }

    def get_section(self, name: str) -> Optional[Section]:
        return self._sections.get(name)

    def get_or_create_section(self, name: str) -> Section:
        section = self._sections.get(name)
        if section is None:
            section = Section(name)
            self._sections[name] = section
        return section

    def section_names(self) -> List[str]:
        return list(self._sections)

    def as_dict(self) -> Dict[str, Dict[str, str]]:
        return {name: section.as_dict() for name, section in self._sections.items()}

    def commit(self) -> None:
        self._store.write(self.as_dict())


@runtime_checkable
class StorageAdapter(Protocol):
    """Medium that can be read into and written from a ``Document``."""

    def open_document(self) -> Document: ...

    def write(self, sections: Dict[str, Dict[str, str]]) -> None: ...


class MemoryStore:
    """Store kept in process memory."""

    def __init__(self, sections: Optional[Dict[str, Dict[str, str]]] = None):
        self._sections: Dict[str, Dict[str, str]] = {
            name: dict(entries) for name, entries in (sections or {}).items()
        }
        self.commits = 0

    @property
    def location(self) -> str:
        return "<memory>"

    def open_document(self) -> Document:
        return Document(self, self.snapshot())

    def write(self, sections: Dict[str, Dict[str, str]]) -> None:
        self._sections = {name: dict(entries) for name, entries in sections.items()}
        self.commits += 1

    def snapshot(self) -> Dict[str, Dict[str, str]]:
        return {name: dict(entries) for name, entries in self._sections.items()}


class _FileStore:
    """Shared plumbing for file-backed stores."""

    format_name = "file"

    def __init__(self, path: Path | str):
        self.path = Path(path)

    @property
    def location(self) -> str:
        return str(self.path)

    def open_document(self) -> Document:
        if not self.path.exists():
            return Document(self)
        try:
            text = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log_file_operation("read", str(self.path), False, str(exc))
            raise StorageUnavailableError(self.location, str(exc)) from exc
        log_file_operation("read", str(self.path), True)
        return Document(self, self._parse(text))

    def write(self, sections: Dict[str, Dict[str, str]]) -> None:
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(self._render(sections), encoding="utf-8")
            temp_path.replace(self.path)
        except OSError as exc:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
            log_file_operation("write", str(self.path), False, str(exc))
            raise StorageUnavailableError(self.location, str(exc)) from exc
        log_file_operation("write", str(self.path), True)

    def _parse(self, text: str) -> Dict[str, Dict[str, str]]:
        raise NotImplementedError

    def _render(self, sections: Dict[str, Dict[str, str]]) -> str:
        raise NotImplementedError


class JsonFileStore(_FileStore):
    """Versioned JSON document: ``{"schema_version": 1, "sections": {...}}``."""

    format_name = "json"

    def _parse(self, text: str) -> Dict[str, Dict[str, str]]:
        if not text.strip():
            return {}
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise StorageUnavailableError(self.location, f"invalid JSON ({exc})") from exc
        if not isinstance(payload, dict):
            raise StorageUnavailableError(self.location, "document root is not an object")
        sections = payload.get("sections", {})
        if not isinstance(sections, dict):
            raise StorageUnavailableError(self.location, "'sections' is not an object")
        parsed: Dict[str, Dict[str, str]] = {}
        for name, entries in sections.items():
            if not isinstance(entries, dict):
                raise StorageUnavailableError(
                    self.location, f"section '{name}' is not an object"
                )
            parsed[name] = {
                str(key): "" if value is None else str(value)
                for key, value in entries.items()
            }
        return parsed

    def _render(self, sections: Dict[str, Dict[str, str]]) -> str:
        payload = {"schema_version": STORE_SCHEMA_VERSION, "sections": sections}
        return json.dumps(payload, indent=2)


class IniFileStore(_FileStore):
    """
    One INI section per record type; key case is preserved.

    configparser strips edge whitespace and folds line breaks, so values
    with either (or starting with a double quote) are written as JSON
    string literals and unquoted again on read.
    """

    format_name = "ini"

    @staticmethod
    def _parser() -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None, default_section="\0")
        parser.optionxform = str  # type: ignore[assignment]
        return parser

    @staticmethod
    def _quote(value: str) -> str:
        if value != value.strip() or "\n" in value or "\r" in value or value.startswith('"'):
            return json.dumps(value, ensure_ascii=False)
        return value

    def _unquote(self, section: str, key: str, value: str) -> str:
        if len(value) < 2 or not (value.startswith('"') and value.endswith('"')):
            return value
        try:
            return json.loads(value)
        except json.JSONDecodeError as exc:
            raise StorageUnavailableError(
                self.location, f"malformed quoted value for [{section}] {key} ({exc})"
            ) from exc

    def _parse(self, text: str) -> Dict[str, Dict[str, str]]:
        parser = self._parser()
        try:
            parser.read_string(text, source=self.location)
        except configparser.Error as exc:
            raise StorageUnavailableError(self.location, f"invalid INI ({exc})") from exc
        return {
            name: {key: self._unquote(name, key, value) for key, value in parser.items(name)}
            for name in parser.sections()
        }

    def _render(self, sections: Dict[str, Dict[str, str]]) -> str:
        parser = self._parser()
        for name, entries in sections.items():
            parser.add_section(name)
            for key, value in entries.items():
                parser.set(name, key, self._quote(value))
        buffer = io.StringIO()
        parser.write(buffer)
        return buffer.getvalue()


def open_store(path: Path | str) -> StorageAdapter:
    """Pick a file store from the path suffix (INI for .ini/.cfg, else JSON)."""
    path = Path(path)
    if path.suffix.lower() in INI_SUFFIXES:
        return IniFileStore(path)
    return JsonFileStore(path)
