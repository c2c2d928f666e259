"""
Typer-based CLI for recordconfig.

Commands inspect and edit the sections a config document holds for record
types, addressed as ``package.module:ClassName``:

- ``show``      load (or first-run create) a record and print it
- ``set``       assign one field from text and persist it immediately
- ``sections``  dump every stored section as raw text
- ``demo``      walk through autosave, manual save and exit flush
"""

import importlib
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from recordconfig.core.display import print_entries
from recordconfig.core.errors import RecordConfigError, RecordTypeError
from recordconfig.core.logger import setup_logging
from recordconfig.core.registry import RegistryCatalog
from recordconfig.core.settings import get_settings
from recordconfig.core.shutdown import ShutdownHooks
from recordconfig.core.storage import StorageAdapter, open_store

from .exit_codes import CliExit, exit_for

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer(
    name="recordconfig",
    help="Inspect and edit dataclass records persisted in a config document",
    no_args_is_help=True,
)

FILE_OPTION = typer.Option(
    None,
    "--file",
    "-f",
    help="Config document (.json, .ini or .cfg); defaults to RECORDCONFIG_FILE",
)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", "-l", help="Logging level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """recordconfig command line."""
    if log_level:
        setup_logging(level=log_level, log_file=get_settings().log_file)


def load_record_type(target: str) -> type:
    """Import ``package.module:ClassName``."""
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise RecordTypeError(target, "expected 'package.module:ClassName'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise RecordTypeError(target, f"module '{module_name}' cannot be imported ({exc})") from exc
    record_type = getattr(module, class_name, None)
    if not isinstance(record_type, type):
        raise RecordTypeError(target, f"'{class_name}' is not a class in {module_name}")
    return record_type


def _store(file: Optional[Path]) -> StorageAdapter:
    return open_store(file or get_settings().config_file)


def _fail(error: RecordConfigError) -> CliExit:
    logger.debug("recordconfig command failed", exc_info=error)
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    return exit_for(error)


@app.command("show")
def show(
    record_type: str = typer.Argument(..., help="Record type as package.module:ClassName"),
    file: Optional[Path] = FILE_OPTION,
):
    """Load a record, creating its section with defaults on first run."""
    try:
        catalog = RegistryCatalog(_store(file), shutdown=ShutdownHooks())
        registry = catalog.registry_for(load_record_type(record_type))
        registry.get()
        registry.print(console)
    except RecordConfigError as e:
        raise _fail(e)


@app.command("set")
def set_value(
    record_type: str = typer.Argument(..., help="Record type as package.module:ClassName"),
    key: str = typer.Argument(..., help="Field name"),
    value: str = typer.Argument(..., help="New value as text"),
    file: Optional[Path] = FILE_OPTION,
):
    """Assign one field from text and persist it immediately."""
    try:
        catalog = RegistryCatalog(_store(file), shutdown=ShutdownHooks())
        registry = catalog.registry_for(load_record_type(record_type))
        registry.set_property(key, value)
        registry.print(console)
    except RecordConfigError as e:
        raise _fail(e)


@app.command("sections")
def list_sections(file: Optional[Path] = FILE_OPTION):
    """Print every stored section exactly as it is stored."""
    try:
        document = _store(file).open_document()
    except RecordConfigError as e:
        raise _fail(e)

    names = document.section_names()
    if not names:
        console.print("[yellow]No sections stored[/yellow]")
        raise CliExit.success()
    for name in names:
        print_entries(name, document.get_section(name).entries(), console)


@app.command("demo")
def demo(file: Optional[Path] = FILE_OPTION):
    """Walk through autosave, manual save, set_property and the exit flush."""
    from recordconfig.examples import ExampleConfigAuto, ExampleConfigManual

    hooks = ShutdownHooks()
    catalog = RegistryCatalog(_store(file), shutdown=hooks)
    try:
        auto = catalog.registry_for(ExampleConfigAuto)
        auto_config = auto.get()
        auto_config.ExampleInt = 3
        auto_config.ExampleString = "Name"
        auto_config.ExampleBool = True
        console.print("[bold]Autosaved record[/bold] (every assignment is written)")
        auto.print(console)

        manual = catalog.registry_for(ExampleConfigManual)
        manual_config = manual.save(ExampleConfigManual(ID=7, Name="Just a name"))
        console.print("[bold]Manual record saved explicitly[/bold]")
        manual.print(console)

        manual_config.Name = "Modified Name"
        console.print(f"Modified in memory only, unsaved changes: {manual.is_dirty}")
        manual.save()
        console.print(f"After save(), unsaved changes: {manual.is_dirty}")

        manual.set_property("Name", "Another modification")
        console.print("[bold]set_property() persists immediately[/bold]")
        manual.print(console)

        manual_config.Name = "Name that has to be saved"
        console.print("Left unsaved on purpose; flushed by the exit hook")
    except RecordConfigError as e:
        raise _fail(e)
    finally:
        hooks.run()


def run() -> None:
    app()


if __name__ == "__main__":
    run()
