"""
recordconfig - persist dataclass records as sections of a config document.

Declare a dataclass once and let a registry create, load, mutate and save a
single instance of it:

    @dataclass
    class WindowSettings(ObservableRecord):
        width: int = 800
        title: str = ""

    settings = registry_for(WindowSettings).get()
    settings.width = 1024  # written through immediately
"""

__version__ = "0.1.0"

from recordconfig.core import *  # noqa: F401,F403
from recordconfig.core import __all__ as _core_all

__all__ = ["__version__", *_core_all]
