"""Record types shared by the recordconfig tests."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from recordconfig.core.fields import SemanticType
from recordconfig.core.observable import ObservableRecord


class Mode(Enum):
    Idle = 0
    Running = 1
    Stopped = 2


@dataclass
class ObservedSettings(ObservableRecord):
    ExampleInt: int = 0
    ExampleString: str = ""


@dataclass
class PlainSettings:
    ExampleInt: int = 0
    ExampleString: str = ""


@dataclass
class AllTypes:
    text: Optional[str] = None
    count: int = 0
    ratio: float = field(default=0.0, metadata={"semantic_type": SemanticType.FLOAT32})
    precise: float = 0.0
    enabled: bool = False
    mode: Mode = Mode.Idle


@dataclass
class WithUnsupported:
    name: str = ""
    tags: List[str] = field(default_factory=list)


@dataclass
class BaseRecord:
    inherited: int = 1


@dataclass
class DerivedRecord(BaseRecord):
    own: str = "x"
    _private: int = 0


@dataclass
class PinnedRecord:
    __config_fields__ = ("second", "first")

    first: int = 1
    second: int = 2
    scratch: str = ""


@dataclass
class RequiredField:
    value: int
