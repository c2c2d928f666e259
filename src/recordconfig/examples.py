"""Example record types used by the ``recordconfig demo`` command."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from recordconfig.core.fields import SemanticType
from recordconfig.core.observable import ObservableRecord


class Choice(Enum):
    First = 0
    Second = 1
    Third = 2
    Fourth = 3
    Fifth = 4


@dataclass
class ExampleConfigAuto(ObservableRecord):
    """Saved field by field as it changes."""

    ExampleInt: int = 0
    ExampleString: str = ""
    ExampleEnum: Choice = Choice.First
    ExampleBool: bool = False
    ExampleRatio: float = field(
        default=0.0, metadata={"semantic_type": SemanticType.FLOAT32}
    )


@dataclass
class ExampleConfigManual:
    """Saved only by ``save()`` or at interpreter exit."""

    ID: int = 0
    Name: Optional[str] = None
