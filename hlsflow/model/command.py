"""External command descriptor produced by stage builders."""

from pathlib import Path
from typing import List, Tuple

from pydantic import Field

from .base import FrozenModel


class CommandDescriptor(FrozenModel):
    """
    Command line of one external stage binary.

    A plain value: building one never runs anything.
    """

    executable: str = Field(..., description="Path of the binary to run")
    arguments: Tuple[str, ...] = Field(default=(), description="Arguments in order")
    working_directory: Path = Field(..., description="Directory the binary runs in")

    @property
    def argv(self) -> List[str]:
        """Full argument vector, executable first."""
        return [self.executable, *self.arguments]

    def __str__(self) -> str:
        return " ".join(self.argv)
