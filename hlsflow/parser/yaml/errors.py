"""Parse errors for project files and generated Verilog."""

from pathlib import Path
from typing import Optional


class ParseError(Exception):
    """Input file could not be parsed; carries the position when known."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.line = line
        self.column = column
        super().__init__(self._format_message(message))

    @property
    def location(self) -> str:
        """``file:line:column`` with whatever parts are known."""
        parts = [str(self.file_path) if self.file_path else "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)

    def _format_message(self, message: str) -> str:
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            parts.append(f"Line: {self.line}")
        parts.append(message)
        return " | ".join(parts)
