"""
Source file records for flow projects.
"""

import re
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator

from .base import FrozenModel

# Extensions stripped to derive the HLS output name (foo.cpp -> foo.v)
_SOURCE_EXTENSION = re.compile(r"\.(cpp|cc|cxx|c)$", re.IGNORECASE)


class FileType(str, Enum):
    """File type enumeration."""

    # Compilable sources
    C = "c"
    CPP = "cpp"

    # Constraints
    CONSTRAINT = "constraint"

    # Generated or hand-written HDL
    VERILOG = "verilog"

    OTHER = "other"

    @classmethod
    def from_string(cls, value: str) -> "FileType":
        """Normalize common file type aliases into ``FileType``."""
        normalized = value.strip().lower()
        mapping = {
            "c": cls.C,
            "csource": cls.C,
            "cpp": cls.CPP,
            "c++": cls.CPP,
            "cc": cls.CPP,
            "cxx": cls.CPP,
            "cppsource": cls.CPP,
            "constraint": cls.CONSTRAINT,
            "xml": cls.CONSTRAINT,
            "verilog": cls.VERILOG,
            "v": cls.VERILOG,
        }
        return mapping.get(normalized, cls.OTHER)


class SourceFile(FrozenModel):
    """
    File reference within a project.

    ``path`` is kept as written in the project file; resolve it against the
    project root with ``resolve()``.
    """

    path: str = Field(..., description="Relative or absolute file path")
    type: FileType = Field(..., description="File type")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Ensure path is not empty."""
        if not v or not v.strip():
            raise ValueError("File path cannot be empty")
        return v.strip()

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return FileType.from_string(v)
        return v

    @property
    def file_name(self) -> str:
        """Get file name from path."""
        return Path(self.path).name

    @property
    def base_name(self) -> str:
        """File name without its C/C++ source extension."""
        return _SOURCE_EXTENSION.sub("", self.file_name)

    @property
    def is_compilable(self) -> bool:
        """Check if file is a C/C++ source the HLS stage can compile."""
        return self.type in [FileType.C, FileType.CPP]

    @property
    def is_constraint(self) -> bool:
        return self.type == FileType.CONSTRAINT

    def resolve(self, root: Path) -> Path:
        """Absolute path of the file, relative paths taken from ``root``."""
        path = Path(self.path)
        return path if path.is_absolute() else root / path
