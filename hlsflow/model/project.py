"""Project model - the state every stage command is built from."""

from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator

from .base import FrozenModel
from .fileset import SourceFile
from .settings import ProjectSettings, SettingsUpdate, update_settings


class Project(FrozenModel):
    """
    Flow project definition.

    ``path`` points at the project file itself; artifacts are written next
    to it, in ``root_dir``.
    """

    name: str = Field(..., description="Project name, prefix of every stage artifact")
    path: Path = Field(..., description="Path of the project file")
    files: List[SourceFile] = Field(default_factory=list, description="Project files in order")
    settings: ProjectSettings = Field(default_factory=ProjectSettings)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Project name cannot be empty")
        return v

    @property
    def root_dir(self) -> Path:
        return self.path.parent

    @property
    def compilable_sources(self) -> List[SourceFile]:
        """C/C++ sources in declaration order."""
        return [f for f in self.files if f.is_compilable]

    @property
    def constraint_files(self) -> List[SourceFile]:
        return [f for f in self.files if f.is_constraint]

    @property
    def primary_source(self) -> Optional[SourceFile]:
        """First compilable source; its name decides the HLS output name."""
        sources = self.compilable_sources
        return sources[0] if sources else None

    @property
    def hls_output_name(self) -> Optional[str]:
        """Verilog file the HLS tool writes for the primary source (foo.cpp -> foo.v)."""
        source = self.primary_source
        return f"{source.base_name}.v" if source else None

    def resolve(self, file: SourceFile) -> Path:
        return file.resolve(self.root_dir)

    def with_settings(self, settings: ProjectSettings) -> "Project":
        return self.model_copy(update={"settings": settings})

    def apply(self, update: SettingsUpdate) -> "Project":
        """Return a copy of the project with one settings field changed."""
        return self.with_settings(update_settings(self.settings, update))
