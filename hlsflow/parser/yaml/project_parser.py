"""
YAML Parser for flow project files.

Loads project YAML files and converts them to canonical Pydantic models.
Missing settings sections fall back to the model defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from hlsflow.model import (
    HlsSettings,
    PlaceSettings,
    Project,
    ProjectSettings,
    RouteSettings,
    SourceFile,
)
from hlsflow.utils import filter_none

from .errors import ParseError

logger = logging.getLogger(__name__)


class YamlProjectParser:
    """
    Parser for flow project YAML definitions.

    Handles:
    - Project name and file list
    - Per-stage settings with defaults
    - Validation and error reporting with line numbers
    """

    def parse_file(self, file_path: Union[str, Path]) -> Project:
        """
        Parse a project YAML file.

        Args:
            file_path: Path to the project file

        Returns:
            Project: Validated project model

        Raises:
            ParseError: If parsing or validation fails
        """
        file_path = Path(file_path).resolve()

        if not file_path.exists():
            raise ParseError(f"File not found: {file_path}")

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            line_num = mark.line + 1 if mark else None
            column = mark.column + 1 if mark else None
            raise ParseError(f"YAML syntax error: {e}", file_path, line_num, column)

        if not isinstance(data, dict):
            raise ParseError("Root element must be a YAML object/dictionary", file_path)

        try:
            project = self._parse_project(data, file_path)
        except ValidationError as e:
            # Convert Pydantic validation errors to ParseError
            errors = []
            for error in e.errors():
                loc = " -> ".join(str(x) for x in error["loc"])
                errors.append(f"{loc}: {error['msg']}")
            raise ParseError("Validation failed:\n  " + "\n  ".join(errors), file_path)

        logger.debug("Loaded project '%s' with %d file(s)", project.name, len(project.files))
        return project

    def _parse_project(self, data: Dict[str, Any], file_path: Path) -> Project:
        """Parse the main project structure."""
        name = data.get("name")
        if not name:
            raise ParseError("Missing required field: name", file_path)

        files = self._parse_files(data.get("files") or [], file_path)
        settings = self._parse_settings(data.get("settings") or {}, file_path)

        return Project(name=str(name), path=file_path, files=files, settings=settings)

    def _parse_files(self, data: List[Dict[str, Any]], file_path: Path) -> List[SourceFile]:
        """Parse file entries."""
        if not isinstance(data, list):
            raise ParseError("'files' must be a list", file_path)

        files = []
        for idx, file_data in enumerate(data):
            try:
                files.append(
                    SourceFile(
                        path=file_data.get("path"),
                        type=file_data.get("type", "other"),
                    )
                )
            except (AttributeError, TypeError, ValueError) as e:
                raise ParseError(f"Error parsing file[{idx}]: {e}", file_path)
        return files

    def _parse_settings(self, data: Dict[str, Any], file_path: Path) -> ProjectSettings:
        """Parse stage settings; absent sections and fields keep their defaults."""
        if not isinstance(data, dict):
            raise ParseError("'settings' must be a mapping", file_path)

        # Older project files keep the HLS options under "bambu"
        hls_data = data.get("hls", data.get("bambu")) or {}
        sections = {}
        for key, model, section_data in (
            ("hls", HlsSettings, hls_data),
            ("place", PlaceSettings, data.get("place") or {}),
            ("route", RouteSettings, data.get("route") or {}),
        ):
            try:
                sections[key] = model.model_validate(filter_none(section_data))
            except (AttributeError, TypeError, ValueError) as e:
                raise ParseError(f"Error parsing settings.{key}: {e}", file_path)

        return ProjectSettings(**sections)
