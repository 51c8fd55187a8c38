"""
Project session: the single owner of the open project.

The project value itself is immutable. Every settings change goes through
``dispatch``, which swaps in the updated project and marks the session
modified until it is saved.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from hlsflow.generator.yaml.project_yaml_generator import ProjectYamlGenerator
from hlsflow.model import Project, SettingsUpdate
from hlsflow.parser import YamlProjectParser

logger = logging.getLogger(__name__)


class ProjectSession:
    """Holds the current project and tracks unsaved changes."""

    def __init__(self, project: Project):
        self._project = project
        self._modified = False

    @classmethod
    def open(cls, path: Union[str, Path]) -> "ProjectSession":
        """Load a project file. Raises ParseError if it is invalid."""
        return cls(YamlProjectParser().parse_file(path))

    @property
    def project(self) -> Project:
        return self._project

    @property
    def modified(self) -> bool:
        return self._modified

    def dispatch(self, update: SettingsUpdate) -> Project:
        """
        Apply a settings update.

        Raises:
            ValueError: The update names an unknown field or has an invalid value;
                the current project is kept
        """
        self._project = self._project.apply(update)
        self._modified = True
        logger.debug("Set %s.%s = %r", update.section, update.field, update.value)
        return self._project

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """Write the project file and clear the modified flag."""
        written = ProjectYamlGenerator().write(self._project, path)
        self._modified = False
        logger.info("Saved project to %s", written)
        return written
