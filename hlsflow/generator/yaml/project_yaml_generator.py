"""
Project YAML Generator module.

Serializes a Project back into the project file format read by
YamlProjectParser. Keys are camelCase and sections keep a stable order.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from hlsflow.generator.base_generator import BaseGenerator
from hlsflow.model import Project, SourceFile
from hlsflow.utils import enum_value


class ProjectYamlGenerator:
    """Generates project YAML files from Project models."""

    def generate(self, project: Project) -> str:
        """
        Generate project YAML content.

        Args:
            project: Project to serialize

        Returns:
            YAML string content
        """
        yaml_data = self._build_yaml_structure(project)
        return yaml.dump(
            yaml_data, default_flow_style=False, sort_keys=False, allow_unicode=True, indent=2
        )

    def write(self, project: Project, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Write the project file.

        Args:
            project: Project to serialize
            path: Destination, defaults to ``project.path``

        Returns:
            Written path
        """
        return BaseGenerator.write_atomic(path or project.path, self.generate(project))

    def _build_yaml_structure(self, project: Project) -> Dict[str, Any]:
        settings = project.settings.model_dump(by_alias=True, mode="json")
        return {
            "name": project.name,
            "files": [self._file_to_dict(f) for f in project.files],
            "settings": settings,
        }

    def _file_to_dict(self, file: SourceFile) -> Dict[str, Any]:
        return {"path": file.path, "type": enum_value(file.type)}
