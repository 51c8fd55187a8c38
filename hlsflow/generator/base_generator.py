"""
Base generator interface for template-driven artifact generation.

Provides the Jinja2 environment and an all-or-nothing file write shared by
concrete generators.

Current implementations:
- ConstraintGenerator: FDE pin constraint XML (hlsflow.generator.constraint_generator)
"""

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape


class BaseGenerator(ABC):
    """
    Abstract base class for artifact generators.

    Templates are loaded from a 'templates' subdirectory.
    """

    def __init__(self, template_dir: Optional[str] = None):
        """
        Initialize the generator with Jinja2 environment.

        Args:
            template_dir: Optional custom template directory.
                Defaults to the 'templates' directory next to this module.
        """
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self.template_dir = template_dir
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["xml.j2", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @abstractmethod
    def generate(self, artifact: Any) -> str:
        """
        Render an artifact to text.

        Args:
            artifact: Model to render

        Returns:
            File content as string
        """
        pass

    @staticmethod
    def write_atomic(path: Union[str, Path], content: str) -> Path:
        """
        Write ``content`` to ``path`` in a single step.

        The text goes to a temporary file in the same directory first and is
        then moved into place, so readers never see a partial file.

        Returns:
            The written path
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        return path
