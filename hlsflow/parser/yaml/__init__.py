"""
YAML parsers for flow project files.
"""

from .errors import ParseError
from .project_parser import YamlProjectParser

__all__ = ["YamlProjectParser", "ParseError"]
