"""
Parsers for project files and generated hardware descriptions.
"""

from .yaml import ParseError, YamlProjectParser

__all__ = ["YamlProjectParser", "ParseError"]
