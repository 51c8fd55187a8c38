"""
Pydantic data models for the HLS-to-bitstream flow.

This module provides the single source of truth for project, settings,
port and pin representation.
"""

from .base import FlowBaseModel, FrozenModel, StrictModel
from .command import CommandDescriptor
from .fileset import FileType, SourceFile
from .pins import ConstraintArtifact, PinAssignment, PinCatalog
from .port import HdlModule, Port, PortDirection
from .project import Project
from .settings import (
    HlsSettings,
    PlaceMode,
    PlaceSettings,
    ProjectSettings,
    RouteMode,
    RouteSettings,
    SettingsUpdate,
    update_settings,
)

__all__ = [
    # Base
    "FlowBaseModel",
    "StrictModel",
    "FrozenModel",
    # Files
    "FileType",
    "SourceFile",
    # Ports
    "Port",
    "PortDirection",
    "HdlModule",
    # Pins
    "PinCatalog",
    "PinAssignment",
    "ConstraintArtifact",
    # Settings
    "HlsSettings",
    "PlaceMode",
    "PlaceSettings",
    "RouteMode",
    "RouteSettings",
    "ProjectSettings",
    "SettingsUpdate",
    "update_settings",
    # Project
    "Project",
    "CommandDescriptor",
]
