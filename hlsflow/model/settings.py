"""
Per-stage settings for flow projects.

Settings are immutable values. Every section carries its defaults, so a
project file may omit any of them. Changes go through ``update_settings``,
which returns a new ``ProjectSettings`` instead of editing the current one.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Type

from pydantic import Field, field_validator

from .base import FrozenModel


class PlaceMode(str, Enum):
    """Placement algorithm selection."""

    TIMING_DRIVEN = "Timing Driven"
    BOUNDING_BOX = "Bounding Box"


class RouteMode(str, Enum):
    """Routing algorithm selection."""

    DIRECT_SEARCH = "Direct Search"
    # Spelling matches the value stored by existing project files
    BREATH_FIRST = "Breath First"
    TIMING_DRIVEN = "Timing Driven"


class HlsSettings(FrozenModel):
    """High-level synthesis options."""

    top_function: str = Field(default="main", description="C/C++ function to synthesize")
    clock_period: int = Field(default=10, ge=1, le=1000, description="Clock period in ns")

    @field_validator("top_function")
    @classmethod
    def validate_top_function(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Top function name cannot be empty")
        return v


class PlaceSettings(FrozenModel):
    """Placement options."""

    mode: PlaceMode = Field(default=PlaceMode.TIMING_DRIVEN, description="Placement mode")


class RouteSettings(FrozenModel):
    """Routing options."""

    mode: RouteMode = Field(default=RouteMode.TIMING_DRIVEN, description="Routing mode")


class ProjectSettings(FrozenModel):
    """All stage settings of a project, defaults resolved at construction."""

    hls: HlsSettings = Field(default_factory=HlsSettings)
    place: PlaceSettings = Field(default_factory=PlaceSettings)
    route: RouteSettings = Field(default_factory=RouteSettings)


SECTION_MODELS: Dict[str, Type[FrozenModel]] = {
    "hls": HlsSettings,
    "place": PlaceSettings,
    "route": RouteSettings,
}

# Older project files keep the HLS options under "bambu"
_SECTION_ALIASES = {"bambu": "hls"}


def _to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class SettingsUpdate:
    """Request to set one settings field, e.g. ``SettingsUpdate("hls", "clockPeriod", 5)``."""

    section: str
    field: str
    value: Any


def update_settings(settings: ProjectSettings, update: SettingsUpdate) -> ProjectSettings:
    """
    Apply a single update and return the resulting settings.

    Args:
        settings: Current settings (left untouched)
        update: Section, field and new value; field names may be camelCase

    Returns:
        New ProjectSettings

    Raises:
        ValueError: Unknown section or field, or a value that fails validation
    """
    section = _SECTION_ALIASES.get(update.section.lower(), update.section.lower())
    if section not in SECTION_MODELS:
        raise ValueError(
            f"Unknown settings section '{update.section}'. "
            f"Expected one of: {', '.join(SECTION_MODELS)}"
        )

    model = SECTION_MODELS[section]
    field = _to_snake(update.field)
    if field not in model.model_fields:
        raise ValueError(f"Unknown field '{update.field}' in settings section '{section}'")

    current = getattr(settings, section)
    data = current.model_dump()
    data[field] = update.value
    # model_validate raises pydantic.ValidationError, a ValueError subclass
    new_section = model.model_validate(data)
    return settings.model_copy(update={section: new_section})
