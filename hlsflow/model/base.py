"""
Base models for flow metadata.

Provides shared base models with centralized configuration for all
project, settings and constraint classes.

Architecture Decision:
    Two mutability policies exist on purpose:
    StrictModel (extra="forbid") is for objects loaded from a project file,
    where extra fields indicate user typos.
    FrozenModel additionally freezes the instance; settings and project
    values are replaced, never edited in place.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class FlowBaseModel(BaseModel):
    """Base model with shared configuration for all flow models.

    Provides camelCase aliasing, assignment validation, and allows field
    population by either alias or Python name.
    """

    model_config = {
        "validate_assignment": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class StrictModel(FlowBaseModel):
    """Base model that forbids unknown fields."""

    model_config = {
        **FlowBaseModel.model_config,
        "extra": "forbid",
    }


class FrozenModel(StrictModel):
    """Immutable strict model.

    Use ``model_copy(update=...)`` to derive a changed value.
    """

    model_config = {
        **StrictModel.model_config,
        "frozen": True,
    }
