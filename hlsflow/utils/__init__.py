"""Shared utility helpers for hlsflow."""

import importlib.resources
from enum import Enum
from pathlib import Path
from typing import Any

# Packaged pin catalog, with a source-tree fallback for editable checkouts
PIN_CATALOG_PATH = None

try:
    ref = importlib.resources.files("hlsflow.devices") / "pin_catalog.yml"
    if ref.is_file():
        PIN_CATALOG_PATH = Path(str(ref))
except (ImportError, ModuleNotFoundError):
    pass

if PIN_CATALOG_PATH is None:
    # utils is in hlsflow/utils/__init__.py
    PIN_CATALOG_PATH = Path(__file__).resolve().parent.parent / "devices" / "pin_catalog.yml"


def enum_value(v: Any) -> str:
    """Extract the string value from an Enum member or return str(v)."""
    return v.value if isinstance(v, Enum) else str(v)


def filter_none(data: dict) -> dict:
    """Remove keys with None values from a dictionary.

    Required for Pydantic v2 compatibility: passing None explicitly
    to fields with defaults causes validation errors. Filtering None
    values lets Pydantic use its own defaults.
    """
    return {k: v for k, v in data.items() if v is not None}
