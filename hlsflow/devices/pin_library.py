"""
Pin Library module.

Provides access to the device pin catalogs (FDP3P7, ...) defined in
pin_catalog.yml.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from hlsflow import utils
from hlsflow.model.pins import PinCatalog

logger = logging.getLogger(__name__)

# Device targeted by the FDE toolchain resources
DEFAULT_DEVICE = "FDP3P7"


class PinLibrary:
    """
    Access device pin catalogs.

    Loads catalogs from YAML and provides query methods.
    """

    def __init__(self, catalogs: Dict[str, PinCatalog]):
        """Initialize with pre-loaded catalogs."""
        self._catalogs = catalogs

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PinLibrary":
        """
        Load pin catalogs from YAML file.

        Args:
            path: Path to pin_catalog.yml (defaults to the packaged file)

        Returns:
            PinLibrary instance

        Raises:
            FileNotFoundError: If the catalog file does not exist
            ValueError: If an entry is not a valid catalog
        """
        path = Path(path) if path else utils.PIN_CATALOG_PATH

        if not path.exists():
            raise FileNotFoundError(f"Pin catalog file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f) or {}

        catalogs = {}
        for device, data in raw_data.items():
            try:
                catalogs[device] = PinCatalog(
                    device=device,
                    description=data.get("description", ""),
                    input_pins=[str(p) for p in data.get("input", [])],
                    output_pins=[str(p) for p in data.get("output", [])],
                )
            except (AttributeError, ValidationError) as e:
                raise ValueError(f"Invalid pin catalog for device '{device}': {e}") from e

        logger.debug("Loaded %d pin catalog(s) from %s", len(catalogs), path)
        return cls(catalogs)

    def list_devices(self) -> List[str]:
        """
        Get list of available device identifiers.

        Returns:
            List of device names (e.g., ['FDP3P7'])
        """
        return list(self._catalogs.keys())

    def get_catalog(self, device: str = DEFAULT_DEVICE) -> Optional[PinCatalog]:
        """
        Get pin catalog by device identifier.

        Args:
            device: Device key (e.g., 'FDP3P7')

        Returns:
            PinCatalog or None if not found
        """
        return self._catalogs.get(device)

    def get_device_info(self, device: str) -> Optional[Dict[str, Any]]:
        """Get device information as dictionary (for JSON serialization)."""
        catalog = self.get_catalog(device)
        if not catalog:
            return None

        return {
            "device": catalog.device,
            "description": catalog.description,
            "inputPins": len(catalog.input_pins),
            "outputPins": len(catalog.output_pins),
        }


# Singleton instance for convenience
_library_instance: Optional[PinLibrary] = None


def get_pin_library() -> PinLibrary:
    """Get or create the global PinLibrary instance."""
    global _library_instance
    if _library_instance is None:
        _library_instance = PinLibrary.load()
    return _library_instance
