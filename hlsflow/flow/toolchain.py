"""
Toolchain installation layout.

Stage commands reference two directories:

- ``resource_dir`` holds the synthesis scripts (``yosys/``) and the device
  libraries (``hw_lib/``);
- ``binaries_dir`` holds the stage binaries. A binary may be installed with a
  target-triple suffix (``fde-cli/place-x86_64-unknown-linux-gnu``), in which
  case the suffixed file is preferred.
"""

import os
import platform
from pathlib import Path
from typing import Mapping, Optional

from pydantic import Field

from hlsflow.model.base import FrozenModel

RESOURCE_DIR_ENV = "HLSFLOW_RESOURCE_DIR"
BINARIES_DIR_ENV = "HLSFLOW_BINARIES_DIR"
TARGET_TRIPLE_ENV = "HLSFLOW_TARGET_TRIPLE"


def detect_target_triple() -> str:
    """Guess the target triple of the running platform."""
    system = platform.system().lower()
    machine = platform.machine().lower()

    if system == "windows":
        return "x86_64-pc-windows-msvc"
    if system == "darwin":
        return "aarch64-apple-darwin" if machine in ("arm64", "aarch64") else "x86_64-apple-darwin"
    if machine in ("x86_64", "amd64"):
        return "x86_64-unknown-linux-gnu"
    if machine in ("arm64", "aarch64"):
        return "aarch64-unknown-linux-gnu"
    return "i686-unknown-linux-gnu"


class Toolchain(FrozenModel):
    """Where stage binaries and their resource files live."""

    resource_dir: Path = Field(default=Path("resource"), description="Scripts and device libraries")
    binaries_dir: Path = Field(default=Path("binaries"), description="Stage binaries")
    target_triple: str = Field(
        default_factory=detect_target_triple, description="Suffix of installed binaries"
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Toolchain":
        """
        Build the layout from ``HLSFLOW_*`` environment variables.

        Unset variables fall back to ``./resource``, ``./binaries`` and the
        detected target triple.
        """
        environ = os.environ if environ is None else environ
        data = {}
        if environ.get(RESOURCE_DIR_ENV):
            data["resource_dir"] = Path(environ[RESOURCE_DIR_ENV])
        if environ.get(BINARIES_DIR_ENV):
            data["binaries_dir"] = Path(environ[BINARIES_DIR_ENV])
        if environ.get(TARGET_TRIPLE_ENV):
            data["target_triple"] = environ[TARGET_TRIPLE_ENV]
        return cls(**data)

    @property
    def exe_extension(self) -> str:
        return ".exe" if "windows" in self.target_triple else ""

    def resource(self, relative: str) -> Path:
        """Absolute path of a resource file, e.g. ``hw_lib/dc_cell.xml``."""
        return (self.resource_dir / relative).resolve()

    def yosys_resource(self, name: str) -> Path:
        return self.resource(f"yosys/{name}")

    def hw_lib(self, name: str) -> Path:
        return self.resource(f"hw_lib/{name}")

    def sidecar(self, tool: str) -> str:
        """
        Executable path of a stage binary.

        Args:
            tool: Binary name relative to ``binaries_dir``, e.g. ``fde-cli/place``

        Returns:
            The target-suffixed binary if installed, else the plain path
        """
        plain = (self.binaries_dir / tool).resolve()
        suffixed = plain.with_name(f"{plain.name}-{self.target_triple}{self.exe_extension}")
        if suffixed.is_file():
            return str(suffixed)
        return str(plain)
