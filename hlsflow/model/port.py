"""
Port definitions for generated hardware modules.
"""

from enum import Enum
from typing import List

from pydantic import Field, field_validator

from .base import FrozenModel


class PortDirection(str, Enum):
    """Port direction enumeration."""

    INPUT = "input"
    OUTPUT = "output"

    @classmethod
    def from_string(cls, value: str) -> "PortDirection":
        """Normalize common direction aliases into ``PortDirection``."""
        normalized = value.lower().strip()
        mapping = {
            "in": cls.INPUT,
            "input": cls.INPUT,
            "out": cls.OUTPUT,
            "output": cls.OUTPUT,
        }
        if normalized not in mapping:
            raise ValueError(f"Unsupported port direction: '{value}'")
        return mapping[normalized]


class Port(FrozenModel):
    """
    Port of a generated module.

    A scalar port has ``msb == lsb``; anything else is a bus.
    """

    name: str = Field(..., description="Port name as emitted by the HDL generator")
    direction: PortDirection = Field(..., description="Port direction")
    msb: int = Field(default=0, ge=0, description="Most significant bit index")
    lsb: int = Field(default=0, ge=0, description="Least significant bit index")

    @field_validator("direction", mode="before")
    @classmethod
    def normalize_direction(cls, v):
        if isinstance(v, str):
            return PortDirection.from_string(v)
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Port name cannot be empty")
        return v

    @property
    def is_bus(self) -> bool:
        """Check if port spans more than one bit."""
        return self.msb != self.lsb

    @property
    def width(self) -> int:
        return abs(self.msb - self.lsb) + 1

    @property
    def bit_indices(self) -> List[int]:
        """Bit indices in ascending order, regardless of declaration order."""
        low, high = min(self.msb, self.lsb), max(self.msb, self.lsb)
        return list(range(low, high + 1))

    @property
    def range_string(self) -> str:
        """Get Verilog-style range string (e.g., '[7:0]')."""
        if not self.is_bus:
            return ""
        return f"[{self.msb}:{self.lsb}]"


class HdlModule(FrozenModel):
    """Module found in generated hardware description text."""

    name: str = Field(..., description="Module name, usually a mangled identifier")
    ports: List[Port] = Field(default_factory=list, description="Ports in declaration order")

    def get_port(self, name: str):
        """Get port by name."""
        return next((p for p in self.ports if p.name == name), None)

    @property
    def input_ports(self) -> List[Port]:
        return [p for p in self.ports if p.direction == PortDirection.INPUT]

    @property
    def output_ports(self) -> List[Port]:
        return [p for p in self.ports if p.direction == PortDirection.OUTPUT]
