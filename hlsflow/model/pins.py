"""
Device pin catalog and pin assignment models.
"""

from typing import List

from pydantic import Field, field_validator, model_validator

from .base import FrozenModel
from .port import PortDirection


class PinCatalog(FrozenModel):
    """
    Physical I/O pins of a device, split by capability.

    Pin identifiers are opaque strings. Order matters: the allocator hands
    out pins front to back.
    """

    device: str = Field(..., description="Device identifier (e.g., 'FDP3P7')")
    description: str = Field(default="", description="Board or package description")
    input_pins: List[str] = Field(default_factory=list, description="Input-capable pins")
    output_pins: List[str] = Field(default_factory=list, description="Output-capable pins")

    @field_validator("input_pins", "output_pins")
    @classmethod
    def validate_unique(cls, v: List[str]) -> List[str]:
        """Ensure a pin is listed only once per direction."""
        seen = set()
        for pin in v:
            if pin in seen:
                raise ValueError(f"Duplicate pin identifier: '{pin}'")
            seen.add(pin)
        return v

    @model_validator(mode="after")
    def validate_disjoint(self) -> "PinCatalog":
        shared = set(self.input_pins) & set(self.output_pins)
        if shared:
            raise ValueError(
                f"Pins listed as both input and output: {', '.join(sorted(shared))}"
            )
        return self

    def pins_for(self, direction: PortDirection) -> List[str]:
        """Get the pin sequence matching a port direction."""
        if direction == PortDirection.INPUT:
            return self.input_pins
        return self.output_pins


class PinAssignment(FrozenModel):
    """One port instance bound to one physical pin."""

    port_name: str = Field(..., description="Scalar name or 'name[bit]'")
    pin: str = Field(..., description="Pin identifier from the catalog")
    direction: PortDirection


class ConstraintArtifact(FrozenModel):
    """Complete pin mapping for one design, as persisted for place and route."""

    design_name: str = Field(..., description="Top module name")
    assignments: List[PinAssignment] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_injective(self) -> "ConstraintArtifact":
        """Each pin may be used by one port instance only."""
        seen = set()
        for assignment in self.assignments:
            if assignment.pin in seen:
                raise ValueError(f"Pin '{assignment.pin}' assigned more than once")
            seen.add(assignment.pin)
        return self
