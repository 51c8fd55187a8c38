"""
Pin allocation for generated top modules.

Ports are walked in declaration order and each port instance takes the next
free pin of its direction. The result is fully deterministic.
"""

import logging
from typing import Dict, Iterator, List, Sequence

from hlsflow.errors import PinExhaustionError
from hlsflow.model import PinAssignment, PinCatalog, Port, PortDirection

logger = logging.getLogger(__name__)

# Routed through the global clock network, never an I/O pin
CLOCK_PORT_NAME = "clock"


def expand_port(port: Port) -> List[str]:
    """
    Port instance names of a port.

    A bus ``data[7:0]`` expands to ``data[0]`` ... ``data[7]``, lowest index
    first, whatever the declared order; a scalar keeps its plain name.
    """
    if not port.is_bus:
        return [port.name]
    return [f"{port.name}[{i}]" for i in port.bit_indices]


def assign_pins(ports: Sequence[Port], catalog: PinCatalog) -> List[PinAssignment]:
    """
    Assign every port instance to a device pin.

    Args:
        ports: Ports in declaration order
        catalog: Device pins to draw from

    Returns:
        Assignments in port order

    Raises:
        PinExhaustionError: A direction ran out of pins; nothing is returned
    """
    free_pins: Dict[PortDirection, Iterator[str]] = {
        direction: iter(catalog.pins_for(direction)) for direction in PortDirection
    }
    assignments: List[PinAssignment] = []

    for port in ports:
        if port.name == CLOCK_PORT_NAME:
            logger.debug("Skipping clock port")
            continue

        for instance in expand_port(port):
            pin = next(free_pins[port.direction], None)
            if pin is None:
                raise PinExhaustionError(port.direction.value, port.name)
            assignments.append(
                PinAssignment(port_name=instance, pin=pin, direction=port.direction)
            )

    logger.debug("Assigned %d pin(s) on %s", len(assignments), catalog.device)
    return assignments
