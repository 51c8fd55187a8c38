import logging

import pytest

from hlsflow.constraints import CLOCK_PORT_NAME, assign_pins, expand_port
from hlsflow.errors import FlowError, PinExhaustionError
from hlsflow.model import PinCatalog, Port, PortDirection


def _port(name, direction, msb=0, lsb=0):
    return Port(name=name, direction=direction, msb=msb, lsb=lsb)


@pytest.fixture
def catalog():
    return PinCatalog(
        device="TEST",
        input_pins=["I0", "I1", "I2", "I3", "I4", "I5", "I6", "I7", "I8", "I9"],
        output_pins=["O0", "O1", "O2"],
    )


class TestExpandPort:
    def test_scalar(self):
        assert expand_port(_port("done_port", "output")) == ["done_port"]

    def test_descending_bus(self):
        assert expand_port(_port("a", "input", 3, 0)) == ["a[0]", "a[1]", "a[2]", "a[3]"]

    def test_ascending_bus(self):
        assert expand_port(_port("a", "input", 0, 2)) == ["a[0]", "a[1]", "a[2]"]

    def test_offset_bus(self):
        assert expand_port(_port("hi", "input", 7, 4)) == ["hi[4]", "hi[5]", "hi[6]", "hi[7]"]


class TestAssignPins:
    def test_eight_bit_bus_gets_eight_pins_in_order(self, catalog):
        assignments = assign_pins([_port("a", "input", 7, 0)], catalog)

        assert [a.port_name for a in assignments] == [f"a[{i}]" for i in range(8)]
        assert [a.pin for a in assignments] == catalog.input_pins[:8]
        assert all(a.direction == PortDirection.INPUT for a in assignments)

    def test_directions_draw_from_their_own_sequence(self, catalog):
        ports = [
            _port("reset", "input"),
            _port("done_port", "output"),
            _port("start_port", "input"),
            _port("return_port", "output", 1, 0),
        ]
        assignments = assign_pins(ports, catalog)

        assert [(a.port_name, a.pin) for a in assignments] == [
            ("reset", "I0"),
            ("done_port", "O0"),
            ("start_port", "I1"),
            ("return_port[0]", "O1"),
            ("return_port[1]", "O2"),
        ]

    def test_clock_never_assigned(self, catalog):
        ports = [_port(CLOCK_PORT_NAME, "input"), _port("reset", "input")]
        assignments = assign_pins(ports, catalog)

        assert [a.port_name for a in assignments] == ["reset"]
        assert assignments[0].pin == "I0"

    def test_pins_are_unique(self, catalog):
        ports = [_port("a", "input", 3, 0), _port("b", "input", 3, 0), _port("y", "output", 2, 0)]
        pins = [a.pin for a in assign_pins(ports, catalog)]
        assert len(pins) == len(set(pins)) == 11

    def test_deterministic(self, catalog):
        ports = [_port("a", "input", 3, 0), _port("y", "output")]
        assert assign_pins(ports, catalog) == assign_pins(ports, catalog)

    def test_no_ports(self, catalog):
        assert assign_pins([], catalog) == []

    def test_output_exhaustion(self, catalog):
        ports = [_port("reset", "input"), _port("return_port", "output", 3, 0)]

        with pytest.raises(PinExhaustionError) as exc_info:
            assign_pins(ports, catalog)

        error = exc_info.value
        assert error.direction == "output"
        assert error.port_name == "return_port"
        assert isinstance(error, FlowError)
        assert "Not enough output pins" in str(error)

    def test_input_exhaustion_with_exact_fit_boundary(self, catalog):
        fits = [_port("a", "input", 9, 0)]
        assert len(assign_pins(fits, catalog)) == 10

        with pytest.raises(PinExhaustionError, match="input"):
            assign_pins(fits + [_port("extra", "input")], catalog)

    def test_clock_does_not_consume_a_pin(self, catalog):
        ports = [_port("clock", "input"), _port("a", "input", 9, 0)]
        assert len(assign_pins(ports, catalog)) == 10

    def test_debug_log(self, catalog, caplog):
        with caplog.at_level(logging.DEBUG, logger="hlsflow.constraints.allocator"):
            assign_pins([_port("reset", "input")], catalog)
        assert "Assigned 1 pin(s) on TEST" in caplog.text
