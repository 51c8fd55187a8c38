"""
Tests for the constraint XML generator.
"""

import xml.etree.ElementTree as ET

import pytest
from pydantic import ValidationError

from hlsflow.generator.constraint_generator import ConstraintGenerator
from hlsflow.model import ConstraintArtifact, PinAssignment


def _assign(port_name, pin, direction="input"):
    return PinAssignment(port_name=port_name, pin=pin, direction=direction)


@pytest.fixture
def generator():
    return ConstraintGenerator()


def test_render_format(generator):
    artifact = ConstraintArtifact(
        design_name="_Z3addhh",
        assignments=[_assign("a[0]", "P151"), _assign("done_port", "P7", "output")],
    )
    assert generator.generate(artifact) == (
        '<design name="_Z3addhh">\n'
        '  <port name="a[0]" position="P151"/>\n'
        '  <port name="done_port" position="P7"/>\n'
        "</design>"
    )


def test_render_empty_design(generator):
    xml = generator.generate(ConstraintArtifact(design_name="idle"))
    root = ET.fromstring(xml)
    assert root.tag == "design"
    assert root.get("name") == "idle"
    assert list(root) == []


def test_attribute_values_escaped(generator):
    artifact = ConstraintArtifact(
        design_name='odd"name<&>', assignments=[_assign("x", "P1")]
    )
    root = ET.fromstring(generator.generate(artifact))
    assert root.get("name") == 'odd"name<&>'


def test_synthesize_writes_file(generator, tmp_path):
    destination = tmp_path / "demo_bambu_cons.xml"
    assignments = [_assign("reset", "P151"), _assign("y", "P7", "output")]

    result = generator.synthesize("top", assignments, destination)

    assert result == destination
    root = ET.parse(destination).getroot()
    assert root.get("name") == "top"
    assert [(p.get("name"), p.get("position")) for p in root] == [("reset", "P151"), ("y", "P7")]
    # No temporary files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["demo_bambu_cons.xml"]


def test_synthesize_keeps_existing_file(generator, tmp_path):
    destination = tmp_path / "cons.xml"
    destination.write_text("hand edited")

    result = generator.synthesize("top", [_assign("reset", "P151")], destination)

    assert result == destination
    assert destination.read_text() == "hand edited"


def test_synthesize_rejects_duplicate_pins(generator, tmp_path):
    destination = tmp_path / "cons.xml"
    with pytest.raises(ValidationError):
        generator.synthesize("top", [_assign("a", "P1"), _assign("b", "P1")], destination)
    assert not destination.exists()


def test_failed_write_leaves_no_file(generator, tmp_path, monkeypatch):
    destination = tmp_path / "cons.xml"

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("hlsflow.generator.base_generator.os.replace", broken_replace)
    with pytest.raises(OSError, match="disk full"):
        generator.synthesize("top", [_assign("a", "P1")], destination)

    assert list(tmp_path.iterdir()) == []
