"""
Tests for constraint file auto-generation.
"""

import logging
import xml.etree.ElementTree as ET

import pytest

from hlsflow.constraints import constraint_path, generate_constraint_file, hls_output_path
from hlsflow.devices.pin_library import get_pin_library
from hlsflow.errors import (
    ArtifactIOError,
    MissingModuleError,
    MissingSourceError,
    PinExhaustionError,
)
from hlsflow.model import PinCatalog, SettingsUpdate
from hlsflow.parser import YamlProjectParser
from hlsflow.parser.hdl.verilog_parser import VerilogPortExtractor


@pytest.fixture
def project(project_dir):
    return YamlProjectParser().parse_file(project_dir / "adder.yml")


def _ports_in(path):
    return [(p.get("name"), p.get("position")) for p in ET.parse(path).getroot()]


def test_paths(project, project_dir):
    assert constraint_path(project) == project_dir.resolve() / "adder_bambu_cons.xml"
    assert hls_output_path(project) == project_dir.resolve() / "add.v"


def test_generates_constraint_file(project, small_catalog):
    path = generate_constraint_file(project, small_catalog)

    assert path == constraint_path(project)
    root = ET.parse(path).getroot()
    assert root.get("name") == "_Z3addhh"

    ports = _ports_in(path)
    # 18 input instances (clock skipped) and 9 output instances
    assert len(ports) == 27
    assert ports[:3] == [("reset", "I0"), ("start_port", "I1"), ("a[0]", "I2")]
    assert ports[9] == ("a[7]", "I9")
    assert ports[17] == ("b[7]", "I17")
    assert ports[18] == ("done_port", "O0")
    assert ports[-1] == ("return_port[7]", "O8")
    assert "clock" not in [name for name, _ in ports]


def test_packaged_catalog_first_pins(project):
    catalog = get_pin_library().get_catalog()
    ports = _ports_in(generate_constraint_file(project, catalog))
    assert ports[0] == ("reset", "P151")
    assert ports[18] == ("done_port", "P7")


def test_existing_file_returned_without_reading_hdl(project, small_catalog, monkeypatch):
    first = generate_constraint_file(project, small_catalog)
    content = first.read_text()

    def fail_parse(*args, **kwargs):
        raise AssertionError("HLS output must not be read again")

    monkeypatch.setattr(VerilogPortExtractor, "parse_file", fail_parse)
    second = generate_constraint_file(project, small_catalog)

    assert second == first
    assert second.read_text() == content


def test_existing_file_not_revalidated(project, project_dir, small_catalog):
    stale = project_dir / "adder_bambu_cons.xml"
    stale.write_text('<design name="old"/>')

    assert generate_constraint_file(project, small_catalog) == constraint_path(project)
    assert stale.read_text() == '<design name="old"/>'


def test_reuse_logged(project, small_catalog, caplog):
    generate_constraint_file(project, small_catalog)
    with caplog.at_level(logging.WARNING, logger="hlsflow.constraints.autogen"):
        generate_constraint_file(project, small_catalog)
    assert "Using existing constraint file" in caplog.text


def test_no_sources(project, small_catalog):
    project = project.model_copy(update={"files": []})
    with pytest.raises(MissingSourceError):
        generate_constraint_file(project, small_catalog)


def test_missing_hls_output(project, project_dir, small_catalog):
    (project_dir / "add.v").unlink()
    with pytest.raises(ArtifactIOError, match="add.v"):
        generate_constraint_file(project, small_catalog)
    assert not constraint_path(project).exists()


def test_top_function_not_found(project, small_catalog):
    project = project.apply(SettingsUpdate("hls", "topFunction", "multiply"))
    with pytest.raises(MissingModuleError, match="multiply"):
        generate_constraint_file(project, small_catalog)
    assert not constraint_path(project).exists()


def test_pin_exhaustion_writes_nothing(project):
    tiny = PinCatalog(device="TINY", input_pins=["I0", "I1", "I2"], output_pins=["O0"])
    with pytest.raises(PinExhaustionError) as exc_info:
        generate_constraint_file(project, tiny)

    assert exc_info.value.direction == "input"
    assert exc_info.value.port_name == "a"
    assert not constraint_path(project).exists()
