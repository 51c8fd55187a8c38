import pytest

from hlsflow.model import PlaceMode, SettingsUpdate
from hlsflow.parser import ParseError, YamlProjectParser
from hlsflow.session import ProjectSession


@pytest.fixture
def session(project_dir):
    return ProjectSession.open(project_dir / "adder.yml")


def test_open_is_unmodified(session):
    assert session.project.name == "adder"
    assert not session.modified


def test_dispatch_replaces_project(session):
    before = session.project
    after = session.dispatch(SettingsUpdate("place", "mode", "Bounding Box"))

    assert session.modified
    assert session.project is after
    assert after.settings.place.mode == PlaceMode.BOUNDING_BOX
    assert before.settings.place.mode == PlaceMode.TIMING_DRIVEN


def test_invalid_update_keeps_state(session):
    before = session.project
    with pytest.raises(ValueError):
        session.dispatch(SettingsUpdate("hls", "clockPeriod", -3))
    assert session.project is before
    assert not session.modified


def test_save_clears_modified(session, project_dir):
    session.dispatch(SettingsUpdate("hls", "clockPeriod", 7))
    path = session.save()

    assert not session.modified
    assert path == session.project.path
    assert YamlProjectParser().parse_file(project_dir / "adder.yml").settings.hls.clock_period == 7


def test_open_invalid_file(tmp_path):
    bad = tmp_path / "bad.yml"
    bad.write_text("[1, 2]\n")
    with pytest.raises(ParseError):
        ProjectSession.open(bad)
