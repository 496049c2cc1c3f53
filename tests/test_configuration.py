import pytest
import json
import os
from unittest.mock import patch

from solomon_draft.configuration import (
    read_configuration,
    write_configuration,
    reset_configuration,
    Configuration,
    get_config_path,
)


@pytest.fixture
def example_configuration():
    # Create an example Configuration object for testing
    config = Configuration()
    config.draft.pack_size = 8
    config.draft.rounds = 5
    config.catalog.requests_per_second = 4
    config.settings.export_folder = "exports"
    return config


def test_read_configuration_existing_file(tmp_path, example_configuration):
    file_location = tmp_path / "config.json"
    with open(file_location, "w") as f:
        json.dump(example_configuration.model_dump(), f)

    config, success = read_configuration(file_location)

    assert success is True
    assert config == example_configuration


def test_read_configuration_nonexistent_file(tmp_path):
    file_location = tmp_path / "nonexistent.json"

    config, success = read_configuration(file_location)

    assert success is False
    assert isinstance(config, Configuration)
    assert config == Configuration()


@pytest.mark.parametrize(
    "contents",
    [
        "{not json",
        json.dumps({"catalog": {"batch_size": 500}}),
        json.dumps({"draft": {"pack_size": "six"}}),
    ],
)
def test_read_configuration_invalid_file(tmp_path, contents):
    file_location = tmp_path / "config.json"
    file_location.write_text(contents)

    config, success = read_configuration(file_location)

    assert success is False
    assert config == Configuration()


def test_read_configuration_partial_file(tmp_path):
    # Missing sections fall back to their defaults
    file_location = tmp_path / "config.json"
    file_location.write_text(json.dumps({"draft": {"pack_size": 3}}))

    config, success = read_configuration(file_location)

    assert success is True
    assert config.draft.pack_size == 3
    assert config.draft.rounds == Configuration().draft.rounds
    assert config.catalog == Configuration().catalog


def test_write_configuration(tmp_path, example_configuration):
    file_location = tmp_path / "nested" / "config.json"

    success = write_configuration(example_configuration, file_location)

    assert success is True
    with open(file_location, "r") as f:
        written_config = json.load(f)
    assert written_config == example_configuration.model_dump()


def test_write_configuration_failure(tmp_path, example_configuration):
    # A directory in place of the file cannot be opened for writing
    file_location = tmp_path / "config.json"
    file_location.mkdir()

    assert write_configuration(example_configuration, file_location) is False


def test_reset_configuration(tmp_path, example_configuration):
    file_location = tmp_path / "config.json"
    with open(file_location, "w") as f:
        json.dump(example_configuration.model_dump(), f)

    success = reset_configuration(file_location)

    assert success is True
    with open(file_location, "r") as f:
        reset_config = json.load(f)
    assert reset_config == Configuration().model_dump()


def test_get_config_path():
    """Verify get_config_path returns correct OS-specific paths."""

    def mock_expanduser(path):
        return path.replace("~", "/User/Home")

    # Windows Case
    mock_appdata = "AppData"
    with patch("sys.platform", "win32"), patch.dict(os.environ, {"APPDATA": mock_appdata}):
        expected = os.path.join(mock_appdata, "Solomon_Draft", "config.json")
        assert get_config_path() == expected

    # Mac Case
    with patch("sys.platform", "darwin"), patch(
        "os.path.expanduser", side_effect=mock_expanduser
    ):
        expected = os.path.join(
            "/User/Home/Library/Application Support", "Solomon_Draft", "config.json"
        )
        assert get_config_path() == expected

    # Linux Case
    with patch("sys.platform", "linux"), patch(
        "os.path.expanduser", side_effect=mock_expanduser
    ):
        expected = os.path.join("/User/Home/.config", "Solomon_Draft", "config.json")
        assert get_config_path() == expected
