##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `configfile.py` module.
"""

import os
from pathlib import Path

import pytest
import yaml
from pytest_mock import MockerFixture

from reltest.backends.dry_run import DryRunService
from reltest.config import SessionConfig
from reltest.config.configfile import (
    APP_FILENAME,
    ENV_CONFIG,
    ENV_ENGINE,
    ENV_PROFILE,
    ENV_SERVICE,
    create_service,
    find_config_file,
    get_profile_settings,
    load_app_file,
    load_config,
)
from reltest.exceptions import ConfigurationError


@pytest.fixture
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture) -> Path:
    """
    Run the test from an empty directory, without RelTest environment variables
    and with an empty `~/.reltest` directory.

    Returns:
        The directory the test runs from.
    """
    for variable in (ENV_CONFIG, ENV_ENGINE, ENV_PROFILE, ENV_SERVICE):
        monkeypatch.delenv(variable, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    mocker.patch("reltest.config.configfile.RELTEST_HOME", str(home))
    cwd = tmp_path / "cwd"
    cwd.mkdir()
    monkeypatch.chdir(cwd)
    return cwd


def write_app_file(directory: Path, contents) -> str:
    """
    Write an app file into a directory.

    Args:
        directory: Where to write `app.yaml`.
        contents: The data to dump as YAML.

    Returns:
        The path to the app file.
    """
    app_path = directory / APP_FILENAME
    app_path.write_text(yaml.safe_dump(contents))
    return str(app_path)


class TestFindConfigFile:
    """
    Tests for the `find_config_file` function.
    """

    def test_no_app_file(self, isolated_environment: Path):
        """
        Test that None is returned when there is no app file anywhere.

        Args:
            isolated_environment: The directory the test runs from.
        """
        assert find_config_file() is None

    def test_app_file_in_cwd(self, isolated_environment: Path):
        """
        Test that the app file of the current working directory is found.

        Args:
            isolated_environment: The directory the test runs from.
        """
        app_path = write_app_file(isolated_environment, {"profiles": {}})
        assert os.path.samefile(find_config_file(), app_path)

    def test_env_variable_takes_precedence(
        self, isolated_environment: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        """
        Test that `RELTEST_CONFIG` wins over the app file of the current working directory.

        Args:
            isolated_environment: The directory the test runs from.
            tmp_path: A built-in fixture with a temporary directory.
            monkeypatch: A built-in fixture to modify the environment.
        """
        write_app_file(isolated_environment, {"profiles": {}})
        other = tmp_path / "other.yaml"
        other.write_text("profiles: {}\n")
        monkeypatch.setenv(ENV_CONFIG, str(other))
        assert find_config_file() == str(other)

    def test_env_variable_to_missing_file(self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch):
        """
        Test that a `RELTEST_CONFIG` pointing nowhere falls back to the regular search.

        Args:
            isolated_environment: The directory the test runs from.
            monkeypatch: A built-in fixture to modify the environment.
        """
        monkeypatch.setenv(ENV_CONFIG, str(isolated_environment / "nope.yaml"))
        assert find_config_file() is None

    def test_explicit_directory(self, tmp_path: Path):
        """
        Test that only the given directory is searched when a path is provided.

        Args:
            tmp_path: A built-in fixture with a temporary directory.
        """
        assert find_config_file(str(tmp_path)) is None
        app_path = write_app_file(tmp_path, {})
        assert find_config_file(str(tmp_path)) == app_path


class TestLoadAppFile:
    """
    Tests for the `load_app_file` function.
    """

    def test_missing_file(self, tmp_path: Path):
        """
        Test that a missing file loads as an empty mapping.

        Args:
            tmp_path: A built-in fixture with a temporary directory.
        """
        assert load_app_file(None) == {}
        assert load_app_file(str(tmp_path / APP_FILENAME)) == {}

    def test_empty_file(self, tmp_path: Path):
        """
        Test that an empty file loads as an empty mapping.

        Args:
            tmp_path: A built-in fixture with a temporary directory.
        """
        app_path = tmp_path / APP_FILENAME
        app_path.write_text("")
        assert load_app_file(str(app_path)) == {}

    def test_not_a_mapping(self, tmp_path: Path):
        """
        Test that a YAML document that is not a mapping is rejected.

        Args:
            tmp_path: A built-in fixture with a temporary directory.
        """
        app_path = write_app_file(tmp_path, ["a", "list"])
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_app_file(app_path)


class TestGetProfileSettings:
    """
    Tests for the `get_profile_settings` function.
    """

    def test_existing_profile(self):
        """Test reading the settings of a profile."""
        app = {"profiles": {"ci": {"service": "dry"}, "empty": None}}
        assert get_profile_settings(app, "ci") == {"service": "dry"}
        assert get_profile_settings(app, "empty") == {}

    def test_missing_default_profile(self):
        """Test that a missing default profile is not an error."""
        assert get_profile_settings({}, "default") == {}

    def test_missing_profile(self):
        """Test that a missing non-default profile is an error."""
        with pytest.raises(ConfigurationError, match="Profile 'ci' not found"):
            get_profile_settings({"profiles": {}}, "ci")


class TestLoadConfig:
    """
    Tests for the `create_service` and `load_config` functions.
    """

    def test_create_service(self, dry_service: DryRunService):
        """
        Test that service instances are passed through and names are instantiated.

        Args:
            dry_service: A fresh in-memory database service.
        """
        assert create_service(dry_service) is dry_service
        assert isinstance(create_service("dry"), DryRunService)

    def test_no_service_configured(self, isolated_environment: Path):
        """
        Test that a missing service is reported.

        Args:
            isolated_environment: The directory the test runs from.
        """
        with pytest.raises(ConfigurationError, match="No database service configured"):
            load_config()

    def test_values_from_app_file(self, isolated_environment: Path):
        """
        Test that the default profile of the app file is used when nothing else is set.

        Args:
            isolated_environment: The directory the test runs from.
        """
        write_app_file(
            isolated_environment,
            {"profiles": {"default": {"service": "dry", "engine": "app-engine", "engine_size": "XL", "pool_size": 3}}},
        )
        config = load_config()
        assert isinstance(config.service, DryRunService)
        assert config.engine == "app-engine"
        assert config.engine_size == "XL"
        assert config.pool_size == 3
        assert config.profile == "default"

    def test_profile_from_env(self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch):
        """
        Test that `RELTEST_PROFILE` selects the profile of the app file.

        Args:
            isolated_environment: The directory the test runs from.
            monkeypatch: A built-in fixture to modify the environment.
        """
        write_app_file(isolated_environment, {"profiles": {"ci": {"service": "dry", "engine": "ci-engine"}}})
        monkeypatch.setenv(ENV_PROFILE, "ci")
        config = load_config()
        assert config.profile == "ci"
        assert config.engine == "ci-engine"

    def test_precedence(self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch):
        """
        Test that explicit arguments win over the session, which wins over the
        environment, which wins over the app file.

        Args:
            isolated_environment: The directory the test runs from.
            monkeypatch: A built-in fixture to modify the environment.
        """
        write_app_file(isolated_environment, {"profiles": {"default": {"service": "dry", "engine": "app-engine"}}})
        monkeypatch.setenv(ENV_ENGINE, "env-engine")
        assert load_config().engine == "env-engine"

        session = SessionConfig()
        session.set_engine("session-engine")
        assert load_config(session=session).engine == "session-engine"

        assert load_config({"engine": "arg-engine"}, session=session).engine == "arg-engine"
        # None values do not override anything
        assert load_config({"engine": None}, session=session).engine == "session-engine"

    def test_session_service(self, isolated_environment: Path, dry_service: DryRunService):
        """
        Test that the service instance of a session is used as is.

        Args:
            isolated_environment: The directory the test runs from.
            dry_service: A fresh in-memory database service.
        """
        session = SessionConfig()
        session.set_service(dry_service)
        assert load_config(session=session).service is dry_service

    def test_service_from_env(self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch):
        """
        Test that `RELTEST_SERVICE` names the service.

        Args:
            isolated_environment: The directory the test runs from.
            monkeypatch: A built-in fixture to modify the environment.
        """
        monkeypatch.setenv(ENV_SERVICE, "dry-run")
        config = load_config({"pool_size": "2"})
        assert isinstance(config.service, DryRunService)
        assert config.pool_size == 2
        assert config.engine is None
