##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module provides functionality for locating and loading the RelTest app file
and for building a `Config` out of the various configuration sources.

The app file is a YAML document with a `profiles` mapping:

    profiles:
      default:
        service: rest
        options:
          host: azure.relationalai.com
        engine_size: S
      ci:
        service: dry
        engine: my-engine
"""
import logging
import os
from typing import Any, Dict, Optional, Union

import yaml

from reltest.backends.database_service import DatabaseService
from reltest.backends.service_factory import service_factory
from reltest.config import DEFAULT_ENGINE_SIZE, DEFAULT_POOL_SIZE, DEFAULT_PROFILE, Config, SessionConfig
from reltest.exceptions import ConfigurationError


LOG: logging.Logger = logging.getLogger(__name__)

APP_FILENAME = "app.yaml"
RELTEST_HOME = os.path.join(os.path.expanduser("~"), ".reltest")

ENV_CONFIG = "RELTEST_CONFIG"
ENV_ENGINE = "RELTEST_ENGINE"
ENV_PROFILE = "RELTEST_PROFILE"
ENV_SERVICE = "RELTEST_SERVICE"


def find_config_file(path: str = None) -> Optional[str]:
    """
    Locate the RelTest app file (`app.yaml`).

    If `path` is given, only that directory is checked. Otherwise the search order is:
      1. The file named by the `RELTEST_CONFIG` environment variable.
      2. `app.yaml` in the current working directory.
      3. `app.yaml` in the `~/.reltest` directory.

    Args:
        path: A specific directory to look for `app.yaml`.

    Returns:
        The full path to the app file if found, otherwise None.
    """
    if path is not None:
        app_path = os.path.join(path, APP_FILENAME)
        return app_path if os.path.isfile(app_path) else None

    env_path = os.environ.get(ENV_CONFIG)
    if env_path:
        if os.path.isfile(env_path):
            return env_path
        LOG.warning(f"{ENV_CONFIG} points to '{env_path}', which is not a file.")

    for directory in (os.getcwd(), RELTEST_HOME):
        app_path = os.path.join(directory, APP_FILENAME)
        if os.path.isfile(app_path):
            return app_path

    return None


def load_app_file(filepath: Optional[str]) -> Dict:
    """
    Read a RelTest app file and return its contents.

    Args:
        filepath: The path to the YAML app file.

    Returns:
        The contents of the file, or an empty dictionary if there is no file.

    Raises:
        ConfigurationError: If the file is not a YAML mapping.
    """
    if filepath is None or not os.path.isfile(filepath):
        LOG.debug(f"No app file at {filepath}")
        return {}
    LOG.debug(f"Reading app file {filepath}")
    with open(filepath, "r") as f:
        contents = yaml.safe_load(f)
    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ConfigurationError(f"App file '{filepath}' must contain a mapping.")
    return contents


def get_profile_settings(app: Dict, profile: str) -> Dict:
    """
    Extract the settings of a profile from the contents of an app file.

    Args:
        app: The contents of the app file.
        profile: The name of the profile.

    Returns:
        The settings of the profile; empty when there is no app file and the default profile is used.

    Raises:
        ConfigurationError: If a non-default profile was requested and does not exist.
    """
    profiles = app.get("profiles") or {}
    if profile in profiles:
        return profiles[profile] or {}
    if profile != DEFAULT_PROFILE:
        raise ConfigurationError(f"Profile '{profile}' not found in the app file.")
    return {}


def create_service(service: Union[str, DatabaseService], options: Optional[Dict] = None) -> DatabaseService:
    """
    Turn a service name into a service instance.

    Args:
        service: A service instance (returned as is) or the name of a registered service.
        options: Keyword arguments used to instantiate the service.

    Returns:
        The `DatabaseService` instance.
    """
    if isinstance(service, DatabaseService):
        return service
    return service_factory.create(service, options)


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def load_config(args: Optional[Dict[str, Any]] = None, session: Optional[SessionConfig] = None) -> Config:
    """
    Load a config object, cascading the search for values across various sources.

    Search order, per key:
      1. the values in `args` (usually from the CLI); None values are ignored
      2. the values set on `session`, if one is given
      3. environment variables (`RELTEST_SERVICE`, `RELTEST_ENGINE`, `RELTEST_PROFILE`)
      4. the selected profile of the app file
      5. the default value (no engine, "S" engines, a pool of 1, the "default" profile)

    Args:
        args: Explicit values for `service`, `engine`, `engine_size`, `pool_size` and `profile`.
        session: The session holder of an interactive process.

    Returns:
        The resulting immutable `Config`.

    Raises:
        ConfigurationError: If no database service is configured anywhere.
    """
    args = {key: value for key, value in (args or {}).items() if value is not None}
    session_values = session.snapshot() if session is not None else {}

    profile = _first(args.get("profile"), session_values.get("profile"), os.environ.get(ENV_PROFILE), DEFAULT_PROFILE)
    settings = get_profile_settings(load_app_file(find_config_file()), profile)

    service = _first(
        args.get("service"), session_values.get("service"), os.environ.get(ENV_SERVICE), settings.get("service")
    )
    if service is None:
        raise ConfigurationError(
            f"No database service configured for profile '{profile}'. Use --service, {ENV_SERVICE} "
            f"or a 'service' entry in {APP_FILENAME}."
        )
    options = settings.get("options") if service == settings.get("service") else None

    config = Config(
        service=create_service(service, options),
        engine=_first(args.get("engine"), session_values.get("engine"), os.environ.get(ENV_ENGINE), settings.get("engine")),
        engine_size=_first(args.get("engine_size"), settings.get("engine_size"), DEFAULT_ENGINE_SIZE),
        pool_size=int(_first(args.get("pool_size"), settings.get("pool_size"), DEFAULT_POOL_SIZE)),
        profile=profile,
    )
    LOG.debug(f"Configuration: {config}")
    return config
