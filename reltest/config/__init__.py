##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Used to store the application configuration.

The `config` package defines the immutable `Config` that is passed explicitly to
every RelTest operation, and `SessionConfig`, a mutable holder meant to live
only at the outermost edge of a process (an interactive session or the CLI).
Inner components never read a session implicitly; they receive the `Config`
snapshot produced by `reltest.config.configfile.load_config`.

Modules:
    configfile.py: Handles locating and loading the YAML app file and cascading
        configuration values into a `Config`.
"""
from dataclasses import dataclass, replace
from typing import Optional

from reltest.backends.database_service import DatabaseService


DEFAULT_PROFILE = "default"
DEFAULT_ENGINE_SIZE = "S"
DEFAULT_POOL_SIZE = 1


@dataclass(frozen=True)
class Config:
    """
    The configuration passed around most RelTest operations.

    Attributes:
        service: The database service used to create databases, provision engines and execute transactions.
        engine: The engine to use. If None, engines are borrowed from the engine pool.
        engine_size: The size of the engines provisioned for a pool.
        pool_size: The number of engines provisioned for a pool.
        profile: The app file profile the configuration was loaded from.
    """

    service: DatabaseService
    engine: Optional[str] = None
    engine_size: str = DEFAULT_ENGINE_SIZE
    pool_size: int = DEFAULT_POOL_SIZE
    profile: str = DEFAULT_PROFILE

    def with_engine(self, engine: Optional[str]) -> "Config":
        """
        Return a copy of this config that uses `engine`.

        Args:
            engine: The explicit engine, or None to use the pool.

        Returns:
            A new `Config`.
        """
        return replace(self, engine=engine)


class SessionConfig:
    """
    Mutable holder for settings of an interactive session.

    Values set here take precedence over environment variables and the app file,
    but are overridden by explicit arguments. A session is only consulted when it
    is passed to `load_config`.

    Attributes:
        service (Optional[DatabaseService]): The service to use for the session.
        engine (Optional[str]): The engine to use for the session.
        profile (Optional[str]): The app file profile to use for the session.
    """

    def __init__(self):
        self.service: Optional[DatabaseService] = None
        self.engine: Optional[str] = None
        self.profile: Optional[str] = None

    def set_engine(self, engine: str):
        """Use this engine for the rest of the session."""
        self.engine = engine

    def unset_engine(self):
        """Go back to borrowing engines from the pool."""
        self.engine = None

    def set_profile(self, profile: Optional[str]):
        """
        Use this app file profile for the rest of the session, dropping any service
        that was loaded for the previous profile.
        """
        self.profile = profile
        self.service = None

    def set_service(self, service: DatabaseService):
        """Use this service instance for the rest of the session."""
        self.service = service

    def snapshot(self) -> dict:
        """
        Return the values currently set, skipping unset ones.

        Returns:
            A dictionary with the `service`, `engine` and `profile` keys that are set.
        """
        values = {"service": self.service, "engine": self.engine, "profile": self.profile}
        return {key: value for key, value in values.items() if value is not None}
