##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Tests for the `Config` and `SessionConfig` classes of the `config/` package.
"""

from dataclasses import FrozenInstanceError

import pytest

from reltest.backends.dry_run import DryRunService
from reltest.config import DEFAULT_ENGINE_SIZE, DEFAULT_POOL_SIZE, DEFAULT_PROFILE, Config, SessionConfig


class TestConfig:
    """
    Tests for the `Config` class.
    """

    def test_defaults(self, dry_service: DryRunService):
        """
        Test the default values of a config.

        Args:
            dry_service: A fresh in-memory database service.
        """
        config = Config(service=dry_service)
        assert config.engine is None
        assert config.engine_size == DEFAULT_ENGINE_SIZE
        assert config.pool_size == DEFAULT_POOL_SIZE
        assert config.profile == DEFAULT_PROFILE

    def test_is_immutable(self, dry_config: Config):
        """
        Test that a config cannot be modified in place.

        Args:
            dry_config: A configuration using the dry service and an explicit engine.
        """
        with pytest.raises(FrozenInstanceError):
            dry_config.engine = "other"

    def test_with_engine(self, dry_config: Config):
        """
        Test that `with_engine` returns a modified copy and leaves the original alone.

        Args:
            dry_config: A configuration using the dry service and an explicit engine.
        """
        pooled = dry_config.with_engine(None)
        assert pooled.engine is None
        assert pooled.service is dry_config.service
        assert dry_config.engine == "test-engine"


class TestSessionConfig:
    """
    Tests for the `SessionConfig` class.
    """

    def test_empty_snapshot(self):
        """Test that a new session has no values set."""
        assert SessionConfig().snapshot() == {}

    def test_set_and_unset_engine(self):
        """Test setting an engine for the session and going back to the pool."""
        session = SessionConfig()
        session.set_engine("my-engine")
        assert session.snapshot() == {"engine": "my-engine"}
        session.unset_engine()
        assert session.snapshot() == {}

    def test_set_profile_drops_service(self, dry_service: DryRunService):
        """
        Test that switching profiles forgets the service loaded for the previous profile.

        Args:
            dry_service: A fresh in-memory database service.
        """
        session = SessionConfig()
        session.set_service(dry_service)
        assert session.snapshot() == {"service": dry_service}
        session.set_profile("ci")
        assert session.snapshot() == {"profile": "ci"}
