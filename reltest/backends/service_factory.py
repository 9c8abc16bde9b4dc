##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Service factory for selecting and instantiating database services in RelTest.

The only built-in implementation is the in-memory `dry` service. Services that
talk to a real deployment are installed as plugins that register themselves in
the `reltest.services` entry point group, e.g.:

    entry_points={"reltest.services": ["rest=my_rest_client:RestDatabaseService"]}
"""

import logging
from importlib.metadata import entry_points
from typing import Dict, List, Optional, Type

from reltest.backends.database_service import DatabaseService
from reltest.backends.dry_run import DryRunService
from reltest.exceptions import ConfigurationError, ServiceNotSupportedError


LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "reltest.services"


class ServiceFactory:
    """
    Factory class for managing and instantiating `DatabaseService` implementations.

    Built-in services are registered on creation; plugins are looked up in the
    `reltest.services` entry point group the first time a name is not found.

    Attributes:
        _registry (Dict[str, Type[DatabaseService]]): Maps canonical service names to their classes.
        _aliases (Dict[str, str]): Maps alias names to canonical service names.

    Methods:
        register: Register a service class and its optional aliases.
        list_available: Return the names of every built-in and installed service.
        create: Instantiate a service by name or alias.
    """

    def __init__(self):
        self._registry: Dict[str, Type[DatabaseService]] = {}
        self._aliases: Dict[str, str] = {}
        self._plugins_loaded = False
        self.register("dry", DryRunService, aliases=["dry-run", "dryrun"])

    def _discover_plugins(self):
        if self._plugins_loaded:
            return
        self._plugins_loaded = True
        for entry_point in entry_points(group=ENTRY_POINT_GROUP):
            try:
                self.register(entry_point.name, entry_point.load())
                LOG.info(f"Loaded service plugin via entry point: {entry_point.name}")
            except Exception as e:  # pylint: disable=broad-exception-caught
                LOG.warning(f"Failed to load service plugin '{entry_point.name}': {e}")

    def register(self, name: str, service_class: Type[DatabaseService], aliases: Optional[List[str]] = None):
        """
        Register a service implementation.

        Args:
            name: Canonical name for the service.
            service_class: The `DatabaseService` subclass to register.
            aliases: Optional alternative names for this service.

        Raises:
            TypeError: If `service_class` does not subclass `DatabaseService`.
        """
        if not (isinstance(service_class, type) and issubclass(service_class, DatabaseService)):
            raise TypeError(f"{service_class} must inherit from DatabaseService")

        self._registry[name] = service_class
        for alias in aliases or []:
            self._aliases[alias] = name
        LOG.debug(f"Registered service '{name}' (aliases: {aliases or []})")

    def list_available(self) -> List[str]:
        """
        Return the canonical names of every built-in and installed service.
        """
        self._discover_plugins()
        return list(self._registry)

    def create(self, service: str, options: Optional[Dict] = None) -> DatabaseService:
        """
        Instantiate the service registered under this name or alias.

        Args:
            service: The name or alias of the service.
            options: Keyword arguments for the service's constructor.

        Returns:
            The `DatabaseService` instance.

        Raises:
            ServiceNotSupportedError: If no service is registered under this name.
            ConfigurationError: If the service cannot be created with these options.
        """
        canonical_name = self._aliases.get(service, service)
        if canonical_name not in self._registry:
            self._discover_plugins()

        service_class = self._registry.get(canonical_name)
        if service_class is None:
            raise ServiceNotSupportedError(
                f"Service '{service}' is not supported. Available services: {', '.join(self.list_available())}"
            )

        try:
            return service_class(**(options or {}))
        except Exception as e:
            raise ConfigurationError(f"Failed to create service '{canonical_name}': {e}") from e


service_factory = ServiceFactory()
