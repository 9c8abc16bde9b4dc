##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module creates, clones and deletes the databases used by test runs.

Every request goes through the configured `DatabaseService`; its outcome is
normalized to a confirmed database name or one of the `DatabaseError` classes.
Deletion is best-effort so that a cleanup failure never hides the result of the
operation that preceded it.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from reltest.backends.database_service import DatabaseService
from reltest.exceptions import (
    DatabaseAlreadyExistsError,
    DatabaseNotFoundError,
    DatabaseOperationError,
    ServiceRequestError,
)


LOG = logging.getLogger(__name__)

CREATED = "CREATED"
CONFLICT = 409
NOT_FOUND = 404


class DatabaseManager:
    """
    Normalizes the database requests sent to a `DatabaseService`.

    Attributes:
        service: The service receiving the requests.
    """

    def __init__(self, service: DatabaseService):
        self.service = service

    def _create(self, name: str, source: Optional[str] = None) -> str:
        action = f"clone database '{source}' to '{name}'" if source else f"create database '{name}'"
        try:
            info = self.service.create_database(name, source=source)
        except ServiceRequestError as exc:
            LOG.error(f"Failed to {action}")
            if exc.status_code == CONFLICT:
                raise DatabaseAlreadyExistsError(name) from exc
            if source is not None and exc.status_code == NOT_FOUND:
                raise DatabaseNotFoundError(source) from exc
            raise DatabaseOperationError(f"Failed to {action}: {exc}", payload=exc.payload) from exc

        if info.state != CREATED:
            raise DatabaseOperationError(f"Failed to {action}: {info}", payload=info)
        LOG.debug(f"Database '{info.name}' {info.state}")
        return info.name

    def create_database(self, name: str) -> str:
        """
        Create a database with this name.

        Args:
            name: The name of the database.

        Returns:
            The name of the created database, as confirmed by the service.

        Raises:
            DatabaseAlreadyExistsError: If a database with this name exists.
            DatabaseOperationError: If the service fails to create the database.
        """
        return self._create(name)

    def clone_database(self, source: str, target: str) -> str:
        """
        Clone the database `source` into `target`.

        Args:
            source: The database to clone.
            target: The name of the new database.

        Returns:
            The name of the new database.

        Raises:
            DatabaseAlreadyExistsError: If `target` exists.
            DatabaseNotFoundError: If `source` does not exist.
            DatabaseOperationError: If the service fails to clone the database.
        """
        return self._create(target, source=source)

    def delete_database(self, name: str) -> bool:
        """
        Delete the database with this name. Failures are logged, never raised.

        Args:
            name: The name of the database.

        Returns:
            True if the database was deleted.
        """
        try:
            self.service.delete_database(name)
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Could not delete database '{name}': {exc}")
            return False
        LOG.debug(f"Database '{name}' deleted")
        return True

    @contextmanager
    def provisional_database(self, name: str, source: Optional[str] = None) -> Generator[str, None, None]:
        """
        Create (or clone `source` into) a database that is kept only if the `with`
        block completes; on any error it is deleted before the error propagates.

        Args:
            name: The name of the database.
            source: The database to clone, if any.

        Yields:
            The name of the database.
        """
        database = self._create(name, source=source)
        try:
            yield database
        except BaseException:
            LOG.info(f"Deleting database '{database}' after a failure...")
            self.delete_database(database)
            raise

    @contextmanager
    def temporary_database(self, name: str, source: Optional[str] = None) -> Generator[str, None, None]:
        """
        Create (or clone `source` into) a database that is deleted when the `with` block exits.

        Args:
            name: The name of the database.
            source: The database to clone, if any.

        Yields:
            The name of the database.
        """
        database = self._create(name, source=source)
        try:
            yield database
        finally:
            self.delete_database(database)
