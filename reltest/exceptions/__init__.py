##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Module of all RelTest-specific exception types.
"""

from typing import Any, Optional


__all__ = (
    "RelTestError",
    "ConfigurationError",
    "PoolNotStartedError",
    "EnginePoolError",
    "EngineProvisioningError",
    "ServiceRequestError",
    "ServiceNotSupportedError",
    "DatabaseError",
    "DatabaseAlreadyExistsError",
    "DatabaseNotFoundError",
    "DatabaseOperationError",
    "TransactionError",
    "ScriptParseError",
    "PackageError",
)


class RelTestError(Exception):
    """
    Base class for every error raised by RelTest.
    """


class ConfigurationError(RelTestError):
    """
    Exception for missing or invalid configuration (engine, pool, service, profile).
    These are never retried.
    """


class PoolNotStartedError(ConfigurationError):
    """
    Exception to signal that an engine was needed but no pool was started and no
    engine was configured.
    """

    HINT = "Starting an engine pool with start_pool() or configuring an engine may solve the problem."

    def __init__(self, message: str = "No engine configured and no engine pool started."):
        super().__init__(f"{message} {self.HINT}")


class EnginePoolError(RelTestError):
    """
    Exception for lower-level engine pool failures (exhausted pool, double
    release, backend errors).
    """


class EngineProvisioningError(EnginePoolError):
    """
    Exception to signal that the engines of a pool could not be provisioned.
    """


class ServiceRequestError(RelTestError):
    """
    Exception raised by `DatabaseService` implementations when a request fails.

    Attributes:
        status_code: HTTP-like status code of the failure (409 conflict, 404 not found, ...).
        payload: Diagnostic payload returned by the service, if any.
    """

    def __init__(self, status_code: int, message: str, payload: Optional[Any] = None):
        super().__init__(f"[{status_code}] {message}")
        self.status_code = status_code
        self.payload = payload


class ServiceNotSupportedError(ConfigurationError):
    """
    Exception to signal that the requested database service implementation is not supported.
    """


class DatabaseError(RelTestError):
    """
    Base class for database lifecycle failures.
    """


class DatabaseAlreadyExistsError(DatabaseError):
    """
    Exception to signal that a database with the requested name already exists.
    """

    def __init__(self, database: str):
        super().__init__(f"Database {database} already exists")
        self.database = database


class DatabaseNotFoundError(DatabaseError):
    """
    Exception to signal that a database (e.g. the source of a clone) does not exist.
    """

    def __init__(self, database: str):
        super().__init__(f"Database {database} does not exist")
        self.database = database


class DatabaseOperationError(DatabaseError):
    """
    Generic database lifecycle failure carrying the service's diagnostic payload.
    """

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message if payload is None else f"{message}: {payload}")
        self.payload = payload


class TransactionError(RelTestError):
    """
    Exception to signal that a transaction aborted or reported error problems.

    Attributes:
        response: The `TransactionResponse` returned by the service.
    """

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response


class ScriptParseError(RelTestError):
    """
    Exception to signal that a script could not be split into code blocks.
    """

    def __init__(self, script: str, directive: str, message: str):
        super().__init__(f"{script}: {message} (directive: '{directive.strip()}')")
        self.script = script
        self.directive = directive


class PackageError(RelTestError):
    """
    Exception for invalid package metadata and failed package or suite preparation.
    """
