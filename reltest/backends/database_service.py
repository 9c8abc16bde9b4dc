##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Abstract interface of the database service RelTest runs transactions against.

This module defines `DatabaseService`, an abstract base class that specifies the
operations RelTest consumes from the remote service, along with the data types
used to describe transaction responses.

The `DatabaseService` class encapsulates:
- Database lifecycle requests (create, clone, delete)
- Transaction execution against a database on an engine
- Engine provisioning and deprovisioning

Implementations signal request failures by raising
`reltest.exceptions.ServiceRequestError` with an HTTP-like status code (409 when
the target already exists, 404 when a database or engine does not exist). The
REST transport and authentication live in the implementations, which are
discovered through the `reltest.services` entry point group.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from reltest.common.enums import TransactionState


LOG = logging.getLogger(__name__)

# Problems of this type are benign constraint violations and never count as errors
IGNORED_PROBLEM_TYPE = "IntegrityConstraintViolation"


@dataclass(frozen=True)
class Problem:
    """
    A problem reported by the service for a transaction.

    Attributes:
        type: The category of the problem (e.g. `UndefinedError`).
        is_error: True if the problem has error severity.
        message: A human readable description of the problem.
    """

    type: str
    is_error: bool
    message: str = ""


@dataclass
class TransactionResponse:
    """
    The outcome of executing a transaction.

    Attributes:
        state: The final state of the transaction.
        problems: The problems reported by the service.
        results: Result relations as `(relation_name, values)` pairs.
    """

    state: TransactionState
    problems: List[Problem] = field(default_factory=list)
    results: List[Tuple[str, List[Any]]] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        """True if the service reports the transaction as aborted."""
        return self.state == TransactionState.ABORTED

    @property
    def errored(self) -> bool:
        """True if at least one error-severity problem, other than the ignored category, was reported."""
        return any(p.is_error and p.type != IGNORED_PROBLEM_TYPE for p in self.problems)

    @property
    def warned(self) -> bool:
        """True if at least one non-error problem was reported."""
        return any(not p.is_error for p in self.problems)

    def abort_diagnostics(self) -> List[Tuple[str, Any]]:
        """
        Collect the diagnostic code and message rows found in the results.

        Returns:
            A list of `(kind, value)` pairs where kind is "code" or "message".
        """
        diagnostics = []
        for relation, values in self.results:
            value = values[-1] if values else None
            if ":code" in relation:
                diagnostics.append(("code", value))
            elif ":message" in relation:
                diagnostics.append(("message", value))
        return diagnostics


@dataclass(frozen=True)
class DatabaseInfo:
    """
    Confirmation returned by the service when a database is created.

    Attributes:
        name: The name of the database.
        state: The state reported by the service (`CREATED` on success).
    """

    name: str
    state: str


class DatabaseService(ABC):
    """
    Abstract base class for the database service, which provides databases, engines
    and transactions.

    Attributes:
        service_name (str): The name of the service implementation (e.g. "dry").

    Methods:
        get_name:
            Retrieve the name of the service implementation.

        create_database:
            Create a database, optionally as a clone of a source database.

        delete_database:
            Delete a database.

        execute:
            Execute a transaction against a database on an engine.

        create_engine:
            Request the provisioning of an engine.

        wait_until_provisioned:
            Block until an engine is ready to execute transactions.

        delete_engine:
            Deprovision an engine.
    """

    def __init__(self, service_name: str):
        """
        Initialize the `DatabaseService` instance.

        Args:
            service_name: The name of the service implementation.
        """
        self.service_name: str = service_name

    def get_name(self) -> str:
        """
        Get the name of the service implementation.

        Returns:
            The name of the service.
        """
        return self.service_name

    @abstractmethod
    def create_database(self, name: str, source: Optional[str] = None) -> DatabaseInfo:
        """
        Create a database, or clone `source` into a new database.

        Args:
            name: The name of the database to create.
            source: The name of the database to clone, if any.

        Returns:
            The confirmation of the service.

        Raises:
            ServiceRequestError: 409 if `name` exists, 404 if `source` does not exist.
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement a `create_database` method.")

    @abstractmethod
    def delete_database(self, name: str):
        """
        Delete a database.

        Args:
            name: The name of the database to delete.
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement a `delete_database` method.")

    @abstractmethod
    def execute(
        self,
        database: str,
        engine: str,
        code: str,
        inputs: Optional[Dict[str, str]] = None,
        readonly: bool = False,
        timeout: int = 1800,
    ) -> TransactionResponse:
        """
        Execute a transaction.

        Args:
            database: The database to run the transaction against.
            engine: The engine to run the transaction on.
            code: The source of the transaction.
            inputs: Named inputs made available to the code.
            readonly: If True the transaction may not write to the database.
            timeout: Upper bound, in seconds, to wait for the response.

        Returns:
            The response of the service.
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement an `execute` method.")

    @abstractmethod
    def create_engine(self, name: str, size: str):
        """
        Request the provisioning of an engine.

        Args:
            name: The name of the engine.
            size: The size of the engine (e.g. "S").
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement a `create_engine` method.")

    @abstractmethod
    def wait_until_provisioned(self, name: str, timeout: int = 600):
        """
        Block until the engine is provisioned.

        Args:
            name: The name of the engine.
            timeout: Upper bound, in seconds, to wait for the engine.
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement a `wait_until_provisioned` method.")

    @abstractmethod
    def delete_engine(self, name: str):
        """
        Deprovision an engine.

        Args:
            name: The name of the engine.
        """
        raise NotImplementedError("Subclasses of `DatabaseService` must implement a `delete_engine` method.")
