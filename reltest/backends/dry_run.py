##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
An in-memory database service used for dry runs.

`DryRunService` keeps track of the databases and engines a run would create and
honors the request semantics of a real service (conflicts, missing sources,
clones of databases that never received a transaction), but commits every
transaction without evaluating it, on any engine name. Each request is appended to an operation
journal so a dry run can show what a real run would have done.
"""

import logging
import threading
from typing import Dict, List, Optional, Set, Tuple

from reltest.backends.database_service import DatabaseInfo, DatabaseService, TransactionResponse
from reltest.common.enums import TransactionState
from reltest.exceptions import ServiceRequestError


LOG = logging.getLogger(__name__)


class DryRunService(DatabaseService):
    """
    A `DatabaseService` that simulates databases and engines in memory.

    Attributes:
        databases (Dict[str, bool]): Existing databases mapped to whether they ever received a transaction.
        engines (Set[str]): Provisioned engines.
        operations (List[Tuple]): Journal of every request, in order.
    """

    def __init__(self):
        super().__init__("dry")
        self.databases: Dict[str, bool] = {}
        self.engines: Set[str] = set()
        self.operations: List[Tuple] = []
        self._lock = threading.Lock()

    def _log(self, *operation):
        self.operations.append(operation)
        LOG.debug(f"Dry run: {operation}")

    def create_database(self, name: str, source: Optional[str] = None) -> DatabaseInfo:
        with self._lock:
            if name in self.databases:
                raise ServiceRequestError(409, f"database '{name}' already exists")
            if source is not None:
                if source not in self.databases:
                    raise ServiceRequestError(404, f"database '{source}' not found")
                if not self.databases[source]:
                    raise ServiceRequestError(400, f"database '{source}' has no transactions and cannot be cloned")
                self._log("clone", source, name)
                # Clones start from the committed state of their source
                self.databases[name] = True
            else:
                self._log("create", name)
                self.databases[name] = False
        return DatabaseInfo(name=name, state="CREATED")

    def delete_database(self, name: str):
        with self._lock:
            if name not in self.databases:
                raise ServiceRequestError(404, f"database '{name}' not found")
            self._log("delete", name)
            del self.databases[name]

    def execute(self, database, engine, code, inputs=None, readonly=False, timeout=1800) -> TransactionResponse:
        with self._lock:
            if database not in self.databases:
                raise ServiceRequestError(404, f"database '{database}' not found")
            self._log("execute", database, engine, code, readonly)
            self.databases[database] = True
        return TransactionResponse(state=TransactionState.COMMITTED)

    def create_engine(self, name: str, size: str):
        with self._lock:
            if name in self.engines:
                raise ServiceRequestError(409, f"engine '{name}' already exists")
            self._log("create_engine", name, size)
            self.engines.add(name)

    def wait_until_provisioned(self, name: str, timeout: int = 600):
        if name not in self.engines:
            raise ServiceRequestError(404, f"engine '{name}' not found")

    def delete_engine(self, name: str):
        with self._lock:
            if name not in self.engines:
                raise ServiceRequestError(404, f"engine '{name}' not found")
            self._log("delete_engine", name)
            self.engines.discard(name)
