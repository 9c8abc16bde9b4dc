##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module manages the engines that execute test transactions.

Engines are either configured explicitly (`Config.engine`), in which case they
are used as is, or borrowed from an `EnginePool`. A pool provisions its engines
concurrently when it starts, hands them out to one consumer at a time and
deprovisions all of them when it stops.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Generator, List, Optional, Set

from reltest.config import Config
from reltest.conventions import DEFAULT_NAME_PREFIX
from reltest.exceptions import EnginePoolError, EngineProvisioningError, PoolNotStartedError
from reltest.utils import gen_safe_name


LOG = logging.getLogger(__name__)

PROVISIONING_TIMEOUT = 600

EngineFactory = Callable[[str], str]
EngineDestroyer = Callable[[str], None]


@dataclass(frozen=True)
class EngineHandle:
    """
    A borrowed or explicitly configured engine.

    Attributes:
        name: The name of the engine.
        pooled: True if the handle must be released back to its pool.
    """

    name: str
    pooled: bool = False


def service_engine_factory(config: Config, timeout: int = PROVISIONING_TIMEOUT) -> EngineFactory:
    """
    Return an engine factory that provisions engines through the service of `config`.

    Args:
        config: The configuration holding the service and the engine size.
        timeout: Seconds to wait for each engine to be provisioned.

    Returns:
        A function creating the engine with the given name and waiting until it is provisioned.
    """

    def provision(name: str) -> str:
        LOG.info(f"Provisioning engine '{name}' ({config.engine_size})...")
        config.service.create_engine(name, config.engine_size)
        config.service.wait_until_provisioned(name, timeout)
        LOG.info(f"Engine '{name}' provisioned.")
        return name

    return provision


class EnginePool:
    """
    A bounded set of engines, each used by at most one consumer at a time.

    `acquire` and `release` may be called from several threads.

    Attributes:
        engines (List[str]): Names of every engine in the pool.
        started (bool): True between `start` and `stop`.
    """

    def __init__(self):
        self.engines: List[str] = []
        self._available: List[str] = []
        self._destroyer: Optional[EngineDestroyer] = None
        # Engines deprovisioned by `stop`, whose handles may still be out
        self._retired: Set[str] = set()
        self._condition = threading.Condition()
        self.started = False

    def __len__(self) -> int:
        return len(self.engines)

    @property
    def available(self) -> int:
        """The number of engines not currently borrowed."""
        with self._condition:
            return len(self._available)

    def start(
        self,
        size: int,
        engine_factory: EngineFactory,
        engine_destroyer: EngineDestroyer,
        name_prefix: str = DEFAULT_NAME_PREFIX,
    ):
        """
        Provision `size` engines concurrently and make them available.

        Blocks until every engine is ready. If any provisioning fails, the engines
        that were provisioned are deprovisioned before the error propagates.

        Args:
            size: The number of engines to provision.
            engine_factory: Provisions the engine with the given name and returns its name.
            engine_destroyer: Deprovisions the engine with the given name.
            name_prefix: Prefix of the generated engine names.

        Raises:
            EnginePoolError: If the pool is already started or `size` is not positive.
            EngineProvisioningError: If provisioning any engine fails.
        """
        if self.started:
            raise EnginePoolError("The engine pool is already started.")
        if size < 1:
            raise EnginePoolError(f"The engine pool size must be positive, got {size}.")

        names = [gen_safe_name(name_prefix) for _ in range(size)]
        LOG.info(f"Starting an engine pool of {size} engine(s)...")
        with ThreadPoolExecutor(max_workers=size) as executor:
            futures = {name: executor.submit(engine_factory, name) for name in names}

        provisioned, failures = [], []
        for name, future in futures.items():
            error = future.exception()
            if error is None:
                provisioned.append(future.result())
            else:
                failures.append((name, error))

        if failures:
            for engine in provisioned:
                self._destroy(engine_destroyer, engine)
            name, error = failures[0]
            raise EngineProvisioningError(f"Failed to provision engine '{name}': {error}") from error

        with self._condition:
            self.engines = provisioned
            self._available = list(provisioned)
            self._destroyer = engine_destroyer
            self.started = True
            self._condition.notify_all()
        LOG.info(f"Engine pool started with engines {', '.join(provisioned)}")

    def acquire(self, timeout: Optional[float] = None) -> EngineHandle:
        """
        Borrow an engine, waiting until one is available.

        Args:
            timeout: Seconds to wait for an engine; wait forever if None.

        Returns:
            A pooled `EngineHandle` that must be released exactly once.

        Raises:
            PoolNotStartedError: If the pool was never started.
            EnginePoolError: If no engine became available in time.
        """
        with self._condition:
            if not self.started:
                raise PoolNotStartedError()
            if not self._condition.wait_for(lambda: self._available or not self.started, timeout=timeout):
                raise EnginePoolError(f"No engine became available within {timeout} seconds.")
            if not self.started:
                raise EnginePoolError("The engine pool was stopped while waiting for an engine.")
            engine = self._available.pop(0)
        LOG.debug(f"Acquired engine '{engine}'")
        return EngineHandle(engine, pooled=True)

    def release(self, handle: EngineHandle):
        """
        Return a borrowed engine to the pool.

        Args:
            handle: The handle returned by `acquire`.

        Raises:
            EnginePoolError: If the handle does not belong to the pool or was already released.
        """
        with self._condition:
            if handle.pooled and (not self.started or handle.name in self._retired):
                LOG.warning(f"Engine '{handle.name}' was returned after the pool was stopped, ignoring it.")
                return
            if not handle.pooled or handle.name not in self.engines:
                raise EnginePoolError(f"Engine '{handle.name}' does not belong to the pool.")
            if handle.name in self._available:
                raise EnginePoolError(f"Engine '{handle.name}' was already released.")
            self._available.append(handle.name)
            self._condition.notify()
        LOG.debug(f"Released engine '{handle.name}'")

    @contextmanager
    def engine(self, timeout: Optional[float] = None) -> Generator[EngineHandle, None, None]:
        """
        Borrow an engine for the duration of a `with` block.

        Args:
            timeout: Seconds to wait for an engine; wait forever if None.

        Yields:
            The borrowed `EngineHandle`, released on every exit path.
        """
        handle = self.acquire(timeout)
        try:
            yield handle
        finally:
            self.release(handle)

    def stop(self):
        """
        Deprovision every engine of the pool.

        Failures are logged and do not prevent the remaining engines from being deprovisioned.
        """
        with self._condition:
            if not self.started:
                LOG.debug("The engine pool is not started, nothing to stop.")
                return
            engines, destroyer = self.engines, self._destroyer
            self._retired.update(engines)
            self.engines, self._available, self._destroyer = [], [], None
            self.started = False
            self._condition.notify_all()

        LOG.info(f"Stopping engine pool ({len(engines)} engine(s))...")
        for engine in engines:
            self._destroy(destroyer, engine)

    @staticmethod
    def _destroy(destroyer: EngineDestroyer, engine: str):
        try:
            destroyer(engine)
            LOG.info(f"Deleted engine '{engine}'")
        except Exception as exc:  # pylint: disable=broad-except
            LOG.error(f"Failed to delete engine '{engine}': {exc}")


@contextmanager
def engine_for(config: Config, pool: Optional[EnginePool] = None) -> Generator[EngineHandle, None, None]:
    """
    Provide the engine to use for one operation.

    The explicit engine of `config` is used when there is one, without touching
    the pool. Otherwise an engine is borrowed from `pool` and released on exit.

    Args:
        config: The configuration, possibly naming an explicit engine.
        pool: The pool to borrow from.

    Yields:
        The `EngineHandle` to execute transactions with.

    Raises:
        PoolNotStartedError: If there is no explicit engine and no started pool.
    """
    if config.engine is not None:
        yield EngineHandle(config.engine, pooled=False)
        return
    if pool is None:
        raise PoolNotStartedError()
    with pool.engine() as handle:
        yield handle


def with_engine(config: Config, fn: Callable[[str], object], pool: Optional[EnginePool] = None):
    """
    Call `fn` with the name of the engine to use, as provided by `engine_for`.

    Args:
        config: The configuration, possibly naming an explicit engine.
        fn: Called with the engine name.
        pool: The pool to borrow from when no engine is configured.

    Returns:
        What `fn` returns.
    """
    with engine_for(config, pool) as handle:
        return fn(handle.name)


def start_pool(config: Config, pool: EnginePool, size: Optional[int] = None):
    """
    Start `pool` with engines provisioned through the service of `config`.

    Args:
        config: The configuration holding the service, the engine size and the default pool size.
        pool: The pool to start.
        size: The number of engines; `config.pool_size` if None.
    """
    pool.start(
        size or config.pool_size,
        engine_factory=service_engine_factory(config),
        engine_destroyer=config.service.delete_engine,
    )


def stop_pool(pool: EnginePool):
    """Deprovision every engine of `pool`."""
    pool.stop()


@contextmanager
def with_pool(config: Config, pool: EnginePool, size: Optional[int] = None) -> Generator[EnginePool, None, None]:
    """
    Start `pool` for the duration of a `with` block, unless an explicit engine is
    configured or the pool is already started by someone else.

    Args:
        config: The configuration.
        pool: The pool to start and stop.
        size: The number of engines; `config.pool_size` if None.

    Yields:
        The pool.
    """
    owned = config.engine is None and not pool.started
    if owned:
        start_pool(config, pool, size)
    try:
        yield pool
    finally:
        if owned:
            stop_pool(pool)
