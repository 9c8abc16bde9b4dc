##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
This module drives test runs through the package, suite and test hierarchy.

For each package a prototype database is created and the package installed in
it. Suites with a `before-suite.rel` script get their own clone of the package
prototype, prepared by the script; other suites use the package prototype as
is. Every test then runs against a fresh clone of its suite's prototype, so
prototypes are never modified by tests. Databases are deleted when the scope
that created them ends, whether it succeeded or not.
"""

import logging
import os
from typing import Callable, FrozenSet, Iterable, List, Optional, Set

from reltest.config import Config
from reltest.conventions import (
    BEFORE_INSTALL_SCRIPT,
    BEFORE_PACKAGE_SCRIPT,
    BEFORE_SUITE_SCRIPT,
    BEFORE_TEST_SCRIPT,
    SCRIPT_EXTENSION,
    TEST_ROOT,
    VALIDATE_TEST_SCRIPT,
    is_testitem_file,
)
from reltest.database.lifecycle import DatabaseManager
from reltest.database.package import generate_install_package_code, load_manifest
from reltest.engines.pool import EnginePool, engine_for, start_pool, stop_pool, with_pool
from reltest.exceptions import ConfigurationError, PackageError
from reltest.execution.runner import CloningStepRunner, StepRunner
from reltest.execution.transactions import execute_blocks, execute_transaction
from reltest.orchestration.discovery import find_test_dirs, find_test_files, has_testitem_files
from reltest.reporting import TestReport
from reltest.scripts.code_block import parse_script_file, parse_source_file
from reltest.scripts.steps import StepCache, parse_steps
from reltest.selection.selectors import (
    TestSelector,
    compute_selectors,
    has_script_changes,
    make_suite_filter,
    tests_for_suite,
)
from reltest.utils import canonical, gen_safe_name, pkg_name, progress, suite_name, test_name, unix_basename, warn


LOG = logging.getLogger(__name__)

# Runs the non-script test items of a package: (package_dir, prototype, engine) -> passed
TestitemRunner = Callable[[str, str, str], bool]


class PackageTester:
    """
    Runs the tests of Rel packages.

    Attributes:
        config: The configuration of every operation.
        report: Where results are recorded.
        pool: The engine pool used when `config` has no explicit engine.
        databases: Manager of the databases created by the runs.
        step_runner: Executes the steps of each test.
        testitem_runner: Runs the non-script test items of a package, if any.
    """

    def __init__(
        self,
        config: Config,
        report: Optional[TestReport] = None,
        pool: Optional[EnginePool] = None,
        step_runner: Optional[StepRunner] = None,
        testitem_runner: Optional[TestitemRunner] = None,
    ):
        self.config = config
        self.report = report if report is not None else TestReport()
        self.pool = pool if pool is not None else EnginePool()
        self.databases = DatabaseManager(config.service)
        self.step_runner = step_runner if step_runner is not None else CloningStepRunner(config, self.report)
        self.testitem_runner = testitem_runner

    def start_pool(self, size: Optional[int] = None):
        """
        Start the engine pool with `size` engines (`config.pool_size` by default).

        This may take a while since every engine gets provisioned. Call `stop_pool`
        to deprovision them.
        """
        start_pool(self.config, self.pool, size)

    def stop_pool(self):
        """Deprovision the engines of the engine pool."""
        stop_pool(self.pool)

    def test_packages(
        self,
        package_dirs: Iterable[str],
        db_prefix: Optional[str] = None,
        skip_suites: bool = False,
        skip_testitems: bool = False,
        changes: Optional[List[str]] = None,
    ) -> TestReport:
        """
        Run all tests in these packages.

        For each package, a database is created, the package is installed and the tests
        are executed. If `config` has no explicit engine, an engine pool is started
        for the whole run (unless it is already started) and stopped before returning.

        Args:
            package_dirs: The package directories.
            db_prefix: Prefix of the package database names; the package name if None.
            skip_suites: Do not run Rel test suites.
            skip_testitems: Do not run non-script test items.
            changes: Changed files, relative to the package directories. If given,
                only the suites and tests affected by the changes run.

        Returns:
            The report holding the results of the run.
        """
        selectors: Set[TestSelector] = set()
        if changes:
            if not has_script_changes(changes):
                LOG.info("None of the changed files is a Rel script or a test item, nothing to run.")
                return self.report
            selectors = compute_selectors(changes)
            LOG.info(f"Selected suites: {sorted(s.suite for s in selectors) if selectors else 'all'}")

        with with_pool(self.config, self.pool):
            for package_dir in map(canonical, package_dirs):
                if not os.path.isdir(package_dir):
                    LOG.warning(f"Package dir is not a directory: '{package_dir}'")
                    continue
                self._test_package(package_dir, db_prefix, skip_suites, skip_testitems, selectors)

        return self.report

    def test_package(self, package_dir: str, db_prefix: Optional[str] = None, **kwargs) -> TestReport:
        """
        Run all tests in this package. This is `test_packages` with a single package.
        """
        return self.test_packages([package_dir], db_prefix, **kwargs)

    def _test_package(
        self,
        package_dir: str,
        db_prefix: Optional[str],
        skip_suites: bool,
        skip_testitems: bool,
        selectors: Set[TestSelector],
    ):
        package = pkg_name(package_dir)
        LOG.info(f"Running tests for package '{package}'...")
        database = self.prepare_package(package_dir, gen_safe_name(db_prefix or package))
        try:
            with self.report.testset(package):
                if not skip_suites:
                    self.run_package_suites(package_dir, database, skip_prepare=True, selectors=selectors)
                if not skip_testitems and has_testitem_files(package_dir) and _selects_testitems(selectors):
                    self.run_package_testitems(package_dir, database, skip_prepare=True)
        finally:
            self.databases.delete_database(database)

    def run_package_suites(
        self,
        package_dir: str,
        database: Optional[str] = None,
        skip_prepare: bool = False,
        selectors: Optional[Set[TestSelector]] = None,
    ):
        """
        Run all Rel test suites in this package.

        Args:
            package_dir: The package directory.
            database: The package database; a name based on the package name is generated if None.
            skip_prepare: Assume `database` is already prepared. Otherwise it is created
                and the package installed, and it is deleted afterwards.
            selectors: If not empty, only the selected suites and tests run.

        Raises:
            ConfigurationError: If `skip_prepare` is set without a `database`.
        """
        if skip_prepare and database is None:
            raise ConfigurationError("Cannot skip package preparation without a database.")

        package = pkg_name(package_dir)
        progress(package, "Running Rel package tests...")

        selectors = selectors or set()
        suites = find_test_dirs(package_dir, make_suite_filter(selectors))
        if not suites:
            progress(package, f"No Rel test suites found under '{package_dir}'.")
            return

        database = database or gen_safe_name(package)
        if not skip_prepare:
            self.prepare_package(package_dir, database)
        try:
            progress(package, f"Found {len(suites)} suites: {[suite_name(s) for s in suites]}")
            with self.report.testset(f"{package} Rel tests"):
                for suite_dir in suites:
                    tests = tests_for_suite(selectors, suite_dir) if selectors else None
                    self.run_suite(suite_dir, database, tests=tests)
        finally:
            if not skip_prepare:
                self.databases.delete_database(database)

    def run_package_testitems(self, package_dir: str, database: Optional[str] = None, skip_prepare: bool = False) -> bool:
        """
        Run the non-script test items of this package with the configured `testitem_runner`.

        Args:
            package_dir: The package directory.
            database: The package database; a name based on the package name is generated if None.
            skip_prepare: Assume `database` is already prepared.

        Returns:
            True if the test items passed or there is no runner to run them.
        """
        package = pkg_name(package_dir)
        if self.testitem_runner is None:
            progress(package, "No test item runner configured, skipping test items.")
            return True

        database = database or gen_safe_name(package)
        if not skip_prepare:
            self.prepare_package(package_dir, database)
        try:
            progress(package, "Running package test items...")
            with self.report.testset(f"{package} test items"):
                with engine_for(self.config, self.pool) as engine:
                    passed = bool(self.testitem_runner(package_dir, database, engine.name))
                return self.report.record(os.path.join(package_dir, TEST_ROOT), passed)
            return False
        finally:
            if not skip_prepare:
                self.databases.delete_database(database)

    def run_suite(
        self,
        suite_dir: str,
        prototype: str,
        database: Optional[str] = None,
        skip_prepare: bool = False,
        tests: Optional[FrozenSet[str]] = None,
    ):
        """
        Run all tests found in this `suite_dir`.

        The `prototype` database must already contain the package (see `prepare_package`).

        Args:
            suite_dir: The suite directory.
            prototype: The package database.
            database: Name of the suite database cloned when the suite has a
                `before-suite.rel`; generated from `prototype` if None.
            skip_prepare: Assume `prototype` is already prepared for the suite, so
                the tests run on it directly and `database` is ignored.
            tests: Basenames of the tests to run; every test if None.
        """
        if skip_prepare and database is not None:
            LOG.warning("Ignoring `database` as it is incompatible with `skip_prepare`.")

        suite = suite_name(suite_dir)
        test_files = find_test_files(suite_dir)
        if tests is not None:
            test_files = [f for f in test_files if f in tests]
        if not test_files:
            progress(suite, f"No test files found under folder '{suite_dir}'.")
            return

        with self.report.testset(suite):
            db = prototype if skip_prepare else self.prepare_suite(suite_dir, prototype, database)
            try:
                cache = StepCache()
                for test_file in test_files:
                    self.run_test(os.path.join(suite_dir, test_file), db, cache=cache)
            finally:
                if db != prototype:
                    progress(suite, f"Deleting suite database '{db}'...")
                    self.databases.delete_database(db)

    def run_test(
        self,
        test_file: str,
        prototype: str,
        with_before_suite: bool = False,
        cache: Optional[StepCache] = None,
    ) -> bool:
        """
        Run a single test on a clone of this `prototype`.

        The steps of the test are, in order: the suite's `before-suite.rel` (only if
        `with_before_suite` is set, to run a test without preparing its suite),
        `before-test.rel`, the test script itself and `validate-test.rel`.

        Args:
            test_file: The test script.
            prototype: The database the test starts from.
            with_before_suite: Run the suite's `before-suite.rel` as part of the test.
            cache: Parsed steps of the suite scripts, shared by the tests of a suite.

        Returns:
            True if the test passed or is empty.
        """
        test = test_name(test_file)
        directory = os.path.dirname(test_file)
        test_steps = parse_steps(test_file)
        if not test_steps:
            warn(test, f"Test script '{test_file}' is empty.")
            return True

        progress(test, f"Running test with {len(test_steps)} steps...")
        cache = cache if cache is not None else StepCache()
        steps = (
            (cache.get_steps(directory, BEFORE_SUITE_SCRIPT) if with_before_suite else [])
            + cache.get_steps(directory, BEFORE_TEST_SCRIPT)
            + test_steps
            + cache.get_steps(directory, VALIDATE_TEST_SCRIPT)
        )
        with engine_for(self.config, self.pool) as engine:
            return self.step_runner.run(test, steps, prototype, engine.name)

    def install_package(self, package_dir: str, database: str, with_deps: bool = False) -> bool:
        """
        Install the package found in `package_dir` in this `database`.

        Args:
            package_dir: The package directory.
            database: The database to install the package in.
            with_deps: Also install the dependencies of the package. This assumes the
                package manager is already installed in the database.

        Returns:
            True if the package was installed.

        Raises:
            PackageError: If the manifest is missing or invalid.
            TransactionError: If the install transaction fails.
        """
        package = pkg_name(package_dir)
        progress(package, f"Installing package sources on '{database}'...")

        manifest = load_manifest(package_dir)
        if "models" not in manifest:
            progress(package, "Package does not have models to install.")
            return True

        code, inputs = generate_install_package_code(package_dir, manifest, with_deps)
        with engine_for(self.config, self.pool) as engine:
            return execute_transaction(code, database, engine.name, self.config, inputs=inputs, ctx=package)

    def prepare_package(self, package_dir: str, database: str, with_deps: bool = False) -> str:
        """
        Prepare a `database` to run the tests of the package in `package_dir`.

        Create the database, run `before-install.rel`, install the package sources and
        run `before-package.rel`, skipping the scripts that do not exist. If any step
        fails, the database is deleted before the error propagates.

        Args:
            package_dir: The package directory.
            database: The name of the database to create.
            with_deps: Also install the dependencies of the package.

        Returns:
            The name of the prepared database.

        Raises:
            PackageError: If installing the package or running a script fails.
        """
        package = pkg_name(package_dir)
        progress(package, f"Creating database '{database}'...")
        with self.databases.provisional_database(database) as db:
            self._run_package_script(package_dir, db, BEFORE_INSTALL_SCRIPT)
            if not self.install_package(package_dir, db, with_deps):
                raise PackageError(f"Installation of package in '{package_dir}' failed.")
            self._run_package_script(package_dir, db, BEFORE_PACKAGE_SCRIPT)
        return db

    def _run_package_script(self, package_dir: str, database: str, script: str):
        blocks = parse_source_file(package_dir, os.path.join(TEST_ROOT, script))
        if not blocks:
            return
        ctx = f"{pkg_name(package_dir)}/{script[: -len(SCRIPT_EXTENSION)]}"
        progress(ctx, f"Processing '{script}'...")
        with engine_for(self.config, self.pool) as engine:
            if not execute_blocks(ctx, blocks, database, engine.name, self.config, self.report):
                raise PackageError(f"Processing of '{script}' failed.")

    def prepare_suite(self, suite_dir: str, prototype: str, database: Optional[str] = None) -> str:
        """
        Prepare a database to run the tests in this `suite_dir`.

        If the suite has a `before-suite.rel`, `prototype` is cloned into `database` and
        the script runs on the clone. Otherwise `prototype` is used as is: a database
        that never received a transaction cannot be cloned, so a clone of the prototype
        could not serve as a prototype for the tests. If the script fails, the clone
        is deleted before the error propagates.

        Args:
            suite_dir: The suite directory.
            prototype: The package database, prepared with `prepare_package`.
            database: The name of the clone; generated from `prototype` if None.

        Returns:
            The database to use as the prototype of the suite's tests.

        Raises:
            PackageError: If `before-suite.rel` fails.
        """
        blocks = parse_source_file(suite_dir, BEFORE_SUITE_SCRIPT)
        if not blocks:
            return prototype

        suite = suite_name(suite_dir)
        database = database or gen_safe_name(prototype)
        progress(suite, f"Cloning '{prototype}' into '{database}'...")
        with self.databases.provisional_database(database, source=prototype) as db:
            progress(suite, f"Processing '{BEFORE_SUITE_SCRIPT}'...")
            with engine_for(self.config, self.pool) as engine:
                if not execute_blocks(f"{suite}/before-suite", blocks, db, engine.name, self.config, self.report):
                    raise PackageError(f"Processing of '{BEFORE_SUITE_SCRIPT}' failed.")
        return db

    def run_script(self, script_file: str, database: str) -> bool:
        """
        Run the blocks in this `script_file` on this `database`, each as its own transaction.

        Args:
            script_file: The script to run.
            database: The database to run it on.

        Returns:
            True if every block satisfied its expectations; False if the file does not exist.
        """
        if not os.path.isfile(script_file):
            LOG.warning(f"'{script_file}' is not a file.")
            return False

        blocks = parse_script_file(script_file)
        with engine_for(self.config, self.pool) as engine:
            return execute_blocks(unix_basename(script_file), blocks, database, engine.name, self.config, self.report)


def _selects_testitems(selectors: Set[TestSelector]) -> bool:
    """True when no filtering applies or a selector covers a whole suite or a test item file."""
    if not selectors:
        return True
    return any(s.all_tests or any(is_testitem_file(t) for t in s.tests) for s in selectors)
