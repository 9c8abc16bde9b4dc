##############################################################################
# Copyright (c) Lawrence Livermore National Security, LLC and other RelTest
# Project developers. See top-level LICENSE and COPYRIGHT files for dates and
# other details. No copyright assignment is required to contribute to RelTest.
##############################################################################

"""
Package metadata and the generation of the transaction that installs a package.

The `rel-package.json` file of a package lists its models and dependencies:

    {
        "name": "std",
        "models": [{"name": "std/common"}, {"name": "std/graph", "file": "src/graph.rel"}],
        "dependencies": [{"range": "^0.2", "package": {"name": "util", "uuid": "..."}}]
    }
"""

import json
import logging
import os
import re
from typing import Dict, Tuple

from reltest.conventions import MODEL_ROOT, PACKAGE_MANIFEST, SCRIPT_EXTENSION
from reltest.exceptions import PackageError


LOG = logging.getLogger(__name__)

_INPUT_CHARS = re.compile(r"[/-]")


def has_manifest(directory: str) -> bool:
    """Check whether `directory` holds a package manifest."""
    return os.path.isfile(os.path.join(directory, PACKAGE_MANIFEST))


def load_manifest(package_dir: str) -> Dict:
    """
    Load the `rel-package.json` file of the package in `package_dir`.

    Args:
        package_dir: The package directory.

    Returns:
        The parsed manifest.

    Raises:
        PackageError: If the manifest does not exist or is not a JSON object.
    """
    metadata_file = os.path.join(package_dir, PACKAGE_MANIFEST)
    if not os.path.isfile(metadata_file):
        raise PackageError(f"Package metadata file '{metadata_file}' does not exist.")

    with open(metadata_file, "r") as f:
        try:
            manifest = json.load(f)
        except json.JSONDecodeError as exc:
            raise PackageError(f"Package metadata file '{metadata_file}' is not valid JSON: {exc}") from exc
    if not isinstance(manifest, dict):
        raise PackageError(f"Package metadata file '{metadata_file}' must contain a JSON object.")
    return manifest


def input_name(model_name: str) -> str:
    """
    Name of the transaction input holding the source of a model.

    Args:
        model_name: The logical name of the model (e.g. `std/common`).

    Returns:
        The input name (e.g. `_input_std_common_`).
    """
    return f"_input_{_INPUT_CHARS.sub('_', model_name)}_"


def _dependency_descriptor(dep: Dict) -> str:
    if "range" not in dep:
        raise PackageError("Invalid 'dependencies' entry: field 'range' is mandatory.")
    if "package" not in dep:
        raise PackageError("Invalid 'dependencies' entry: field 'package' is mandatory.")
    for key in ("name", "uuid"):
        if key not in dep["package"]:
            raise PackageError(f"Invalid 'dependencies/package' entry: field '{key}' is mandatory.")
    return f'"{dep["package"]["name"]}@{dep["range"]}"'


def generate_install_package_code(package_dir: str, manifest: Dict, with_deps: bool = False) -> Tuple[str, Dict[str, str]]:
    """
    Generate the Rel code and inputs of the transaction installing a package.

    Each model replaces its previous version in the model catalog. If `with_deps`
    is set, package manager instructions install the dependencies of the package,
    so the package manager must already be installed in the database.

    Args:
        package_dir: The package directory, against which model files are resolved.
        manifest: The manifest returned by `load_manifest`.
        with_deps: Also install the dependencies of the package.

    Returns:
        A tuple with the code of the transaction and its inputs (input name to model source).

    Raises:
        PackageError: If an entry of the manifest is invalid or a model file is missing.
    """
    lines = []
    inputs = {}

    for model in manifest.get("models", []):
        if "name" not in model:
            raise PackageError("Invalid 'models' entry: field 'name' is mandatory.")
        name = model["name"]
        model_file = os.path.join(package_dir, model.get("file", os.path.join(MODEL_ROOT, name + SCRIPT_EXTENSION)))
        if not os.path.isfile(model_file):
            raise PackageError(f"Cannot find model file {model_file}.")

        with open(model_file, "r") as f:
            inputs[input_name(name)] = f.read()
        lines.append(f'def insert[:rel, :catalog, :model] {{("{name}", {input_name(name)})}}')
        lines.append(f'def delete[:rel, :catalog, :model] {{("{name}", ::rel[:catalog, :model, "{name}"])}}')

    if with_deps:
        descriptors = [_dependency_descriptor(dep) for dep in manifest.get("dependencies", [])]
        if descriptors:
            lines.append(f"def dependencies {{ ::std::pkg::project::add_package[{{{';'.join(descriptors)}}}] }}")
            lines.append("def insert { dependencies[:insert] }")
            lines.append("def delete { dependencies[:delete] }")

    code = "".join(f"{line}\n" for line in lines)
    return code, inputs
