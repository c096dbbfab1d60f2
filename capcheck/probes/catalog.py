"""Probe catalog files for capcheck.

A catalog is a YAML file listing probes. Callbacks are referenced by
import path in "module:attribute" form and imported when the catalog is
loaded into a registry.

Example catalog:
    title: JSON Compatibility Check
    target: json
    probes:
      - name: dumps
        aliases: [encode]
        dependencies: [loads]
        callback: mychecks.json_probes:check_dumps
      - name: JSONDecoder
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import CallbackImportError, CatalogError, CatalogNotFoundError, InvalidPathError
from .registry import ProbeCallback, ProbeRegistry
from .resolver import MISSING, lookup_segment, split_path

logger = logging.getLogger("capcheck.probes.catalog")


def _check_path(path: str) -> str:
    try:
        split_path(path)
    except InvalidPathError as e:
        raise ValueError(e.reason)
    return path


class ProbeSpec(BaseModel):
    """One probe entry in a catalog file."""

    name: str = Field(..., description="Dotted capability path to probe")
    aliases: list[str] = Field(default_factory=list, description="Alternate names to check")
    dependencies: list[str] = Field(default_factory=list, description="Capabilities the check relies on")
    callback: str | None = Field(default=None, description="Check reference as 'module:attribute'")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_path(v)

    @field_validator("aliases", "dependencies")
    @classmethod
    def validate_paths(cls, v: list[str]) -> list[str]:
        for path in v:
            _check_path(path)
        return v

    @field_validator("callback")
    @classmethod
    def validate_callback(cls, v: str | None) -> str | None:
        if v is None:
            return v
        module, sep, attr = v.partition(":")
        if not sep or not module or not attr:
            raise ValueError(f"Callback must be 'module:attribute', got '{v}'")
        return v


class CatalogFile(BaseModel):
    """Top-level structure of a catalog file."""

    title: str | None = Field(default=None, description="Report title override")
    target: str | None = Field(default=None, description="Module to probe when none is given on the command line")
    probes: list[ProbeSpec] = Field(default_factory=list, description="Probes in dispatch order")


def import_callback(probe_name: str, reference: str, search_path: Path | None = None) -> ProbeCallback:
    """Import a callback from a 'module:attribute' reference.

    The attribute part may be dotted to reach into a class or namespace.
    When search_path is given it is added to sys.path for the import, so
    probe modules can live next to their catalog file.

    Raises:
        CallbackImportError: If the module or attribute cannot be found,
            or the target is not callable
    """
    module_name, _, attr_path = reference.partition(":")

    added_to_path = False
    if search_path is not None and str(search_path) not in sys.path:
        sys.path.insert(0, str(search_path))
        added_to_path = True
        logger.debug(f"Added to sys.path: {search_path}")

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise CallbackImportError(probe_name, reference, str(e))
    finally:
        if added_to_path:
            sys.path.remove(str(search_path))

    for segment in attr_path.split("."):
        target = lookup_segment(target, segment)
        if target is MISSING:
            raise CallbackImportError(probe_name, reference, f"'{segment}' not found")

    if not callable(target):
        raise CallbackImportError(probe_name, reference, "target is not callable")

    return target


def load_catalog(path: Path | str) -> CatalogFile:
    """Load and validate a catalog file.

    Args:
        path: Path to the YAML catalog

    Returns:
        Validated CatalogFile

    Raises:
        CatalogNotFoundError: If the file doesn't exist
        CatalogError: If the file is not a valid catalog
    """
    path = Path(path)

    if not path.exists():
        raise CatalogNotFoundError(str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(str(path), f"Invalid YAML: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise CatalogError(str(path), "Catalog must be a YAML mapping")

    try:
        return CatalogFile.model_validate(data)
    except ValidationError as e:
        raise CatalogError(
            str(path),
            [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()],
        )


def build_registry(
    catalog: CatalogFile,
    registry: ProbeRegistry | None = None,
    search_path: Path | None = None,
) -> ProbeRegistry:
    """Register every probe in a catalog, importing callbacks.

    Args:
        catalog: Validated catalog
        registry: Registry to add to (a new one is created if omitted)
        search_path: Extra import directory for callback modules

    Returns:
        The populated registry
    """
    registry = registry if registry is not None else ProbeRegistry()

    for spec in catalog.probes:
        callback = import_callback(spec.name, spec.callback, search_path) if spec.callback else None
        registry.register(
            spec.name,
            aliases=spec.aliases,
            callback=callback,
            dependencies=spec.dependencies,
        )

    logger.info(f"Loaded {len(catalog.probes)} probes from catalog")
    return registry
