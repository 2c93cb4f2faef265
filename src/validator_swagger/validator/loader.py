"""Loads endpoint definitions from validator files.

A validator file is either a Python module exposing ``api_list`` and/or
``endpoint``, or a YAML/JSON document holding the same data.
"""

import importlib.util
import json
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

import yaml

from .base import EndpointDefinition

VALIDATOR_PATTERNS = ("*_validator.py", "*_validator.yaml", "*_validator.yml", "*_validator.json")


def load_validators(path: Path, recursive: bool = False) -> list[EndpointDefinition]:
    """Load endpoint definitions from one file, or from a directory tree when recursive."""
    path = path.resolve()
    if recursive:
        if not path.is_dir():
            raise FileNotFoundError(f"Validator directory not found in {path}, please create validator directory first")
        files = discover_validator_files(path)
    else:
        if not path.is_file():
            raise FileNotFoundError(f"Validator file not found in {path}, please create validator file first")
        files = [path]

    endpoints = []
    for file_path in files:
        endpoints.extend(load_validator_file(file_path))
    return endpoints


def discover_validator_files(directory: Path) -> list[Path]:
    """Find all validator files below ``directory``, sorted by path."""
    found = set()
    for pattern in VALIDATOR_PATTERNS:
        found.update(p for p in directory.rglob(pattern) if p.is_file())
    return sorted(found)


def load_validator_file(file_path: Path) -> list[EndpointDefinition]:
    """Load the endpoint definitions contributed by a single validator file."""
    if file_path.suffix == ".py":
        items = _items_from_module(_import_module(file_path))
    else:
        items = _items_from_document(_read_document(file_path))

    if not items:
        raise ValueError(f"{file_path} defines neither api_list nor endpoint")
    return [EndpointDefinition.model_validate(item) for item in items]


def _import_module(file_path: Path) -> ModuleType:
    module_name = "_validator_" + re.sub(r"\W", "_", str(file_path))
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    # Registered so pydantic can resolve annotations declared in the module.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[module_name]
        raise ValueError(f"{file_path} could not be loaded: {e}") from e
    return module


def _items_from_module(module: ModuleType) -> list[Any]:
    items = list(getattr(module, "api_list", None) or [])
    endpoint = getattr(module, "endpoint", None)
    if endpoint is not None:
        items.append(endpoint)
    return items


def _read_document(file_path: Path) -> Any:
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def _items_from_document(doc: Any) -> list[Any]:
    if isinstance(doc, list):
        return doc
    if isinstance(doc, dict):
        if "api_list" in doc:
            return list(doc["api_list"] or [])
        if "path" in doc:
            return [doc]
    return []
