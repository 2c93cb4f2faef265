"""Reading the header document and writing the generated one."""

import json
from pathlib import Path
from urllib.parse import urlsplit

import yaml

from validator_swagger.config import GeneratorConfig

YAML_SUFFIXES = (".yaml", ".yml")


def load_header(file_path: Path) -> dict:
    """Load the base Swagger document (JSON, or YAML by file suffix)."""
    file_path = file_path.resolve()
    if not file_path.is_file():
        raise FileNotFoundError(f"Header file not found in {file_path}, please create header file first")

    text = file_path.read_text(encoding="utf-8")
    try:
        if file_path.suffix.lower() in YAML_SUFFIXES:
            doc = yaml.safe_load(text)
        else:
            doc = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Header file {file_path} could not be parsed: {e}") from e

    if not isinstance(doc, dict):
        raise ValueError(f"Header file {file_path} must contain an object")
    return doc


def apply_overrides(document: dict, config: GeneratorConfig) -> dict:
    """Apply --base-url and --map-path to the document before mapping."""
    if config.base_url:
        url = urlsplit(config.base_url)
        if url.scheme:
            document["schemes"] = [url.scheme]
        if url.netloc:
            document["host"] = url.netloc
        if url.path and url.path != "/":
            document["basePath"] = url.path
    if config.map_path:
        document["basePath"] = config.map_path
    return document


def write_document(document: dict, file_path: Path) -> None:
    """Write the document, pretty-printed, creating parent directories."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    if file_path.suffix.lower() in YAML_SUFFIXES:
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(document, indent=4, ensure_ascii=False)
    file_path.write_text(text, encoding="utf-8")
