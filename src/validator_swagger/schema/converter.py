"""Conversion of validator sub-schemas into Swagger 2.0 schema objects.

Pydantic model classes are rendered with ``model_json_schema`` and plain
mappings are taken as JSON schema. Either way the result is made
self-contained: local references are inlined and nullable ``anyOf`` unions
are folded, since Swagger 2.0 supports neither ``$defs`` nor ``anyOf``.
"""

import copy
from typing import Any, NamedTuple

from pydantic import BaseModel

from validator_swagger.validator.base import ResponseSpec

LOCAL_DEF_KEYS = ("$defs", "definitions")
LOCAL_REF_PREFIXES = ("#/$defs/", "#/definitions/")


class ResponseEntry(NamedTuple):
    status: str
    description: str
    body: dict | None
    header: dict | None


def to_swagger(sub_schema: Any) -> dict:
    """Convert a pydantic model class or JSON schema mapping to a Swagger schema."""
    if isinstance(sub_schema, type) and issubclass(sub_schema, BaseModel):
        raw = sub_schema.model_json_schema(by_alias=True)
    elif isinstance(sub_schema, dict):
        raw = copy.deepcopy(sub_schema)
    else:
        raise TypeError(f"Cannot convert {sub_schema!r} to a Swagger schema")

    defs = {}
    for key in LOCAL_DEF_KEYS:
        defs.update(raw.pop(key, None) or {})
    return _normalize(raw, defs, frozenset())


def _normalize(node: Any, defs: dict, resolving: frozenset) -> Any:
    if isinstance(node, list):
        return [_normalize(item, defs, resolving) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith(LOCAL_REF_PREFIXES):
        name = ref.rsplit("/", 1)[-1]
        if name in resolving:
            return {"type": "object"}
        if name in defs:
            target = _normalize(defs[name], defs, resolving | {name})
            siblings = {k: v for k, v in node.items() if k != "$ref"}
            return {**target, **_normalize(siblings, defs, resolving)}

    result = {key: _normalize(value, defs, resolving) for key, value in node.items()}
    return _collapse_nullable(result)


def _collapse_nullable(node: dict) -> dict:
    """Fold ``anyOf: [X, {type: null}]`` into ``X`` marked ``x-nullable``."""
    variants = node.get("anyOf")
    if not isinstance(variants, list):
        return node
    non_null = [v for v in variants if not (isinstance(v, dict) and v.get("type") == "null")]
    # A one-member anyOf has no null branch to fold away.
    if len(non_null) != 1 or len(non_null) == len(variants):
        return node

    merged = dict(non_null[0])
    for key in ("title", "description"):
        if key in node:
            merged[key] = node[key]
    if node.get("default") is not None:
        merged["default"] = node["default"]
    merged["x-nullable"] = True
    return merged


def property_type(schema: dict) -> str:
    """Derive the Swagger parameter type of a property schema."""
    declared = schema.get("type")
    if isinstance(declared, list):
        declared = next((t for t in declared if t != "null"), None)
    return declared or "string"


def single_value(schema: dict) -> Any:
    """Return the one value a schema allows (``enum: [x]`` or ``const: x``)."""
    enum = schema.get("enum")
    if enum:
        return enum[0]
    return schema.get("const")


def response_entries(response: Any) -> list[ResponseEntry]:
    """Normalize both accepted response forms into per-status entries."""
    if isinstance(response, dict) and response and all(
        isinstance(spec, ResponseSpec) for spec in response.values()
    ):
        return [
            ResponseEntry(
                status=status,
                description=spec.description,
                body=to_swagger(spec.body) if spec.body is not None else None,
                header=to_swagger(spec.header) if spec.header is not None else None,
            )
            for status, spec in response.items()
        ]

    entries = []
    converted = to_swagger(response)
    for status, entry in converted.get("properties", {}).items():
        props = entry.get("properties", {})
        description = single_value(props.get("description", {}))
        if not isinstance(description, str):
            raise ValueError(f"Response {status} must allow exactly one description string")
        entries.append(
            ResponseEntry(
                status=str(status),
                description=description,
                body=props.get("body"),
                header=props.get("header"),
            )
        )
    return entries
