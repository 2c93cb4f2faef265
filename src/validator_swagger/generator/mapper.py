"""Merges endpoint validators into a Swagger document.

Each endpoint definition becomes one operation under ``paths`` and its
request and response bodies become named entries under ``definitions``.
"""

import posixpath
import re

from validator_swagger.config import GeneratorConfig
from validator_swagger.schema.converter import property_type, response_entries, to_swagger
from validator_swagger.validator.base import EndpointDefinition, ValidationSchema

JSON_MEDIA_TYPE = "application/json"
BANNER_TEMPLATE = "<b>Environment: `{environment}` </b><br /><br />"
WHITESPACE = re.compile(r"\s")


def capitalize(text: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return text[:1].upper() + text[1:]


def join_path(*parts: str) -> str:
    """Join URL path pieces the way a POSIX path join normalizes them."""
    joined = "/".join(part for part in parts if part)
    if not joined:
        return "."
    joined = re.sub(r"/{2,}", "/", joined)
    normalized = posixpath.normpath(joined)
    if joined.endswith("/") and normalized != "/":
        normalized += "/"
    return normalized


def convert_path(path: str) -> str:
    """Rewrite ``:name`` segments into ``{name}`` placeholders."""
    segments = path.split("/")
    return "/".join(f"{{{s[1:]}}}" if s.startswith(":") else s for s in segments)


def model_name(endpoint: EndpointDefinition, suffix: str) -> str:
    """Definition name for one of the endpoint's schemas, e.g. ``GetUserGetBody``."""
    compact_name = WHITESPACE.sub("", endpoint.name)
    return f"{compact_name}{capitalize(endpoint.method)}{suffix}"


def apply_validators(document: dict, endpoints: list[EndpointDefinition], config: GeneratorConfig) -> dict:
    """Rebuild ``paths`` and ``definitions`` of ``document`` from the endpoints.

    The document is modified in place and returned. The environment banner
    is prepended to ``info.description`` on every call.
    """
    info = document.setdefault("info", {})
    banner = BANNER_TEMPLATE.format(environment=config.environment)
    info["description"] = banner + (info.get("description") or "")

    document["paths"] = {}
    document["definitions"] = {}
    base_path = document.get("basePath") or ""

    for endpoint in endpoints:
        converted = convert_path(join_path(base_path, endpoint.path))
        key = join_path(config.api_gateway_path, converted) if config.api_gateway_path else converted
        path_item = document["paths"].setdefault(key, {})
        path_item[endpoint.method] = _build_operation(endpoint, document["definitions"])

    return document


def _build_operation(endpoint: EndpointDefinition, definitions: dict) -> dict:
    schema = endpoint.validation or ValidationSchema()

    parameters = []
    parameters.extend(_header_parameters(schema))
    parameters.extend(_body_parameters(schema, endpoint, definitions))
    parameters.extend(_path_parameters(schema))
    parameters.extend(_query_parameters(schema))

    return {
        "summary": endpoint.name,
        "tags": endpoint.tags,
        "consumes": [JSON_MEDIA_TYPE],
        "produces": [JSON_MEDIA_TYPE],
        "parameters": parameters,
        "responses": _responses(schema, endpoint, definitions),
        "deprecated": schema.deprecated is True,
    }


def _header_parameters(schema: ValidationSchema) -> list[dict]:
    if schema.headers is None:
        return []
    swagger = to_swagger(schema.headers)
    required = swagger.get("required", [])
    return [
        {"name": name, "in": "header", "required": name in required, "type": property_type(prop)}
        for name, prop in swagger.get("properties", {}).items()
    ]


def _body_parameters(schema: ValidationSchema, endpoint: EndpointDefinition, definitions: dict) -> list[dict]:
    if schema.body is None:
        return []
    name = model_name(endpoint, "Body")
    definitions[name] = to_swagger(schema.body)
    return [{"name": "body", "in": "body", "schema": {"$ref": f"#/definitions/{name}"}}]


def _path_parameters(schema: ValidationSchema) -> list[dict]:
    # `path` and `params` are both honoured and not deduplicated.
    parameters = []
    for sub_schema in (schema.path, schema.params):
        if sub_schema is None:
            continue
        swagger = to_swagger(sub_schema)
        parameters.extend(
            {"name": name, "in": "path", "required": True, "type": property_type(prop)}
            for name, prop in swagger.get("properties", {}).items()
        )
    return parameters


def _query_parameters(schema: ValidationSchema) -> list[dict]:
    if schema.query is None:
        return []
    swagger = to_swagger(schema.query)
    required = swagger.get("required") or []
    return [
        {"name": name, "in": "query", "required": name in required, "type": property_type(prop)}
        for name, prop in swagger.get("properties", {}).items()
    ]


def _responses(schema: ValidationSchema, endpoint: EndpointDefinition, definitions: dict) -> dict:
    if schema.response is None:
        return {}

    responses = {}
    for entry in response_entries(schema.response):
        data = {"description": entry.description}
        if entry.body is not None:
            name = model_name(endpoint, f"{entry.status}Response")
            definitions[name] = entry.body
            data["schema"] = {"$ref": f"#/definitions/{name}"}
        if entry.header is not None:
            data["headers"] = entry.header.get("properties", {})
        if _is_success(entry.status):
            data.setdefault("headers", {})
        responses[entry.status] = data
    return responses


def _is_success(status: str) -> bool:
    return status.isdigit() and 200 <= int(status) < 400
