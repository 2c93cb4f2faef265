import pytest
from pydantic import BaseModel

from validator_swagger.config import GeneratorConfig
from validator_swagger.generator.mapper import (
    BANNER_TEMPLATE,
    apply_validators,
    capitalize,
    convert_path,
    join_path,
    model_name,
)
from validator_swagger.validator.base import EndpointDefinition


def _make_endpoint(**overrides) -> EndpointDefinition:
    defaults = dict(path="/users", type="get", name="List Users", tags=["users"])
    defaults.update(overrides)
    return EndpointDefinition.model_validate(defaults)


def _make_document(**overrides) -> dict:
    doc = {
        "swagger": "2.0",
        "info": {"title": "Test", "description": "Docs"},
        "basePath": "/api",
        "paths": {"/old": {"get": {}}},
        "definitions": {"Old": {}},
    }
    doc.update(overrides)
    return doc


class PageQuery(BaseModel):
    page: int
    limit: int = 10


class TestPathHelpers:
    def test_convert_path(self):
        assert convert_path("/users/:id/orders/:orderId") == "/users/{id}/orders/{orderId}"

    def test_convert_path_keeps_plain_and_empty_segments(self):
        assert convert_path("/users/me/") == "/users/me/"
        assert convert_path("") == ""

    def test_join_path(self):
        assert join_path("/api", "/users/:id") == "/api/users/:id"
        assert join_path("/api/", "users") == "/api/users"
        assert join_path("/", "/users") == "/users"
        assert join_path("", "/users") == "/users"

    def test_join_path_keeps_trailing_slash(self):
        assert join_path("/api", "/users/") == "/api/users/"

    def test_join_path_resolves_dots(self):
        assert join_path("/api/v1", "../v2/users") == "/api/v2/users"

    def test_capitalize(self):
        assert capitalize("get") == "Get"
        assert capitalize("pOST") == "POST"
        assert capitalize("") == ""

    def test_model_name_strips_whitespace(self):
        ep = _make_endpoint(name="Get  User\tById", type="get")
        assert model_name(ep, "Body") == "GetUserByIdGetBody"


class TestApplyValidators:
    def test_resets_paths_and_definitions(self):
        doc = apply_validators(_make_document(), [_make_endpoint()], GeneratorConfig())
        assert list(doc["paths"]) == ["/api/users"]
        assert doc["definitions"] == {}

    def test_operation_shape(self):
        doc = apply_validators(_make_document(), [_make_endpoint()], GeneratorConfig())
        assert doc["paths"]["/api/users"]["get"] == {
            "summary": "List Users",
            "tags": ["users"],
            "consumes": ["application/json"],
            "produces": ["application/json"],
            "parameters": [],
            "responses": {},
            "deprecated": False,
        }

    def test_banner_prepended(self):
        doc = apply_validators(_make_document(), [], GeneratorConfig(environment="staging"))
        assert doc["info"]["description"] == "<b>Environment: `staging` </b><br /><br />Docs"

    def test_second_run_rebuilds_but_doubles_banner(self):
        config = GeneratorConfig(environment="prod")
        endpoints = [_make_endpoint(schema={"body": PageQuery}, type="post")]
        doc = apply_validators(_make_document(), endpoints, config)
        first_paths = {k: dict(v) for k, v in doc["paths"].items()}
        first_defs = dict(doc["definitions"])

        apply_validators(doc, endpoints, config)
        assert doc["paths"] == first_paths
        assert doc["definitions"] == first_defs
        banner = BANNER_TEMPLATE.format(environment="prod")
        assert doc["info"]["description"] == banner + banner + "Docs"

    def test_same_path_different_methods_merge(self):
        endpoints = [_make_endpoint(type="get"), _make_endpoint(type="post", name="Create User")]
        doc = apply_validators(_make_document(), endpoints, GeneratorConfig())
        assert list(doc["paths"]) == ["/api/users"]
        assert list(doc["paths"]["/api/users"]) == ["get", "post"]

    def test_same_path_same_method_overwrites(self):
        endpoints = [_make_endpoint(name="First"), _make_endpoint(name="Second")]
        doc = apply_validators(_make_document(), endpoints, GeneratorConfig())
        assert doc["paths"]["/api/users"]["get"]["summary"] == "Second"

    def test_gateway_prefix_changes_key_only(self):
        endpoint = _make_endpoint(
            path="/users/:id",
            schema={"path": {"type": "object", "properties": {"id": {"type": "string"}}}},
        )
        doc = apply_validators(_make_document(), [endpoint], GeneratorConfig(api_gateway_path="/gateway"))
        assert list(doc["paths"]) == ["/gateway/api/users/{id}"]
        [param] = doc["paths"]["/gateway/api/users/{id}"]["get"]["parameters"]
        assert param["name"] == "id"

    def test_missing_base_path(self):
        doc = _make_document()
        del doc["basePath"]
        apply_validators(doc, [_make_endpoint(path="/users/:id")], GeneratorConfig())
        assert list(doc["paths"]) == ["/users/{id}"]


class TestParameters:
    def _params(self, schema: dict, **overrides) -> list[dict]:
        doc = apply_validators(_make_document(), [_make_endpoint(schema=schema, **overrides)], GeneratorConfig())
        [operation] = [op for item in doc["paths"].values() for op in item.values()]
        return operation["parameters"]

    def test_query_parameters(self):
        assert self._params({"query": PageQuery}) == [
            {"name": "page", "in": "query", "required": True, "type": "integer"},
            {"name": "limit", "in": "query", "required": False, "type": "integer"},
        ]

    def test_query_without_required_set(self):
        params = self._params({"query": {"type": "object", "properties": {"q": {"type": "string"}}}})
        assert params == [{"name": "q", "in": "query", "required": False, "type": "string"}]

    def test_header_parameters(self):
        headers = {
            "type": "object",
            "properties": {"authorization": {"type": "string"}, "x-trace": {"type": "string"}},
            "required": ["authorization"],
        }
        assert self._params({"headers": headers}) == [
            {"name": "authorization", "in": "header", "required": True, "type": "string"},
            {"name": "x-trace", "in": "header", "required": False, "type": "string"},
        ]

    def test_path_and_params_are_additive(self):
        ids = {"type": "object", "properties": {"id": {"type": "integer"}}}
        params = self._params({"path": ids, "params": ids}, path="/users/:id")
        assert params == [
            {"name": "id", "in": "path", "required": True, "type": "integer"},
            {"name": "id", "in": "path", "required": True, "type": "integer"},
        ]

    def test_body_parameter_registers_definition(self):
        doc = apply_validators(
            _make_document(),
            [_make_endpoint(type="post", name="Create User", schema={"body": PageQuery})],
            GeneratorConfig(),
        )
        operation = doc["paths"]["/api/users"]["post"]
        assert operation["parameters"] == [
            {"name": "body", "in": "body", "schema": {"$ref": "#/definitions/CreateUserPostBody"}}
        ]
        assert doc["definitions"]["CreateUserPostBody"]["required"] == ["page"]

    def test_parameter_order(self):
        obj = {"type": "object", "properties": {"x": {"type": "string"}}}
        params = self._params({"query": obj, "path": obj, "body": obj, "headers": obj})
        assert [p["in"] for p in params] == ["header", "body", "path", "query"]


class TestResponses:
    def test_joi_style_response(self):
        response = {
            "type": "object",
            "properties": {
                "200": {
                    "type": "object",
                    "properties": {
                        "description": {"type": "string", "enum": ["OK"]},
                        "body": {"type": "object", "properties": {"id": {"type": "string"}}},
                    },
                },
                "500": {
                    "type": "object",
                    "properties": {
                        "description": {"type": "string", "enum": ["Oops"]},
                        "body": {"type": "object"},
                    },
                },
            },
        }
        doc = apply_validators(
            _make_document(), [_make_endpoint(name="Get User", schema={"response": response})], GeneratorConfig()
        )
        responses = doc["paths"]["/api/users"]["get"]["responses"]
        assert responses["200"] == {
            "description": "OK",
            "schema": {"$ref": "#/definitions/GetUserGet200Response"},
            "headers": {},
        }
        assert "headers" not in responses["500"]
        assert doc["definitions"]["GetUserGet200Response"]["properties"]["id"]["type"] == "string"
        assert "GetUserGet500Response" in doc["definitions"]

    def test_response_headers_from_properties(self):
        response = {
            "201": {
                "description": "Created",
                "body": {"type": "object"},
                "header": {"type": "object", "properties": {"location": {"type": "string"}}},
            },
            "302": {"description": "Found"},
        }
        doc = apply_validators(
            _make_document(), [_make_endpoint(type="post", schema={"response": response})], GeneratorConfig()
        )
        responses = doc["paths"]["/api/users"]["post"]["responses"]
        assert responses["201"]["headers"] == {"location": {"type": "string"}}
        assert responses["302"] == {"description": "Found", "headers": {}}

    def test_deprecated(self):
        doc = apply_validators(
            _make_document(), [_make_endpoint(schema={"deprecated": True})], GeneratorConfig()
        )
        assert doc["paths"]["/api/users"]["get"]["deprecated"] is True

    @pytest.mark.parametrize("value", [None, 1, "true"])
    def test_non_true_deprecated_is_false(self, value):
        doc = apply_validators(
            _make_document(), [_make_endpoint(schema={"deprecated": value})], GeneratorConfig()
        )
        assert doc["paths"]["/api/users"]["get"]["deprecated"] is False
