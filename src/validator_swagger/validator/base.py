"""Data models for endpoint validators.

Validator files (Python modules, YAML or JSON) are converted into these
models before they are merged into the Swagger document.
"""

from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def _check_sub_schema(value: Any) -> Any:
    if isinstance(value, type) and issubclass(value, BaseModel):
        return value
    if isinstance(value, dict):
        return value
    raise ValueError("expected a pydantic model class or a JSON schema mapping")


# A pydantic model class or a plain JSON schema mapping.
SubSchema = Annotated[Any, AfterValidator(_check_sub_schema)]


class ResponseSpec(BaseModel):
    """A single documented response for one status code."""

    description: str
    body: SubSchema | None = None
    header: SubSchema | None = None


def is_status_map(value: Any) -> bool:
    """Whether ``value`` maps status codes to responses rather than being a schema."""
    if not isinstance(value, dict) or not value:
        return False
    return all(_is_status_key(key) for key in value)


def _is_status_key(key: Any) -> bool:
    if isinstance(key, int):
        return True
    return isinstance(key, str) and (key.isdigit() or key == "default")


class ValidationSchema(BaseModel):
    """Request/response sub-schemas of one endpoint."""

    headers: SubSchema | None = None
    body: SubSchema | None = None
    path: SubSchema | None = None
    params: SubSchema | None = None
    query: SubSchema | None = None
    response: SubSchema | None = None  # Joi-style schema or {status: ResponseSpec}
    deprecated: bool = False

    @field_validator("deprecated", mode="before")
    @classmethod
    def _only_true_deprecates(cls, value: Any) -> bool:
        return value is True

    @field_validator("response", mode="before")
    @classmethod
    def _parse_status_map(cls, value: Any) -> Any:
        if is_status_map(value):
            return {str(code): ResponseSpec.model_validate(spec) for code, spec in value.items()}
        return value


class EndpointDefinition(BaseModel):
    """One API operation: where it lives and how it is validated."""

    model_config = ConfigDict(populate_by_name=True)

    path: str  # /users/:id
    method: str = Field(validation_alias=AliasChoices("type", "method"))
    name: str
    tags: list[str] = []
    validation: ValidationSchema | None = Field(
        None,
        validation_alias=AliasChoices("schema", "JoiSchema", "joiSchema", "validation"),
    )

    @field_validator("method")
    @classmethod
    def _lowercase_method(cls, value: str) -> str:
        return value.lower()
