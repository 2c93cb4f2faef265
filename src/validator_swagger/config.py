"""Run configuration assembled from command-line options."""

from pydantic import BaseModel

DEFAULT_ENVIRONMENT = "development"
ENVIRONMENT_VARIABLE = "APP_ENV"


class GeneratorConfig(BaseModel):
    """Settings that shape the generated document."""

    environment: str = DEFAULT_ENVIRONMENT
    api_gateway_path: str | None = None
    base_url: str | None = None  # overrides schemes/host (and basePath if it has a path)
    map_path: str | None = None  # overrides basePath
