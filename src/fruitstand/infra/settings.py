"""HTTP app settings: OpenAPI metadata, docs exposure and browser CORS origins.

Only the origins are configurable for CORS. Methods and headers are fixed
to what the fruits endpoints accept.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

import fruitstand
from fruitstand.infra.middleware.request_id import REQUEST_ID_HEADER

FRUITS_CORS_METHODS = ("GET", "POST", "PATCH", "DELETE", "OPTIONS")
FRUITS_CORS_HEADERS = ("Content-Type", REQUEST_ID_HEADER)


class CORSSettings(BaseSettings):
    """Browser origins allowed to call the fruits API.

    ``CORS_ALLOW_ORIGINS`` is a comma-separated list, for example
    ``https://shop.example,https://admin.shop.example``. The default ``*``
    lets any storefront read the catalogue.

    Example:
        >>> CORSSettings(allow_origins="https://shop.example").allow_origins
        ['https://shop.example']
    """

    model_config = SettingsConfigDict(env_prefix="CORS_", extra="ignore")

    # NoDecode: the raw env string reaches _split_origins instead of json.loads.
    allow_origins: Annotated[list[str], NoDecode] = Field(default=["*"])
    allow_credentials: bool = Field(default=False)

    @field_validator("allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @model_validator(mode="after")
    def _reject_credentials_for_any_origin(self) -> CORSSettings:
        if self.allow_credentials and "*" in self.allow_origins:
            msg = "CORS_ALLOW_CREDENTIALS requires explicit CORS_ALLOW_ORIGINS, not '*'"
            raise ValueError(msg)
        return self

    @property
    def allow_methods(self) -> list[str]:
        return list(FRUITS_CORS_METHODS)

    @property
    def allow_headers(self) -> list[str]:
        return list(FRUITS_CORS_HEADERS)

    @property
    def expose_headers(self) -> list[str]:
        """Lets browser clients read the correlation ID quoted in 5xx problems."""
        return [REQUEST_ID_HEADER]


class AppSettings(BaseSettings):
    """Application settings (``APP_`` prefix, e.g. ``APP_TITLE``).

    ``APP_DOCS_ENABLED=false`` removes ``/docs``, ``/redoc`` and
    ``/openapi.json`` together.
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        extra="ignore",
    )

    title: str = Field(default="Fruitstand")
    version: str = Field(default=fruitstand.__version__)
    description: str = Field(default="CRUD API for the fruits table.")
    docs_enabled: bool = Field(default=True)
    debug: bool = Field(default=False, description="Unhandled errors include the exception")
    cors: CORSSettings = Field(default_factory=CORSSettings)

    @property
    def docs_url(self) -> str | None:
        return "/docs" if self.docs_enabled else None

    @property
    def redoc_url(self) -> str | None:
        return "/redoc" if self.docs_enabled else None

    @property
    def openapi_url(self) -> str | None:
        return "/openapi.json" if self.docs_enabled else None
