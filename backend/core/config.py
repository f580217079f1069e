from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=BACKEND_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = Field(validation_alias=AliasChoices("database_url", "DATABASE_URL"))

    # Tokens are issued by the institution's auth service; this API only verifies them.
    jwt_secret_key: str = Field(
        validation_alias=AliasChoices("jwt_secret_key", "jwt_secret", "JWT_SECRET_KEY", "JWT_SECRET")
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias=AliasChoices("jwt_algorithm", "JWT_ALGORITHM"))

    # Runtime
    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))
    frontend_origin: str = Field(
        default="http://localhost:5173",
        validation_alias=AliasChoices("frontend_origin", "FRONTEND_ORIGIN"),
    )
    auto_create_schema: bool = Field(
        default=True,
        validation_alias=AliasChoices("auto_create_schema", "AUTO_CREATE_SCHEMA"),
    )

    # Institution isolation
    # - shared: a single institution; rows carry tenant_id NULL
    # - per_tenant: rows are scoped to the token's tenant_id (one configuration per institution)
    tenant_mode: str = Field(
        default="shared",
        validation_alias=AliasChoices("tenant_mode", "TENANT_MODE"),
    )

    @field_validator("frontend_origin")
    @classmethod
    def _normalize_frontend_origin(cls, v: str) -> str:
        # Starlette CORS expects the Origin to match exactly (no trailing slash).
        return v.strip().rstrip("/")

    @field_validator("tenant_mode")
    @classmethod
    def _normalize_tenant_mode(cls, v: str) -> str:
        v = (v or "shared").strip().lower()
        if v not in {"shared", "per_tenant"}:
            raise ValueError("TENANT_MODE must be 'shared' or 'per_tenant'")
        return v

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"


settings = Settings()
