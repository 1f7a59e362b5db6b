"""Filter configuration and environment-driven settings."""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FILTER_FIELDS: tuple[str, ...] = ("date", "ip", "method", "path", "referer", "status")


class FilterConfig(BaseModel):
    """One optional pattern per filterable field. ``None`` means no filter."""

    date: str | None = Field(default=None, description="Date or date range, e.g. 2024/03 or >2024/03/10")
    ip: str | None = Field(default=None, description="Remote address pattern, e.g. 10.0.*")
    method: str | None = Field(default=None, description="HTTP methods, e.g. GET,POST")
    path: str | None = Field(default=None, description="Path pattern, e.g. /blog or !/static/*")
    referer: str | None = Field(default=None, description="Referer pattern")
    status: str | None = Field(default=None, description="Status codes, e.g. 404 or 4xx,5xx")

    @field_validator(*FILTER_FIELDS, mode="before")
    @classmethod
    def _blank_is_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def merged(self, other: "FilterConfig") -> "FilterConfig":
        """Return a copy where every pattern set in ``other`` wins."""
        overrides = {k: v for k, v in other.model_dump().items() if v is not None}
        return self.model_copy(update=overrides)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in FILTER_FIELDS)


class Settings(BaseSettings):
    """accessfilter settings, loaded from ACCESSFILTER_* env vars or a .env file."""

    model_config = SettingsConfigDict(env_prefix="ACCESSFILTER_", env_file=".env", extra="ignore")

    log_level: str = Field(default="WARNING", description="Root log level (DEBUG, INFO, WARNING, ...)")
    date: str | None = Field(default=None, description="Default date pattern")
    ip: str | None = Field(default=None, description="Default remote address pattern")
    method: str | None = Field(default=None, description="Default method pattern")
    path: str | None = Field(default=None, description="Default path pattern")
    referer: str | None = Field(default=None, description="Default referer pattern")
    status: str | None = Field(default=None, description="Default status pattern")

    def filter_config(self) -> FilterConfig:
        return FilterConfig(**{name: getattr(self, name) for name in FILTER_FIELDS})
