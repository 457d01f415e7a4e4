"""Configuration and environment for kube-dump."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from kube_dump.dump.strip import parse_strips


class Settings(BaseSettings):
    """Dump settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="KUBE_DUMP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Output
    out: Path | None = Field(default=None, description="Directory the dump is written to")
    strip: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="Strip operations applied to every object (e.g. managed-fields)",
    )
    escape_names: bool = Field(
        default=False,
        description="Escape '~', ':' and '%' in object names used as path segments",
    )

    # Kubernetes
    kubeconfig: Path | None = Field(
        default=None,
        description="Path to kubeconfig; uses KUBECONFIG env or default location if unset",
    )
    context: str | None = Field(default=None, description="Kubernetes context to use")
    list_page_size: int = Field(
        default=500,
        ge=1,
        le=10000,
        description="Page size for list requests",
    )

    # kubectl
    kubectl_path: str = Field(default="kubectl", description="kubectl executable")
    kubectl_enabled: bool = Field(
        default=True,
        description="If false, never invoke kubectl (cluster-info.txt is not written)",
    )

    @field_validator("strip", mode="before")
    @classmethod
    def _split_strip(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        names: list[str] = []
        for item in value:
            names.extend(part.strip() for part in str(item).split(",") if part.strip())
        return names

    @field_validator("strip")
    @classmethod
    def _known_strip(cls, value: list[str]) -> list[str]:
        # Raises ValueError for unknown names so bad config fails before any request.
        return [strip.name for strip in parse_strips(value)]


def get_settings(**overrides: Any) -> Settings:
    """Return validated settings instance; keyword overrides win over the environment."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
