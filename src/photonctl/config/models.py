from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, model_validator

from photonctl.constants import (
    DEFAULT_MAX_CONSECUTIVE_ERRORS,
    DEFAULT_READY_POLL_INTERVAL_SECONDS,
    DEFAULT_READY_TIMEOUT_SECONDS,
    DEFAULT_RENDER_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    DEFAULT_TASK_POLL_INTERVAL_SECONDS,
    DEFAULT_TASK_TIMEOUT_SECONDS,
)


class RetryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_attempts: int = 4
    base_delay: float = 0.2
    max_delay: float = 2.5
    jitter: float = 0.2
    retry_statuses: list[int] = Field(default_factory=lambda: [429, 500, 502, 503, 504])


class PollingConfig(BaseModel):
    """Timeouts and intervals for task and readiness waits."""

    model_config = ConfigDict(extra="forbid")

    task_timeout: float = Field(default=DEFAULT_TASK_TIMEOUT_SECONDS, gt=0)
    task_poll_interval: float = Field(default=DEFAULT_TASK_POLL_INTERVAL_SECONDS, ge=0)
    ready_timeout: float = Field(default=DEFAULT_READY_TIMEOUT_SECONDS, gt=0)
    ready_poll_interval: float = Field(default=DEFAULT_READY_POLL_INTERVAL_SECONDS, ge=0)
    max_consecutive_errors: int = Field(default=DEFAULT_MAX_CONSECUTIVE_ERRORS, ge=0)
    render_interval: float = Field(default=DEFAULT_RENDER_INTERVAL_SECONDS, gt=0)


class NamedSelection(BaseModel):
    """A tenant or project the user selected with `tenant set` / `project set`."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = Field(validation_alias=AliasChoices("name", "Name"))
    id: str = Field(validation_alias=AliasChoices("id", "ID", "Id"))


_LEGACY_KEYS = {
    "CloudTarget": "target",
    "Token": "token",
    "RefreshToken": "refresh_token",
    "IgnoreCertificate": "ignore_certificate",
    "Tenant": "tenant",
    "Project": "project",
}


class CLIConfig(BaseModel):
    """Root configuration persisted between CLI invocations."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = "2"
    target: str | None = Field(default=None, validation_alias=AliasChoices("target", "endpoint"))
    token: SecretStr | None = Field(default=None, validation_alias=AliasChoices("token", "access_token"))
    refresh_token: SecretStr | None = None
    ignore_certificate: bool = Field(
        default=False,
        validation_alias=AliasChoices("ignore_certificate", "ignoreCertificate"),
    )
    tenant: NamedSelection | None = None
    project: NamedSelection | None = None

    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    retry: RetryConfig = Field(default_factory=RetryConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_schema(cls, data: object) -> object:
        if not isinstance(data, Mapping):
            return data

        data_dict = dict(data)
        if not any(key in data_dict for key in _LEGACY_KEYS):
            return data_dict

        normalized: dict[str, Any] = {"version": "1"}
        for key, value in data_dict.items():
            target_key = _LEGACY_KEYS.get(key, key)
            if target_key in {"tenant", "project"} and not value:
                continue
            if target_key in {"token", "refresh_token"} and not value:
                continue
            normalized[target_key] = value
        return normalized


class ResolvedConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    path: Path | None = None
    data: CLIConfig


ConfigInput = CLIConfig | dict[str, Any]
