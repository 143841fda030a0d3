from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from photonctl.constants import DEFAULT_CONFIG_FILE


class RuntimeSettings(BaseSettings):
    """Environment-driven runtime overrides for client resolution."""

    model_config = SettingsConfigDict(
        env_prefix="PHOTON_",
        extra="ignore",
        populate_by_name=True,
        case_sensitive=False,
    )

    config_file: Path = Field(
        default=Path(DEFAULT_CONFIG_FILE).expanduser(),
        validation_alias=AliasChoices("PHOTON_CONFIG", "PHOTON_CONFIG_FILE"),
    )
    target: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_TARGET", "PHOTON_ENDPOINT"),
    )
    token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_TOKEN", "PHOTON_ACCESS_TOKEN"),
    )
    ignore_certificate: bool | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_IGNORE_CERTIFICATE", "PHOTON_NOCERTCHECK"),
    )
    request_timeout_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_REQUEST_TIMEOUT_SECONDS"),
    )
