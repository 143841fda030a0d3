from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr

from photonctl.config.loader import default_config_path, load_config, save_config
from photonctl.config.models import CLIConfig, NamedSelection


class ConfigManager:
    """Read-modify-write access to the persisted CLI configuration."""

    def __init__(self, config_file: str | Path | None = None) -> None:
        self._explicit = config_file is not None
        self._path = Path(config_file).expanduser() if config_file else default_config_path()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> CLIConfig:
        if self._explicit:
            resolved = load_config(config_path=self._path)
        else:
            resolved = load_config()
            if resolved.path is not None:
                self._path = resolved.path
        return resolved.data

    def save(self, config: CLIConfig) -> None:
        self._path = save_config(config, path=self._path)

    def set_target(self, target: str, *, ignore_certificate: bool = False, token: str | None = None) -> CLIConfig:
        cfg = self.load()
        target = target.rstrip("/")
        if cfg.target != target:
            # Selections belong to the previous endpoint.
            cfg.tenant = None
            cfg.project = None
        cfg.target = target
        cfg.ignore_certificate = ignore_certificate
        if token is not None:
            cfg.token = SecretStr(token) if token else None
        self.save(cfg)
        return cfg

    def set_tenant(self, name: str, tenant_id: str) -> CLIConfig:
        cfg = self.load()
        if cfg.tenant is None or cfg.tenant.id != tenant_id:
            cfg.project = None
        cfg.tenant = NamedSelection(name=name, id=tenant_id)
        self.save(cfg)
        return cfg

    def set_project(self, name: str, project_id: str) -> CLIConfig:
        cfg = self.load()
        cfg.project = NamedSelection(name=name, id=project_id)
        self.save(cfg)
        return cfg

    def clear_tenant(self, tenant_id: str | None = None) -> bool:
        """Clear the selected tenant (and project) when it matches `tenant_id` or no id is given."""

        cfg = self.load()
        if cfg.tenant is None:
            return False
        if tenant_id and cfg.tenant.id != tenant_id:
            return False
        cfg.tenant = None
        cfg.project = None
        self.save(cfg)
        return True

    def clear_project(self, project_id: str | None = None) -> bool:
        cfg = self.load()
        if cfg.project is None:
            return False
        if project_id and cfg.project.id != project_id:
            return False
        cfg.project = None
        self.save(cfg)
        return True
