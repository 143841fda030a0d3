from photonctl.config.loader import (
    CONFIG_PATH_ENVS,
    default_config_path,
    legacy_config_path,
    load_config,
    save_config,
)
from photonctl.config.manager import ConfigManager
from photonctl.config.models import (
    CLIConfig,
    ConfigInput,
    NamedSelection,
    PollingConfig,
    ResolvedConfig,
    RetryConfig,
)

__all__ = [
    "CONFIG_PATH_ENVS",
    "CLIConfig",
    "ConfigInput",
    "ConfigManager",
    "NamedSelection",
    "PollingConfig",
    "ResolvedConfig",
    "RetryConfig",
    "default_config_path",
    "legacy_config_path",
    "load_config",
    "save_config",
]
