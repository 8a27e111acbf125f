from .loader import (
    CONFIG_DIR,
    CONFIG_FILE,
    CodeBridgeConfig,
    ConfigError,
    load_config_from_path,
    write_config,
)

__all__ = [
    "CONFIG_DIR",
    "CONFIG_FILE",
    "CodeBridgeConfig",
    "ConfigError",
    "load_config_from_path",
    "write_config",
]
