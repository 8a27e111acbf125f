from pathlib import Path

from codebridge.common import bus
from codebridge.config import CONFIG_DIR, CONFIG_FILE, CodeBridgeConfig, write_config
from codebridge.needle import L


class InitRunner:
    def __init__(self, root_path: Path, config: CodeBridgeConfig):
        self.root_path = root_path
        self.config = config

    def run_init(self) -> bool:
        config_path = self.root_path / CONFIG_DIR / CONFIG_FILE
        if config_path.exists():
            bus.info(L.index.init.exists, path=config_path)
            return True

        written = write_config(self.root_path, self.config)
        bus.success(L.index.init.created, path=written)
        return True
