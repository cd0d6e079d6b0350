"""
Config Manager

Loads the YAML configuration into a SecureAppConfig, falling back to the
packaged factory defaults when the main file cannot be read.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from secure_app.models.config import SecureAppConfig
from secure_app.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

PACKAGE_DIR = Path(__file__).parent.parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config" / "secure_app.yaml"
FACTORY_DEFAULTS_PATH = PACKAGE_DIR / "config" / "factory_defaults.yaml"


class ConfigManager:
    """
    Configuration manager

    Example:
        config_manager = ConfigManager("config/secure_app.yaml")
        config = config_manager.load()

        config.native_remove_delay_ms   # 150
        config.initial_state            # SecureState(secured=True, ...)

    Relative paths are resolved against the secure_app package directory.
    """

    def __init__(
        self,
        config_path: Union[str, Path, None] = None,
        defaults_path: Union[str, Path, None] = None,
    ):
        self.config_path = self._resolve(config_path, DEFAULT_CONFIG_PATH)
        self.factory_defaults_path = self._resolve(defaults_path, FACTORY_DEFAULTS_PATH)
        self.data: Dict[str, Any] = {}
        self.config: Optional[SecureAppConfig] = None
        self.using_factory_defaults = False

    @staticmethod
    def _resolve(path: Union[str, Path, None], default: Path) -> Path:
        if path is None:
            return default
        path = Path(path)
        if path.is_absolute() or path.exists():
            return path
        return PACKAGE_DIR / path

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{path.name}: top level must be a mapping")
        return data

    def load(self) -> SecureAppConfig:
        """
        Load YAML configuration

        Process:
        1. Load main config file
        2. On read/parse failure, fall back to factory defaults
        3. Build SecureAppConfig (invalid values raise ValueError)
        """
        try:
            self.data = self._read_yaml(self.config_path)
            self.using_factory_defaults = False
            log.info(f"Loaded configuration: {self.config_path.name}")

        except (OSError, yaml.YAMLError) as ex:
            log.error("Failed to load config", path=str(self.config_path), error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")

            self.data = self._read_yaml(self.factory_defaults_path)
            self.using_factory_defaults = True

        self.config = SecureAppConfig.from_dict(self.data)
        log.debug(
            "Configuration ready",
            initial_state=self.config.initial_state.to_dict(),
            auto_unlock_native=self.config.auto_unlock_native,
            native_remove_delay_ms=self.config.native_remove_delay_ms,
            native_overlay=self.config.native_overlay.name,
        )
        return self.config
