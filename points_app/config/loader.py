"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from .defaults import DefaultConfig, get_default_config

PRIVATE_KEY_ENV = "POINTS_PRIVATE_KEY"
RPC_URL_ENV = "POINTS_RPC_URL"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_network_config(self) -> dict[str, Any]:
        """Load deployment-specific overrides from network.yaml."""
        network_file = self.config_dir / "network.yaml"

        if not network_file.exists():
            return {}

        with open(network_file) as f:
            network_config = yaml.safe_load(f) or {}

        return network_config.get("network", {})  # type: ignore[no-any-return]

    def load_environment_config(self) -> dict[str, Any]:
        """Read secrets and endpoint overrides from the environment."""
        config: dict[str, Any] = {}

        rpc_url = os.environ.get(RPC_URL_ENV)
        if rpc_url:
            config["chain"] = {"rpc_url": rpc_url}

        private_key = os.environ.get(PRIVATE_KEY_ENV)
        if private_key:
            config["signer"] = {"private_key": private_key}

        return config

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. network.yaml, then environment variables
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)
        config["signer"] = {"private_key": None}

        config = self._deep_merge(config, self.load_network_config())
        config = self._deep_merge(config, self.load_environment_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
