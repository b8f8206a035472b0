"""
Configuration Management System

This module provides centralized configuration management using YAML and JSON files.
Supports dot-notation access, default values and hot reloading.
"""

import os
import yaml
import json
from pathlib import Path
from typing import Dict, Any, Optional


# Default configuration, written to disk when the config directory is missing
DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "auth": {
        "adminEmail": "admin@frsc.gov.ng",
        "adminPassword": "12345",
    },
    "storage": {
        "userKey": "frsc_user",
        "offencesKey": "frsc_offences",
        "seedOnEmpty": True,
    },
    "offences": {
        "idPrefix": "OFF",
        "idPadding": 3,
    },
    "payment": {
        "processingDelay": 2.5,
        "transactionPrefix": "TXN",
        "referencePrefix": "REF",
    },
}


class ConfigManager:
    """
    Manage application configuration from YAML and JSON files

    Provides:
    - Load all config files on startup (file stem = section name)
    - Dot notation access: config.get('payment.processingDelay')
    - Fallback to built-in defaults for missing keys
    - Hot reload capability
    """

    def __init__(self, config_dir: str = None):
        """
        Initialize configuration manager

        Args:
            config_dir: Path to config directory (default: $CONFIG_DIR or project_root/config)
        """
        config_dir = config_dir or os.getenv("CONFIG_DIR")
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            # Find config dir relative to this file
            self.config_dir = Path(__file__).parent.parent / "config"

        self.configs: Dict[str, Any] = {}
        self._load_all_configs()

    def _load_all_configs(self):
        """Load all configuration files from config directory"""
        # Ensure config directory exists
        if not self.config_dir.exists():
            self.config_dir.mkdir(parents=True, exist_ok=True)
            self._create_default_configs()

        # Load YAML configs
        for yaml_file in sorted(self.config_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r') as f:
                    config_name = yaml_file.stem
                    self.configs[config_name] = yaml.safe_load(f) or {}
                    print(f"   [CONFIG] Loaded: {yaml_file.name}")
            except (OSError, yaml.YAMLError) as e:
                print(f"   [WARN] Failed to load {yaml_file.name}: {e}")

        # Load JSON configs
        for json_file in sorted(self.config_dir.glob("*.json")):
            try:
                with open(json_file, 'r') as f:
                    config_name = json_file.stem
                    self.configs[config_name] = json.load(f)
                    print(f"   [CONFIG] Loaded: {json_file.name}")
            except (OSError, json.JSONDecodeError) as e:
                print(f"   [WARN] Failed to load {json_file.name}: {e}")

    def _create_default_configs(self):
        """Write one YAML file per default section"""
        print("   Creating default configuration files...")
        for section, values in DEFAULT_CONFIGS.items():
            path = self.config_dir / f"{section}.yaml"
            with open(path, 'w') as f:
                yaml.safe_dump(values, f, default_flow_style=False, sort_keys=False)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot notation key

        Lookup order: loaded files, then DEFAULT_CONFIGS, then `default`.

        Examples:
            config.get('auth.adminEmail')
            config.get('payment.processingDelay', 2.5)

        Args:
            key: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self._lookup(self.configs, key)
        if value is None:
            value = self._lookup(DEFAULT_CONFIGS, key)
        return default if value is None else value

    @staticmethod
    def _lookup(source: Dict[str, Any], key: str) -> Optional[Any]:
        value = source
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    def _section(self, name: str) -> Dict[str, Any]:
        merged = dict(DEFAULT_CONFIGS.get(name, {}))
        merged.update(self.configs.get(name) or {})
        return merged

    def get_auth_config(self) -> Dict[str, Any]:
        """Get auth configuration section"""
        return self._section('auth')

    def get_storage_config(self) -> Dict[str, Any]:
        """Get storage configuration section"""
        return self._section('storage')

    def get_offence_config(self) -> Dict[str, Any]:
        """Get offence id configuration section"""
        return self._section('offences')

    def get_payment_config(self) -> Dict[str, Any]:
        """Get payment simulator configuration section"""
        return self._section('payment')

    def reload(self):
        """Reload all configuration files"""
        print("[CONFIG] Reloading configuration...")
        self.configs.clear()
        self._load_all_configs()
        print("[OK] Configuration reloaded")

    def set(self, key: str, value: Any):
        """
        Set a configuration value (runtime only, not persisted)

        Args:
            key: Dot-separated key path
            value: Value to set
        """
        keys = key.split('.')
        config = self.configs

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value


# Global configuration instance, created lazily by get_config()
config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get the global configuration instance"""
    global config
    if config is None:
        config = ConfigManager()
    return config
