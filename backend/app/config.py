"""
Configuration management for Code Escape.

Handles loading project-level configuration for the submission validator:
stage catalogue location, workspace (event log) location and static analyzer
selection.

Configuration priority (highest to lowest):
1. Environment variables (for Docker/container deployments)
2. config.json file (for local development)
3. Built-in defaults
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent

# Config file path at project root
CONFIG_FILE = PROJECT_ROOT / "config.json"

# Default values (used when neither env var nor config.json specifies)
DEFAULT_STAGES_FILE = PROJECT_ROOT / "data" / "stages" / "escape_room.yaml"
DEFAULT_WORKSPACE_DIR = PROJECT_ROOT / "backend" / "workspace"
DEFAULT_ANALYZER_MODE = "auto"
DEFAULT_ANALYZER_TIMEOUT = 5.0

ANALYZER_MODES = ("auto", "builtin", "external")


class Config:
    """
    Project-level configuration manager.

    Priority: ENV > config.json > defaults

    Environment variables for Docker:
      - STAGES_FILE: Path to the YAML stage catalogue
      - WORKSPACE_DIR: Path to workspace storage (event log lives under it)
      - ANALYZER_MODE: Static analyzer selection (auto, builtin, external)
      - ANALYZER_TIMEOUT: Seconds allowed for each external analyzer run
    """

    def __init__(self):
        self.data = self.load()

    def load(self) -> Dict[str, Any]:
        """Load configuration from file."""
        if CONFIG_FILE.exists():
            try:
                with open(CONFIG_FILE, 'r') as f:
                    return json.load(f)
            except Exception as e:
                logger.error(f"Failed to load config: {e}")
                return self._default_config()
        else:
            return self._default_config()

    def save(self) -> None:
        """Save configuration to file."""
        try:
            with open(CONFIG_FILE, 'w') as f:
                json.dump(self.data, f, indent=2)
            logger.info(f"Configuration saved to {CONFIG_FILE}")
        except Exception as e:
            logger.error(f"Failed to save config: {e}")

    def _default_config(self) -> Dict[str, Any]:
        """Return default configuration."""
        return {
            "analyzer": {
                "mode": DEFAULT_ANALYZER_MODE,
                "timeout_seconds": DEFAULT_ANALYZER_TIMEOUT
            }
        }

    def get_stages_file(self) -> str:
        """Get stage catalogue path (ENV > config.json > default)."""
        env_path = os.getenv('STAGES_FILE')
        if env_path:
            return env_path

        config_path = self.data.get('paths', {}).get('stages_file')
        if config_path:
            return config_path

        return str(DEFAULT_STAGES_FILE)

    def get_workspace_root(self) -> str:
        """Get workspace root directory (ENV > config.json > default)."""
        env_path = os.getenv('WORKSPACE_DIR')
        if env_path:
            return env_path

        config_path = self.data.get('paths', {}).get('workspace_dir')
        if config_path:
            return config_path

        return str(DEFAULT_WORKSPACE_DIR)

    def get_analyzer_mode(self) -> str:
        """
        Get static analyzer mode.

        Priority: ANALYZER_MODE env var > config.json > default.
        Unknown values fall back to the default with a warning.
        """
        mode = os.getenv('ANALYZER_MODE') or self.data.get("analyzer", {}).get("mode", DEFAULT_ANALYZER_MODE)
        mode = str(mode).strip().lower()
        if mode not in ANALYZER_MODES:
            logger.warning(f"Unknown analyzer mode '{mode}', using '{DEFAULT_ANALYZER_MODE}'")
            return DEFAULT_ANALYZER_MODE
        return mode

    def get_analyzer_timeout(self) -> float:
        """Get the per-invocation timeout for external analyzers, in seconds."""
        raw = os.getenv('ANALYZER_TIMEOUT') or self.data.get("analyzer", {}).get("timeout_seconds")
        if raw is None:
            return DEFAULT_ANALYZER_TIMEOUT
        try:
            timeout = float(raw)
        except (TypeError, ValueError):
            logger.warning(f"Invalid analyzer timeout '{raw}', using {DEFAULT_ANALYZER_TIMEOUT}s")
            return DEFAULT_ANALYZER_TIMEOUT
        return timeout if timeout > 0 else DEFAULT_ANALYZER_TIMEOUT

    def set_analyzer_config(self, mode: str, timeout_seconds: float) -> None:
        """Set analyzer mode and timeout."""
        if "analyzer" not in self.data:
            self.data["analyzer"] = {}
        self.data["analyzer"]["mode"] = mode
        self.data["analyzer"]["timeout_seconds"] = timeout_seconds
        self.save()

    def set_paths(self, stages_file: str = None, workspace_dir: str = None) -> None:
        """Set custom paths in config.json."""
        if 'paths' not in self.data:
            self.data['paths'] = {}

        if stages_file:
            self.data['paths']['stages_file'] = stages_file
        if workspace_dir:
            self.data['paths']['workspace_dir'] = workspace_dir

        self.save()


# Global config instance
config = Config()
