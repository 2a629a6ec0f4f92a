"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import DefaultConfig, get_default_config


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

    def available_runs(self) -> list[str]:
        """Names of the run configurations shipped in the config directory."""
        runs_dir = self.config_dir / "runs"
        if not runs_dir.exists():
            return []
        return sorted(path.stem for path in runs_dir.glob("*.yaml"))

    def load_run_config(self, run_name: str) -> dict[str, Any]:
        """
        Load a named run configuration.

        Raises:
            ConfigurationError: If no file exists for the run name
        """
        run_file = self.config_dir / "runs" / f"{run_name}.yaml"

        if not run_file.exists():
            raise ConfigurationError(
                f"Unknown run '{run_name}': {run_file} does not exist "
                f"(available: {', '.join(self.available_runs()) or 'none'})"
            )

        with open(run_file) as f:
            run_config = yaml.safe_load(f)

        return run_config or {}

    def merge_config(
        self,
        run_name: Optional[str] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Named run configuration file
        3. Global defaults (lowest priority)

        Raises:
            ConfigurationError: If run_name is given but has no run file
        """
        config = self._dataclass_to_dict(self.defaults)

        if run_name:
            config = self._deep_merge(config, self.load_run_config(run_name))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, tuple):
                    result[field_name] = list(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries. Lists are replaced, not concatenated."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
