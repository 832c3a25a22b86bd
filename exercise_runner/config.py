"""Program configuration loader with strict validation of config.yaml."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .exceptions import ConfigValidationError, ValidationError
from .reporting import ConsoleReporter, Reporter
from .types import DEFAULT_EXERCISES_DIR, DEFAULT_PROGRAM_NAME, ProgramConfig


CONFIG_FILENAME = "config.yaml"
GHC_ENV_VAR = "EXERCISE_RUNNER_GHC"


class ConfigLoader:
    """Loads config.yaml from a project root and builds a ProgramConfig."""

    REQUIRED_KEYS = {"ghc_path", "package_db"}
    OPTIONAL_KEYS = {"exercises_dir", "program_name"}

    def __init__(self, project_root: Path, env: Optional[Dict[str, str]] = None):
        """Initialize loader with the project root."""
        self.project_root = project_root.resolve()
        self.env = os.environ if env is None else env
        self.errors: List[ValidationError] = []

    def load(self, config_path: Optional[Path] = None, reporter: Optional[Reporter] = None) -> ProgramConfig:
        """
        Load and validate the configuration file.

        Args:
            config_path: Config file (default: <project_root>/config.yaml)
            reporter: Output sink (default: ConsoleReporter)

        Returns:
            ProgramConfig

        Raises:
            ConfigValidationError: If the file is missing, unreadable or invalid
        """
        path = config_path or self.project_root / CONFIG_FILENAME
        raw = self._read(path)

        ghc_path = self.env.get(GHC_ENV_VAR) or raw.get("ghc_path")
        self._require_string("ghc_path", ghc_path, path)
        self._require_string("package_db", raw.get("package_db"), path)
        for key in self.OPTIONAL_KEYS:
            if key in raw:
                self._require_string(key, raw[key], path)

        unknown = set(raw) - self.REQUIRED_KEYS - self.OPTIONAL_KEYS
        for key in sorted(unknown):
            self._add_error(f"Unknown key '{key}'", str(path))

        self._raise_validation_errors()

        return ProgramConfig(
            project_root=self.project_root,
            ghc_path=self._resolve_tool(ghc_path),
            package_db=str(self._resolve_path(raw["package_db"])),
            exercises_dir=raw.get("exercises_dir", DEFAULT_EXERCISES_DIR),
            program_name=raw.get("program_name", DEFAULT_PROGRAM_NAME),
            reporter=reporter or ConsoleReporter(),
        )

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            self._add_error(f"Config file not found: {path}")
            self._raise_validation_errors()

        try:
            with open(path, 'r') as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self._add_error(f"Failed to parse config: {e}", str(path))
            self._raise_validation_errors()
        except OSError as e:
            self._add_error(f"Failed to read config: {e}", str(path))
            self._raise_validation_errors()

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            self._add_error("Config must be a YAML mapping", str(path))
            self._raise_validation_errors()
        return raw

    def _require_string(self, key: str, value: Any, path: Path) -> None:
        if value is None:
            self._add_error(f"'{key}' is required", str(path))
        elif not isinstance(value, str) or not value.strip():
            self._add_error(f"'{key}' must be a non-empty string", str(path))

    def _resolve_path(self, value: str) -> Path:
        p = Path(value).expanduser()
        return p if p.is_absolute() else self.project_root / p

    def _resolve_tool(self, value: str) -> str:
        # Bare names like 'ghc' are looked up on PATH; anything with a
        # separator is a path relative to the project root
        if os.sep not in value and "/" not in value and not value.startswith("~"):
            return value
        return str(self._resolve_path(value))

    def _add_error(self, message: str, path: str = "") -> None:
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_validation_errors(self) -> None:
        if self.errors:
            errors, self.errors = self.errors, []
            raise ConfigValidationError(errors)


def load_config(project_root: Path, config_path: Optional[Path] = None, reporter: Optional[Reporter] = None) -> ProgramConfig:
    """Convenience wrapper around ConfigLoader.load."""
    return ConfigLoader(project_root).load(config_path, reporter)
