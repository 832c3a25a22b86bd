"""Exercise catalog loaded from exercises.yaml."""

from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

import yaml

from .exceptions import ConfigValidationError, ValidationError
from .types import CompileOnly, Executable, ExerciseDescriptor, ExerciseKind, UnitTests


CATALOG_FILENAME = "exercises.yaml"
KINDS = ("compile_only", "unit_tests", "executable")


def expect_lines(expected: Sequence[str]) -> Callable[[List[str]], bool]:
    """Output check accepting exactly the given lines."""
    expected_lines = [str(line) for line in expected]

    def check(lines: List[str]) -> bool:
        return list(lines) == expected_lines

    return check


class Catalog:
    """Ordered, name-indexed collection of exercise descriptors."""

    def __init__(self, exercises: Sequence[ExerciseDescriptor]):
        self._exercises = list(exercises)
        self._by_name = {ex.name: ex for ex in self._exercises}

    def __iter__(self) -> Iterator[ExerciseDescriptor]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)

    def get(self, name: str) -> Optional[ExerciseDescriptor]:
        return self._by_name.get(name)

    def names(self) -> List[str]:
        return [ex.name for ex in self._exercises]


class CatalogLoader:
    """Loads and validates the exercise catalog."""

    def __init__(self):
        self.errors: List[ValidationError] = []

    def load(self, catalog_path: Path) -> Catalog:
        """
        Load exercises.yaml.

        Raises:
            ConfigValidationError: If the file is missing or any entry is invalid
        """
        if not catalog_path.exists():
            self._add_error(f"Catalog file not found: {catalog_path}")
            self._raise_validation_errors()

        try:
            with open(catalog_path, 'r') as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self._add_error(f"Failed to parse catalog: {e}")
            self._raise_validation_errors()
        except OSError as e:
            self._add_error(f"Failed to read catalog: {e}")
            self._raise_validation_errors()

        if not isinstance(raw, dict) or not isinstance(raw.get('exercises'), list):
            self._add_error("Catalog must contain an 'exercises' list")
            self._raise_validation_errors()

        return self.parse(raw['exercises'])

    def parse(self, entries: List[Any]) -> Catalog:
        """Build a Catalog from already-parsed entries."""
        exercises = []
        seen = set()
        for i, entry in enumerate(entries):
            path = f"exercises[{i}]"
            descriptor = self._parse_entry(entry, path)
            if descriptor is None:
                continue
            if descriptor.name in seen:
                self._add_error(f"Duplicate exercise name '{descriptor.name}'", path)
                continue
            seen.add(descriptor.name)
            exercises.append(descriptor)

        self._raise_validation_errors()
        return Catalog(exercises)

    def _parse_entry(self, entry: Any, path: str) -> Optional[ExerciseDescriptor]:
        if not isinstance(entry, dict):
            self._add_error("Exercise entry must be a mapping", path)
            return None

        name = entry.get('name')
        directory = entry.get('directory')
        if not isinstance(name, str) or not name:
            self._add_error("'name' is required and must be a string", path)
            return None
        if not isinstance(directory, str):
            self._add_error(f"Exercise '{name}': 'directory' is required and must be a string", path)
            return None

        kind = self._parse_kind(name, entry, path)
        if kind is None:
            return None

        hint = entry.get('hint')
        return ExerciseDescriptor(
            name=name,
            directory=directory,
            kind=kind,
            hint=str(hint) if hint is not None else None,
        )

    def _parse_kind(self, name: str, entry: Dict[str, Any], path: str) -> Optional[ExerciseKind]:
        kind = entry.get('kind', 'compile_only')
        if kind not in KINDS:
            self._add_error(f"Exercise '{name}': unknown kind '{kind}'. Expected one of {', '.join(KINDS)}", path)
            return None

        if kind == 'compile_only':
            return CompileOnly()
        if kind == 'unit_tests':
            return UnitTests()

        inputs = entry.get('inputs', [])
        expected = entry.get('expected_output', [])
        if not isinstance(inputs, list):
            self._add_error(f"Exercise '{name}': 'inputs' must be a list", path)
            return None
        if not isinstance(expected, list):
            self._add_error(f"Exercise '{name}': 'expected_output' must be a list", path)
            return None

        return Executable(
            inputs=tuple(str(i) for i in inputs),
            output_check=expect_lines(expected),
        )

    def _add_error(self, message: str, path: str = "") -> None:
        self.errors.append(ValidationError(message=message, path=path))

    def _raise_validation_errors(self) -> None:
        if self.errors:
            errors, self.errors = self.errors, []
            raise ConfigValidationError(errors)


def load_catalog(catalog_path: Path) -> Catalog:
    """Convenience wrapper around CatalogLoader.load."""
    return CatalogLoader().load(catalog_path)
