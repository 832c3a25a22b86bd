"""Tests for config.yaml and exercises.yaml loading."""

import pytest

from exercise_runner.catalog import CatalogLoader, expect_lines, load_catalog
from exercise_runner.config import ConfigLoader, GHC_ENV_VAR
from exercise_runner.exceptions import ConfigValidationError
from exercise_runner.reporting import ConsoleReporter, RecordingReporter
from exercise_runner.types import CompileOnly, Executable, UnitTests


class TestConfigLoader:
    """Strict validation of config.yaml."""

    def test_minimal_config(self, tmp_path):
        (tmp_path / "config.yaml").write_text("ghc_path: ghc\npackage_db: .ghc/package.db\n")

        config = ConfigLoader(tmp_path, env={}).load()

        assert config.ghc_path == "ghc"
        assert config.package_db == str(tmp_path.resolve() / ".ghc" / "package.db")
        assert config.exercises_dir == "src/exercises"
        assert config.program_name == "exercise-runner"
        assert isinstance(config.reporter, ConsoleReporter)

    def test_optional_keys_and_relative_tool_path(self, tmp_path):
        (tmp_path / "config.yaml").write_text(
            "ghc_path: tools/bin/ghc\n"
            "package_db: /abs/package.db\n"
            "exercises_dir: lessons\n"
            "program_name: haskell-drills\n"
        )
        reporter = RecordingReporter()

        config = ConfigLoader(tmp_path, env={}).load(reporter=reporter)

        assert config.ghc_path == str(tmp_path.resolve() / "tools" / "bin" / "ghc")
        assert config.package_db == "/abs/package.db"
        assert config.exercises_dir == "lessons"
        assert config.program_name == "haskell-drills"
        assert config.reporter is reporter

    def test_env_overrides_ghc_path(self, tmp_path):
        (tmp_path / "config.yaml").write_text("ghc_path: ghc\npackage_db: db\n")

        config = ConfigLoader(tmp_path, env={GHC_ENV_VAR: "/usr/local/bin/ghc-9.4"}).load()

        assert config.ghc_path == "/usr/local/bin/ghc-9.4"

    def test_all_errors_collected(self, tmp_path):
        """Missing keys, wrong types and unknown keys are reported together."""
        (tmp_path / "config.yaml").write_text("package_db: 3\ncolour: true\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(tmp_path, env={}).load()

        messages = [e.message for e in exc_info.value.errors]
        assert "'ghc_path' is required" in messages
        assert "'package_db' must be a non-empty string" in messages
        assert "Unknown key 'colour'" in messages
        assert exc_info.value.exit_code == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(tmp_path, env={}).load()

        assert "Config file not found" in str(exc_info.value)

    def test_unreadable_file(self, tmp_path):
        (tmp_path / "config.yaml").mkdir()

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader(tmp_path, env={}).load()

        assert "Failed to read config" in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path):
        (tmp_path / "config.yaml").write_text("- ghc\n")

        with pytest.raises(ConfigValidationError):
            ConfigLoader(tmp_path, env={}).load()


class TestCatalogLoader:
    """Parsing of exercises.yaml into descriptors."""

    def test_kinds_parsed(self, tmp_path):
        catalog_file = tmp_path / "exercises.yaml"
        catalog_file.write_text(
            "exercises:\n"
            "  - name: Types1\n"
            "    directory: types\n"
            "    hint: Fill in the type signature\n"
            "  - name: Lists1\n"
            "    directory: lists\n"
            "    kind: unit_tests\n"
            "  - name: Sum\n"
            "    directory: io\n"
            "    kind: executable\n"
            "    inputs: ['3', '4']\n"
            "    expected_output: [7]\n"
        )

        catalog = load_catalog(catalog_file)

        assert catalog.names() == ["Types1", "Lists1", "Sum"]
        assert isinstance(catalog.get("Types1").kind, CompileOnly)
        assert catalog.get("Types1").hint == "Fill in the type signature"
        assert isinstance(catalog.get("Lists1").kind, UnitTests)

        sum_kind = catalog.get("Sum").kind
        assert isinstance(sum_kind, Executable)
        assert sum_kind.inputs == ("3", "4")
        assert sum_kind.output_check(["7"]) is True
        assert sum_kind.output_check(["8"]) is False
        assert catalog.get("Missing") is None

    def test_empty_expected_output_accepts_no_output(self):
        catalog = CatalogLoader().parse([
            {"name": "Quiet", "directory": "io", "kind": "executable", "expected_output": []},
        ])

        check = catalog.get("Quiet").kind.output_check
        assert check([]) is True
        assert check([""]) is False

    def test_invalid_entries(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            CatalogLoader().parse([
                {"name": "A", "directory": "x"},
                {"name": "A", "directory": "y"},
                {"name": "B", "directory": "x", "kind": "interactive"},
                {"directory": "x"},
                {"name": "C", "directory": "x", "kind": "executable", "inputs": "3 4"},
                "D",
            ])

        errors = exc_info.value.errors
        assert len(errors) == 5
        assert errors[0].message == "Duplicate exercise name 'A'"
        assert errors[0].path == "exercises[1]"
        assert "unknown kind 'interactive'" in errors[1].message

    def test_unreadable_catalog(self, tmp_path):
        catalog_path = tmp_path / "exercises.yaml"
        catalog_path.mkdir()

        with pytest.raises(ConfigValidationError) as exc_info:
            load_catalog(catalog_path)

        assert "Failed to read catalog" in str(exc_info.value)

    def test_missing_exercises_list(self, tmp_path):
        catalog_file = tmp_path / "exercises.yaml"
        catalog_file.write_text("name: nope\n")

        with pytest.raises(ConfigValidationError):
            load_catalog(catalog_file)


def test_expect_lines_compares_exactly():
    check = expect_lines(["1", "2"])
    assert check(["1", "2"])
    assert not check(["1"])
    assert not check(["1", "2", ""])
