"""Shared fixtures: a throwaway project with a stub compiler standing in for GHC.

The stub records its argv to a log file, fails with a GHC-like diagnostic when
the source contains COMPILE_ERROR, and otherwise "compiles" by installing the
source (a Python script) as the executable named by -o.
"""

import json
import os
import shlex
import stat
import sys
import textwrap
from pathlib import Path
from typing import List

import pytest

from exercise_runner.reporting import RecordingReporter
from exercise_runner.types import ProgramConfig


STUB_COMPILER = textwrap.dedent('''
    import json
    import os
    import shlex
    import sys

    args = sys.argv[1:]
    with open({log!r}, "a") as f:
        f.write(json.dumps(args) + "\\n")

    source = args[0]
    with open(source) as f:
        text = f.read()

    if "COMPILE_ERROR" in text:
        sys.stderr.write(source + ":1:1: error: parse error on input\\n")
        sys.exit(1)

    if "-o" in args:
        out = args[args.index("-o") + 1]
        with open(out + ".py", "w") as f:
            f.write(text)
        with open(out, "w") as f:
            f.write("#!/bin/sh\\nexec " + shlex.quote({python!r}) + " " + shlex.quote(out + ".py") + ' "$@"\\n')
        os.chmod(out, 0o755)
    sys.exit(0)
''')


def _make_executable(path: Path) -> None:
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


class StubProject:
    """Project root with a stub compiler and helpers to add exercises."""

    def __init__(self, root: Path):
        self.root = root
        self.exercises_root = root / "src" / "exercises"
        self.exercises_root.mkdir(parents=True)
        self.log_path = root / "ghc_calls.log"

        tools = root / "tools"
        tools.mkdir()
        script = tools / "fake_ghc.py"
        script.write_text(STUB_COMPILER.format(log=str(self.log_path), python=sys.executable))
        self.ghc_path = tools / "ghc"
        self.ghc_path.write_text(
            f"#!/bin/sh\nexec {shlex.quote(sys.executable)} {shlex.quote(str(script))} \"$@\"\n"
        )
        _make_executable(self.ghc_path)

        self.reporter = RecordingReporter()
        self.config = ProgramConfig(
            project_root=root,
            ghc_path=str(self.ghc_path),
            package_db=str(root / ".package-db"),
            reporter=self.reporter,
        )

    def write_exercise(self, name: str, body: str, directory: str = "basics") -> Path:
        """Write <name>.hs; body is Python run by the stub executable."""
        folder = self.exercises_root / directory
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / f"{name}.hs"
        path.write_text(textwrap.dedent(body))
        return path

    def compiler_calls(self) -> List[List[str]]:
        if not self.log_path.exists():
            return []
        return [json.loads(line) for line in self.log_path.read_text().splitlines() if line]


@pytest.fixture
def stub_project(tmp_path):
    """A project root with a stub compiler; cwd is restored after the test."""
    original_cwd = Path.cwd()
    project = StubProject(tmp_path / "project")
    yield project
    os.chdir(original_cwd)
