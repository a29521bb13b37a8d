import shutil

import pytest

from shell_proxy.config import ShellConfig
from shell_proxy.lib.command import ExecutionEngine, ExecutionResult


class RecordingEngine(ExecutionEngine):
    """Engine that records word lists instead of spawning processes."""

    def __init__(self):
        super().__init__(ShellConfig(silent=True))
        self.calls = []

    def execute(self, words):
        argv = list(words)
        self.calls.append(argv)
        return ExecutionResult(argv=argv, exit_code=0, stdout=" ".join(argv) + "\n", stderr="")


def needs(*programs):
    missing = [p for p in programs if shutil.which(p) is None]
    return pytest.mark.skipif(bool(missing), reason=f"not on PATH: {', '.join(missing)}")


@pytest.fixture
def recorder():
    return RecordingEngine()


@pytest.fixture
def engine(tmp_path):
    """A real, silent engine whose commands run inside tmp_path."""
    return ExecutionEngine(ShellConfig(silent=True, cwd=str(tmp_path)))
