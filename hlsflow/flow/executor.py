"""Running stage commands."""

import logging
import subprocess
from dataclasses import dataclass
from typing import Optional, Protocol

from hlsflow.errors import ArtifactIOError
from hlsflow.model import CommandDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one stage binary run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0


class Executor(Protocol):
    """Anything that can run a command descriptor."""

    def run(self, descriptor: CommandDescriptor) -> ExecutionResult:
        """Run the command and wait for it to finish."""
        ...


class SubprocessExecutor:
    """Runs stage binaries as local child processes."""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, descriptor: CommandDescriptor) -> ExecutionResult:
        """
        Run the command in its working directory and capture its output.

        Raises:
            ArtifactIOError: The binary does not exist or is not executable
            subprocess.TimeoutExpired: The command ran longer than ``timeout``
        """
        logger.info("Running %s", descriptor)
        try:
            completed = subprocess.run(
                descriptor.argv,
                cwd=descriptor.working_directory,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ArtifactIOError(f"Cannot run {descriptor.executable}: {e}") from e

        logger.debug("%s exited with %d", descriptor.executable, completed.returncode)
        return ExecutionResult(completed.returncode, completed.stdout, completed.stderr)
