import logging
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    exit_code: int
    stdout: str
    stderr: str


class ProcessRunner(ABC):
    """Runs an external tool to completion and reports what it produced."""

    @abstractmethod
    def run(self, args: Sequence[str]) -> ProcessResult:
        ...


class SubprocessRunner(ProcessRunner):

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    def run(self, args: Sequence[str]) -> ProcessResult:
        # subprocess.run drains stdout and stderr before reading the exit code
        cmd = [str(a) for a in args]
        logger.debug(f"Running {' '.join(cmd)}")
        try:
            completed = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            return ProcessResult(exit_code=-1, stdout="", stderr=f"executable not found: {cmd[0]}")
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else (e.stderr or "")
            return ProcessResult(
                exit_code=-1,
                stdout="",
                stderr=f"{cmd[0]} timed out after {self.timeout}s\n{stderr}",
            )

        return ProcessResult(
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
