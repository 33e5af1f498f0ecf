# Libraries
import logging
import os
import subprocess

# Typing
from typing import Final, Sequence

logger = logging.getLogger(__name__)

LLC: Final[str] = "llc"
LLC_FLAGS: Final[Sequence[str]] = (
    "-O0",
    "-stats",
    "--time-passes",
    "-relocation-model=pic",
    "-O0",
    "-asm-verbose=false",
)


class RunError(Exception):
    pass


class ReadError(RunError):
    pass


class ProcessStartError(RunError):
    pass


class StreamReadError(RunError):
    pass


class ProcessExitError(RunError):
    def __init__(self, message: str, returncode: int, stderr: bytes) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


def tool_path(toolchain: str, tool: str = LLC) -> str:
    return os.path.join(toolchain, "bin", tool)


def run_test(toolchain: str, test: str, tool: str = LLC) -> str:
    """Runs the toolchain's code generator on a test file and returns what it
    wrote to stderr.

    The test file is fed on stdin. Stdout is drained and dropped; both streams
    are read to the end before the exit status is collected.
    """
    try:
        with open(test, "rb") as f:
            data = f.read()
    except OSError as e:
        raise ReadError(f"open/read {test}: {e}") from e

    cmd = [tool_path(toolchain, tool), *LLC_FLAGS]
    logger.debug("Running %s < %s", " ".join(cmd), test)

    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessStartError(f"start {cmd[0]}: {e}") from e

    with proc:
        try:
            _, err = proc.communicate(input=data)
        except OSError as e:
            proc.kill()
            raise StreamReadError(f"read output of {cmd[0]}: {e}") from e

    if proc.returncode != 0:
        raise ProcessExitError(
            f"{cmd[0]} exited with status {proc.returncode}", proc.returncode, err
        )

    # Undecodable bytes (e.g. quoted symbol names) must not fail the run
    return err.decode("utf-8", errors="replace")
