# Libraries
import logging
import re
from dataclasses import dataclass

# Typing
from typing import Callable, Final, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)

ASM_INSTRS_RE: Final[re.Pattern] = re.compile(
    r"([0-9]+) asm-printer[^N]+Number of machine instrs printed"
)
STACK_SPACE_RE: Final[re.Pattern] = re.compile(
    r"([0-9]+) pei[^N]+Number of bytes used for stack in all functions"
)
EXEC_TIME_RE: Final[re.Pattern] = re.compile(
    r"Total Execution Time: ([0-9.]+) seconds \(([0-9.]+) wall clock\)"
)


@dataclass(frozen=True)
class Stats:
    asm_instrs: int = 0
    stack_space: int = 0
    seconds: float = 0.0
    wall_seconds: float = 0.0

    @staticmethod
    def empty() -> "Stats":
        return Stats()

    @staticmethod
    def from_output(stderr: str) -> "Stats":
        asm_instrs: int = 0
        stack_space: int = 0
        seconds: float = 0.0
        wall_seconds: float = 0.0

        def convert(
            name: str, line: str, substr: str, cast: Callable[[str], T], prev: T
        ) -> T:
            # Keep the previous value when the matched text is not a number
            try:
                return cast(substr)
            except ValueError as e:
                logger.warning(
                    "Could not parse %s statistic for line=[%s], "
                    "matched substring=[%s]: %s",
                    name,
                    line,
                    substr,
                    e,
                )
                return prev

        for line in stderr.split("\n"):
            line = line.strip()
            if (m := ASM_INSTRS_RE.search(line)) is not None:
                asm_instrs = convert("AsmInstrs", line, m.group(1), int, asm_instrs)
            if (m := STACK_SPACE_RE.search(line)) is not None:
                stack_space = convert("StackSpace", line, m.group(1), int, stack_space)
            if (m := EXEC_TIME_RE.search(line)) is not None:
                seconds = convert("Seconds", line, m.group(1), float, seconds)
                wall_seconds = convert(
                    "WallSeconds", line, m.group(2), float, wall_seconds
                )

        return Stats(asm_instrs, stack_space, seconds, wall_seconds)


def parse_output(stderr: str) -> Stats:
    return Stats.from_output(stderr)
