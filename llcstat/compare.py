# Libraries
import argparse
import logging
import os
import sys

# Local
from llcstat.parser import Stats, parse_output
from llcstat.runner import RunError, run_test

# Typing
from typing import Sequence

logger = logging.getLogger(__name__)


class ComparisonError(Exception):
    pass


def run_and_parse(toolchain: str, test: str) -> Stats:
    return parse_output(run_test(toolchain, test))


def run_both(t1: str, t2: str, test: str) -> tuple[Stats, Stats]:
    """Runs the test with each toolchain, one after the other."""
    results: list[Stats] = []
    for name, toolchain in (("t1", t1), ("t2", t2)):
        try:
            results.append(run_and_parse(toolchain, test))
        except RunError as e:
            raise ComparisonError(f"run_test({name}={toolchain}, test={test}): {e}") from e
    return results[0], results[1]


def compare(
    t1: str, t2: str, test: str, warmup_runs: int = 0
) -> tuple[Stats, Stats]:
    """Compares both toolchains on the test, after `warmup_runs` comparisons whose
    results are thrown away."""
    for i in range(warmup_runs):
        logger.debug("Warm-up run %d/%d", i + 1, warmup_runs)
        run_both(t1, t2, test)
    return run_both(t1, t2, test)


def format_float(val: float) -> str:
    # Shortest round-trip form, integral values without a trailing ".0"
    text = repr(val)
    return text[:-2] if text.endswith(".0") else text


def format_row(test: str, stats: tuple[Stats, Stats]) -> str:
    fields: list[str] = [os.path.basename(test)]
    for s in stats:
        fields += [
            str(s.asm_instrs),
            str(s.stack_space),
            format_float(s.seconds),
            format_float(s.wall_seconds),
        ]
    return "\t".join(fields) + "\n"


def _non_negative(text: str) -> int:
    val = int(text)
    if val < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative count, got {val}")
    return val


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llcstat",
        description="Compare llc statistics of two toolchains on one bitcode file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-t1", default="", help="Path to the first toolchain")
    parser.add_argument("-t2", default="", help="Path to the second toolchain")
    parser.add_argument("-test", default="", help="Path to the test bitcode file")
    parser.add_argument(
        "-warmup",
        type=_non_negative,
        default=0,
        metavar="N",
        help="Number of comparisons to run and discard before the measured one",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    args = parser.parse_args(argv)

    def check_arg(name: str, cond: bool) -> None:
        if not cond:
            print(f"{name} is not specified", file=sys.stderr)
            parser.print_help(sys.stderr)
            sys.exit(1)

    check_arg("-test", args.test != "")
    check_arg("-t1", args.t1 != "")
    check_arg("-t2", args.t2 != "")
    return args


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    logger.info("Running test: %s", args.test)
    try:
        stats = compare(args.t1, args.t2, args.test, args.warmup)
    except ComparisonError as e:
        logger.critical("%s", e)
        sys.exit(1)

    sys.stdout.write(format_row(args.test, stats))


if __name__ == "__main__":
    main()
