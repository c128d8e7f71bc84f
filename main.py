"""
SymSolve — command line entry point.

    python main.py "x^2 - 4 = 0"
    python main.py "a*x^2 + b*x + c" -v x
    python main.py --system "x + y = 3" "x - y = 1"
    python main.py "2x + 1 = 7" --check "x = 3"
"""

import argparse
import logging
import sys

from symsolve import check_solution, configure, load_settings, solve, solve_system
from symsolve.errors import SolveError
from symsolve.parsing import split_system
from symsolve.results import format_numeric

logger = logging.getLogger("symsolve.cli")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("equations", nargs="+", help="Equation(s), e.g. \"x^2 - 4 = 0\".")
    parser.add_argument("-v", "--variable", default="x",
                        help="Variable to solve for (comma separated with --system).")
    parser.add_argument("--system", action="store_true",
                        help="Solve the equations as a system.")
    parser.add_argument("--check", metavar="VALUES",
                        help="Substitute VALUES (e.g. \"x = 3\") instead of solving.")
    parser.add_argument("--settings", metavar="FILE", help="Load solver settings from a JSON file.")
    parser.add_argument("--numeric", action="store_true", help="Print decimal values.")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    return parser.parse_args(argv)


def _show(value, numeric: bool) -> str:
    if numeric and not value.free_symbols:
        return format_numeric(value)
    return str(value)


def run(args: argparse.Namespace) -> int:
    if args.settings:
        configure(load_settings(args.settings))

    if args.check:
        for equation in args.equations:
            result = check_solution(equation, args.check)
            verdict = "holds" if result["holds"] else "does not hold"
            print(f"{equation}: {result['lhs']} = {result['rhs']} ({verdict})")
        return 0

    if args.system or len(args.equations) > 1:
        equations = args.equations
        if len(equations) == 1:
            equations = split_system(equations[0])
        variables = None
        if args.system and args.variable != "x":
            variables = [v.strip() for v in args.variable.split(",") if v.strip()]
        solutions = solve_system(equations, variables)
        if not solutions:
            print("No solution found.")
            return 1
        pairs = solutions.items() if isinstance(solutions, dict) else solutions
        for name, value in pairs:
            print(f"{name} = {_show(value, args.numeric)}")
        return 0

    solutions = solve(args.equations[0], args.variable)
    if not solutions:
        print("No solution found.")
        return 1
    for value in solutions:
        print(f"{args.variable} = {_show(value, args.numeric)}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return run(args)
    except SolveError as e:
        logger.debug("Solve failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
