import argparse
import sys
from functools import reduce
from typing import List, Optional

from .configuration import Debug
from .minijs import MiniJS


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="minijs",
        description="Lexer, parser and tree-walking interpreter for the Mini JavaScript language",
        allow_abbrev=False
    )
    parser.add_argument(
        "-c",
        metavar="STRING",
        type=str,
        required=False,
        help="source string to execute"
    )
    parser.add_argument(
        "source",
        metavar="FILE",
        nargs="?",
        type=str,
        default=None,
        help="the source file to interpret"
    )
    parser.add_argument(
        "--dbg",
        choices=tuple(option.name for option in Debug),
        default=list(),
        action="append",
        help="debugging options, multiple --dbg arguments can be passed"
    )
    args = parser.parse_args(argv)

    minijs = MiniJS(reduce(lambda a, b: a | Debug[b], args.dbg, Debug(0)))  # Collapse all flags passed.
    if args.c is not None:
        minijs.run(args.c)
    elif args.source:
        try:
            minijs.run_file(args.source)
        except OSError as error:
            print(f"ERROR: Could not read '{args.source}': {error.strerror}", file=sys.stderr)
            return 66
    else:
        minijs.run_prompt()
        return 0

    if minijs.had_error: return 65
    if minijs.had_runtime_error: return 70
    return 0


if __name__ == "__main__":
    sys.exit(main())
