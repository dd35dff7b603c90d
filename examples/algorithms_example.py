"""
Algorithms — generic handlers on any type, re-dispatch per element.

    wrap(v).apply(Sort).apply(Unique).apply(ForEach(Output), sys.stdout, "\\n")

Reading stdin:

    python -m examples.algorithms_example --stdin < words.txt
"""

import argparse
import sys

from examples._infra import banner, algorithms, Sort, Unique, ForEach, Output, GetAllLines


resolver = algorithms.compile()


def main() -> None:
    parser = argparse.ArgumentParser(description="Sort and deduplicate values")
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read lines from stdin instead of the built-in sequence",
    )
    args = parser.parse_args()

    banner("Algorithms: Sort, Unique, ForEach(Output)")

    if args.stdin:
        (
            resolver.wrap(sys.stdin)
            .apply(GetAllLines)
            .apply(Sort)
            .apply(Unique)
            .apply(ForEach(Output), sys.stdout, "\n")
        )
        return

    v = [4, 4, 1, 2, 2, 9, 9, 9, 7, 6, 6]
    resolver.wrap(v).apply(Sort).apply(Unique).apply(ForEach(Output), sys.stdout, "\n")
    print(f"   → the list itself was sorted in place: {v}")


if __name__ == "__main__":
    main()
