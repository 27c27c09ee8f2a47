"""Command line entry: parse a domain and a problem and print both."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from .domain import Domain
from .filereader import PddlError
from .instance import Instance

USAGE = "Usage: ./Domain <domain.pddl> <task.pddl>"


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse the domain and problem files given and print them back as PDDL."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(USAGE)
        return 1
    try:
        domain = Domain(args[0])
        instance = Instance(domain, args[1])
    except (PddlError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(domain)
    print(instance)
    return 0


if __name__ == "__main__":
    sys.exit(main())