"""Command that decodes possibly ACE encoded domain names."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from .decode import to_unicode
from .errors import IdnError, strerror

PROMPT = "Enter (possibly non-ASCII) domain name to decode: "


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idnutil-decode",
        description="Decode possibly ACE encoded domain names into Unicode.",
    )
    parser.add_argument(
        "domains", nargs="*", help="domain names to decode; read one line from stdin if none"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="do not prompt when reading stdin"
    )
    parser.add_argument(
        "-x", "--hex", action="store_true", help="show the bytes of each input first"
    )
    return parser


def _read_line(quiet: bool) -> Optional[str]:
    if not quiet:
        print(PROMPT, end="", flush=True)
    line = sys.stdin.readline()
    if not line:
        return None
    return line[:-1] if line.endswith("\n") else line


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the decoder; return the process exit status."""
    args = _build_parser().parse_args(argv)

    if args.domains:
        inputs = list(args.domains)
    else:
        line = _read_line(args.quiet)
        if line is None:
            print("error: no input read", file=sys.stderr)
            return 1
        inputs = [line]

    status = 0
    for domain in inputs:
        if args.hex:
            raw = domain.encode("utf-8", "surrogatepass")
            dump = " ".join(f"{byte:02x}" for byte in raw)
            print(f"Read string (length {len(raw)}): {dump}")
        try:
            decoded = to_unicode(domain)
        except IdnError as exc:
            print(
                f"error: {strerror(exc.code)} ({exc.name}, {int(exc.code)})",
                file=sys.stderr,
            )
            status = 1
            continue
        print(f"Decoded domain name: {decoded}")

    return status


if __name__ == "__main__":
    sys.exit(main())