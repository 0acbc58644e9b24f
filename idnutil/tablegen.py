"""Generator of the IDNA2008 property table from IANA or UTC data."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

HEADER = "/* This file is automatically generated.  DO NOT EDIT! */"


class TableSyntax(Enum):
    """Layout of the input table."""

    IANA = "iana"
    UTC = "utc"


@dataclass(frozen=True)
class TableEntry:
    """One code point range and its IDNA2008 property, as written in the input."""

    start: str
    end: str
    property: str


class _Malformed(Exception):
    pass


def detect_syntax(header: str) -> TableSyntax:
    """Tell the table layout from its first line."""
    if header.startswith("Codepoint,Property,"):
        return TableSyntax.IANA
    if header.startswith("# Idna2008-"):
        return TableSyntax.UTC
    raise ValueError("unrecognized input")


def _first_word(text: str) -> str:
    stripped = text.lstrip(" ")
    return text[: len(text) - len(stripped)] + stripped.partition(" ")[0]


def _parse_iana(line: str) -> Optional[TableEntry]:
    tokens = [token for token in line.split(",") if token]
    if len(tokens) < 2:
        raise _Malformed
    codepoint, prop = tokens[0], tokens[1]
    if prop == "UNASSIGNED":
        return None
    start, _, rest = codepoint.lstrip("-").partition("-")
    return TableEntry(start, rest or start, prop)


def _parse_utc(line: str) -> Optional[TableEntry]:
    if not line or line.startswith("#"):
        return None
    codepoint, _, rest = line.lstrip(";").partition(";")
    if not codepoint:
        raise _Malformed
    prop = rest.lstrip("#").partition("#")[0]
    if not prop or not prop.startswith(" "):
        raise _Malformed
    prop = prop[1:]
    if prop.startswith("UNASSIGNED"):
        return None

    start, _, tail = codepoint.lstrip(".").partition(".")
    if tail:
        if not tail.startswith("."):
            raise _Malformed
        end = tail[1:]
    else:
        end = start
    return TableEntry(_first_word(start), _first_word(end), _first_word(prop))


_PARSERS: dict[TableSyntax, Callable[[str], Optional[TableEntry]]] = {
    TableSyntax.IANA: _parse_iana,
    TableSyntax.UTC: _parse_utc,
}


def parse_table(lines: Iterable[str]) -> list[TableEntry]:
    """Read the assigned ranges of a table; the first line selects the layout."""
    iterator = iter(lines)
    try:
        header = next(iterator)
    except StopIteration:
        raise ValueError("unexpected failure at input line 1") from None
    parser = _PARSERS[detect_syntax(header)]

    entries: list[TableEntry] = []
    for number, raw in enumerate(iterator, start=2):
        try:
            entry = parser(raw.rstrip("\r\n"))
        except _Malformed:
            raise ValueError(f"unexpected failure at input line {number}") from None
        if entry is not None:
            entries.append(entry)
    return entries


def render_table(entries: Iterable[TableEntry]) -> str:
    """Return the generated table source."""
    items = list(entries)
    lines = [
        HEADER,
        "",
        "#include <config.h>",
        '#include "data.h"',
        "",
        "const struct idna_table idna_table[] = {",
    ]
    lines.extend(f"  {{0x{e.start}, 0x{e.end}, {e.property}}}," for e in items)
    lines.append("};")
    lines.append(f"const size_t idna_table_size = {len(items)};")
    return "\n".join(lines) + "\n"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idnutil-tablegen", description="Generate the IDNA2008 property table."
    )
    parser.add_argument("input", nargs="?", help="input table; stdin if omitted")
    parser.add_argument("-o", "--output", help="write here instead of stdout")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate the table; return the process exit status."""
    args = _build_parser().parse_args(argv)
    try:
        if args.input:
            with open(args.input, encoding="utf-8") as handle:
                entries = parse_table(handle)
        else:
            entries = parse_table(sys.stdin)
    except OSError as exc:
        print(f"gendata: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"gendata: {exc}", file=sys.stderr)
        return 1

    text = render_table(entries)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())