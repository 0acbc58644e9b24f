"""Builder for the compact TR46 mapping and NFC quick-check tables."""

from __future__ import annotations

import argparse
import re
import sys
from dataclasses import dataclass
from enum import IntFlag
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

MAX_MAP_ENTRIES = 10000
MAX_MAPDATA = 16384
MAX_FLAG_COMBINATIONS = 8
MAX_NFCQC_ENTRIES = 140
MAX_MAPPINGS = 31

HEADER = "/* This file is automatically generated.  DO NOT EDIT! */"

_WHITESPACE = " \t\n\r\f\v"


class Tr46Flag(IntFlag):
    """Status values of the IDNA mapping table."""

    VALID = 1
    MAPPED = 2
    IGNORED = 4
    DEVIATION = 8
    DISALLOWED = 16
    DISALLOWED_STD3_MAPPED = 32
    DISALLOWED_STD3_VALID = 64


_FLAG_NAMES = {
    "valid": Tr46Flag.VALID,
    "mapped": Tr46Flag.MAPPED,
    "disallowed": Tr46Flag.DISALLOWED,
    "ignored": Tr46Flag.IGNORED,
    "deviation": Tr46Flag.DEVIATION,
    "disallowed_STD3_mapped": Tr46Flag.DISALLOWED_STD3_MAPPED,
    "disallowed_STD3_valid": Tr46Flag.DISALLOWED_STD3_VALID,
}

_NEEDS_MAPPING = Tr46Flag.MAPPED | Tr46Flag.DISALLOWED_STD3_MAPPED | Tr46Flag.DEVIATION
_JOINERS = (0x200C, 0x200D)

_RANGE = re.compile(r"\s*([0-9A-Fa-f]+)(?:\.\.\s*([0-9A-Fa-f]+))?")
_HEX_NUMBER = re.compile(r"\s*([0-9A-Fa-f]+)")

_ROW_WIDTHS = {0xFF: 5, 0xFFFF: 7, 0xFFFFFF: 8}


def _byte_count(cp: int) -> int:
    if cp <= 0x7F:
        return 1
    if cp <= 0x3FFF:
        return 2
    if cp <= 0x1FFFFF:
        return 3
    if cp <= 0xFFFFFFF:
        return 4
    return 5


def stream_length(code_points: Iterable[int]) -> int:
    """Return the number of bytes the code points take in the 7-bit stream."""
    return sum(_byte_count(cp) for cp in code_points)


def encode_stream(code_points: Iterable[int]) -> bytes:
    """Encode code points as big-endian 7-bit groups; the last byte of each has bit 7 clear."""
    out = bytearray()
    for cp in code_points:
        if not 0 <= cp <= 0xFFFFFFFF:
            raise ValueError(f"code point out of range: {cp:#x}")
        count = _byte_count(cp)
        for shift in range(7 * (count - 1), 0, -7):
            out.append(0x80 | ((cp >> shift) & 0x7F))
        out.append(cp & 0x7F)
    return bytes(out)


def decode_stream(data: Iterable[int], count: int) -> list[int]:
    """Decode ``count`` code points from the start of a 7-bit stream."""
    result: list[int] = []
    cp = 0
    for byte in data:
        if len(result) == count:
            break
        cp = (cp << 7) | (byte & 0x7F)
        if not byte & 0x80:
            result.append(cp)
            cp = 0
    if len(result) < count:
        raise ValueError(f"stream ends before {count} code points")
    return result


def split_fields(line: str) -> list[str]:
    """Split a data file line into its ';' separated fields, stopping at '#'."""
    fields: list[str] = []
    rest = line
    while rest:
        cuts = [index for index in (rest.find(";"), rest.find("#")) if index >= 0]
        if not cuts:
            fields.append(rest.strip(_WHITESPACE))
            break
        cut = min(cuts)
        fields.append(rest[:cut].strip(_WHITESPACE))
        if rest[cut] == "#":
            break
        rest = rest[cut + 1:]
    return fields


def _parse_range(text: Optional[str]) -> tuple[int, int]:
    match = _RANGE.match(text or "")
    if not match:
        raise ValueError(f"Failed to scan mapping codepoint '{text}'")
    cp1 = int(match[1], 16)
    cp2 = int(match[2], 16) if match[2] else cp1
    if cp1 > cp2:
        raise ValueError(f"Invalid codepoint range '{text}'")
    return cp1, cp2


def _parse_mapping(text: str) -> list[int]:
    points: list[int] = []
    pos = 0
    while True:
        match = _HEX_NUMBER.match(text, pos)
        if not match:
            return points
        points.append(int(match[1], 16))
        pos = match.end()


@dataclass
class MappingEntry:
    """One range of the mapping table."""

    cp1: int
    cp2: int
    flags: Tr46Flag
    mapping: tuple[int, ...] = ()
    offset: int = 0
    flag_index: int = 0

    @property
    def value(self) -> int:
        """Packed mapping count, data offset and flag index."""
        return (((len(self.mapping) << 14) | self.offset) << 3) | self.flag_index


@dataclass(frozen=True)
class NfcqcEntry:
    """A range whose NFC quick-check value is No (1) or Maybe (2)."""

    cp1: int
    cp2: int
    check: int


def parse_nfcqc_line(line: str) -> Optional[NfcqcEntry]:
    """Parse one line of the normalization properties; None if it is not NFC_QC."""
    fields = split_fields(line)
    if len(fields) < 2 or fields[1] != "NFC_QC":
        return None
    cp1, cp2 = _parse_range(fields[0])
    check = fields[2] if len(fields) > 2 else ""
    if check.startswith("N"):
        value = 1
    elif check.startswith("M"):
        value = 2
    else:
        raise ValueError(f"NFCQC: Unknown value '{check}'")
    return NfcqcEntry(cp1, cp2, value)


def _load_nfcqc(lines: Iterable[str]) -> list[NfcqcEntry]:
    entries: list[NfcqcEntry] = []
    for line in lines:
        entry = parse_nfcqc_line(line.strip(_WHITESPACE))
        if entry is None:
            continue
        entries.append(entry)
        if len(entries) >= MAX_NFCQC_ENTRIES:
            raise ValueError("Internal NFCQC map size too small")
    return entries


class MappingTableBuilder:
    """Collects mapping table lines and produces the compact table source."""

    def __init__(self) -> None:
        self.entries: list[MappingEntry] = []
        self.mapdata = bytearray()
        self.flag_combinations: list[Tr46Flag] = []
        self.warnings: list[str] = []

    def add_line(self, line: str) -> None:
        """Add one line of the mapping table; blank and comment lines are ignored."""
        text = line.strip(_WHITESPACE)
        if not text or text.startswith("#"):
            return

        fields = split_fields(text)
        codepoint = fields[0]
        flag = fields[1] if len(fields) > 1 else None
        mapping_text = fields[2] if len(fields) > 2 else ""

        cp1, cp2 = _parse_range(codepoint)
        if self.entries and cp1 <= self.entries[-1].cp2:
            raise ValueError(f"Mapping codepoints out of order '{codepoint}'")
        try:
            flags = _FLAG_NAMES[flag] if flag is not None else None
        except KeyError:
            flags = None
        if flags is None:
            raise ValueError(f"Unknown flag '{flag}'")

        points = _parse_mapping(mapping_text)
        entry = MappingEntry(cp1, cp2, flags, tuple(points))

        if points:
            if len(points) > MAX_MAPPINGS:
                raise ValueError(f"Too many mapped code points for '{codepoint}'")
            encoded = encode_stream(points)
            if len(self.mapdata) + len(encoded) > MAX_MAPDATA:
                raise ValueError("genmapdata too small - increase and retry")
            entry.offset = len(self.mapdata)
            self.mapdata.extend(encoded)
            if decode_stream(self.mapdata[entry.offset:], len(points)) != points:
                raise RuntimeError(f"mapping data self test failed for '{codepoint}'")
        elif flags & _NEEDS_MAPPING and cp1 not in _JOINERS:
            self.warnings.append(f"Missing mapping for '{codepoint}'")

        if not points and self.entries:
            prev = self.entries[-1]
            if prev.cp2 + 1 == cp1 and not prev.mapping and prev.flags == flags:
                prev.cp2 = cp2
                return

        if len(self.entries) + 1 >= MAX_MAP_ENTRIES:
            raise ValueError("Internal map size too small")
        self.entries.append(entry)

    def compact(self) -> None:
        """Share mapping data between entries whose mappings overlap."""
        self.entries.sort(key=lambda entry: (-len(entry.mapping), entry.cp1))
        data = bytearray()
        for entry in self.entries:
            if not entry.mapping:
                continue
            segment = encode_stream(entry.mapping)
            found = data.find(segment)
            if found >= 0:
                entry.offset = found
                continue
            entry.offset = len(data)
            data.extend(segment)
        self.mapdata = data
        self.entries.sort(key=lambda entry: entry.cp1)

    def combine_flags(self) -> None:
        """Give each entry an index into the list of distinct flag values."""
        self.flag_combinations = []
        for entry in self.entries:
            if entry.flags in self.flag_combinations:
                entry.flag_index = self.flag_combinations.index(entry.flags)
                continue
            if len(self.flag_combinations) >= MAX_FLAG_COMBINATIONS:
                raise ValueError("flag_combination[] too small - increase and retry")
            entry.flag_index = len(self.flag_combinations)
            self.flag_combinations.append(entry.flags)

    def _rows(self, low: int, high: int) -> Iterator[tuple[int, int, int]]:
        for entry in self.entries:
            if entry.cp1 < low:
                continue
            if entry.cp1 > high:
                break
            start = entry.cp1
            while True:
                end = min(entry.cp2, start + 0xFFFF)
                yield start, end - start, entry.value
                if end == entry.cp2:
                    break
                start = end + 1

    @staticmethod
    def _format_row(high: int, start: int, span: int, value: int) -> str:
        if high == 0xFF:
            prefix = f"0x{start & 0xFF:X},0x{span & 0xFF:X},"
        elif high == 0xFFFF:
            prefix = (
                f"0x{(start >> 8) & 0xFF:X},0x{start & 0xFF:X},"
                f"0x{(span >> 8) & 0xFF:X},0x{span & 0xFF:X},"
            )
        else:
            prefix = (
                f"0x{(start >> 16) & 0xFF:X},0x{(start >> 8) & 0xFF:X},0x{start & 0xFF:X},"
                f"0x{(span >> 8) & 0xFF:X},0x{span & 0xFF:X},"
            )
        return (
            prefix
            + f"0x{(value >> 16) & 0xFF:X},0x{(value >> 8) & 0xFF:X},0x{value & 0xFF:X},\n"
        )

    def render(self, nfcqc_entries: Iterable[NfcqcEntry] = ()) -> str:
        """Return the generated table source."""
        nfcqc = sorted(nfcqc_entries, key=lambda entry: entry.cp1)
        parts = [
            HEADER + "\n\n",
            "#include <stdint.h>\n",
            '#include "tr46map.h"\n\n',
            f"static const uint8_t idna_flags[{len(self.flag_combinations)}] =\n{{",
        ]
        parts.extend(f"0x{int(flags):X}," for flags in self.flag_combinations)
        parts.append("};\n\n")

        for name, low, high in (
            ("idna_map_8", 0x0, 0xFF),
            ("idna_map_16", 0x100, 0xFFFF),
            ("idna_map_24", 0x10000, 0xFFFFFF),
        ):
            rows = [self._format_row(high, *row) for row in self._rows(low, high)]
            parts.append(
                f"static const uint8_t {name}[{len(rows) * _ROW_WIDTHS[high]}] = {{\n"
            )
            parts.extend(rows)
            parts.append("};\n\n")

        parts.append(f"static const uint8_t mapdata[{len(self.mapdata)}] = {{\n")
        for index, byte in enumerate(self.mapdata):
            tail = "\n" if index % 16 == 15 else ""
            parts.append(f"0x{byte:02X},{tail}")
        parts.append("};\n\n")

        parts.append(f"static const NFCQCMap nfcqc_map[{len(nfcqc)}] = {{\n")
        parts.extend(f"{{0x{e.cp1:X},0x{e.cp2:X},{e.check}}},\n" for e in nfcqc)
        parts.append("};\n")
        return "".join(parts)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idnutil-tr46gen", description="Generate the compact TR46 lookup tables."
    )
    parser.add_argument("--srcdir", default=".", help="directory holding the data files")
    parser.add_argument("--mapping-table", default="IdnaMappingTable.txt")
    parser.add_argument("--normalization-props", default="DerivedNormalizationProps.txt")
    parser.add_argument("-o", "--output", help="write here instead of stdout")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate the tables; return the process exit status."""
    args = _build_parser().parse_args(argv)
    srcdir = Path(args.srcdir)
    builder = MappingTableBuilder()
    try:
        with open(srcdir / args.mapping_table, encoding="utf-8") as handle:
            for line in handle:
                builder.add_line(line)
        builder.compact()
        builder.combine_flags()
        with open(srcdir / args.normalization_props, encoding="utf-8") as handle:
            nfcqc = _load_nfcqc(handle)
    except OSError as exc:
        print(f"Failed to open {exc.filename}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    for warning in builder.warnings:
        print(warning, file=sys.stderr)

    text = builder.render(nfcqc)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    sys.exit(main())