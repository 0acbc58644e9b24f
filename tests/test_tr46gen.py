import re

import pytest

from idnutil.tr46gen import (
    HEADER,
    MappingTableBuilder,
    NfcqcEntry,
    Tr46Flag,
    decode_stream,
    encode_stream,
    main,
    parse_nfcqc_line,
    split_fields,
    stream_length,
)


@pytest.mark.parametrize(
    "cp, size",
    [
        (0, 1),
        (0x7F, 1),
        (0x80, 2),
        (0x3FFF, 2),
        (0x4000, 3),
        (0x1FFFFF, 3),
        (0x200000, 4),
        (0xFFFFFFF, 4),
        (0x10000000, 5),
        (0xFFFFFFFF, 5),
    ],
)
def test_stream_length_boundaries(cp, size):
    assert stream_length([cp]) == size
    assert len(encode_stream([cp])) == size


def test_ascii_is_encoded_unchanged():
    assert encode_stream([ord("a"), ord("b")]) == b"ab"


@pytest.mark.parametrize(
    "points",
    [[], [0x41], [0x80, 0x3FFF, 0x4000], [0x10FFFF, 0x200000, 0xFFFFFFFF], [0x61, 0x308]],
)
def test_stream_round_trip(points):
    data = encode_stream(points)
    assert decode_stream(data, len(points)) == points
    assert stream_length(points) == len(data)


def test_only_last_byte_of_code_point_has_high_bit_clear():
    for cp in (0x80, 0x4000, 0x200000, 0x10000000):
        data = encode_stream([cp])
        assert data[-1] < 0x80
        assert all(byte >= 0x80 for byte in data[:-1])


def test_decode_stream_stops_after_count():
    assert decode_stream(encode_stream([1, 2, 3]), 2) == [1, 2]


def test_decode_stream_truncated():
    with pytest.raises(ValueError):
        decode_stream(encode_stream([0x4000])[:-1], 1)


def test_encode_stream_rejects_negative():
    with pytest.raises(ValueError):
        encode_stream([-1])


@pytest.mark.parametrize(
    "line, expected",
    [
        ("0041..005A ; mapped ; 0061 # LATIN", ["0041..005A", "mapped", "0061"]),
        ("0041 ; valid", ["0041", "valid"]),
        ("0041 ; valid ;", ["0041", "valid"]),
        ("00A0 ; disallowed ;# c", ["00A0", "disallowed", ""]),
        ("a;;b", ["a", "", "b"]),
        ("", []),
    ],
)
def test_split_fields(line, expected):
    assert split_fields(line) == expected


def test_parse_nfcqc_no():
    assert parse_nfcqc_line("0340..0341    ; NFC_QC; N # Mn") == NfcqcEntry(0x340, 0x341, 1)


def test_parse_nfcqc_maybe_single():
    assert parse_nfcqc_line("0300 ; NFC_QC; M # Mn") == NfcqcEntry(0x300, 0x300, 2)


def test_parse_nfcqc_other_property_ignored():
    assert parse_nfcqc_line("0340 ; NFD_QC; N") is None


@pytest.mark.parametrize("line", ["0340 ; NFC_QC; X", "0341..0340 ; NFC_QC; N"])
def test_parse_nfcqc_errors(line):
    with pytest.raises(ValueError):
        parse_nfcqc_line(line)


def _builder(*lines):
    builder = MappingTableBuilder()
    for line in lines:
        builder.add_line(line)
    return builder


def test_adjacent_ranges_merge():
    builder = _builder("0041 ; valid", "0042 ; valid", "0043..0045 ; valid")
    assert len(builder.entries) == 1
    assert (builder.entries[0].cp1, builder.entries[0].cp2) == (0x41, 0x45)


def test_no_merge_across_gap_or_flag_change():
    builder = _builder("0041 ; valid", "0043 ; valid", "0044 ; disallowed")
    assert [(e.cp1, e.cp2) for e in builder.entries] == [(0x41, 0x41), (0x43, 0x43), (0x44, 0x44)]


def test_comments_and_blank_lines_ignored():
    builder = _builder("# header", "   ", "0041 ; valid")
    assert [e.cp1 for e in builder.entries] == [0x41]


def test_out_of_order_raises():
    with pytest.raises(ValueError, match="out of order"):
        _builder("0042 ; valid", "0041 ; valid")


def test_unknown_flag_raises():
    with pytest.raises(ValueError, match="Unknown flag"):
        _builder("0041 ; weird")


def test_invalid_range_raises():
    with pytest.raises(ValueError, match="Invalid codepoint range"):
        _builder("0042..0041 ; valid")


def test_mapping_is_stored():
    builder = _builder("0041 ; mapped ; 0061", "0042 ; mapped ; 0062")
    assert len(builder.entries) == 2
    first = builder.entries[0]
    assert first.mapping == (0x61,)
    assert first.flags == Tr46Flag.MAPPED
    assert decode_stream(builder.mapdata[first.offset:], 1) == [0x61]


def test_missing_mapping_warns_except_joiners():
    builder = _builder("0041 ; mapped", "200C ; deviation")
    assert builder.warnings == ["Missing mapping for '0041'"]


def test_compact_shares_data():
    builder = _builder(
        "0041 ; mapped ; 0061", "0042 ; mapped ; 0061 0062", "0043 ; valid"
    )
    builder.compact()
    assert [e.cp1 for e in builder.entries] == [0x41, 0x42, 0x43]
    assert bytes(builder.mapdata) == encode_stream([0x61, 0x62])
    for entry in builder.entries:
        if entry.mapping:
            assert decode_stream(builder.mapdata[entry.offset:], len(entry.mapping)) == list(
                entry.mapping
            )


def test_combine_flags():
    builder = _builder("0041 ; valid", "0042 ; mapped ; 0062", "0043 ; valid")
    builder.combine_flags()
    assert builder.flag_combinations == [Tr46Flag.VALID, Tr46Flag.MAPPED]
    assert [e.flag_index for e in builder.entries] == [0, 1, 0]


def _block(text, name):
    start = text.index(f"static const uint8_t {name}[")
    end = text.index("};", start)
    return text[start:end]


def test_render_small_table():
    builder = _builder("0041 ; valid")
    builder.compact()
    builder.combine_flags()
    text = builder.render([NfcqcEntry(0x300, 0x304, 2)])
    assert text.startswith(HEADER + "\n\n")
    assert f"static const uint8_t idna_flags[1] =\n{{0x{int(Tr46Flag.VALID):X},}};" in text
    assert "static const uint8_t idna_map_8[5] = {\n0x41,0x0,0x0,0x0,0x0,\n};" in text
    assert "static const uint8_t idna_map_16[0] = {\n};" in text
    assert "{0x300,0x304,2},\n" in text


def test_render_splits_wide_ranges():
    builder = _builder("10000..2FFFF ; disallowed")
    builder.combine_flags()
    block = _block(builder.render(), "idna_map_24")
    lines = block.splitlines()
    declared = int(re.search(r"\[(\d+)\]", lines[0]).group(1))
    rows = lines[1:]
    assert declared == 8 * len(rows)
    assert len(rows) > 1


def test_render_sorts_nfcqc():
    builder = _builder("0041 ; valid")
    builder.combine_flags()
    text = builder.render([NfcqcEntry(0x400, 0x400, 1), NfcqcEntry(0x300, 0x300, 2)])
    assert text.index("{0x300,0x300,2},") < text.index("{0x400,0x400,1},")


def test_main_writes_tables(tmp_path):
    (tmp_path / "IdnaMappingTable.txt").write_text(
        "# comment\n0000..002C ; disallowed_STD3_valid\n0041 ; mapped ; 0061 # A\n0061 ; valid\n",
        encoding="utf-8",
    )
    (tmp_path / "DerivedNormalizationProps.txt").write_text(
        "# x\n0300..0304 ; NFC_QC; M # Mn\n0340 ; NFC_QC; N\n", encoding="utf-8"
    )
    out = tmp_path / "out.c"
    assert main(["--srcdir", str(tmp_path), "-o", str(out)]) == 0
    text = out.read_text(encoding="utf-8")
    assert text.startswith(HEADER)
    assert "{0x300,0x304,2}," in text
    assert "{0x340,0x340,1}," in text
    data = encode_stream([0x61])
    assert f"static const uint8_t mapdata[{len(data)}] = {{\n0x{data[0]:02X}," in text


def test_main_missing_file(tmp_path, capsys):
    assert main(["--srcdir", str(tmp_path / "missing")]) == 1
    assert "Failed to open" in capsys.readouterr().err