# idnutil

Tools for working with internationalized domain names (IDNs):

- decoding ACE (`xn--`) labels of a domain name back to Unicode,
- IDNA2008 label helpers: the right-to-left (bidi) rules of RFC 5893, an
  NFC check and UTF-8 decoding with optional NFC normalization,
- readable messages and symbolic names for every error condition,
- generators for the compact TR46 mapping tables and the IDNA2008 property
  table.

The package uses only the standard library and supports Python 3.10 and later.

## Installation

```
pip install idnutil
```

To run the test suite:

```
pip install "idnutil[test]"
pytest
```

## Decoding domain names

```python
from idnutil.decode import to_unicode
from idnutil.errors import IdnError, strerror_name

print(to_unicode("xn--nxasmm1c.com"))        # βόλος.com
print(to_unicode("xn--bcher-kva.de"))        # bücher.de

try:
    to_unicode("xn---.example")
except IdnError as exc:
    print(strerror_name(exc.code), exc)      # IDN2_PUNYCODE_BAD_INPUT ...
```

Labels that start with `xn--` (the `xn` in any letter case) are
Punycode-decoded; all other labels pass through unchanged. A label longer
than 63 code points, a domain longer than 255, bad Punycode and invalid input
encodings raise `IdnError`, whose `code` is an `ErrorCode` member and whose
`name` is the symbolic name of that code. Passing `None` returns `None`.

Other entry points in `idnutil.decode`:

- `to_unicode_utf8(data)`: UTF-8 bytes in, decoded text out.
- `to_unicode_bytes(data)`: UTF-8 bytes in, UTF-8 bytes out.
- `to_unicode_locale(data, encoding=None)`: bytes in the given character set
  (the locale's preferred encoding when none is given) in, bytes in the same
  character set out. Input that cannot be read in that character set raises
  `ErrorCode.ICONV_FAIL`; a result that cannot be written in it raises
  `ErrorCode.ENCODING_ERROR`.
- `to_unicode_label(code_points, limit=None)`: a sequence of code points in
  (read up to the first 0), a tuple out of the decoded code points, cut to
  `limit` when one is given, and the full length of the decoded result.

## Error codes

`idnutil.errors.ErrorCode` lists every condition that can be reported.
`strerror(code)` gives a human-readable message and `strerror_name(code)` the
symbolic name; both accept any integer and return `"Unknown error"` and
`"IDN2_UNKNOWN"` for values they do not know.

```python
from idnutil.errors import ErrorCode, strerror, strerror_name

strerror(ErrorCode.BIDI)          # 'string has forbidden bi-directional properties'
strerror_name(ErrorCode.BIDI)     # 'IDN2_BIDI'
```

## Label helpers

```python
from idnutil.bidi import check_bidi, is_bidi
from idnutil.idna import is_ascii, is_nfc, utf8_to_code_points

label = utf8_to_code_points("ء٠".encode(), nfc=True)
is_bidi(label)        # True: holds right-to-left characters
check_bidi(label)     # passes; raises IdnError(BIDI) when the rules are broken
is_nfc("e\u0301")     # False
is_ascii(b"example")  # True
```

`is_bidi`, `check_bidi` and `is_nfc` take a string or an iterable of code
points. `utf8_to_code_points` raises `IdnError` with
`ErrorCode.ENCODING_ERROR` on invalid UTF-8.

## Command-line tools

Decode domain names given as arguments, or one line read from standard input
when none are given:

```
idnutil-decode xn--nxasmm1c.com
echo xn--nxasmm1c.com | idnutil-decode -q
```

`-q` / `--quiet` drops the prompt when reading standard input; `-x` / `--hex`
first prints the bytes of each input. The exit status is 1 if any name fails.

Generate the IDNA2008 property table from an IANA CSV or a Unicode
`Idna2008` text file (standard input when no file is named):

```
idnutil-tablegen idna-tables-properties.csv -o data.c
```

Generate the compact TR46 mapping tables from `IdnaMappingTable.txt` and
`DerivedNormalizationProps.txt` found in `--srcdir` (the file names can be
changed with `--mapping-table` and `--normalization-props`):

```
idnutil-tr46gen --srcdir unicode-data -o tr46map_data.c
```

The same steps are available from Python through
`idnutil.tr46gen.MappingTableBuilder` (`add_line`, `compact`,
`combine_flags`, `render`) and `idnutil.tablegen.parse_table` /
`render_table`.

## What this package does not do

It decodes domain names only. There is no conversion from Unicode to ACE
form (ToASCII), no IDNA2008 lookup or registration processing, and no
checking of the CONTEXTJ / CONTEXTO rules, hyphen rules or disallowed code
points. The generators write table source text; the package does not itself
load or query those tables.