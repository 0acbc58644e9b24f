"""Error codes, their descriptions and the exception raised for them."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Result codes for IDNA processing."""

    OK = 0
    MALLOC = -100
    NO_CODESET = -101
    ICONV_FAIL = -102
    ENCODING_ERROR = -200
    NFC = -201
    PUNYCODE_BAD_INPUT = -202
    PUNYCODE_BIG_OUTPUT = -203
    PUNYCODE_OVERFLOW = -204
    TOO_BIG_DOMAIN = -205
    TOO_BIG_LABEL = -206
    INVALID_ALABEL = -207
    UALABEL_MISMATCH = -208
    INVALID_FLAGS = -209
    NOT_NFC = -300
    TWO_HYPHEN = -301
    HYPHEN_STARTEND = -302
    LEADING_COMBINING = -303
    DISALLOWED = -304
    CONTEXTJ = -305
    CONTEXTJ_NO_RULE = -306
    CONTEXTO = -307
    CONTEXTO_NO_RULE = -308
    UNASSIGNED = -309
    BIDI = -310
    DOT_IN_LABEL = -311
    INVALID_TRANSITIONAL = -312
    INVALID_NONTRANSITIONAL = -313
    ALABEL_ROUNDTRIP_FAILED = -314


_UNKNOWN_MESSAGE = "Unknown error"
_UNKNOWN_NAME = "IDN2_UNKNOWN"

_MESSAGES = {
    ErrorCode.OK: "success",
    ErrorCode.MALLOC: "out of memory",
    ErrorCode.NO_CODESET: "could not determine locale encoding format",
    ErrorCode.ICONV_FAIL: "could not convert string to UTF-8",
    ErrorCode.ENCODING_ERROR: "string encoding error",
    ErrorCode.NFC: "string could not be NFC normalized",
    ErrorCode.PUNYCODE_BAD_INPUT: "string contains invalid punycode data",
    ErrorCode.PUNYCODE_BIG_OUTPUT: "punycode encoded data will be too large",
    ErrorCode.PUNYCODE_OVERFLOW: "punycode conversion resulted in overflow",
    ErrorCode.TOO_BIG_DOMAIN: "domain name longer than 255 characters",
    ErrorCode.TOO_BIG_LABEL: "domain label longer than 63 characters",
    ErrorCode.INVALID_ALABEL: "input A-label is not valid",
    ErrorCode.UALABEL_MISMATCH: "input A-label and U-label does not match",
    ErrorCode.NOT_NFC: "string is not in Unicode NFC format",
    ErrorCode.TWO_HYPHEN: "string contains forbidden two hyphens pattern",
    ErrorCode.HYPHEN_STARTEND: "string start/ends with forbidden hyphen",
    ErrorCode.LEADING_COMBINING: "string contains a forbidden leading combining character",
    ErrorCode.DISALLOWED: "string contains a disallowed character",
    ErrorCode.CONTEXTJ: "string contains a forbidden context-j character",
    ErrorCode.CONTEXTJ_NO_RULE: "string contains a context-j character with null rule",
    ErrorCode.CONTEXTO: "string contains a forbidden context-o character",
    ErrorCode.CONTEXTO_NO_RULE: "string contains a context-o character with null rule",
    ErrorCode.UNASSIGNED: "string contains unassigned code point",
    ErrorCode.BIDI: "string has forbidden bi-directional properties",
    ErrorCode.DOT_IN_LABEL: "domain label has forbidden dot (TR46)",
    ErrorCode.INVALID_TRANSITIONAL: (
        "domain label has character forbidden in transitional mode (TR46)"
    ),
    ErrorCode.INVALID_NONTRANSITIONAL: (
        "domain label has character forbidden in non-transitional mode (TR46)"
    ),
    ErrorCode.ALABEL_ROUNDTRIP_FAILED: "A-label roundtrip failed",
}

_NAMES = {
    ErrorCode.OK: "IDN2_OK",
    ErrorCode.MALLOC: "IDN2_MALLOC",
    # The historical symbol name carries this spelling.
    ErrorCode.NO_CODESET: "IDN2_NO_NODESET",
    ErrorCode.ICONV_FAIL: "IDN2_ICONV_FAIL",
    ErrorCode.ENCODING_ERROR: "IDN2_ENCODING_ERROR",
    ErrorCode.NFC: "IDN2_NFC",
    ErrorCode.PUNYCODE_BAD_INPUT: "IDN2_PUNYCODE_BAD_INPUT",
    ErrorCode.PUNYCODE_BIG_OUTPUT: "IDN2_PUNYCODE_BIG_OUTPUT",
    ErrorCode.PUNYCODE_OVERFLOW: "IDN2_PUNYCODE_OVERFLOW",
    ErrorCode.TOO_BIG_DOMAIN: "IDN2_TOO_BIG_DOMAIN",
    ErrorCode.TOO_BIG_LABEL: "IDN2_TOO_BIG_LABEL",
    ErrorCode.INVALID_ALABEL: "IDN2_INVALID_ALABEL",
    ErrorCode.UALABEL_MISMATCH: "IDN2_UALABEL_MISMATCH",
    ErrorCode.INVALID_FLAGS: "IDN2_INVALID_FLAGS",
    ErrorCode.NOT_NFC: "IDN2_NOT_NFC",
    ErrorCode.TWO_HYPHEN: "IDN2_2HYPHEN",
    ErrorCode.HYPHEN_STARTEND: "IDN2_HYPHEN_STARTEND",
    ErrorCode.LEADING_COMBINING: "IDN2_LEADING_COMBINING",
    ErrorCode.DISALLOWED: "IDN2_DISALLOWED",
    ErrorCode.CONTEXTJ: "IDN2_CONTEXTJ",
    ErrorCode.CONTEXTJ_NO_RULE: "IDN2_CONTEXTJ_NO_RULE",
    ErrorCode.CONTEXTO: "IDN2_CONTEXTO",
    ErrorCode.CONTEXTO_NO_RULE: "IDN2_CONTEXTO_NO_RULE",
    ErrorCode.UNASSIGNED: "IDN2_UNASSIGNED",
    ErrorCode.BIDI: "IDN2_BIDI",
    ErrorCode.DOT_IN_LABEL: "IDN2_DOT_IN_LABEL",
    ErrorCode.INVALID_TRANSITIONAL: "IDN2_INVALID_TRANSITIONAL",
    ErrorCode.INVALID_NONTRANSITIONAL: "IDN2_INVALID_NONTRANSITIONAL",
    ErrorCode.ALABEL_ROUNDTRIP_FAILED: "IDN2_ALABEL_ROUNDTRIP_FAILED",
}


def _lookup(code: int) -> ErrorCode | None:
    try:
        return ErrorCode(code)
    except ValueError:
        return None


def strerror(code: int) -> str:
    """Return a human readable description of an error code."""
    known = _lookup(code)
    if known is None:
        return _UNKNOWN_MESSAGE
    return _MESSAGES.get(known, _UNKNOWN_MESSAGE)


def strerror_name(code: int) -> str:
    """Return the symbolic name of an error code."""
    known = _lookup(code)
    if known is None:
        return _UNKNOWN_NAME
    return _NAMES.get(known, _UNKNOWN_NAME)


class IdnError(Exception):
    """Raised when IDNA processing fails; carries the error code."""

    def __init__(self, code: int, detail: str | None = None) -> None:
        known = _lookup(code)
        self.code = known if known is not None else code
        self.detail = detail
        message = strerror(code)
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def name(self) -> str:
        """Symbolic name of the error code."""
        return strerror_name(self.code)