"""Conversion of possibly ACE encoded domain names into Unicode."""

from __future__ import annotations

import locale
from itertools import takewhile
from typing import Iterable, Optional

from .errors import ErrorCode, IdnError

LABEL_MAX_LENGTH = 63
DOMAIN_MAX_LENGTH = 255

_BASE = 36
_TMIN = 1
_TMAX = 26
_SKEW = 38
_DAMP = 700
_INITIAL_BIAS = 72
_INITIAL_N = 0x80
_MAXINT = 0xFFFFFFFF
_DELIMITER = ord("-")


def _adapt(delta: int, numpoints: int, first_time: bool) -> int:
    delta = delta // _DAMP if first_time else delta // 2
    delta += delta // numpoints
    k = 0
    while delta > ((_BASE - _TMIN) * _TMAX) // 2:
        delta //= _BASE - _TMIN
        k += _BASE
    return k + ((_BASE - _TMIN + 1) * delta) // (delta + _SKEW)


def _digit_value(byte: int) -> int:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30 + 26
    if 0x41 <= byte <= 0x5A:
        return byte - 0x41
    if 0x61 <= byte <= 0x7A:
        return byte - 0x61
    return _BASE


def _threshold(k: int, bias: int) -> int:
    if k <= bias:
        return _TMIN
    if k >= bias + _TMAX:
        return _TMAX
    return k - bias


def _punycode_decode(data: bytes, max_length: int) -> list[int]:
    """Decode the punycode part of an A-label into code points."""
    if any(byte >= 0x80 for byte in data):
        raise IdnError(ErrorCode.PUNYCODE_BAD_INPUT, "non-basic code point")

    basic_end = max(data.rfind(_DELIMITER), 0)
    if basic_end > 0 and basic_end + 1 >= len(data):
        raise IdnError(ErrorCode.PUNYCODE_BAD_INPUT, "no data after delimiter")
    if basic_end > max_length:
        raise IdnError(ErrorCode.PUNYCODE_BIG_OUTPUT)

    output = list(data[:basic_end])
    pos = basic_end + 1 if basic_end else 0
    n, i, bias = _INITIAL_N, 0, _INITIAL_BIAS

    while pos < len(data):
        old_i, weight, k = i, 1, _BASE
        while True:
            if pos >= len(data):
                raise IdnError(ErrorCode.PUNYCODE_BAD_INPUT, "truncated input")
            digit = _digit_value(data[pos])
            pos += 1
            if digit >= _BASE:
                raise IdnError(ErrorCode.PUNYCODE_BAD_INPUT, "invalid digit")
            if digit > (_MAXINT - i) // weight:
                raise IdnError(ErrorCode.PUNYCODE_OVERFLOW)
            i += digit * weight
            t = _threshold(k, bias)
            if digit < t:
                break
            if weight > _MAXINT // (_BASE - t):
                raise IdnError(ErrorCode.PUNYCODE_OVERFLOW)
            weight *= _BASE - t
            k += _BASE

        count = len(output) + 1
        bias = _adapt(i - old_i, count, old_i == 0)
        if i // count > _MAXINT - n:
            raise IdnError(ErrorCode.PUNYCODE_OVERFLOW)
        n += i // count
        i %= count

        if n > 0x10FFFF or 0xD800 <= n <= 0xDFFF:
            raise IdnError(ErrorCode.PUNYCODE_BAD_INPUT, "invalid code point")
        if len(output) >= max_length:
            raise IdnError(ErrorCode.PUNYCODE_BIG_OUTPUT)
        output.insert(i, n)
        i += 1

    return output


def _is_ace(label: bytes) -> bool:
    return len(label) >= 4 and label[:2].lower() == b"xn" and label[2:4] == b"--"


def _convert(data: bytes) -> str:
    data = data.split(b"\0", 1)[0]
    labels = data.split(b".")
    last = len(labels) - 1
    parts: list[str] = []
    total = 0

    for index, label in enumerate(labels):
        if _is_ace(label):
            decoded = "".join(map(chr, _punycode_decode(label[4:], LABEL_MAX_LENGTH)))
        else:
            try:
                decoded = label.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise IdnError(ErrorCode.ENCODING_ERROR, str(exc)) from exc
            if len(decoded) > LABEL_MAX_LENGTH:
                raise IdnError(ErrorCode.TOO_BIG_LABEL)

        total += len(decoded) + (index < last)
        if total > DOMAIN_MAX_LENGTH:
            raise IdnError(ErrorCode.TOO_BIG_DOMAIN)
        parts.append(decoded)

    return ".".join(parts)


def to_unicode(domain: Optional[str]) -> Optional[str]:
    """Decode every A-label of a domain name; other labels pass through unchanged."""
    if domain is None:
        return None
    return _convert(domain.encode("utf-8", "surrogatepass"))


def to_unicode_utf8(data: Optional[bytes]) -> Optional[str]:
    """Decode a UTF-8 encoded domain name into a Unicode string."""
    if data is None:
        return None
    return _convert(bytes(data))


def to_unicode_bytes(data: Optional[bytes]) -> Optional[bytes]:
    """Decode a UTF-8 encoded domain name into UTF-8 encoded Unicode."""
    text = to_unicode_utf8(data)
    if text is None:
        return None
    return text.encode("utf-8")


def to_unicode_locale(data: Optional[bytes], encoding: Optional[str] = None) -> Optional[bytes]:
    """Decode a domain name given and returned in a locale character set."""
    if data is None:
        return None
    charset = encoding or locale.getpreferredencoding(False)
    try:
        text = bytes(data).decode(charset)
    except (UnicodeDecodeError, LookupError) as exc:
        raise IdnError(ErrorCode.ICONV_FAIL, str(exc)) from exc

    decoded = _convert(text.encode("utf-8", "surrogatepass"))
    try:
        return decoded.encode(charset)
    except UnicodeEncodeError as exc:
        raise IdnError(ErrorCode.ENCODING_ERROR, str(exc)) from exc


def to_unicode_label(
    code_points: Optional[Iterable[int]], limit: Optional[int] = None
) -> tuple[list[int], int]:
    """Decode a sequence of code points.

    Returns the decoded code points, cut to ``limit`` if one is given,
    together with the full length of the decoded result.
    """
    if code_points is None:
        return [], 0
    points = list(takewhile(lambda cp: cp != 0, code_points))
    try:
        text = "".join(map(chr, points))
    except (ValueError, OverflowError, TypeError) as exc:
        raise IdnError(ErrorCode.ENCODING_ERROR, str(exc)) from exc
    try:
        raw = text.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise IdnError(ErrorCode.ENCODING_ERROR, str(exc)) from exc

    result = [ord(ch) for ch in _convert(raw)]
    if limit is not None:
        return result[:limit], len(result)
    return result, len(result)