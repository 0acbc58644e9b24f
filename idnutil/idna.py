"""Helpers for turning raw label input into checked code point sequences."""

from __future__ import annotations

import unicodedata
from typing import Iterable, Union

from .errors import ErrorCode, IdnError

Label = Union[str, Iterable[int]]


def _as_text(label: Label) -> str:
    if isinstance(label, str):
        return label
    return "".join(map(chr, label))


def is_ascii(data: bytes) -> bool:
    """Return True if every byte is below 0x80."""
    return all(byte < 0x80 for byte in data)


def is_nfc(label: Label) -> bool:
    """Return True if the label is already in Unicode NFC form."""
    text = _as_text(label)
    last_class = 0
    for ch in text:
        current = unicodedata.combining(ch)
        if current and last_class > current:
            return False
        last_class = current
    return unicodedata.is_normalized("NFC", text)


def utf8_to_code_points(data: bytes, nfc: bool = False) -> str:
    """Decode UTF-8 bytes, NFC normalizing the result when asked."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise IdnError(ErrorCode.ENCODING_ERROR, str(exc)) from exc

    if nfc and not is_nfc(text):
        text = unicodedata.normalize("NFC", text)
    return text