"""Right-to-left label checks of IDNA2008 (RFC 5893)."""

from __future__ import annotations

import unicodedata
from typing import Iterable, Union

from .errors import ErrorCode, IdnError

Label = Union[str, Iterable[int]]

_RTL_MARKERS = frozenset({"R", "AL", "AN"})
_NEUTRAL = frozenset({"ES", "CS", "ET", "ON", "BN"})
_LTR_END = frozenset({"L", "EN", "NSM"})
_RTL_END = frozenset({"R", "AL", "EN", "AN", "NSM"})


def _as_text(label: Label) -> str:
    if isinstance(label, str):
        return label
    return "".join(map(chr, label))


def is_bidi(label: Label) -> bool:
    """Return True if the label holds any right-to-left or Arabic number character."""
    return any(unicodedata.bidirectional(ch) in _RTL_MARKERS for ch in _as_text(label))


def check_bidi(label: Label) -> None:
    """Raise IdnError(BIDI) if a bidi label breaks the RFC 5893 rules."""
    text = _as_text(label)
    if not is_bidi(text):
        return

    first = unicodedata.bidirectional(text[0])
    if first == "L":
        allowed_end = _LTR_END
    elif first in ("R", "AL"):
        allowed_end = _RTL_END
    else:
        raise IdnError(ErrorCode.BIDI, "label begins with invalid bidi class")

    end_ok = True
    for ch in text[1:]:
        category = unicodedata.bidirectional(ch)
        if category in allowed_end:
            end_ok = True
        elif category in _NEUTRAL:
            end_ok = False
        else:
            raise IdnError(ErrorCode.BIDI, "label contains invalid code point")

    if not end_ok:
        raise IdnError(ErrorCode.BIDI, "label ends with invalid code point")